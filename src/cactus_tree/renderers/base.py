"""Drawing-surface protocol."""

from __future__ import annotations

from typing import Protocol


class DrawingContext(Protocol):
    """Immediate-mode 2D drawing surface (canvas-like, retains nothing).

    Implementations must allow ``stroke_style``, ``fill_style``,
    ``line_width`` and ``global_alpha`` to be read back after assignment.
    """

    stroke_style: str
    fill_style: str
    line_width: float
    global_alpha: float

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, x: float, y: float) -> None: ...

    def scale(self, x: float, y: float) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None: ...

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None: ...

    def stroke(self) -> None: ...

    def fill(self) -> None: ...


def set_context_styles(
    context: DrawingContext | None,
    *,
    stroke_style: str | None = None,
    fill_style: str | None = None,
    line_width: float | None = None,
    global_alpha: float | None = None,
) -> None:
    """Assign only the style properties that are given and actually differ."""
    if context is None:
        return
    if stroke_style is not None and context.stroke_style != stroke_style:
        context.stroke_style = stroke_style
    if fill_style is not None and context.fill_style != fill_style:
        context.fill_style = fill_style
    if line_width is not None and context.line_width != line_width:
        context.line_width = line_width
    if global_alpha is not None and context.global_alpha != global_alpha:
        context.global_alpha = global_alpha
