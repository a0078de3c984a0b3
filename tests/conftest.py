from __future__ import annotations

import pytest
from helpers import RecordingContext, make_rendered_nodes

from cactus_tree.index import HierarchyIndex, build_hierarchy_index
from cactus_tree.types import RenderedNode


@pytest.fixture
def rendered_nodes() -> list[RenderedNode]:
    return make_rendered_nodes()


@pytest.fixture
def index(rendered_nodes: list[RenderedNode]) -> HierarchyIndex:
    return build_hierarchy_index(rendered_nodes)


@pytest.fixture
def ctx() -> RecordingContext:
    return RecordingContext()
