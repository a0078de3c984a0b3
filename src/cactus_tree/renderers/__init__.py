"""Drawing-surface protocol and renderers."""
