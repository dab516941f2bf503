"""Tree-style rendering of walk results."""

from .tree_node import TreeNode
from .tree_renderer import build_tree, count_entries, render, root_display_name, stream_tree

__all__ = ["TreeNode", "build_tree", "count_entries", "render", "root_display_name", "stream_tree"]
