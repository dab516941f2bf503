"""Node representation for rendered tree elements."""

from typing import Any, Optional

from anytree import Node

from fs_tools.walker.entry import Entry


class TreeNode(Node):  # type: ignore
    """Node class representing one entry in the rendered tree.

    Extends anytree.Node so the flat, depth-annotated entry sequence can be turned
    back into a hierarchy, which is what last-sibling detection needs. The root
    node stands for the walk root and carries no entry.

    Attributes:
        name (str): Display name (the entry's basename, or the root's name).
        entry (Optional[Entry]): The entry this node renders; None for the root.
        children (tuple[TreeNode]): The child nodes (inherited from anytree.Node).

    Example:
        >>> root = TreeNode("project")
        >>> child = TreeNode("src", parent=root)
        >>> [node.name for node in root.children]
        ['src']
        >>> child.is_dir
        False
    """

    def __init__(self, name: str, parent: Optional["TreeNode"] = None, entry: Optional[Entry] = None, **kwargs: Any):
        super().__init__(name, parent, **kwargs)
        self.entry = entry

    @property
    def is_dir(self) -> bool:
        if self.entry is None:
            return bool(self.is_root)
        return self.entry.is_dir
