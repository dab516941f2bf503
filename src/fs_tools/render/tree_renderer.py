"""Tree-style text rendering of walk results.

Rendering is a pure formatting step: it performs no filesystem access and makes
no inclusion decisions. Entries must arrive in the walker's depth-first,
pre-order sequence; they are rebuilt into a hierarchy first because whether an
entry is the last of its siblings is only known once its parent's children are
exhausted.
"""

from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from fs_tools.render.tree_node import TreeNode
from fs_tools.types import EntryKind, PathType
from fs_tools.walker.entry import Entry, printable

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def root_display_name(root: PathType) -> str:
    """Name shown on the first line of a tree.

    Example:
        >>> root_display_name("/home/user/project")
        'project'
        >>> root_display_name("/")
        '/'
    """
    path = Path(root)
    return printable(path.name or str(path))


def build_tree(entries: Iterable[Entry], root_name: str) -> TreeNode:
    """Rebuild the hierarchy described by a pre-order entry sequence.

    Args:
        entries: Entries in walk order, each with its depth below the root.
        root_name: Name given to the root node.

    Returns:
        The root node; its descendants mirror the entries in the same order.

    Raises:
        ValueError: If an entry is deeper than its predecessors allow, which
            means the sequence is not in pre-order.
    """
    root = TreeNode(root_name)
    # path[d] is the most recent node at depth d
    path: List[TreeNode] = [root]
    for entry in entries:
        if entry.depth < 1 or entry.depth > len(path):
            raise ValueError(f"Entry {entry.relative_path!r} at depth {entry.depth} does not follow its parent")
        del path[entry.depth :]
        node = TreeNode(entry.name, parent=path[-1], entry=entry)
        path.append(node)
    return root


def _label(node: TreeNode) -> str:
    entry = node.entry
    name = printable(node.name)
    if entry is None:
        return name
    if entry.kind is EntryKind.DIRECTORY:
        return f"{name}/"
    if entry.kind is EntryKind.SYMLINK:
        if entry.link_target:
            return f"{name} → {printable(entry.link_target)} [symlink]"
        return f"{name} [symlink]"
    return name


def stream_tree(entries: Iterable[Entry], root_name: str = ".") -> Iterator[str]:
    """Generate the tree representation one line at a time.

    Output resembles the Unix ``tree`` command: the root line first, then one
    line per entry with branch connectors reflecting depth and sibling order.
    With no entries the output is the root line alone.

    Args:
        entries: Entries in walk order.
        root_name: Name shown on the root line.

    Yields:
        Lines of the tree, without trailing newlines.

    Example:
        >>> from pathlib import Path
        >>> entries = [
        ...     Entry(Path("/p/a"), "a", EntryKind.DIRECTORY, 1),
        ...     Entry(Path("/p/a/x.rs"), "a/x.rs", EntryKind.FILE, 2, size=0),
        ...     Entry(Path("/p/z.txt"), "z.txt", EntryKind.FILE, 1, size=0),
        ... ]
        >>> for line in stream_tree(entries, "p"):
        ...     print(line)
        p/
        ├── a/
        │   └── x.rs
        └── z.txt
    """
    root = build_tree(entries, root_name)

    def write_node(node: TreeNode, prefix: str, is_last: bool) -> Iterator[str]:
        connector = LAST_BRANCH if is_last else BRANCH
        yield f"{prefix}{connector}{_label(node)}"

        children = node.children
        child_prefix = prefix + (SPACE if is_last else PIPE)
        for i, child in enumerate(children):
            yield from write_node(child, child_prefix, i == len(children) - 1)

    yield root.name if root.name.endswith("/") else f"{root.name}/"
    top_level = root.children
    for i, child in enumerate(top_level):
        yield from write_node(child, "", i == len(top_level) - 1)


def render(entries: Iterable[Entry], root_name: str = ".") -> str:
    """Return the complete tree representation as a string.

    Example:
        >>> render([], "empty")
        'empty/'
    """
    return "\n".join(stream_tree(entries, root_name))


def count_entries(entries: Iterable[Entry]) -> Dict[str, int]:
    """Count directories, files and symlinks among rendered entries.

    Example:
        >>> from pathlib import Path
        >>> count_entries([Entry(Path("/p/a"), "a", EntryKind.DIRECTORY, 1)])
        {'directories': 1, 'files': 0, 'symlinks': 0}
    """
    counts = {"directories": 0, "files": 0, "symlinks": 0}
    key_for = {EntryKind.DIRECTORY: "directories", EntryKind.FILE: "files", EntryKind.SYMLINK: "symlinks"}
    for entry in entries:
        counts[key_for[entry.kind]] += 1
    return counts
