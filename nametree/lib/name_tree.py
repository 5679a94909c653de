"""
Name tree implementation for exact and longest prefix matching of hierarchical names.

Names are slash-delimited component sequences (e.g. "/a/b/c"). Each node of the
tree carries one component label and an opaque entry; a name maps to the path
from the root that consumes its components in order.
"""

import logging
from typing import Any, List, NamedTuple, Optional, Tuple

from nametree.lib.export import dump_json, load_json
from nametree.lib.models import TreeNode


def split_name(name: str) -> List[str]:
    """
    Split a name into its components.

    The first element produced by the leading slash is always discarded, so
    "/a/b" gives ["a", "b"]. Names are otherwise taken as they are: "//a"
    yields an empty component and a name without any slash yields nothing.
    """
    return name.split("/")[1:]


class WalkResult(NamedTuple):
    """Outcome of walking a component sequence down the tree."""

    node: "Node"
    component: str
    sentinel: int  # > 0 when the whole sequence was consumed
    depth: int  # number of components matched


class Node:
    """Node in the name tree. A root node is the tree itself."""

    def __init__(self, component: str = "", entry: Any = None, logger: Optional[logging.Logger] = None):
        self.component = component
        self.entry = entry
        self.children: List[Node] = []
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def __repr__(self):
        return f"Node({self.component!r}, entry={self.entry!r}, children={len(self.children)})"

    def __str__(self):
        lines: List[str] = []
        self._print(lines, 0)
        return "".join(lines)

    def size(self) -> int:
        """Number of named nodes in this subtree (an unnamed root is not counted)."""
        size = 0
        stack = [self]
        while stack:
            node = stack.pop()
            if node is not self or node.component != "":
                size += 1
            stack.extend(node.children)
        return size

    def child(self, component: str) -> Optional["Node"]:
        """Return the child labelled `component`, if any."""
        for child in self.children:
            if child.component == component:
                return child
        return None

    def insert(self, name: str, entry: Any) -> int:
        """
        Insert a name into the tree with the given entry.

        Every component missing from the tree gets a new node, and each new
        node carries `entry`, not only the last one. An existing name is left
        untouched, including its entry.

        Args:
            name: Hierarchical name (e.g. "/a/b/c")
            entry: Opaque payload to attach

        Returns:
            Number of nodes created (0 if the name was already present)
        """
        components = split_name(name)
        count = len(components)
        created = 0
        while count != 0:
            # Each pass walks the full sequence again and gets one component further
            walk = self._walk_tree(components)
            if walk.sentinel > 0:
                break
            walk.node.children.append(Node(walk.component, entry, logger=self.logger))
            created += 1
            count -= 1

        if created:
            self.logger.info(f"Added name {name!r} ({created} new nodes)")
        else:
            self.logger.debug(f"Name {name!r} already present, nothing added")
        return created

    def find_exact_match(self, name: str) -> Tuple[Any, bool]:
        """
        Find the exact match for a name.

        Returns:
            (entry, True) if the whole name exists in the tree, (None, False) otherwise
        """
        _, entry, found, is_exact = self._find(name)
        if found and is_exact:
            return entry, True
        return None, False

    def find_longest_match(self, name: str) -> Tuple[str, Any, bool]:
        """
        Find the longest prefix of a name present in the tree.

        Returns:
            (longest, entry, found). On an exact match `longest` is the name
            itself; on a partial match it is the matched components joined
            with "/" and without the leading slash.
        """
        longest, entry, found, _ = self._find(name)
        return longest, entry, found

    def _find(self, name: str) -> Tuple[str, Any, bool, bool]:
        """Shared lookup for exact and longest match: (longest, entry, found, is_exact)."""
        components = split_name(name)
        if not components:
            return "", None, False, False

        walk = self._walk_tree(components)
        if walk.sentinel > 0:
            return name, walk.node.entry, True, True

        if walk.depth == 0:
            return "", None, False, False
        return "/".join(components[: walk.depth]), walk.node.entry, True, False

    def _walk_tree(self, components: List[str]) -> WalkResult:
        """
        Follow `components` down from this node as far as existing children allow.

        If every component is matched, returns the last matched node with a
        positive sentinel (the children count of its parent). Otherwise returns
        the deepest node reached, the first component that could not be
        matched and a zero sentinel.
        """
        node = self
        for depth, component in enumerate(components):
            child = node.child(component)
            if child is None:
                return WalkResult(node, component, 0, depth)
            if depth + 1 == len(components):
                return WalkResult(child, component, len(node.children), depth + 1)
            node = child
        raise ValueError("cannot walk an empty component sequence")

    def to_model(self) -> TreeNode:
        """Copy the labels of this subtree into the exported tree shape."""
        # Post-order: a node's model is built once all of its children's models exist
        models = {}
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in node.children)
                continue
            children = [models.pop(id(child)) for child in node.children] or None
            models[id(node)] = TreeNode(component=node.component, children=children)
        return models[id(self)]

    def to_json(self, indent: int = 2) -> str:
        """Render the subtree as JSON with the given indent width; entries are not exported."""
        return dump_json(self, indent=indent)

    @classmethod
    def from_model(cls, model: TreeNode, logger: Optional[logging.Logger] = None) -> "Node":
        """Rebuild a label-only tree from the exported shape."""
        root = cls(model.component, logger=logger)
        stack = [(root, model)]
        while stack:
            node, current = stack.pop()
            for child_model in current.children or []:
                child = cls(child_model.component, logger=logger)
                node.children.append(child)
                stack.append((child, child_model))
        return root

    @classmethod
    def from_json(cls, data: str, logger: Optional[logging.Logger] = None) -> "Node":
        """Rebuild a label-only tree from `to_json` output. Raises ValueError on any other shape."""
        return load_json(data, lambda component: cls(component, logger=logger))

    def _print(self, lines: List[str], indent: int):
        stack = [(self, indent)]
        while stack:
            node, level = stack.pop()
            lines.append(f"{' ' * level}{node.component}\n")
            stack.extend((child, level + 2) for child in reversed(node.children))


def new(root: str = "", logger: Optional[logging.Logger] = None) -> Node:
    """Create a new name tree with the given root label (may be empty)."""
    tree = Node(root, logger=logger)
    tree.logger.info(f"New name tree with root {root!r}")
    return tree
