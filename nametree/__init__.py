"""Hierarchical name tree with exact and longest prefix matching."""

from nametree.lib.name_tree import Node, new

__all__ = ["Node", "new"]
