"""Unit tests for name tree insertion, exact match and longest prefix match."""

import logging

import pytest

from nametree.lib.name_tree import Node, new, split_name


@pytest.fixture
def tree():
    """Tree holding /a, /a/b and /a/c with entries 1, 2 and 3."""
    tree = new("")
    tree.insert("/a", 1)
    tree.insert("/a/b", 2)
    tree.insert("/a/c", 3)
    return tree


class TestNameTreeBasic:
    """Basic name tree functionality tests."""

    def test_new_tree_is_empty(self):
        """Test that a tree with an unnamed root has size 0."""
        tree = new("")
        assert tree.size() == 0
        assert tree.children == []

    def test_named_root_is_counted(self):
        """Test that a named root counts towards the size."""
        tree = new("root")
        assert tree.size() == 1

        tree.insert("/a", 1)
        assert tree.size() == 2

    def test_split_name(self):
        """Test that the leading empty component is dropped."""
        assert split_name("/a/b/c") == ["a", "b", "c"]
        assert split_name("/a") == ["a"]
        assert split_name("") == []

    def test_reference_scenario(self, tree):
        """Test exact, longest and size on /a, /a/b, /a/c."""
        assert tree.find_exact_match("/a/b") == (2, True)
        assert tree.find_longest_match("/a/b/d") == ("a/b", 2, True)
        assert tree.find_exact_match("/a/x") == (None, False)
        assert tree.size() == 3

    def test_children_keep_insertion_order(self):
        """Test that children are appended in insertion order."""
        tree = new("")
        for name in ["/b", "/a", "/c"]:
            tree.insert(name, name)

        assert [child.component for child in tree.children] == ["b", "a", "c"]


class TestInsert:
    """Tests for insertion behavior."""

    def test_insert_creates_missing_components(self):
        """Test that every missing component becomes a node carrying the entry."""
        tree = new("")
        created = tree.insert("/x/y/z", "P")

        assert created == 3
        assert tree.size() == 3
        # Intermediate nodes carry the entry too
        assert tree.find_exact_match("/x") == ("P", True)
        assert tree.find_exact_match("/x/y") == ("P", True)
        assert tree.find_exact_match("/x/y/z") == ("P", True)

    def test_insert_extends_existing_path(self, tree):
        """Test that only the missing suffix is created."""
        created = tree.insert("/a/b/d/e", 4)

        assert created == 2
        assert tree.size() == 5
        assert tree.find_exact_match("/a/b") == (2, True)
        assert tree.find_exact_match("/a/b/d") == (4, True)

    def test_duplicate_insert_keeps_first_entry(self, tree):
        """Test that inserting an existing name does not overwrite its entry."""
        created = tree.insert("/a/b", 99)

        assert created == 0
        assert tree.find_exact_match("/a/b") == (2, True)
        assert tree.size() == 3

    def test_ancestor_inserted_after_descendant_keeps_first_entry(self):
        """Test that a prefix created by a longer name keeps that name's entry."""
        tree = new("")
        tree.insert("/a/b", 2)
        tree.insert("/a", 1)

        assert tree.find_exact_match("/a") == (2, True)

    def test_repeated_labels(self):
        """Test a name whose components repeat the same label."""
        tree = new("")
        assert tree.insert("/a/a/a", 1) == 3
        assert tree.size() == 3
        assert tree.find_exact_match("/a/a") == (1, True)

    def test_shared_prefix_no_cross_contamination(self):
        """Test that sibling names keep their own entries."""
        tree = new("")
        tree.insert("/com/example/www", "www")
        tree.insert("/com/example/mail", "mail")

        assert tree.find_exact_match("/com/example/www") == ("www", True)
        assert tree.find_exact_match("/com/example/mail") == ("mail", True)


class TestExactMatch:
    """Tests for exact match lookups."""

    def test_not_found_on_empty_tree(self):
        """Test exact match on an empty tree."""
        tree = new("")
        assert tree.find_exact_match("/a") == (None, False)

    def test_prefix_of_name_is_not_exact(self, tree):
        """Test that a name longer than any path is not an exact match."""
        assert tree.find_exact_match("/a/b/c") == (None, False)

    def test_entry_is_returned_unmodified(self):
        """Test that the stored object is returned as is."""
        tree = new("")
        payload = {"face": 7}
        tree.insert("/a", payload)

        entry, found = tree.find_exact_match("/a")
        assert found
        assert entry is payload


class TestLongestMatch:
    """Tests for longest prefix match lookups."""

    def test_exact_match_returns_name_itself(self, tree):
        """Test that an exact match reports the queried name."""
        assert tree.find_longest_match("/a/c") == ("/a/c", 3, True)

    def test_partial_match(self, tree):
        """Test that the deepest existing prefix is returned."""
        assert tree.find_longest_match("/a/x/y") == ("a", 1, True)

    def test_no_prefix(self, tree):
        """Test a name with no inserted prefix."""
        assert tree.find_longest_match("/z/a/b") == ("", None, False)

    def test_no_prefix_on_empty_tree(self):
        """Test longest match on an empty tree."""
        tree = new("")
        assert tree.find_longest_match("/a") == ("", None, False)

    def test_repeated_label_in_query(self):
        """Test that the prefix follows the matched depth, not the last equal label."""
        tree = new("")
        tree.insert("/a", 1)

        assert tree.find_longest_match("/a/x/a") == ("a", 1, True)

    def test_lookups_are_read_only(self, tree):
        """Test that lookups do not change the tree size."""
        for _ in range(3):
            tree.find_exact_match("/a/b/c/d")
            tree.find_longest_match("/a/b/c/d")
            tree.find_longest_match("/q")

        assert tree.size() == 3


class TestWalkTree:
    """Tests for the traversal primitive."""

    def test_full_sequence_consumed(self, tree):
        """Test a walk that consumes every component."""
        walk = tree._walk_tree(["a", "c"])

        assert walk.node.component == "c"
        assert walk.component == "c"
        assert walk.sentinel == 2
        assert walk.depth == 2

    def test_stops_at_first_unmatched_component(self, tree):
        """Test a walk that cannot advance past a node."""
        walk = tree._walk_tree(["a", "x", "y"])

        assert walk.node.component == "a"
        assert walk.component == "x"
        assert walk.sentinel == 0
        assert walk.depth == 1

    def test_nothing_matched(self, tree):
        """Test a walk that does not leave the root."""
        walk = tree._walk_tree(["z"])

        assert walk.node is tree
        assert walk.component == "z"
        assert walk.sentinel == 0
        assert walk.depth == 0

    def test_empty_sequence_rejected(self, tree):
        """Test that the primitive needs at least one component."""
        with pytest.raises(ValueError):
            tree._walk_tree([])


class TestEdgeCases:
    """Tests for names that are not normalized."""

    def test_empty_name(self):
        """Test that an empty name is ignored."""
        tree = new("")
        assert tree.insert("", 1) == 0
        assert tree.size() == 0
        assert tree.find_exact_match("") == (None, False)
        assert tree.find_longest_match("") == ("", None, False)

    def test_consecutive_slashes_make_empty_labels(self):
        """Test that an empty component becomes a node label."""
        tree = new("")
        assert tree.insert("/a//b", 1) == 3
        assert tree.find_exact_match("/a//b") == (1, True)
        assert tree.find_exact_match("/a/b") == (None, False)

    def test_missing_leading_slash_drops_first_component(self):
        """Test that the first component is always discarded."""
        tree = new("")
        tree.insert("a/b", 1)

        assert tree.find_exact_match("/b") == (1, True)
        assert tree.find_exact_match("/a") == (None, False)

    def test_deep_name(self):
        """Test a name deeper than the interpreter recursion limit."""
        tree = new("")
        name = "/" + "/".join(f"c{i}" for i in range(1200))
        tree.insert(name, "deep")

        assert tree.find_exact_match(name) == ("deep", True)
        assert tree.find_longest_match(name + "/more")[0] == name[1:]

    def test_deep_name_size_and_text(self):
        """Test size and text dump on a tree deeper than the recursion limit."""
        tree = new("")
        tree.insert("/" + "/".join(f"c{i}" for i in range(1200)), "deep")

        assert tree.size() == 1200
        lines = str(tree).splitlines()
        assert len(lines) == 1201
        assert lines[-1] == " " * 2400 + "c1199"


class TestLogging:
    """Tests for the injectable logger."""

    def test_custom_logger_receives_messages(self, caplog):
        """Test that construction and insertion log through the given logger."""
        observer = logging.getLogger("tests.nametree.observer")

        with caplog.at_level(logging.INFO, logger="tests.nametree.observer"):
            tree = new("root", logger=observer)
            tree.insert("/a/b", 1)

        messages = [r.getMessage() for r in caplog.records if r.name == "tests.nametree.observer"]
        assert any("root" in m for m in messages)
        assert any("/a/b" in m for m in messages)

    def test_children_share_logger(self):
        """Test that created nodes inherit the logger of their creator."""
        observer = logging.getLogger("tests.nametree.children")
        tree = Node("", logger=observer)
        tree.insert("/a/b", 1)

        assert tree.children[0].logger is observer
        assert tree.children[0].children[0].logger is observer
