"""Tests for `fsmtest.trees.tree`."""
import pytest

import fsmtest.trees.tree as _tree


def test_root_only():
    w = _tree.Tree()
    assert w.get_io_lists() == [[]]
    assert w.get_leaves() == [w.root]
    assert w.height() == 0


def test_add_io_lists_shares_prefixes():
    w = _tree.Tree()
    w.add_io_lists([[0, 1], [0, 2], [1]])
    assert w.get_io_lists() == [[0, 1], [0, 2], [1]]
    assert len(w) == 5
    assert w.height() == 2
    # existing path adds no nodes
    u = w.add([0])
    assert len(w) == 5
    assert w.get_path(u) == [0]
    assert not w.is_leaf(u)
    assert w.get_io_lists() == [[0, 1], [0, 2], [1]]


def test_add_below_node():
    w = _tree.Tree()
    u = w.add([3])
    v = w.add([4, 5], u)
    assert w.get_path(v) == [3, 4, 5]
    assert w.get_io_lists() == [[3, 4, 5]]


def test_children_order():
    w = _tree.Tree()
    a = w.add_child(w.root, 2)
    b = w.add_child(w.root, 1)
    assert w.children(w.root) == [(2, a), (1, b)]
    assert w.find_child(w.root, 1) == b
    assert w.find_child(w.root, 7) is None
    assert w.get_io_lists() == [[2], [1]]


def test_add_child_to_missing_node():
    w = _tree.Tree()
    with pytest.raises(ValueError):
        w.add_child(10, 0)
