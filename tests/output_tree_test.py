"""Tests for `fsmtest.trees.output_tree`."""
import pytest

import fsmtest.fsm.machines as _machines
import fsmtest.fsm.traces as _traces
import fsmtest.trees.output_tree as _otree


def _machine(reverse=False):
    transitions = [
        (0, 1, 0, 0),
        (0, 2, 0, 1),
        (1, 1, 0, 0),
        (2, 0, 0, 1)]
    if reverse:
        transitions.reverse()
    m = _machines.Fsm('nd', max_input=1, max_output=1)
    m.add_state('s0', initial=True)
    m.add_states_from(['s1', 's2'])
    m.add_transitions_from(transitions)
    return m


def test_paths_of_complete_runs():
    m = _machine()
    tree = m.state(0).apply([0, 0])
    assert tree.get_io_lists() == [[0, 0], [1, 1]]
    assert tree.get_output_traces() == [
        _traces.OutputTrace([0, 0]),
        _traces.OutputTrace([1, 1])]
    assert tree.to_io_traces() == [
        _traces.IOTrace([0, 0], [0, 0]),
        _traces.IOTrace([0, 0], [1, 1])]
    assert tree.get_input_trace() == _traces.InputTrace([0, 0])


def test_runs_stop_at_undefined_input():
    m = _machine()
    tree = m.state(0).apply([0, 1])
    assert tree.get_io_lists() == [[0], [1]]
    assert tree.to_io_traces() == [
        _traces.IOTrace([0], [0]),
        _traces.IOTrace([0], [1])]


def test_contains_is_reflexive():
    m = _machine()
    tree = m.state(0).apply([0, 0, 0])
    assert tree.contains(tree)
    assert tree == tree


def test_equality_ignores_branch_order():
    a = _machine().state(0).apply([0, 0])
    b = _machine(reverse=True).state(0).apply([0, 0])
    assert a.get_io_lists() != b.get_io_lists()
    assert a == b


def test_different_inputs_not_equal():
    m = _machine()
    a = m.state(0).apply([0])
    b = m.state(0).apply([0, 0])
    assert a != b
    assert not a.contains(b)
    assert a != 5


def test_contains_subset():
    big = _otree.OutputTree(_traces.InputTrace([0]))
    big.add([0])
    big.add([1])
    small = _otree.OutputTree(_traces.InputTrace([0]))
    small.add([1])
    assert big.contains(small)
    assert not small.contains(big)
    assert big != small


def test_outputs_intersection_is_multiset():
    twice = _otree.OutputTree(_traces.InputTrace([0]))
    twice.add_child(twice.root, 0)
    twice.add_child(twice.root, 0)
    once = _otree.OutputTree(_traces.InputTrace([0]))
    once.add_child(once.root, 0)
    once.add_child(once.root, 1)
    expected = [_traces.IOTrace([0], [0])]
    assert twice.get_outputs_intersection(once) == expected
    assert once.get_outputs_intersection(twice) == expected
    assert len(twice.get_outputs_intersection(twice)) == 2


def test_output_tree_unhashable():
    tree = _otree.OutputTree(_traces.InputTrace([0]))
    with pytest.raises(TypeError):
        hash(tree)


def test_str_lists_io_traces():
    m = _machine()
    tree = m.state(0).apply([0])
    assert str(tree) == '(0/0)\n(0/1)'
