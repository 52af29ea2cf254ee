"""Tests for `fsmtest.fsm.containers`."""
import logging

import pytest

import fsmtest.fsm.containers as _cont
import fsmtest.fsm.traces as _traces


logging.basicConfig()
IOTrace = _traces.IOTrace


def test_add_unique_remove_prefixes():
    c = _cont.IOTraceContainer()
    c.add_unique_remove_prefixes(IOTrace([1, 2], [5, 6]))
    # prefix of a member is skipped
    c.add_unique_remove_prefixes(IOTrace([1], [5]))
    assert c.get_list() == [IOTrace([1, 2], [5, 6])]
    # equal trace is skipped
    c.add_unique_remove_prefixes(IOTrace([1, 2], [5, 6]))
    assert len(c) == 1
    # extension replaces its prefixes
    c.add_unique_remove_prefixes(IOTrace([1, 2, 3], [5, 6, 7]))
    assert c.get_list() == [IOTrace([1, 2, 3], [5, 6, 7])]
    # unrelated trace is appended
    c.add_unique_remove_prefixes(IOTrace([2], [0]))
    assert c.get_list() == [
        IOTrace([1, 2, 3], [5, 6, 7]),
        IOTrace([2], [0])]


def test_remove_prefixes_needs_matching_outputs():
    c = _cont.IOTraceContainer()
    c.add_unique_remove_prefixes(IOTrace([1], [5]))
    c.add_unique_remove_prefixes(IOTrace([1, 2], [4, 6]))
    assert len(c) == 2


def test_add_and_add_unique():
    a = IOTrace([0], [0])
    b = IOTrace([1], [1])
    c = _cont.IOTraceContainer()
    c.add(a)
    c.add(a)
    assert len(c) == 2
    c = _cont.IOTraceContainer()
    c.add_unique([a, b, a])
    assert c.get_list() == [a, b]
    assert c.contains(a)
    assert b in c
    assert not c.is_empty()
    assert _cont.IOTraceContainer().is_empty()


def test_add_rejects_other_types():
    c = _cont.IOTraceContainer()
    with pytest.raises(TypeError):
        c.add(5)
    with pytest.raises(TypeError):
        c.add([IOTrace([0], [0]), 1])


def test_concatenate_trace():
    c = _cont.IOTraceContainer([
        IOTrace([0], [1]),
        IOTrace([1], [0])])
    c.concatenate(IOTrace([2], [2]))
    assert c.get_list() == [
        IOTrace([0, 2], [1, 2]),
        IOTrace([1, 2], [0, 2])]


def test_concatenate_container():
    c = _cont.IOTraceContainer([
        IOTrace([0], [0]),
        IOTrace([1], [1])])
    suffixes = _cont.IOTraceContainer([
        IOTrace([2], [2]),
        IOTrace([3], [3])])
    c.concatenate(suffixes)
    assert c.get_list() == [
        IOTrace([0, 2], [0, 2]),
        IOTrace([0, 3], [0, 3]),
        IOTrace([1, 2], [1, 2]),
        IOTrace([1, 3], [1, 3])]


def test_concatenate_to_empty_trace():
    c = _cont.IOTraceContainer([IOTrace.empty()])
    c.concatenate(IOTrace([0], [1]))
    assert c.get_list() == [IOTrace([0], [1])]


def test_concatenate_to_front():
    c = _cont.IOTraceContainer([IOTrace([1], [1])])
    c.concatenate_to_front(
        _traces.InputTrace([0]),
        _traces.OutputTrace([2]))
    assert c.get_list() == [IOTrace([0, 1], [2, 1])]
    c.concatenate_to_front(IOTrace([3], [3]))
    assert c.get_list() == [IOTrace([3, 0, 1], [3, 2, 1])]


def test_difference_and_remove():
    a = IOTrace([0], [0])
    b = IOTrace([1], [1])
    c = _cont.IOTraceContainer([a, b])
    d = _cont.IOTraceContainer([b])
    assert (c - d).get_list() == [a]
    assert (d - c).is_empty()
    c.remove(a)
    assert c == d


def test_get_output_traces():
    c = _cont.IOTraceContainer([
        IOTrace([0, 1], [2, 3]),
        IOTrace([1], [0])])
    assert c.get_output_traces() == [
        _traces.OutputTrace([2, 3]),
        _traces.OutputTrace([0])]
