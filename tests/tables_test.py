"""Tests for `fsmtest.fsm.tables`, and distinguishing traces."""
import itertools
import logging

import numpy as np
import pytest

import fsmtest.fsm.machines as _machines
import fsmtest.fsm.tables as _tables
import fsmtest.fsm.traces as _traces


logging.basicConfig()
logger = logging.getLogger(__name__)


def _two_states():
    m = _machines.Fsm('ab', max_input=1, max_output=1)
    m.add_state('A', initial=True)
    m.add_state('B')
    m.add_transitions_from([
        (0, 0, 0, 0),
        (0, 1, 1, 1),
        (1, 0, 0, 1),
        (1, 1, 1, 0)])
    return m


def _chain():
    """Return machine where only `s2` outputs 1."""
    m = _machines.Fsm('chain', max_input=0, max_output=1)
    m.add_state('s0', initial=True)
    m.add_states_from(['s1', 's2'])
    m.add_transitions_from([
        (0, 1, 0, 0),
        (1, 2, 0, 0),
        (2, 2, 0, 1)])
    return m


def _observable():
    """Return observable nondeterministic machine."""
    m = _machines.Fsm('obs', max_input=0, max_output=1)
    m.add_state('t0', initial=True)
    m.add_states_from(['t1', 't2'])
    m.add_transitions_from([
        (0, 1, 0, 0),
        (0, 0, 0, 1),
        (1, 2, 0, 0),
        (1, 0, 0, 1),
        (2, 2, 0, 0)])
    return m


def _assert_refines(tables):
    """Assert that classes only split across levels."""
    for earlier, later in zip(tables, tables[1:]):
        assert later.max_class_id() > earlier.max_class_id()
        n = len(later)
        for p, q in itertools.product(range(n), repeat=2):
            if later.get_class(p) == later.get_class(q):
                assert earlier.get_class(p) == earlier.get_class(q)


def test_dfsm_table():
    m = _two_states()
    table = m.dfsm_table()
    assert len(table) == 2
    assert table.rows[0].io.tolist() == [0, 1]
    assert table.rows[0].i2p.tolist() == [0, 1]
    assert table.rows[1].io.tolist() == [1, 0]
    assert table.rows[1].i2p.tolist() == [0, 1]


def test_dfsm_table_needs_all_rows():
    with pytest.raises(ValueError):
        _tables.DFSMTable([_tables.DFSMTableRow(1, 0)], 0)


def test_dfsm_table_nondeterministic():
    m = _observable()
    with pytest.raises(_tables.NondeterministicRowError):
        m.dfsm_table()


def test_p1_table_two_states():
    m = _two_states()
    p1 = m.dfsm_table().p1_table()
    assert p1.s2c.tolist() == [0, 1]
    assert p1.pk_plus_one() is None
    assert len(m.pk_tables()) == 1


def test_two_states_distinguishing_trace():
    m = _two_states()
    a, b = m.fsm_nodes
    tables = m.pk_tables()
    itrc = a.calc_distinguishing_trace(b, tables, m.max_input)
    assert itrc == _traces.InputTrace([0])
    assert a.distinguished(b, itrc)
    assert m.distinguishing_trace(0, 1) == _traces.InputTrace([0])


def test_pk_tables_chain():
    m = _chain()
    tables = m.pk_tables()
    assert len(tables) == 2
    assert tables[0].s2c.tolist() == [0, 0, 1]
    assert tables[1].s2c.tolist() == [0, 1, 2]
    _assert_refines(tables)


def test_pk_distinguishing_trace_walks_down():
    m = _chain()
    s0, s1, s2 = m.fsm_nodes
    tables = m.pk_tables()
    itrc = s0.calc_distinguishing_trace(s1, tables, m.max_input)
    assert itrc == _traces.InputTrace([0, 0])
    assert s0.distinguished(s1, itrc)
    assert not s0.distinguished(s1, itrc[:1])
    assert s0.calc_distinguishing_trace(
        s2, tables, m.max_input) == _traces.InputTrace([0])


def test_pk_table_rows_shared():
    m = _chain()
    p1, p2 = m.pk_tables()
    assert all(r1 is r2 for r1, r2 in zip(p1.rows, p2.rows))
    row = p1.rows[1]
    assert row.get(0) == 2
    assert row.get_output(0) == 0
    assert row.class_signature(p1.s2c) == (1,)


def test_pk_table_members_and_str():
    m = _chain()
    p1 = m.pk_tables()[0]
    assert p1.get_members(0) == '{0,1}'
    assert p1.get_members(1) == '{2}'
    text = str(p1)
    assert text.splitlines()[0] == 'state\tclass\tI2O(0)\tI2P(0)'
    assert text.splitlines()[3] == '2\t1\t1\t2'


def test_pk_table_missing_rows():
    pk = _tables.PkTable(2, 0)
    with pytest.raises(ValueError):
        pk.pk_plus_one()


def test_equivalent_states():
    m = _machines.Fsm('loop', max_input=0, max_output=0)
    m.add_state('a', initial=True)
    m.add_state('b')
    m.add_transitions_from([
        (0, 1, 0, 0),
        (1, 0, 0, 0)])
    tables = m.pk_tables()
    assert len(tables) == 1
    assert m.distinguishing_trace(0, 1) is None
    a, b = m.fsm_nodes
    with pytest.raises(_tables.InconsistentTableError):
        a.calc_distinguishing_trace(b, tables, m.max_input)


def test_inconsistent_pk_tables():
    m = _chain()
    s0, s1, _ = m.fsm_nodes
    p1, p2 = m.pk_tables()
    # claim that s0 and s1 differ in P_2,
    # while their successors agree in P_1
    p2.s2c = np.array([0, 1, 1])
    p1.s2c = np.array([0, 0, 0])
    with pytest.raises(_tables.InconsistentTableError):
        s0.calc_distinguishing_trace(s1, [p1, p2], m.max_input)


def test_ofsm_tables():
    m = _observable()
    tables = m.ofsm_tables()
    assert len(tables) == 3
    assert tables[0].s2c.tolist() == [0, 0, 0]
    assert tables[0].max_class_id() == 0
    assert tables[1].s2c.tolist() == [0, 0, 1]
    assert tables[2].s2c.tolist() == [0, 1, 2]
    _assert_refines(tables)
    # successors are shared by all levels
    assert tables[0].post is tables[2].post
    assert tables[0].get(0, 0, 0) == 1
    assert tables[0].get(2, 0, 1) == _tables.UNDEFINED


def test_ofsm_distinguishing_trace():
    m = _observable()
    t0, t1, t2 = m.fsm_nodes
    tables = m.ofsm_tables()
    itrc = t0.calc_distinguishing_trace(
        t1, tables, m.max_input, m.max_output)
    assert itrc == _traces.InputTrace([0, 0])
    assert t0.distinguished(t1, itrc)
    assert not t0.distinguished(t1, itrc[:1])
    itrc = t0.calc_distinguishing_trace(
        t2, tables, m.max_input, m.max_output)
    assert itrc == _traces.InputTrace([0])
    assert m.distinguishing_trace(t0, t1) == _traces.InputTrace([0, 0])


def test_ofsm_needs_max_output():
    m = _observable()
    t0, t1, _ = m.fsm_nodes
    with pytest.raises(ValueError):
        t0.calc_distinguishing_trace(t1, m.ofsm_tables(), m.max_input)


def test_ofsm_inconsistent_tables():
    m = _observable()
    t0, t1, _ = m.fsm_nodes
    tables = m.ofsm_tables()
    with pytest.raises(_tables.InconsistentTableError):
        t0.calc_distinguishing_trace(
            t1, tables[:1], m.max_input, m.max_output)
    with pytest.raises(_tables.InconsistentTableError):
        t0.calc_distinguishing_trace(
            t1, [], m.max_input, m.max_output)


def test_ofsm_tables_not_observable():
    m = _observable()
    m.add_transition(2, 0, 0, 0)
    assert not m.is_observable()
    with pytest.raises(ValueError):
        m.ofsm_tables()
    with pytest.raises(ValueError):
        _tables.OFSMTable.from_nodes(
            m.fsm_nodes, m.max_input, m.max_output)


def test_ofsm_table_str():
    m = _observable()
    t0 = m.ofsm_tables()[0]
    lines = str(t0).splitlines()
    assert lines[0] == 'state\tclass\t0/0\t0/1'
    assert lines[3] == '2\t0\t2\t-'


def _two_classes():
    """Return machine with stable classes `{0}`, `{1, 2}`."""
    m = _machines.Fsm('pair', max_input=0, max_output=1)
    m.add_state('u', initial=True)
    m.add_states_from(['v', 'w'])
    m.add_transitions_from([
        (0, 0, 0, 1),
        (1, 2, 0, 0),
        (2, 1, 0, 0)])
    return m


def test_pk_fixpoint_with_gapped_class_ids():
    m = _two_classes()
    p1 = m.dfsm_table().p1_table()
    assert p1.s2c.tolist() == [0, 1, 1]
    p1.set_class(1, 5)
    p1.set_class(2, 5)
    assert p1.pk_plus_one() is None


def test_pk_split_with_gapped_class_ids():
    m = _chain()
    p1 = m.dfsm_table().p1_table()
    p1.s2c = np.array([0, 0, 2])
    p2 = p1.pk_plus_one()
    assert p2 is not None
    assert p2.s2c.tolist() == [0, 1, 2]


def test_ofsm_fixpoint_with_gapped_class_ids():
    m = _observable()
    last = m.ofsm_tables()[-1]
    gapped = _tables.OFSMTable(
        3, m.max_input, m.max_output,
        last.post, np.array([0, 3, 7]))
    assert gapped.next() is None
    merged = _tables.OFSMTable(
        3, m.max_input, m.max_output,
        last.post, np.array([4, 4, 9]))
    split = merged.next()
    assert split is not None
    assert split.s2c.tolist() == [0, 1, 2]


def test_ofsm_table_symbols_out_of_range():
    m = _observable()
    m.add_transition(2, 0, 1, 0)
    with pytest.raises(ValueError):
        _tables.OFSMTable.from_nodes(m.fsm_nodes, 0, m.max_output)
    with pytest.raises(ValueError):
        _tables.OFSMTable.from_nodes(m.fsm_nodes, m.max_input, 0)
