# Copyright (c) 2026 by the fsmtest developers
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions
# are met:
#
# 1. Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# 3. Neither the name of the copyright holder nor
#    the names of its contributors may be used to endorse or promote
#    products derived from this software without specific prior
#    written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED.  IN NO EVENT SHALL THE
# COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL,
# SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF
# USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND
# ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT
# OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF
# SUCH DAMAGE.
"""Finite state machines with integer input and output alphabets."""
import collections
import collections.abc as _abc
import logging

import networkx as nx

import fsmtest.fsm.nodes as _nodes
import fsmtest.fsm.tables as _tables
import fsmtest.fsm.traces as _traces
import fsmtest.graphics as _graphics
import fsmtest.presentation as _pres


__all__ = [
    'Fsm']


logger = logging.getLogger(__name__)


class Fsm(nx.MultiDiGraph):
    """Finite state machine, possibly nondeterministic.

    The graph nodes are the state ids `0..n-1`.
    Each state is described by an `FsmNode`,
    which holds the ordered list of outgoing transitions.
    Each transition is mirrored by a graph edge
    whose key is the transition's `FsmLabel`,
    so a transition with the same source, target,
    input, and output is stored only once.

    Inputs are `0..max_input`, outputs `0..max_output`.
    Both bounds grow as transitions with larger
    symbols are added.

    Example
    =======

    ```python
    m = Fsm(max_input=1, max_output=1)
    a = m.add_state('A', initial=True)
    b = m.add_state('B')
    m.add_transition(a, a, 0, 0)
    m.add_transition(a, b, 1, 1)
    m.add_transition(b, a, 0, 1)
    m.add_transition(b, b, 1, 0)
    m.distinguishing_trace(a, b)  # InputTrace([0])
    ```
    """

    def __init__(
            self,
            name:
                str='fsm',
            max_input:
                int=0,
            max_output:
                int=0,
            presentation:
                _pres.FsmPresentationLayer |
                None=None):
        super().__init__()
        if presentation is None:
            presentation = _pres.FsmPresentationLayer()
        self.name = name
        self.max_input = max_input
        self.max_output = max_output
        self.presentation = presentation
        self._fsm_nodes = list()
        self._initial = None

    def __str__(self):
        # need to override networkx.MultiDiGraph.__str__
        lines = [f'Fsm {self.name}:']
        for node in self._fsm_nodes:
            lines.extend(map(node._transition_str, node.transitions))
        return '\n'.join(lines)

    @property
    def fsm_nodes(self) -> list[_nodes.FsmNode]:
        return list(self._fsm_nodes)

    @property
    def initial_state(self) -> _nodes.FsmNode | None:
        if self._initial is None:
            return None
        return self._fsm_nodes[self._initial]

    def state(
            self,
            q:
                'int | _nodes.FsmNode'
            ) -> _nodes.FsmNode:
        """Return the node of state `q`."""
        if isinstance(q, _nodes.FsmNode):
            if q.fsm is not self:
                raise ValueError(
                    f'State {q} belongs to another machine')
            return q
        if not 0 <= q < len(self._fsm_nodes):
            raise KeyError(
                f'Machine {self.name} has no state: {q}')
        return self._fsm_nodes[q]

    def add_state(
            self,
            name:
                str |
                None=None,
            initial:
                bool=False
            ) -> _nodes.FsmNode:
        """Add a new state, with the next free id."""
        q = len(self._fsm_nodes)
        node = _nodes.FsmNode(self, q, name)
        if initial:
            if self._initial is not None:
                raise ValueError(
                    'Machine has initial state already: '
                    f'{self.initial_state.name}')
            self._initial = q
            node.mark_as_initial()
        self._fsm_nodes.append(node)
        self.add_node(q)
        logger.debug(f'added state {node.name} with id {q}')
        return node

    def add_states_from(
            self,
            names:
                _abc.Iterable[str]
            ) -> list[_nodes.FsmNode]:
        return [self.add_state(name) for name in names]

    def add_transition(
            self,
            source:
                'int | _nodes.FsmNode',
            target:
                'int | _nodes.FsmNode',
            x:
                int,
            y:
                int
            ) -> _nodes.FsmTransition:
        """Add transition `source --x/y--> target`.

        Adding an existing transition has no effect.
        """
        if x < 0 or y < 0:
            raise ValueError(
                f'Symbols must be nonnegative, got {x}/{y}')
        source = self.state(source)
        target = self.state(target)
        self.max_input = max(self.max_input, x)
        self.max_output = max(self.max_output, y)
        transition = _nodes.FsmTransition(
            source.id, target.id,
            _nodes.FsmLabel(x, y))
        source.add_transition(transition)
        return transition

    def add_transitions_from(
            self,
            transitions:
                _abc.Iterable[tuple[int, int, int, int]]):
        """Add transitions given as `(source, target, x, y)`."""
        for source, target, x, y in transitions:
            self.add_transition(source, target, x, y)

    def remove_transition(
            self,
            transition:
                _nodes.FsmTransition
            ) -> bool:
        return self.state(transition.source).remove_transition(
            transition)

    def transitions(self) -> list[_nodes.FsmTransition]:
        return [
            tr
            for node in self._fsm_nodes
            for tr in node.transitions]

    def is_deterministic(self) -> bool:
        return all(
            node.is_deterministic()
            for node in self._fsm_nodes)

    def is_observable(self) -> bool:
        return all(
            node.is_observable()
            for node in self._fsm_nodes)

    def is_completely_defined(self) -> bool:
        """Return `True` if every state has every input defined."""
        return not any(
            node.not_defined_inputs(self.max_input)
            for node in self._fsm_nodes)

    def _require_initial(self) -> _nodes.FsmNode:
        if self._initial is None:
            raise ValueError(
                f'Machine {self.name} has no initial state')
        return self.initial_state

    def reachable_states(self) -> set[_nodes.FsmNode]:
        """Return states reachable from the initial state."""
        init = self._require_initial()
        ids = nx.descendants(self, init.id)
        ids.add(init.id)
        return {self._fsm_nodes[q] for q in ids}

    def reach_traces(self) -> dict[int, _traces.IOTrace]:
        """Return a shortest IO trace to each reachable state.

        The initial state is reached by the empty trace.
        """
        init = self._require_initial()
        traces = {init.id: _traces.IOTrace.empty(self.presentation)}
        queue = collections.deque([init])
        while queue:
            node = queue.popleft()
            for tr in node.transitions:
                if tr.target in traces:
                    continue
                step = _traces.IOTrace(
                    [tr.input], [tr.output],
                    self.presentation)
                traces[tr.target] = traces[node.id] + step
                queue.append(self._fsm_nodes[tr.target])
        return traces

    def d_reachable_states(self) -> dict[int, _traces.IOTrace]:
        """Return deterministically reachable states.

        A state `q` is d-reachable if some input trace,
        defined in every state along all runs,
        leads each run from the initial state to `q`.

        @return:
            `dict` that maps each d-reachable state
            to an `IOTrace` whose input trace is
            shortest with that property
        """
        init = self._require_initial()
        result = {init.id: _traces.IOTrace.empty(self.presentation)}
        start = frozenset([init.id])
        seen = {start}
        queue = collections.deque([(start, list())])
        while queue:
            states, inputs = queue.popleft()
            nodes = [self._fsm_nodes[q] for q in states]
            for x in range(self.max_input + 1):
                if not all(n.is_possible_input(x) for n in nodes):
                    continue
                post = frozenset(
                    tr.target
                    for n in nodes
                    for tr in n.transitions
                    if tr.input == x)
                if post in seen:
                    continue
                seen.add(post)
                next_inputs = inputs + [x]
                queue.append((post, next_inputs))
                if len(post) != 1:
                    continue
                (q,) = post
                if q in result:
                    continue
                outputs, _ = init.possible_output_traces(next_inputs)
                result[q] = _traces.IOTrace(
                    next_inputs, outputs[0],
                    self.presentation)
                logger.debug(
                    f'state {self._fsm_nodes[q].name} is '
                    f'd-reachable via {result[q]}')
        return result

    def dfsm_table(self) -> _tables.DFSMTable:
        """Return the table of a deterministic machine.

        Raise `NondeterministicRowError` otherwise.
        """
        rows = [
            node.dfsm_table_row(self.max_input, strict=True)
            for node in self._fsm_nodes]
        return _tables.DFSMTable(
            rows, self.max_input, self.presentation)

    def pk_tables(self) -> list[_tables.PkTable]:
        """Return the Pk-tables `P_1, ..., P_K`.

        `P_K` is the last table that splits a class.
        """
        pk = self.dfsm_table().p1_table()
        tables = [pk]
        while True:
            pk = pk.pk_plus_one()
            if pk is None:
                break
            tables.append(pk)
        logger.info(
            f'computed {len(tables)} Pk-tables '
            f'for machine {self.name}')
        return tables

    def ofsm_tables(self) -> list[_tables.OFSMTable]:
        """Return the OFSM-tables of levels `0..K`.

        Raise `ValueError` if the machine is not observable.
        """
        if not self.is_observable():
            raise ValueError(
                f'Machine {self.name} is not observable')
        table = _tables.OFSMTable.from_nodes(
            self._fsm_nodes, self.max_input, self.max_output,
            self.presentation)
        tables = [table]
        while True:
            table = table.next()
            if table is None:
                break
            tables.append(table)
        logger.info(
            f'computed {len(tables)} OFSM-tables '
            f'for machine {self.name}')
        return tables

    def distinguishing_trace(
            self,
            q1:
                'int | _nodes.FsmNode',
            q2:
                'int | _nodes.FsmNode'
            ) -> _traces.InputTrace | None:
        """Return a shortest input trace that distinguishes states.

        Uses Pk-tables for deterministic machines,
        and OFSM-tables otherwise.

        @return:
            `None` if the states are equivalent
        """
        n1 = self.state(q1)
        n2 = self.state(q2)
        if self.is_deterministic():
            tables = self.pk_tables()
            max_output = None
        else:
            tables = self.ofsm_tables()
            max_output = self.max_output
        last = tables[-1]
        if last.get_class(n1.id) == last.get_class(n2.id):
            return None
        return n1.calc_distinguishing_trace(
            n2, tables, self.max_input, max_output)

    def to_graphviz(self):
        """Return `graphviz.Digraph` of this machine."""
        pl = self.presentation
        g = nx.MultiDiGraph()
        for node in self._fsm_nodes:
            shape = 'doublecircle' if node.is_initial else 'circle'
            g.add_node(node.id, label=node.name, shape=shape)
        for tr in self.transitions():
            label = f'{pl.get_in_id(tr.input)}/{pl.get_out_id(tr.output)}'
            g.add_edge(tr.source, tr.target, label=label)
        return _graphics.networkx_to_graphviz(g)
