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
"""States and transitions of finite state machines.

An `FsmNode` is a state of an `Fsm`, which owns all nodes.
Transitions refer to their target by state id,
the machine resolves ids to nodes.
"""
import collections
import collections.abc as _abc
import logging
import numbers
import typing as _ty

import fsmtest.fsm.tables as _tables
import fsmtest.fsm.traces as _traces
import fsmtest.trees.output_tree as _otree
import fsmtest.trees.tree as _tree

if _ty.TYPE_CHECKING:
    import fsmtest.fsm.machines as _machines


__all__ = [
    'FsmLabel',
    'FsmTransition',
    'FsmNode']


logger = logging.getLogger(__name__)
EPSILON = _traces.EPSILON


FsmLabel = collections.namedtuple(
    'FsmLabel', 'input, output')


class FsmTransition:
    """Transition `source --input/output--> target`.

    Source and target are state ids.
    """

    def __init__(
            self,
            source:
                int,
            target:
                int,
            label:
                FsmLabel):
        self.source = source
        self.target = target
        self.label = FsmLabel(*label)

    @property
    def input(self) -> int:
        return self.label.input

    @property
    def output(self) -> int:
        return self.label.output

    def __eq__(self, other):
        if not isinstance(other, FsmTransition):
            return NotImplemented
        return (
            self.source == other.source and
            self.target == other.target and
            self.label == other.label)

    def __hash__(self):
        return hash((self.source, self.target, self.label))

    def __repr__(self):
        return (
            f'FsmTransition({self.source}, {self.target}, '
            f'{self.input}/{self.output})')


class FsmNode:
    """State of a finite state machine.

    Create nodes with `Fsm.add_state`.

    Nodes compare by machine and id.
    Algorithms that mark states (visited, reachable, ...)
    keep those marks in their own containers,
    so nodes carry only the structure of the machine.
    """

    def __init__(
            self,
            fsm:
                '_machines.Fsm',
            id:
                int,
            name:
                str |
                None=None):
        self.fsm = fsm
        self.id = id
        self._name = name
        self.transitions = list()
        self._is_initial = False
        self._derived_from = None
        self.satisfied = list()

    def __eq__(self, other):
        if not isinstance(other, FsmNode):
            return NotImplemented
        return self.fsm is other.fsm and self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f'FsmNode({self.id})'

    def __str__(self):
        return '\n'.join(map(self._transition_str, self.transitions))

    def _transition_str(
            self,
            tr:
                FsmTransition
            ) -> str:
        pl = self.fsm.presentation
        target = self.fsm.state(tr.target).name
        return (
            f'{self.name} -- {pl.get_in_id(tr.input)}'
            f'/{pl.get_out_id(tr.output)} --> {target}')

    @property
    def name(self) -> str:
        return self.fsm.presentation.get_state_id(
            self.id, self._name)

    @property
    def presentation(self):
        return self.fsm.presentation

    @property
    def is_initial(self) -> bool:
        return self._is_initial

    def mark_as_initial(self):
        self._is_initial = True

    def set_pair(
            self,
            left:
                'int | FsmNode',
            right:
                'int | FsmNode'):
        """Record the pair of states this node was derived from."""
        self._derived_from = (_state_id(left), _state_id(right))

    def get_pair(self) -> tuple[int, int] | None:
        return self._derived_from

    def is_derived_from(
            self,
            pair:
                tuple
            ) -> bool:
        if self._derived_from is None:
            return False
        left, right = pair
        return self._derived_from == (
            _state_id(left), _state_id(right))

    def add_satisfies(
            self,
            requirement:
                str):
        self.satisfied.append(requirement)

    # transitions

    def add_transition(
            self,
            transition:
                FsmTransition
            ) -> bool:
        """Add `transition`, unless an equal one exists.

        @return:
            `True` if the transition was added
        """
        if transition.source != self.id:
            raise ValueError(
                f'Transition {transition} does not '
                f'start at state {self.id}')
        if transition.input < 0 or transition.output < 0:
            raise ValueError(
                f'Symbols must be nonnegative, got {transition}')
        if transition.target not in self.fsm:
            raise ValueError(
                f'Target state {transition.target} '
                'not in machine')
        if transition in self.transitions:
            logger.debug(f'ignored duplicate {transition}')
            return False
        self.transitions.append(transition)
        self.fsm.add_edge(
            self.id, transition.target,
            key=transition.label)
        return True

    def remove_transition(
            self,
            transition:
                FsmTransition
            ) -> bool:
        """Detach `transition`, return `True` if it was present."""
        if transition not in self.transitions:
            return False
        self.transitions.remove(transition)
        self.fsm.remove_edge(
            self.id, transition.target,
            key=transition.label)
        return True

    def _transitions_on(
            self,
            x:
                int
            ) -> list[FsmTransition]:
        return [tr for tr in self.transitions if tr.input == x]

    def _node(
            self,
            q:
                int
            ) -> 'FsmNode':
        return self.fsm.state(q)

    def deterministic_transitions(self) -> list[FsmTransition]:
        """Return transitions whose input occurs once."""
        counts = collections.Counter(
            tr.input for tr in self.transitions)
        return [
            tr for tr in self.transitions
            if counts[tr.input] == 1]

    def nondeterministic_transitions(self) -> list[FsmTransition]:
        """Return transitions whose input occurs more than once."""
        counts = collections.Counter(
            tr.input for tr in self.transitions)
        return [
            tr for tr in self.transitions
            if counts[tr.input] > 1]

    def has_transition(
            self,
            x:
                int,
            y:
                int |
                None=None
            ) -> bool:
        """Return `True` if a transition is labeled `x` (and `y`)."""
        return any(
            tr.input == x and (y is None or tr.output == y)
            for tr in self.transitions)

    def is_possible_input(
            self,
            x:
                int
            ) -> bool:
        return self.has_transition(x)

    def is_possible_output(
            self,
            x:
                int,
            y:
                int
            ) -> bool:
        return self.has_transition(x, y)

    def not_defined_inputs(
            self,
            max_input:
                int
            ) -> list[int]:
        """Return inputs in `0..max_input` without transition."""
        defined = {tr.input for tr in self.transitions}
        return [
            x for x in range(max_input + 1)
            if x not in defined]

    def not_defined_outputs(
            self,
            x:
                int,
            max_output:
                int
            ) -> list[int]:
        """Return outputs in `0..max_output` never produced on `x`."""
        defined = {tr.output for tr in self._transitions_on(x)}
        return [
            y for y in range(max_output + 1)
            if y not in defined]

    def is_observable(self) -> bool:
        """Return `True` if no two transitions share a label."""
        labels = set()
        for tr in self.transitions:
            if tr.label in labels:
                logger.debug(
                    f'Node {self.name} is not observable, '
                    f'label {tr.label} occurs twice')
                return False
            labels.add(tr.label)
        return True

    def is_deterministic(self) -> bool:
        """Return `True` if no two transitions share an input."""
        inputs = set()
        for tr in self.transitions:
            if tr.input in inputs:
                return False
            inputs.add(tr.input)
        return True

    # successors and outputs

    def possible_outputs(
            self,
            x:
                int
            ) -> list[tuple[_traces.OutputTrace, 'FsmNode']]:
        """Return `(output, target)` for each transition on `x`.

        For `x == EPSILON` the node stays put,
        and produces the output `EPSILON`.
        """
        pl = self.presentation
        if x == EPSILON:
            return [(_traces.OutputTrace([EPSILON], pl), self)]
        return [
            (_traces.OutputTrace([tr.output], pl), self._node(tr.target))
            for tr in self._transitions_on(x)]

    def possible_output_traces(
            self,
            input_trace:
                _abc.Sequence[int]
            ) -> tuple[
                list[_traces.OutputTrace],
                list['FsmNode']]:
        """Return output traces producible by `input_trace`.

        @return:
            `(outputs, reached)` where:
            - `outputs`: each output trace producible by
              `input_trace` from this node
            - `reached`: the nodes in which these runs end.

            For an empty input trace, no output is
            produced, and this node is the only node reached.
        """
        if len(input_trace) == 0:
            return list(), [self]
        # pairs of (outputs so far, node reached)
        frontier = [(list(), self)]
        for x in input_trace:
            expanded = list()
            for outputs, node in frontier:
                successors = node.possible_outputs(x)
                last = len(successors) - 1
                for i, (output, target) in enumerate(successors):
                    # the last branch reuses the list
                    extended = outputs if i == last else list(outputs)
                    extended.extend(output)
                    expanded.append((extended, target))
            frontier = expanded
        pl = self.presentation
        produced = [
            _traces.OutputTrace(outputs, pl)
            for outputs, _ in frontier]
        reached = [node for _, node in frontier]
        logger.debug(
            f'possible_output_traces(): {self.name}, '
            f'{len(input_trace)} inputs, {len(produced)} outputs')
        return produced, reached

    def after_as_set(
            self,
            x:
                int,
            y:
                int |
                None=None
            ) -> set['FsmNode']:
        """Return the targets of transitions labeled `x` (and `y`)."""
        if x == EPSILON and y in (None, EPSILON):
            return {self}
        return {
            self._node(tr.target)
            for tr in self.transitions
            if tr.input == x and (y is None or tr.output == y)}

    def after(
            self,
            trace:
                int |
                _abc.Iterable[int] |
                _traces.IOTrace,
            output_trace:
                _abc.Iterable[int] |
                None=None
            ) -> list['FsmNode'] | set['FsmNode']:
        """Return the nodes reached by `trace`.

        @param trace:
            - single input symbol: return list of targets,
              in the order of transitions
              (`[self]` for `EPSILON`)
            - input trace: return set of nodes reachable
              by applying `trace`, constrained to produce
              `output_trace` if that is given
            - `IOTrace`: like input with output trace
        """
        if isinstance(trace, numbers.Integral):
            return self._after_input(trace)
        if isinstance(trace, _traces.IOTrace):
            return self._after_io(
                trace.input_trace, trace.output_trace)
        if output_trace is not None:
            return self._after_io(trace, output_trace)
        nodes = {self}
        for x in trace:
            nodes = set().union(*(n.after_as_set(x) for n in nodes))
        return nodes

    def _after_input(
            self,
            x:
                int
            ) -> list['FsmNode']:
        if x == EPSILON:
            return [self]
        return [self._node(tr.target) for tr in self._transitions_on(x)]

    def _after_io(
            self,
            input_trace:
                _abc.Iterable[int],
            output_trace:
                _abc.Iterable[int]
            ) -> set['FsmNode']:
        inputs = list(input_trace)
        outputs = list(output_trace)
        if len(inputs) != len(outputs):
            return set()
        nodes = {self}
        for x, y in zip(inputs, outputs):
            nodes = set().union(
                *(n.after_as_set(x, y) for n in nodes))
        return nodes

    def after_with_outputs(
            self,
            x:
                int
            ) -> tuple[list['FsmNode'], list[int]]:
        """Return targets and outputs of transitions on `x`."""
        transitions = self._transitions_on(x)
        targets = [self._node(tr.target) for tr in transitions]
        outputs = [tr.output for tr in transitions]
        return targets, outputs

    def apply_input(
            self,
            x:
                int,
            output_trace:
                _traces.OutputTrace
            ) -> 'FsmNode | None':
        """Take the first transition on `x`.

        The output is appended to `output_trace`.

        @return:
            target node, or `None` if `x` is undefined
        """
        for tr in self.transitions:
            if tr.input == x:
                output_trace.add(tr.output)
                return self._node(tr.target)
        return None

    def apply(
            self,
            input_trace:
                _abc.Iterable[int],
            visited:
                set[int] |
                None=None
            ) -> '_otree.OutputTree':
        """Return the `OutputTree` of `input_trace`.

        @param visited:
            if given, then the ids of all nodes
            passed by the runs are added to it
        """
        itrc = _traces.InputTrace(input_trace, self.presentation)
        tree = _otree.OutputTree(itrc)
        if len(itrc) == 0:
            return tree
        t2f = {tree.root: self}
        frontier = [tree.root]
        for x in itrc:
            expanded = list()
            for u in frontier:
                state = t2f[u]
                if visited is not None:
                    visited.add(state.id)
                for output, target in state.possible_outputs(x):
                    (y,) = output
                    v = tree.add_child(u, y)
                    t2f[v] = target
                    expanded.append(v)
                    if visited is not None:
                        visited.add(target.id)
            frontier = expanded
        return tree

    # distinguishability

    def distinguished(
            self,
            other:
                'FsmNode',
            input_list:
                _abc.Iterable[int]
            ) -> bool:
        """Return `True` if `input_list` distinguishes the nodes.

        The nodes are distinguished if their output trees
        differ as sets of output traces.
        """
        input_list = list(input_list)
        return self.apply(input_list) != other.apply(input_list)

    def r_distinguished(
            self,
            other:
                'FsmNode',
            input_list:
                _abc.Iterable[int]
            ) -> bool:
        """Return `True` if the nodes share no IO trace on `input_list`.

        The empty input list never r-distinguishes.
        """
        input_list = list(input_list)
        if not input_list:
            return False
        mine = self.apply(input_list)
        theirs = other.apply(input_list)
        return not mine.get_outputs_intersection(theirs)

    def find_distinguishing_trace(
            self,
            other:
                'FsmNode',
            w:
                _tree.Tree
            ) -> _traces.InputTrace | None:
        """Return the first input list of `w` that distinguishes.

        @return:
            `None` if no path of `w` distinguishes the nodes
        """
        for input_list in w.get_io_lists():
            if self.distinguished(other, input_list):
                return _traces.InputTrace(input_list, self.presentation)
        return None

    def find_r_distinguishing_trace(
            self,
            other:
                'FsmNode',
            w:
                _tree.Tree
            ) -> _traces.InputTrace | None:
        """Return the first input list of `w` that r-distinguishes."""
        for input_list in w.get_io_lists():
            if self.r_distinguished(other, input_list):
                return _traces.InputTrace(input_list, self.presentation)
        return None

    def dfsm_table_row(
            self,
            max_input:
                int,
            strict:
                bool=False
            ) -> _tables.DFSMTableRow | None:
        """Return the deterministic table row of this node.

        @param strict:
            if `True`, then raise `NondeterministicRowError`
            for a nondeterministic node,
            else log an error and return `None`
        """
        row = _tables.DFSMTableRow(self.id, max_input)
        for tr in self.transitions:
            x = tr.input
            if not 0 <= x <= max_input:
                raise ValueError(
                    f'Input {x} of state {self.id} '
                    f'outside 0..{max_input}')
            if row.io[x] >= 0:
                msg = (
                    'Cannot calculate DFSM table row for '
                    f'nondeterministic state {self.name}, '
                    f'input {x} has multiple transitions.')
                if strict:
                    raise _tables.NondeterministicRowError(msg)
                logger.error(msg)
                return None
            row.io[x] = tr.output
            row.i2p[x] = tr.target
        return row

    def calc_distinguishing_trace(
            self,
            other:
                'FsmNode',
            tables:
                _abc.Sequence[_tables.PkTable] |
                _abc.Sequence[_tables.OFSMTable],
            max_input:
                int,
            max_output:
                int |
                None=None
            ) -> _traces.InputTrace:
        """Return an input trace that distinguishes the nodes.

        @param tables:
            - Pk-tables for `k = 1..K`, in that order,
              computed for a deterministic machine, or
            - OFSM-tables of levels `0..K`,
              computed for an observable machine.
        @param max_input:
            largest input symbol
        @param max_output:
            largest output symbol, used with OFSM-tables
        @return:
            trace of minimal length that distinguishes
            the nodes, according to `tables`
        """
        if not tables:
            raise _tables.InconsistentTableError(
                'No tables given to compute distinguishing trace')
        if isinstance(tables[0], _tables.OFSMTable):
            if max_output is None:
                raise ValueError(
                    '`max_output` is required with OFSM-tables')
            return self._calc_ofsm_distinguishing_trace(
                other, tables, max_input, max_output)
        return self._calc_pk_distinguishing_trace(
            other, tables, max_input)

    def _inconsistency(
            self,
            msg:
                str
            ) -> _tables.InconsistentTableError:
        logger.critical(msg)
        return _tables.InconsistentTableError(msg)

    def _calc_pk_distinguishing_trace(
            self,
            other:
                'FsmNode',
            pk_tables:
                _abc.Sequence[_tables.PkTable],
            max_input:
                int
            ) -> _traces.InputTrace:
        # least l with `P_l` distinguishing, `P_l = pk_tables[l - 1]`
        for l, pk in enumerate(pk_tables, start=1):
            if pk.get_class(self.id) != pk.get_class(other.id):
                break
        else:
            raise self._inconsistency(
                f'States {self.name} and {other.name} are '
                'not distinguished by the given Pk-tables')
        qi = self
        qj = other
        itrc = _traces.InputTrace(presentation=self.presentation)
        for k in range(1, l):
            pl_minus_k = pk_tables[l - k - 1]
            for x in range(max_input + 1):
                qi_next = qi.after(x)
                qj_next = qj.after(x)
                if not qi_next or not qj_next:
                    continue
                qi_next = qi_next[0]
                qj_next = qj_next[0]
                if (pl_minus_k.get_class(qi_next.id) !=
                        pl_minus_k.get_class(qj_next.id)):
                    qi = qi_next
                    qj = qj_next
                    itrc.add(x)
                    break
            else:
                raise self._inconsistency(
                    'Inconsistent Pk-tables: no input separates '
                    f'{qi.name} and {qj.name} in P_{l - k}')
        # qi, qj differ in P_1, so some output differs
        for x in range(max_input + 1):
            oti = _traces.OutputTrace(presentation=self.presentation)
            otj = _traces.OutputTrace(presentation=self.presentation)
            qi.apply_input(x, oti)
            qj.apply_input(x, otj)
            if oti != otj:
                itrc.add(x)
                return itrc
        raise self._inconsistency(
            'Inconsistent Pk-tables: no input produces '
            f'different outputs in {qi.name} and {qj.name}')

    def _calc_ofsm_distinguishing_trace(
            self,
            other:
                'FsmNode',
            ofsm_tables:
                _abc.Sequence[_tables.OFSMTable],
            max_input:
                int,
            max_output:
                int
            ) -> _traces.InputTrace:
        q1 = self.id
        q2 = other.id
        # least l >= 1 with table l distinguishing
        for l in range(1, len(ofsm_tables)):
            ot = ofsm_tables[l]
            if ot.get_class(q1) != ot.get_class(q2):
                break
        else:
            raise self._inconsistency(
                f'States {self.name} and {other.name} are '
                'not distinguished by the given OFSM-tables')
        itrc = _traces.InputTrace(presentation=self.presentation)
        ios = [
            (x, y)
            for x in range(max_input + 1)
            for y in range(max_output + 1)]
        for k in range(1, l):
            ot = ofsm_tables[l - k]
            for x, y in ios:
                q1_post = ot.get(q1, x, y)
                q2_post = ot.get(q2, x, y)
                if q1_post < 0 or q2_post < 0:
                    continue
                if ot.get_class(q1_post) != ot.get_class(q2_post):
                    itrc.add(x)
                    q1 = q1_post
                    q2 = q2_post
                    break
            else:
                raise self._inconsistency(
                    'Inconsistent OFSM-tables: no IO separates '
                    f'states {q1} and {q2} in table {l - k}')
        # q1, q2 differ in the IO pairs they accept
        ot0 = ofsm_tables[0]
        for x, y in ios:
            defined_1 = ot0.get(q1, x, y) >= 0
            defined_2 = ot0.get(q2, x, y) >= 0
            if defined_1 != defined_2:
                itrc.add(x)
                return itrc
        raise self._inconsistency(
            'Inconsistent OFSM-tables: states '
            f'{q1} and {q2} accept the same IO pairs')


def _state_id(
        state:
            'int | FsmNode'
        ) -> int:
    if isinstance(state, FsmNode):
        return state.id
    return state
