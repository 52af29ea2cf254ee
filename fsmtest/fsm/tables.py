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
"""Pk-tables and OFSM-tables, for partitioning states.

A table of level `k` maps each state to an equivalence class,
so that two states are in the same class if and only if
no input trace of length at most `k` distinguishes them.

- Pk-tables apply to deterministic machines,
  and are refined by the successor of each input.

- OFSM-tables apply to observable, possibly nondeterministic
  machines, and are refined by the successor of each
  input/output pair.

Each table is obtained from the table of the previous level,
see `PkTable.pk_plus_one` and `OFSMTable.next`.
Classes only split as the level increases.
"""
import collections.abc as _abc
import logging

import numpy as np

import fsmtest.presentation as _pres


__all__ = [
    'UNDEFINED',
    'NondeterministicRowError',
    'InconsistentTableError',
    'DFSMTableRow',
    'DFSMTable',
    'PkTableRow',
    'PkTable',
    'OFSMTable']


logger = logging.getLogger(__name__)
UNDEFINED = -1


class NondeterministicRowError(ValueError):
    """A deterministic table row requested for a nondeterministic state."""


class InconsistentTableError(Exception):
    """A chain of tables does not justify that two states differ."""


def _successor_classes(
        post:
            np.ndarray,
        s2c:
            np.ndarray
        ) -> np.ndarray:
    """Replace each successor in `post` by its class.

    Undefined successors remain `UNDEFINED`.
    """
    return np.where(post >= 0, s2c[post], UNDEFINED)


def _refine(
        s2c:
            np.ndarray,
        signatures:
            _abc.Iterable[tuple]
        ) -> np.ndarray:
    """Split classes of `s2c` by state signatures.

    Class ids are numbered in order of first appearance.
    """
    classes = dict()
    new_s2c = np.zeros_like(s2c)
    for q, signature in enumerate(signatures):
        key = (int(s2c[q]), signature)
        new_s2c[q] = classes.setdefault(key, len(classes))
    return new_s2c


def _num_classes(
        s2c:
            np.ndarray
        ) -> int:
    return len(np.unique(s2c))


def _members(
        s2c:
            np.ndarray,
        c:
            int,
        presentation:
            _pres.FsmPresentationLayer
        ) -> str:
    names = (
        presentation.get_state_id(int(q))
        for q in np.flatnonzero(s2c == c))
    return '{' + ','.join(names) + '}'


class DFSMTableRow:
    """Outputs and successors of a deterministic state.

    `io[x]` is the output and `i2p[x]` the successor
    under input `x`, or `UNDEFINED`.
    """

    def __init__(
            self,
            state:
                int,
            max_input:
                int):
        self.state = state
        self.io = np.full(max_input + 1, UNDEFINED, dtype=int)
        self.i2p = np.full(max_input + 1, UNDEFINED, dtype=int)

    def __repr__(self):
        return (
            f'DFSMTableRow(state={self.state}, '
            f'io={self.io.tolist()}, i2p={self.i2p.tolist()})')

    def get_io_section(self) -> np.ndarray:
        return self.io

    def get_i2post_section(self) -> np.ndarray:
        return self.i2p


class DFSMTable:
    """Rows of all states of a deterministic machine."""

    def __init__(
            self,
            rows:
                _abc.Iterable[DFSMTableRow],
            max_input:
                int,
            presentation:
                _pres.FsmPresentationLayer |
                None=None):
        if presentation is None:
            presentation = _pres.DEFAULT_PRESENTATION
        self.rows = sorted(rows, key=lambda row: row.state)
        self.max_input = max_input
        self.presentation = presentation
        states = [row.state for row in self.rows]
        if states != list(range(len(states))):
            raise ValueError(
                'Expected one row for each state 0..n-1, '
                f'got rows for states: {states}')

    def __len__(self):
        return len(self.rows)

    def p1_table(self) -> 'PkTable':
        """Return the Pk-table with `k = 1`.

        States are in the same class if and only if
        they produce the same output for each input.
        """
        rows = [PkTableRow(row.io, row.i2p) for row in self.rows]
        pk = PkTable(
            len(rows), self.max_input,
            rows, self.presentation)
        pk.s2c = _refine(
            pk.s2c,
            (tuple(row.io.tolist()) for row in rows))
        return pk


class PkTableRow:
    """Row of a Pk-table, shared by all levels."""

    def __init__(
            self,
            io:
                np.ndarray,
            i2p:
                np.ndarray):
        self.io = io
        self.i2p = i2p

    def __repr__(self):
        return (
            f'PkTableRow(io={self.io.tolist()}, '
            f'i2p={self.i2p.tolist()})')

    def get(
            self,
            x:
                int
            ) -> int:
        """Return the successor under input `x`."""
        return int(self.i2p[x])

    def get_output(
            self,
            x:
                int
            ) -> int:
        return int(self.io[x])

    def class_signature(
            self,
            s2c:
                np.ndarray
            ) -> tuple[int, ...]:
        """Return the class of the successor of each input."""
        return tuple(_successor_classes(self.i2p, s2c).tolist())


class PkTable:
    """Partition of states by distinguishability up to length `k`.

    `s2c[q]` is the class of state `q`.
    Row `q` of the table describes state `q`.
    """

    def __init__(
            self,
            num_states:
                int,
            max_input:
                int,
            rows:
                _abc.Iterable[PkTableRow] |
                None=None,
            presentation:
                _pres.FsmPresentationLayer |
                None=None):
        if presentation is None:
            presentation = _pres.DEFAULT_PRESENTATION
        if rows is None:
            rows = [None] * num_states
        self.rows = list(rows)
        if len(self.rows) != num_states:
            raise ValueError(
                f'Expected {num_states} rows, '
                f'got {len(self.rows)}')
        self.s2c = np.zeros(num_states, dtype=int)
        self.max_input = max_input
        self.presentation = presentation

    def __len__(self):
        return len(self.rows)

    def set_row(
            self,
            q:
                int,
            row:
                PkTableRow):
        self.rows[q] = row

    def set_class(
            self,
            q:
                int,
            c:
                int):
        self.s2c[q] = c

    def get_class(
            self,
            q:
                int
            ) -> int:
        return int(self.s2c[q])

    def max_class_id(self) -> int:
        return int(self.s2c.max(initial=0))

    def get_members(
            self,
            c:
                int
            ) -> str:
        """Return the states of class `c` as set string."""
        return _members(self.s2c, c, self.presentation)

    def pk_plus_one(self) -> 'PkTable | None':
        """Return the table of the next level.

        @return:
            `None` if no class splits,
            the P(k+1)-table otherwise
        """
        missing = [q for q, row in enumerate(self.rows) if row is None]
        if missing:
            raise ValueError(
                f'Pk-table has no rows for states: {missing}')
        signatures = (
            row.class_signature(self.s2c)
            for row in self.rows)
        new_s2c = _refine(self.s2c, signatures)
        if _num_classes(new_s2c) == _num_classes(self.s2c):
            logger.debug('Pk-table refinement reached fixpoint')
            return None
        pk = PkTable(
            len(self.rows), self.max_input,
            self.rows, self.presentation)
        pk.s2c = new_s2c
        return pk

    def __str__(self):
        pl = self.presentation
        inputs = range(self.max_input + 1)
        header = (
            ['state', 'class'] +
            [f'I2O({pl.get_in_id(x)})' for x in inputs] +
            [f'I2P({pl.get_in_id(x)})' for x in inputs])
        lines = ['\t'.join(header)]
        for q, row in enumerate(self.rows):
            cells = [pl.get_state_id(q), str(self.get_class(q))]
            if row is not None:
                cells.extend(
                    pl.get_out_id(y) if y >= 0 else '-'
                    for y in row.io.tolist())
                cells.extend(
                    pl.get_state_id(p) if p >= 0 else '-'
                    for p in row.i2p.tolist())
            lines.append('\t'.join(cells))
        return '\n'.join(lines)


class OFSMTable:
    """Partition of states of an observable machine.

    `post[q, x, y]` is the unique successor of state `q`
    under input `x` and output `y`, or `UNDEFINED` if
    `q` cannot produce `y` on input `x`.
    The `post` array is shared by all levels,
    only the classes `s2c` change.
    The table of level 0 has a single class.
    """

    def __init__(
            self,
            num_states:
                int,
            max_input:
                int,
            max_output:
                int,
            post:
                np.ndarray |
                None=None,
            s2c:
                np.ndarray |
                None=None,
            presentation:
                _pres.FsmPresentationLayer |
                None=None):
        if presentation is None:
            presentation = _pres.DEFAULT_PRESENTATION
        shape = (num_states, max_input + 1, max_output + 1)
        if post is None:
            post = np.full(shape, UNDEFINED, dtype=int)
        if post.shape != shape:
            raise ValueError(
                f'Expected successor array of shape {shape}'
                f', got: {post.shape}')
        if s2c is None:
            s2c = np.zeros(num_states, dtype=int)
        self.post = post
        self.s2c = s2c
        self.max_input = max_input
        self.max_output = max_output
        self.presentation = presentation

    @classmethod
    def from_nodes(
            cls,
            nodes:
                _abc.Iterable,
            max_input:
                int,
            max_output:
                int,
            presentation:
                _pres.FsmPresentationLayer |
                None=None
            ) -> 'OFSMTable':
        """Return the OFSM-table of level 0.

        @param nodes:
            `FsmNode`s, with ids `0..n-1`
        """
        nodes = list(nodes)
        table = cls(
            len(nodes), max_input, max_output,
            presentation=presentation)
        for node in nodes:
            for tr in node.transitions:
                if not (0 <= tr.input <= max_input and
                        0 <= tr.output <= max_output):
                    raise ValueError(
                        f'IO {tr.input}/{tr.output} of state '
                        f'{node.id} outside 0..{max_input}'
                        f'/0..{max_output}')
                old = table.post[node.id, tr.input, tr.output]
                if old != UNDEFINED and old != tr.target:
                    raise ValueError(
                        'Cannot compute OFSM-table for '
                        'non-observable state '
                        f'{node.id}, on IO '
                        f'{tr.input}/{tr.output}')
                table.post[node.id, tr.input, tr.output] = tr.target
        return table

    def __len__(self):
        return len(self.s2c)

    def get(
            self,
            q:
                int,
            x:
                int,
            y:
                int
            ) -> int:
        """Return successor of `q` under `x/y`, or `UNDEFINED`."""
        return int(self.post[q, x, y])

    def get_s2c(self) -> np.ndarray:
        return self.s2c

    def get_class(
            self,
            q:
                int
            ) -> int:
        return int(self.s2c[q])

    def max_class_id(self) -> int:
        return int(self.s2c.max(initial=0))

    def get_members(
            self,
            c:
                int
            ) -> str:
        return _members(self.s2c, c, self.presentation)

    def next(self) -> 'OFSMTable | None':
        """Return the table of the next level.

        @return:
            `None` if no class splits,
            the table of the next level otherwise
        """
        post_classes = _successor_classes(self.post, self.s2c)
        signatures = (
            tuple(post_classes[q].ravel().tolist())
            for q in range(len(self)))
        new_s2c = _refine(self.s2c, signatures)
        if _num_classes(new_s2c) == _num_classes(self.s2c):
            logger.debug('OFSM-table refinement reached fixpoint')
            return None
        return OFSMTable(
            len(self), self.max_input, self.max_output,
            self.post, new_s2c, self.presentation)

    def __str__(self):
        pl = self.presentation
        ios = [
            (x, y)
            for x in range(self.max_input + 1)
            for y in range(self.max_output + 1)]
        header = ['state', 'class'] + [
            f'{pl.get_in_id(x)}/{pl.get_out_id(y)}'
            for x, y in ios]
        lines = ['\t'.join(header)]
        for q in range(len(self)):
            cells = [pl.get_state_id(q), str(self.get_class(q))]
            for x, y in ios:
                p = self.get(q, x, y)
                cells.append(pl.get_state_id(p) if p >= 0 else '-')
            lines.append('\t'.join(cells))
        return '\n'.join(lines)
