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
"""Trees of all outputs an FSM can produce for an input trace."""
import collections
import logging

import fsmtest.fsm.traces as _traces
import fsmtest.trees.tree as _tree


__all__ = [
    'OutputTree']


logger = logging.getLogger(__name__)


class OutputTree(_tree.Tree):
    """All output traces observable for a fixed input trace.

    The edge from depth `i` to depth `i + 1` carries an output
    produced by the `i`-th symbol of `self.input_trace`.
    Each path from the root to a leaf is a run of the FSM,
    and spells the output trace of that run.

    Two output trees are equal if each contains the other
    (see `contains`).  The order of branches, and repeated
    branches, do not matter, so trees built from nondeterministic
    machines compare by the set of behaviours they represent.
    """

    def __init__(
            self,
            input_trace:
                _traces.InputTrace):
        super().__init__()
        self.input_trace = _traces.InputTrace(
            input_trace,
            getattr(input_trace, 'presentation', None))

    __hash__ = None

    def __eq__(self, other):
        if not isinstance(other, OutputTree):
            return NotImplemented
        return self.contains(other) and other.contains(self)

    def __str__(self):
        return '\n'.join(map(str, self.to_io_traces()))

    def get_input_trace(self) -> _traces.InputTrace:
        return self.input_trace.copy()

    def get_output_traces(self) -> list[_traces.OutputTrace]:
        """Return the output trace of each path."""
        presentation = self.input_trace.presentation
        return [
            _traces.OutputTrace(io_list, presentation)
            for io_list in self.get_io_lists()]

    def to_io_traces(self) -> list[_traces.IOTrace]:
        """Return each path as an `IOTrace`.

        The input trace is truncated to the length of
        paths that end before the input is consumed.
        """
        presentation = self.input_trace.presentation
        return [
            _traces.IOTrace(
                self.input_trace.trace[:len(io_list)],
                io_list,
                presentation)
            for io_list in self.get_io_lists()]

    def contains(
            self,
            other:
                'OutputTree'
            ) -> bool:
        """Return `True` if `other` is included in this tree.

        That is the case if both trees are for the same
        input trace, and each output trace of `other`
        is an output trace of this tree.
        """
        if self.input_trace != other.input_trace:
            return False
        mine = set(self.get_output_traces())
        theirs = set(other.get_output_traces())
        return mine.issuperset(theirs)

    def get_outputs_intersection(
            self,
            other:
                'OutputTree'
            ) -> list[_traces.IOTrace]:
        """Return the IO traces that occur in both trees.

        Traces are matched as a multiset:
        each trace of `other` matches at most once.
        """
        remaining = collections.Counter(other.to_io_traces())
        intersection = list()
        for trace in self.to_io_traces():
            if remaining[trace] <= 0:
                continue
            remaining[trace] -= 1
            intersection.append(trace)
        return intersection

    def _edge_label(self, u, v, d) -> str:
        depth = len(self.get_path(u))
        x = self.input_trace[depth]
        pl = self.input_trace.presentation
        return f'{pl.get_in_id(x)}/{pl.get_out_id(d["io"])}'
