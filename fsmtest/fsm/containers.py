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
"""Ordered collections of input/output traces."""
import collections.abc as _abc
import logging
import pprint as _pp

import fsmtest.fsm.traces as _traces
import fsmtest.trees.output_tree as _otree


__all__ = [
    'IOTraceContainer']


logger = logging.getLogger(__name__)


def _as_traces(item) -> list[_traces.IOTrace]:
    """Return the `IOTrace`s that `item` represents.

    @param item:
        `IOTrace`, `IOTraceContainer`,
        `OutputTree`, or iterable of `IOTrace`
    """
    if isinstance(item, _traces.IOTrace):
        return [item]
    if isinstance(item, IOTraceContainer):
        return list(item)
    if isinstance(item, _otree.OutputTree):
        return item.to_io_traces()
    if isinstance(item, _abc.Iterable):
        traces = list(item)
        for trace in traces:
            if not isinstance(trace, _traces.IOTrace):
                raise TypeError(
                    f'Expected `IOTrace`, got: {type(trace)}')
        return traces
    raise TypeError(
        'Expected `IOTrace`, `IOTraceContainer`, or `OutputTree`'
        f', got instead: {type(item)}')


class IOTraceContainer:
    """List of `IOTrace`, with set operations.

    Enumeration follows insertion order.
    Uniqueness is maintained only by the methods
    whose name says so (`add_unique`, ...).

    Example
    =======

    ```python
    c = IOTraceContainer()
    c.add_unique_remove_prefixes(IOTrace([1, 2], [5, 6]))
    c.add_unique_remove_prefixes(IOTrace([1], [5]))
    len(c)  # 1, `[1]/[5]` is a prefix of the first trace
    ```
    """

    def __init__(
            self,
            traces:
                _abc.Iterable[_traces.IOTrace] |
                None=None):
        self._list = list()
        if traces is not None:
            self.add(traces)

    def __len__(self):
        return len(self._list)

    def __iter__(self):
        return iter(self._list)

    def __contains__(self, trace):
        return trace in self._list

    def __eq__(self, other):
        if not isinstance(other, IOTraceContainer):
            return NotImplemented
        return self._list == other._list

    def __sub__(self, other):
        """Set difference, as a new container."""
        if not isinstance(other, IOTraceContainer):
            return NotImplemented
        result = IOTraceContainer()
        result.add_unique(
            trace for trace in self._list
            if trace not in other)
        return result

    def __str__(self):
        traces = ', '.join(map(str, self._list))
        return f'{{{traces}}}'

    def __repr__(self):
        return f'IOTraceContainer({_pp.pformat(self._list)})'

    def get_list(self) -> list[_traces.IOTrace]:
        return list(self._list)

    def is_empty(self) -> bool:
        return not self._list

    def contains(
            self,
            trace:
                _traces.IOTrace
            ) -> bool:
        return trace in self

    def add(self, item):
        """Append traces, without checking uniqueness.

        @param item:
            `IOTrace`, `IOTraceContainer`,
            `OutputTree`, or iterable of `IOTrace`
        """
        self._list.extend(_as_traces(item))

    def add_unique(self, item):
        """Append each trace not already contained."""
        for trace in _as_traces(item):
            if trace in self._list:
                continue
            self._list.append(trace)

    def add_unique_remove_prefixes(self, item):
        """Insert traces, keeping only maximal ones.

        A trace is skipped if some member equals it or
        extends it.  Otherwise, the members that are
        proper prefixes of the trace are removed,
        and the trace appended.
        """
        for trace in _as_traces(item):
            self._add_unique_remove_prefixes(trace)

    def _add_unique_remove_prefixes(
            self,
            trace:
                _traces.IOTrace):
        for other in self._list:
            if trace.is_prefix(other):
                logger.debug(
                    f'trace {trace} is prefix of {other}, skipped')
                return
        self._remove_real_prefixes(trace)
        self._list.append(trace)

    def _remove_real_prefixes(
            self,
            trace:
                _traces.IOTrace):
        self._list = [
            other for other in self._list
            if not other.is_prefix(trace, proper=True)]

    def concatenate(self, item):
        """Append to each member, in place.

        If `item` is an `IOTrace`, then it is appended
        to each member.  Otherwise each member `m` is
        replaced by `m + c`, for each trace `c` in `item`.
        """
        if isinstance(item, _traces.IOTrace):
            self._list = [trace + item for trace in self._list]
            return
        suffixes = _as_traces(item)
        self._list = [
            trace + suffix
            for trace in self._list
            for suffix in suffixes]

    def concatenate_to_front(
            self,
            trace:
                _traces.IOTrace |
                _traces.InputTrace,
            output_trace:
                _traces.OutputTrace |
                None=None):
        """Prepend the given trace to each member, in place.

        @param trace:
            `IOTrace`, or the input trace,
            if `output_trace` is given
        """
        if output_trace is not None:
            trace = _traces.IOTrace(trace, output_trace)
        self._list = [trace + other for other in self._list]

    def remove(self, item):
        """Remove all occurrences of the given traces."""
        unwanted = _as_traces(item)
        self._list = [
            trace for trace in self._list
            if trace not in unwanted]

    def get_output_traces(self) -> list[_traces.OutputTrace]:
        return [trace.output_trace for trace in self._list]
