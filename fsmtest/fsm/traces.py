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
"""Input, output, and input/output traces."""
import collections.abc as _abc
import logging

import fsmtest.presentation as _pres


__all__ = [
    'EPSILON',
    'Trace',
    'InputTrace',
    'OutputTrace',
    'IOTrace']


logger = logging.getLogger(__name__)
EPSILON = -1


class Trace:
    """Finite sequence of symbols.

    Symbols are integers `>= 0`, or `EPSILON`.
    Traces compare by content, so they can be
    used as `dict` keys and set elements.
    """

    def __init__(
            self,
            trace:
                _abc.Iterable[int] |
                None=None,
            presentation:
                _pres.FsmPresentationLayer |
                None=None):
        if trace is None:
            trace = list()
        if presentation is None:
            presentation = _pres.DEFAULT_PRESENTATION
        self.trace = list(trace)
        self.presentation = presentation

    def _symbol_name(self, x) -> str:
        if x == EPSILON:
            return _pres.EPSILON_NAME
        return str(x)

    def __str__(self):
        return '.'.join(map(self._symbol_name, self.trace))

    def __repr__(self):
        return f'{type(self).__name__}({self.trace})'

    def __len__(self):
        return len(self.trace)

    def __iter__(self):
        return iter(self.trace)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(self.trace[index], self.presentation)
        return self.trace[index]

    def __eq__(self, other):
        if not isinstance(other, Trace):
            return NotImplemented
        return self.trace == other.trace

    def __hash__(self):
        return hash(tuple(self.trace))

    def __lt__(self, other):
        if not isinstance(other, Trace):
            return NotImplemented
        return self.trace < other.trace

    def __add__(self, other):
        if not isinstance(other, Trace):
            return NotImplemented
        return type(self)(self.trace + other.trace, self.presentation)

    def get(self) -> list[int]:
        """Return the symbols as a new `list`."""
        return list(self.trace)

    def add(
            self,
            x:
                int):
        """Append a single symbol."""
        self.trace.append(x)

    def append(
            self,
            other:
                _abc.Iterable[int]):
        """Append all symbols of `other`."""
        self.trace.extend(other)

    def copy(self) -> 'Trace':
        return type(self)(self.trace, self.presentation)

    def is_prefix(
            self,
            other:
                'Trace',
            proper:
                bool=False
            ) -> bool:
        """Return `True` if `self` is a prefix of `other`.

        @param proper:
            if `True`, then equal traces are not prefixes
            of each other
        """
        n = len(self.trace)
        if n > len(other.trace):
            return False
        if proper and n == len(other.trace):
            return False
        return other.trace[:n] == self.trace

    def get_prefix(
            self,
            n:
                int
            ) -> 'Trace':
        """Return the first `n` symbols."""
        return self[:n]

    def get_suffix(
            self,
            n:
                int
            ) -> 'Trace':
        """Return the trace without its first `n` symbols."""
        return self[n:]


class InputTrace(Trace):
    """Trace over the input alphabet."""

    def _symbol_name(self, x) -> str:
        return self.presentation.get_in_id(x)

    def is_empty_trace(self) -> bool:
        """Return `True` if this is the trace `[EPSILON]`."""
        return self.trace == [EPSILON]


class OutputTrace(Trace):
    """Trace over the output alphabet."""

    def _symbol_name(self, x) -> str:
        return self.presentation.get_out_id(x)


class IOTrace:
    """Input trace paired with the output trace it produced.

    Both traces always have equal length.
    The empty observation is `([EPSILON], [EPSILON])`,
    see `IOTrace.empty`.
    """

    def __init__(
            self,
            input_trace:
                _abc.Iterable[int],
            output_trace:
                _abc.Iterable[int],
            presentation:
                _pres.FsmPresentationLayer |
                None=None):
        if presentation is None:
            presentation = getattr(
                input_trace, 'presentation', None)
        itrc = InputTrace(input_trace, presentation)
        otrc = OutputTrace(output_trace, presentation)
        if len(itrc) != len(otrc):
            raise ValueError(
                'Input and output trace differ in length:\n'
                f'\tinput = {itrc.trace}\n'
                f'\toutput = {otrc.trace}')
        self.input_trace = itrc
        self.output_trace = otrc

    @classmethod
    def empty(
            cls,
            presentation:
                _pres.FsmPresentationLayer |
                None=None
            ) -> 'IOTrace':
        return cls([EPSILON], [EPSILON], presentation)

    @property
    def presentation(self) -> _pres.FsmPresentationLayer:
        return self.input_trace.presentation

    def is_empty_trace(self) -> bool:
        return self.input_trace.is_empty_trace()

    def __len__(self):
        return len(self.input_trace)

    def __iter__(self):
        """Iterate over `(input, output)` pairs."""
        return zip(self.input_trace, self.output_trace)

    def __eq__(self, other):
        if not isinstance(other, IOTrace):
            return NotImplemented
        return (
            self.input_trace == other.input_trace and
            self.output_trace == other.output_trace)

    def __hash__(self):
        return hash((
            tuple(self.input_trace),
            tuple(self.output_trace)))

    def __str__(self):
        pairs = (
            f'({self.input_trace._symbol_name(x)}'
            f'/{self.output_trace._symbol_name(y)})'
            for x, y in self)
        return '.'.join(pairs)

    def __repr__(self):
        return (
            f'IOTrace({self.input_trace.trace}, '
            f'{self.output_trace.trace})')

    def __add__(self, other):
        if not isinstance(other, IOTrace):
            return NotImplemented
        result = self.copy()
        result.append(other)
        return result

    def copy(self) -> 'IOTrace':
        return IOTrace(
            self.input_trace.trace,
            self.output_trace.trace,
            self.presentation)

    def append(
            self,
            other:
                'IOTrace'):
        """Append `other` to this trace, in place.

        An empty operand leaves this trace unchanged.
        Appending to the empty trace replaces it.
        """
        if other.is_empty_trace():
            return
        if self.is_empty_trace():
            self.input_trace = other.input_trace.copy()
            self.output_trace = other.output_trace.copy()
            return
        self.input_trace.append(other.input_trace)
        self.output_trace.append(other.output_trace)

    def prepend(
            self,
            other:
                'IOTrace'):
        """Prepend `other` to this trace, in place."""
        if other.is_empty_trace():
            return
        if self.is_empty_trace():
            self.input_trace = other.input_trace.copy()
            self.output_trace = other.output_trace.copy()
            return
        self.input_trace = other.input_trace + self.input_trace
        self.output_trace = other.output_trace + self.output_trace

    def is_prefix(
            self,
            other:
                'IOTrace',
            proper:
                bool=False
            ) -> bool:
        """Return `True` if `self` is a prefix of `other`."""
        n = len(self)
        if n > len(other):
            return False
        if proper and n == len(other):
            return False
        return (
            self.input_trace.is_prefix(other.input_trace) and
            self.output_trace.is_prefix(other.output_trace))

    def get_prefix(
            self,
            n:
                int
            ) -> 'IOTrace':
        return IOTrace(
            self.input_trace.trace[:n],
            self.output_trace.trace[:n],
            self.presentation)

    def get_suffix(
            self,
            n:
                int
            ) -> 'IOTrace':
        return IOTrace(
            self.input_trace.trace[n:],
            self.output_trace.trace[n:],
            self.presentation)
