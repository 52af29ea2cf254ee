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
"""Names for states, inputs, and outputs.

The algorithms of `fsmtest` work on integer ids only.
A presentation layer translates these ids to strings,
and is used solely when printing traces, tables, and trees.
"""
import collections.abc as _abc


__all__ = [
    'FsmPresentationLayer']


EPSILON_NAME = 'ε'


def _lookup(
        names:
            list[str],
        index:
            int
        ) -> str:
    if index < 0:
        return EPSILON_NAME
    if index < len(names):
        return names[index]
    return str(index)


class FsmPresentationLayer:
    """Translate ids of states, inputs, outputs to names.

    Ids without a given name are shown as numbers.
    Negative symbol ids are shown as the empty symbol.

    Example
    =======

    ```python
    pl = FsmPresentationLayer(
        inputs=['a', 'b'],
        outputs=['0', '1'],
        states=['idle', 'busy'])
    pl.get_in_id(1)  # 'b'
    pl.get_state_id(3)  # '3'
    ```
    """

    def __init__(
            self,
            inputs:
                _abc.Iterable[str] |
                None=None,
            outputs:
                _abc.Iterable[str] |
                None=None,
            states:
                _abc.Iterable[str] |
                None=None):
        self.in2string = list(inputs or ())
        self.out2string = list(outputs or ())
        self.state2string = list(states or ())

    def __repr__(self):
        return (
            'FsmPresentationLayer('
            f'inputs={self.in2string}, '
            f'outputs={self.out2string}, '
            f'states={self.state2string})')

    def get_in_id(
            self,
            x:
                int
            ) -> str:
        return _lookup(self.in2string, x)

    def get_out_id(
            self,
            y:
                int
            ) -> str:
        return _lookup(self.out2string, y)

    def get_state_id(
            self,
            q:
                int,
            name:
                str |
                None=None
            ) -> str:
        """Return `name` if given, else the registered name of `q`."""
        if name:
            return name
        if 0 <= q < len(self.state2string):
            return self.state2string[q]
        return str(q)


DEFAULT_PRESENTATION = FsmPresentationLayer()
