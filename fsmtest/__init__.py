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
"""
fsmtest

Finite state machines over integer input and output alphabets,
with the algorithms that model-based testing builds on:
output trees, distinguishing traces, Pk-tables, and OFSM-tables.

Logging is left to the caller, for example:

```python
import logging
logging.getLogger('fsmtest').setLevel(logging.DEBUG)
```
"""

try:
    from ._version import version as __version__
except ImportError:
    __version__ = None

import fsmtest.presentation
from fsmtest.presentation import FsmPresentationLayer

import fsmtest.fsm
from fsmtest.fsm import (
    # fsmtest.fsm.traces
    EPSILON, InputTrace, OutputTrace, IOTrace,
    # fsmtest.fsm.tables
    NondeterministicRowError, InconsistentTableError,
    DFSMTableRow, DFSMTable, PkTableRow, PkTable, OFSMTable,
    # fsmtest.fsm.containers
    IOTraceContainer,
    # fsmtest.fsm.nodes
    FsmLabel, FsmTransition, FsmNode,
    # fsmtest.fsm.machines
    Fsm)

import fsmtest.trees
from fsmtest.trees import Tree, OutputTree
