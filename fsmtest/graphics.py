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
"""Conversion of graphs to GraphViz, for rendering."""
import logging

try:
    import graphviz as _gv
except ImportError as error:
    _gv = None
    gv_error = error


__all__ = [
    'networkx_to_graphviz']


logger = logging.getLogger(__name__)


def networkx_to_graphviz(graph) -> '_gv.Digraph':
    """Convert `networkx` `graph` to `graphviz.Digraph`.

    Node and edge attributes are passed to `graphviz`
    as they are, so they should be valid DOT attributes
    with `str` values.
    """
    _assert_graphviz()
    if graph.is_directed():
        gv_graph = _gv.Digraph()
    else:
        gv_graph = _gv.Graph()
    for u, d in graph.nodes(data=True):
        gv_graph.node(
            str(u), **d)
    for u, v, d in graph.edges(data=True):
        gv_graph.edge(
            str(u), str(v), **d)
    return gv_graph


def _assert_graphviz():
    """Raise `ImportError` if `graphviz` missing."""
    if _gv is not None:
        return
    raise ImportError(
        'Could not import the Python package '
        '`graphviz`, which can be installed from '
        'the Python Package Index (PyPI) '
        'with `pip install graphviz`'
        ) from gv_error
