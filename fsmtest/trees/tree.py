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
"""Rooted trees with symbol-labeled edges."""
import collections.abc as _abc
import logging

import networkx as nx

import fsmtest.graphics as _graphics


__all__ = [
    'Tree']


logger = logging.getLogger(__name__)


class Tree(nx.DiGraph):
    """Rooted tree as a graph data structure.

    Tree nodes are integers, the root is `self.root`.
    Each edge is annotated with a symbol, under the key `'io'`.
    The children of a node are ordered by insertion,
    so a path from the root to a leaf spells
    a sequence of symbols.

    A `Tree` stores sets of input sequences that share prefixes,
    for example a characterization set:

    ```python
    w = Tree()
    w.add_io_lists([[0, 1], [0, 2], [1]])
    w.get_io_lists()  # [[0, 1], [0, 2], [1]]
    ```
    """

    def __init__(self):
        super().__init__()
        self.root = 0
        self._next_node = 1
        self.add_node(self.root)

    def __str__(self):
        # need to override networkx.DiGraph.__str__
        return (
            'Tree with paths:\n' +
            '\n'.join(map(str, self.get_io_lists())))

    def add_child(
            self,
            parent:
                int,
            io:
                int
            ) -> int:
        """Add a new child of `parent`, return the child."""
        if parent not in self:
            raise ValueError(
                f'Tree does not have node: {parent}')
        child = self._next_node
        self._next_node += 1
        self.add_edge(parent, child, io=io)
        return child

    def children(
            self,
            u:
                int
            ) -> list[tuple[int, int]]:
        """Return `(io, child)` pairs, in insertion order."""
        return [
            (d['io'], v)
            for v, d in self._succ[u].items()]

    def find_child(
            self,
            u:
                int,
            io:
                int
            ) -> int | None:
        for label, v in self.children(u):
            if label == io:
                return v
        return None

    def add(
            self,
            io_list:
                _abc.Iterable[int],
            u:
                int |
                None=None
            ) -> int:
        """Add a path below `u`, reusing existing edges.

        @param u:
            node where the path starts,
            the root if `None`
        @return:
            last node of the path
        """
        if u is None:
            u = self.root
        for io in io_list:
            v = self.find_child(u, io)
            if v is None:
                v = self.add_child(u, io)
            u = v
        return u

    def add_io_lists(
            self,
            io_lists:
                _abc.Iterable[_abc.Iterable[int]]):
        for io_list in io_lists:
            self.add(io_list)

    def is_leaf(
            self,
            u:
                int
            ) -> bool:
        return not self._succ[u]

    def get_leaves(self) -> list[int]:
        """Return leaves, ordered as depth-first from the root."""
        return [
            u for u in nx.dfs_preorder_nodes(self, self.root)
            if self.is_leaf(u)]

    def get_path(
            self,
            u:
                int
            ) -> list[int]:
        """Return the symbols on the path from the root to `u`."""
        path = list()
        while u != self.root:
            (parent,) = self.predecessors(u)
            path.append(self.edges[parent, u]['io'])
            u = parent
        path.reverse()
        return path

    def get_io_lists(self) -> list[list[int]]:
        """Return the symbols of each path from the root to a leaf.

        A tree that consists of the root only
        has a single path, which is empty.
        """
        return [self.get_path(u) for u in self.get_leaves()]

    def height(self) -> int:
        lengths = nx.single_source_shortest_path_length(
            self, self.root)
        return max(lengths.values())

    def _to_labeled_graph(self) -> nx.DiGraph:
        g = nx.DiGraph()
        for u in self:
            g.add_node(u, label='', shape='circle')
        for u, v, d in self.edges(data=True):
            g.add_edge(u, v, label=self._edge_label(u, v, d))
        return g

    def _edge_label(self, u, v, d) -> str:
        return str(d['io'])

    def to_graphviz(self):
        """Return `graphviz.Digraph` of this tree."""
        g = self._to_labeled_graph()
        gv_graph = _graphics.networkx_to_graphviz(g)
        gv_graph.graph_attr['ordering'] = 'out'
        return gv_graph
