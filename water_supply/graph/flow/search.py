from typing import Dict, Optional
from collections import deque

from ..base import BaseGraph

# Residuals and flows closer than this to zero or capacity count as exhausted.
TOLERANCE = 1e-9


class NoExclusion:
    """Every edge with positive residual capacity is eligible."""

    def allows_vertex(self, code: str) -> bool:
        return True

    def allows_edge(self, edge) -> bool:
        return True

    def __repr__(self):
        return 'NoExclusion()'


class VertexExclusion(NoExclusion):
    """Treat one vertex, and every edge touching it, as out of service."""

    def __init__(self, code: str):
        self.code = code

    def allows_vertex(self, code: str) -> bool:
        return code != self.code

    def allows_edge(self, edge) -> bool:
        return edge.orig != self.code and edge.dest != self.code

    def __repr__(self):
        return f'VertexExclusion({self.code!r})'


class EdgeExclusion(NoExclusion):
    """Treat the pipe between two vertices as out of service.

    With unidirectional set only edges from a to b are blocked, otherwise
    edges in both directions are.
    """

    def __init__(self, a: str, b: str, unidirectional: bool = False):
        self.a = a
        self.b = b
        self.unidirectional = unidirectional

    def allows_edge(self, edge) -> bool:
        if edge.orig == self.a and edge.dest == self.b:
            return False
        if not self.unidirectional and edge.orig == self.b and edge.dest == self.a:
            return False
        return True

    def __repr__(self):
        return f'EdgeExclusion({self.a!r}, {self.b!r}, unidirectional={self.unidirectional})'


class SearchState:
    """Per-search scratch: which vertices were reached and through which edge."""

    def __init__(self, source: str):
        self.source = source
        self.path_edges: Dict[str, Optional[int]] = {source: None}

    def visited(self, code: str) -> bool:
        return code in self.path_edges

    def visit(self, code: str, edge_id: int):
        self.path_edges[code] = edge_id

    def path_edge(self, code: str) -> Optional[int]:
        return self.path_edges.get(code)

    def reached(self, code: str) -> bool:
        return self.visited(code)


def find_augmenting_path(graph: BaseGraph, source: str, target: str,
                         exclusion: Optional[NoExclusion] = None) -> SearchState:
    """
    Breadth-first search for a shortest augmenting path in the residual graph.

    Outgoing edges are usable while capacity - flow > 0; incoming edges
    carrying flow are usable backwards to cancel that flow. Edges and
    vertices rejected by the exclusion rule are never traversed.

    Returns:
        The search state; ``state.reached(target)`` tells whether a path exists.
    """
    if exclusion is None:
        exclusion = NoExclusion()

    state = SearchState(source)
    queue = deque([source])

    while queue and not state.reached(target):
        v = queue.popleft()
        for e in graph.outgoing(v):
            _test_and_visit(queue, state, exclusion, e, e.dest, e.capacity - e.flow)
        for e in graph.incoming(v):
            _test_and_visit(queue, state, exclusion, e, e.orig, e.flow)

    return state


def _test_and_visit(queue, state: SearchState, exclusion, edge, w: str, residual):
    if state.visited(w) or residual <= TOLERANCE:
        return
    if not exclusion.allows_vertex(w) or not exclusion.allows_edge(edge):
        return
    state.visit(w, edge.id)
    queue.append(w)
