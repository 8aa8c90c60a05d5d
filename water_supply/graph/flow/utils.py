from typing import List, Optional, Tuple, Set

from ..base import BaseGraph
from .search import find_augmenting_path, NoExclusion, TOLERANCE


def verify_flow_conservation(graph: BaseGraph, source: str, sink: str) -> bool:
    """Verify flow conservation at intermediate nodes."""
    for code in graph.get_vertices():
        if code not in (source, sink):
            if abs(graph.total_inflow(code) - graph.total_outflow(code)) > TOLERANCE:
                return False
    return True


def verify_capacity_constraints(graph: BaseGraph) -> bool:
    """Verify 0 <= flow <= capacity on every edge, up to rounding."""
    return all(-TOLERANCE <= data['flow'] <= data['capacity'] + TOLERANCE
               for _, _, data in graph.get_edges())


def min_cut(graph: BaseGraph, source: str, target: str,
            exclusion: Optional[NoExclusion] = None) -> Tuple[Set[str], List[int]]:
    """
    Read the minimum cut off a graph that is at maximum flow.

    Args:
        exclusion: The rule the max flow was computed under; excluded edges
            are neither traversed nor counted in the cut

    Returns:
        Tuple of (vertices reachable from source in the residual graph,
        ids of the edges crossing from that set to the rest)
    """
    if exclusion is None:
        exclusion = NoExclusion()

    state = find_augmenting_path(graph, source, target, exclusion)
    reachable = set(state.path_edges)
    cut_edges = []
    for code in reachable:
        for e in graph.outgoing(code):
            if e.dest not in reachable and exclusion.allows_edge(e) and exclusion.allows_vertex(e.dest):
                cut_edges.append(e.id)
    return reachable, sorted(cut_edges)
