from typing import Iterator, Tuple

from ..base import BaseGraph, FlowLogicError
from .search import SearchState, TOLERANCE


def _walk_path(graph: BaseGraph, state: SearchState, source: str,
               target: str) -> Iterator[Tuple[object, bool]]:
    """Yield (edge, forward) pairs from target back to source."""
    if not state.reached(target):
        raise FlowLogicError(f"No augmenting path from '{source}' to '{target}' was recorded")

    v = target
    steps = 0
    while v != source:
        edge_id = state.path_edge(v)
        if edge_id is None or steps > len(state.path_edges):
            raise FlowLogicError(f"Broken path chain at '{v}' while walking back to '{source}'")
        e = graph.edge(edge_id)
        forward = e.dest == v
        yield e, forward
        v = e.orig if forward else e.dest
        steps += 1


def find_min_residual_along_path(graph: BaseGraph, state: SearchState, source: str, target: str):
    """Return the bottleneck residual capacity of the recorded path."""
    f = None
    for e, forward in _walk_path(graph, state, source, target):
        residual = e.capacity - e.flow if forward else e.flow
        assert residual >= 0, f"negative residual on {e.orig} -> {e.dest}"
        if f is None or residual < f:
            f = residual
    return f


def augment_flow_along_path(graph: BaseGraph, state: SearchState, source: str, target: str, f):
    """Push f units along the recorded path, cancelling flow on backward edges."""
    for e, forward in _walk_path(graph, state, source, target):
        if forward:
            e.flow += f
            _snap(e)
            _cancel_counter_flow(graph, e)
        else:
            e.flow -= f
            _snap(e)
        assert 0 <= e.flow <= e.capacity, f"flow out of bounds on {e.orig} -> {e.dest}: {e.flow}"


def _snap(e):
    # Rounding can leave a flow a few ulps outside [0, capacity].
    if abs(e.flow) <= TOLERANCE:
        e.flow = 0
    elif abs(e.capacity - e.flow) <= TOLERANCE:
        e.flow = e.capacity


def _cancel_counter_flow(graph: BaseGraph, e):
    # Opposite directions of a bidirectional pipe keep only the net flow.
    if e.reverse is None:
        return
    r = graph.edge(e.reverse)
    common = min(e.flow, r.flow)
    if common > 0:
        e.flow -= common
        r.flow -= common
        _snap(e)
        _snap(r)
