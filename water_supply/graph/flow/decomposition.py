from typing import Dict, List, Tuple, Optional
from collections import deque

from .search import TOLERANCE

Path = Tuple[List[str], float]


def decompose_flow(flow_dict: Dict[str, Dict[str, float]], source: str, sink: str,
                   requested_flow: Optional[float] = None) -> Tuple[List[Path], Dict[Tuple[str, str], float]]:
    """
    Split a flow into source-to-sink paths, fewest hops first.

    Flow circulating in cycles belongs to no path and is left out.

    Args:
        flow_dict: Flows as {orig: {dest: flow}}
        requested_flow: Stop once this much flow has been assigned to paths

    Returns:
        Tuple of ([(path, flow), ...], {(u, v): flow carried by the paths})
    """
    remaining = {
        u: {v: flow for v, flow in flows.items() if flow > TOLERANCE}
        for u, flows in flow_dict.items()
    }
    budget = float('inf') if requested_flow is None else requested_flow

    paths = []
    edge_flows = {}
    while budget > TOLERANCE:
        path = _shortest_flow_path(remaining, source, sink)
        if not path:
            break
        hops = list(zip(path[:-1], path[1:]))
        amount = min(min(remaining[u][v] for u, v in hops), budget)

        for hop in hops:
            edge_flows[hop] = edge_flows.get(hop, 0) + amount
        _consume(remaining, hops, amount)

        paths.append((path, amount))
        budget -= amount

    return paths, edge_flows


def _shortest_flow_path(remaining: Dict[str, Dict[str, float]], source: str, sink: str) -> List[str]:
    parents = {source: None}
    queue = deque([source])
    while queue:
        u = queue.popleft()
        if u == sink:
            path = []
            while u is not None:
                path.append(u)
                u = parents[u]
            return path[::-1]
        for v in remaining.get(u, {}):
            if v not in parents:
                parents[v] = u
                queue.append(v)
    return []


def _consume(remaining: Dict[str, Dict[str, float]], hops: List[Tuple[str, str]], amount: float):
    for u, v in hops:
        remaining[u][v] -= amount
        if remaining[u][v] <= TOLERANCE:
            del remaining[u][v]


def strip_terminals(paths: List[Path], source: str, sink: str) -> List[Path]:
    """Drop super-source and super-sink hops, merging paths that become identical."""
    merged: Dict[Tuple[str, ...], float] = {}
    for path, flow in paths:
        inner = tuple(node for node in path if node not in (source, sink))
        if inner:
            merged[inner] = merged.get(inner, 0) + flow
    return [(list(path), flow) for path, flow in merged.items()]


__all__ = ['decompose_flow', 'strip_terminals']
