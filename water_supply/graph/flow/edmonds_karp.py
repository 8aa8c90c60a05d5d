import logging
from typing import NamedTuple, Optional, Tuple

from ..base import BaseGraph, FlowLogicError
from .search import find_augmenting_path, NoExclusion, VertexExclusion, EdgeExclusion
from .augment import find_min_residual_along_path, augment_flow_along_path

# Configure logging for the module
logger = logging.getLogger(__name__)


class FlowResult(NamedTuple):
    value: float
    augmentations: int


def _resolve_terminals(graph: BaseGraph, source: Optional[str], target: Optional[str]) -> Tuple[str, str]:
    source = graph.source_code if source is None else source
    target = graph.target_code if target is None else target

    if not graph.has_vertex(source) or not graph.has_vertex(target):
        raise FlowLogicError(f"Source '{source}' or target '{target}' not in graph.")
    if source == target:
        raise FlowLogicError(f"Source and target must differ, both are '{source}'.")
    return source, target


def _edmonds_karp(graph: BaseGraph, source: str, target: str, exclusion: NoExclusion,
                  reset: bool) -> FlowResult:
    if reset:
        graph.reset_flows()

    logger.info(f"Computing max flow from {source} to {target} with {exclusion!r}")
    augmentations = 0
    while True:
        state = find_augmenting_path(graph, source, target, exclusion)
        if not state.reached(target):
            break
        f = find_min_residual_along_path(graph, state, source, target)
        augment_flow_along_path(graph, state, source, target, f)
        augmentations += 1
        logger.debug(f"Augmentation {augmentations}: pushed {f}")

    value = graph.total_outflow(source) - graph.total_inflow(source)
    logger.info(f"Max flow {value} after {augmentations} augmentations")
    return FlowResult(value, augmentations)


def run_max_flow(graph: BaseGraph, source: Optional[str] = None, target: Optional[str] = None,
                 reset: bool = False) -> FlowResult:
    """
    Run Edmonds-Karp over the whole network.

    Flows already on the graph are kept unless reset is set, so calling this
    on a graph that is already at max flow performs no augmentation.

    Args:
        graph: Network whose edge flows are updated in place
        source: Source vertex code, defaults to graph.source_code
        target: Target vertex code, defaults to graph.target_code
        reset: Zero every flow before starting

    Returns:
        FlowResult with the total flow leaving the source
    """
    source, target = _resolve_terminals(graph, source, target)
    return _edmonds_karp(graph, source, target, NoExclusion(), reset)


def run_max_flow_without_vertex(graph: BaseGraph, vertex_code: str, source: Optional[str] = None,
                                target: Optional[str] = None, reset: bool = True) -> FlowResult:
    """
    Run Edmonds-Karp as if vertex_code and its pipes were out of service.

    Raises:
        FlowLogicError: if the vertex does not exist or is the source or target
    """
    source, target = _resolve_terminals(graph, source, target)
    if graph.find_vertex(vertex_code) is None:
        raise FlowLogicError(f"Deactivated vertex '{vertex_code}' not in graph.")
    if vertex_code in (source, target):
        raise FlowLogicError(f"Cannot deactivate terminal vertex '{vertex_code}'.")
    return _edmonds_karp(graph, source, target, VertexExclusion(vertex_code), reset)


def run_max_flow_without_edge(graph: BaseGraph, a: str, b: str, unidirectional: bool = False,
                              source: Optional[str] = None, target: Optional[str] = None,
                              reset: bool = True) -> FlowResult:
    """Run Edmonds-Karp as if the pipe a -> b (and b -> a unless unidirectional) were out of service."""
    source, target = _resolve_terminals(graph, source, target)
    if not graph.has_edge(a, b) and not graph.has_edge(b, a):
        logger.warning(f"No pipe between {a} and {b}; the result equals the baseline")
    return _edmonds_karp(graph, source, target, EdgeExclusion(a, b, unidirectional), reset)
