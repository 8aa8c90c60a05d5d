from .analysis import ResilienceAnalysis, ImpactResult
from .decomposition import decompose_flow, strip_terminals
from .edmonds_karp import (
    FlowResult,
    run_max_flow,
    run_max_flow_without_vertex,
    run_max_flow_without_edge,
)
from .search import (
    find_augmenting_path,
    SearchState,
    NoExclusion,
    VertexExclusion,
    EdgeExclusion,
    TOLERANCE,
)
from .augment import find_min_residual_along_path, augment_flow_along_path
from .utils import (
    verify_flow_conservation,
    verify_capacity_constraints,
    min_cut,
)

__all__ = [
    'ResilienceAnalysis',
    'ImpactResult',
    'decompose_flow',
    'strip_terminals',
    'FlowResult',
    'run_max_flow',
    'run_max_flow_without_vertex',
    'run_max_flow_without_edge',
    'find_augmenting_path',
    'SearchState',
    'NoExclusion',
    'VertexExclusion',
    'EdgeExclusion',
    'TOLERANCE',
    'find_min_residual_along_path',
    'augment_flow_along_path',
    'verify_flow_conservation',
    'verify_capacity_constraints',
    'min_cut',
]
