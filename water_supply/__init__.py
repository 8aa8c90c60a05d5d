from .graph import WaterNetwork, VertexKind, FlowLogicError, ResilienceAnalysis
from .graph.flow import run_max_flow, run_max_flow_without_vertex, run_max_flow_without_edge
from .config import Settings, get_settings, configure_logging

__all__ = [
    'WaterNetwork',
    'VertexKind',
    'FlowLogicError',
    'ResilienceAnalysis',
    'run_max_flow',
    'run_max_flow_without_vertex',
    'run_max_flow_without_edge',
    'Settings',
    'get_settings',
    'configure_logging'
]
