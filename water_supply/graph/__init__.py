from .base import BaseGraph, FlowLogicError, VertexKind
from .network import WaterNetwork, Vertex, Edge
from .flow.analysis import ResilienceAnalysis

__all__ = [
    'BaseGraph',
    'FlowLogicError',
    'VertexKind',
    'WaterNetwork',
    'Vertex',
    'Edge',
    'ResilienceAnalysis'
]
