import copy
import logging
from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional, Iterator, Set, Iterable

import networkx as nx

from .base import BaseGraph, FlowLogicError, VertexKind
from ..config import get_settings

# Configure logging for the module
logger = logging.getLogger(__name__)


@dataclass
class Vertex:
    code: str
    kind: VertexKind = VertexKind.STATION
    attrs: Dict[str, Any] = field(default_factory=dict)
    outgoing: List[int] = field(default_factory=list)
    incoming: List[int] = field(default_factory=list)


@dataclass
class Edge:
    id: int
    orig: str
    dest: str
    capacity: float
    flow: float = 0
    reverse: Optional[int] = None

    @property
    def residual(self) -> float:
        return self.capacity - self.flow


class WaterNetwork(BaseGraph):
    """In-memory water network owning its vertices and edges.

    Vertices are keyed by code and edges live in a list indexed by their id.
    Vertices and edges refer to each other through codes and edge ids only,
    so a copy of the network never shares state with the original.
    """

    def __init__(self, source_code: Optional[str] = None, target_code: Optional[str] = None):
        settings = get_settings()
        self.source_code = source_code or settings.source_code
        self.target_code = target_code or settings.target_code
        self._vertices: Dict[str, Vertex] = {}
        self._edges: List[Edge] = []

    @classmethod
    def from_edges(cls, edges: Iterable[Tuple[str, str, float]], source_code: Optional[str] = None,
                   target_code: Optional[str] = None) -> 'WaterNetwork':
        """Create a network from (orig, dest, capacity) triples, adding vertices as needed."""
        network = cls(source_code, target_code)
        for u, v, capacity in edges:
            for code in (u, v):
                if not network.has_vertex(code):
                    network.add_vertex(code)
            network.add_edge(u, v, capacity)
        return network

    def add_vertex(self, code: str, kind: VertexKind = VertexKind.STATION, **attrs) -> Vertex:
        if code in self._vertices:
            raise ValueError(f"Vertex '{code}' already exists")
        vertex = Vertex(code, VertexKind(kind), dict(attrs))
        self._vertices[code] = vertex
        return vertex

    def add_edge(self, orig: str, dest: str, capacity: float) -> int:
        if orig not in self._vertices or dest not in self._vertices:
            raise FlowLogicError(f"Cannot connect unknown vertices '{orig}' -> '{dest}'")
        if capacity < 0:
            raise ValueError(f"Capacity of {orig} -> {dest} must not be negative: {capacity}")
        edge = Edge(len(self._edges), orig, dest, capacity)
        self._edges.append(edge)
        self._vertices[orig].outgoing.append(edge.id)
        self._vertices[dest].incoming.append(edge.id)
        return edge.id

    def add_pipe(self, a: str, b: str, capacity: float, bidirectional: bool = False) -> List[int]:
        """Add a pipe; a bidirectional pipe becomes two opposite edges paired as reverses."""
        forward = self.add_edge(a, b, capacity)
        if not bidirectional:
            return [forward]
        backward = self.add_edge(b, a, capacity)
        self._edges[forward].reverse = backward
        self._edges[backward].reverse = forward
        return [forward, backward]

    def add_super_source(self, reservoirs: Dict[str, float]) -> str:
        """Connect the source terminal to every reservoir with its maximum delivery."""
        if not self.has_vertex(self.source_code):
            self.add_vertex(self.source_code, VertexKind.TERMINAL)
        for code, delivery in reservoirs.items():
            self.add_edge(self.source_code, code, delivery)
        return self.source_code

    def add_super_sink(self, cities: Dict[str, float]) -> str:
        """Connect every city to the target terminal with its demand."""
        if not self.has_vertex(self.target_code):
            self.add_vertex(self.target_code, VertexKind.TERMINAL)
        for code, demand in cities.items():
            self.add_edge(code, self.target_code, demand)
        return self.target_code

    # Required BaseGraph interface methods
    def num_vertices(self) -> int:
        return len(self._vertices)

    def num_edges(self) -> int:
        return len(self._edges)

    def has_vertex(self, code: str) -> bool:
        return code in self._vertices

    def has_edge(self, u: str, v: str) -> bool:
        return self.find_edge(u, v) is not None

    def find_vertex(self, code: str) -> Optional[Vertex]:
        return self._vertices.get(code)

    def find_edge(self, u: str, v: str) -> Optional[Edge]:
        vertex = self._vertices.get(u)
        if vertex is None:
            return None
        return next((e for e in self.outgoing(u) if e.dest == v), None)

    def get_vertices(self) -> Set[str]:
        return set(self._vertices)

    def vertices_of_kind(self, kind: VertexKind) -> List[str]:
        return [code for code, vertex in self._vertices.items() if vertex.kind == kind]

    def get_edges(self) -> List[Tuple[str, str, Dict[str, Any]]]:
        return [(e.orig, e.dest, {'id': e.id, 'capacity': e.capacity, 'flow': e.flow})
                for e in self._edges]

    def edges(self) -> List[Edge]:
        return list(self._edges)

    def edge(self, edge_id: int) -> Edge:
        return self._edges[edge_id]

    def outgoing(self, code: str) -> Iterator[Edge]:
        return (self._edges[i] for i in self._vertices[code].outgoing)

    def incoming(self, code: str) -> Iterator[Edge]:
        return (self._edges[i] for i in self._vertices[code].incoming)

    def get_edge_capacity(self, u: str, v: str) -> Optional[float]:
        edge = self.find_edge(u, v)
        return edge.capacity if edge is not None else None

    def reset_flows(self):
        for edge in self._edges:
            edge.flow = 0

    def total_outflow(self, code: str) -> float:
        return sum(e.flow for e in self.outgoing(code))

    def total_inflow(self, code: str) -> float:
        return sum(e.flow for e in self.incoming(code))

    def copy(self) -> 'WaterNetwork':
        return copy.deepcopy(self)

    def flow_dict(self) -> Dict[str, Dict[str, float]]:
        """Return positive flows as {orig: {dest: flow}}."""
        flows: Dict[str, Dict[str, float]] = {}
        for e in self._edges:
            if e.flow > 0:
                flows.setdefault(e.orig, {})
                flows[e.orig][e.dest] = flows[e.orig].get(e.dest, 0) + e.flow
        return flows

    def to_networkx(self) -> nx.DiGraph:
        """Export to a NetworkX DiGraph; parallel edges are merged by summing."""
        g = nx.DiGraph()
        for code, vertex in self._vertices.items():
            g.add_node(code, kind=vertex.kind.value, **vertex.attrs)
        for e in self._edges:
            if g.has_edge(e.orig, e.dest):
                g[e.orig][e.dest]['capacity'] += e.capacity
                g[e.orig][e.dest]['flow'] += e.flow
            else:
                g.add_edge(e.orig, e.dest, capacity=e.capacity, flow=e.flow)
        return g
