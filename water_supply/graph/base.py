from abc import abstractmethod
from enum import Enum
from typing import Set, Dict, Any, Optional, Iterator, List, Tuple


class FlowLogicError(ValueError):
    """Raised when a call references vertices or paths that cannot exist.

    This is a programmer error: callers must validate codes before invoking
    the flow algorithms. It is never caught inside the package.
    """


class VertexKind(str, Enum):
    RESERVOIR = 'reservoir'
    STATION = 'station'
    CITY = 'city'
    TERMINAL = 'terminal'


class BaseGraph:
    """Abstract base class defining the interface the flow algorithms consume."""

    source_code: str
    target_code: str

    @abstractmethod
    def num_vertices(self) -> int:
        """Return the total number of vertices in the graph."""
        pass

    @abstractmethod
    def num_edges(self) -> int:
        """Return the total number of edges in the graph."""
        pass

    @abstractmethod
    def has_vertex(self, code: str) -> bool:
        """Check if a vertex exists in the graph."""
        pass

    @abstractmethod
    def has_edge(self, u: str, v: str) -> bool:
        """Check if an edge exists between two vertices."""
        pass

    @abstractmethod
    def find_vertex(self, code: str):
        """Return the vertex with the given code, or None."""
        pass

    @abstractmethod
    def get_vertices(self) -> Set[str]:
        """Return set of all vertex codes."""
        pass

    @abstractmethod
    def get_edges(self) -> List[Tuple[str, str, Dict[str, Any]]]:
        """Return list of all edges with their data."""
        pass

    @abstractmethod
    def edge(self, edge_id: int):
        """Return the edge stored under edge_id."""
        pass

    @abstractmethod
    def outgoing(self, code: str) -> Iterator:
        """Return iterator over the edges leaving a vertex."""
        pass

    @abstractmethod
    def incoming(self, code: str) -> Iterator:
        """Return iterator over the edges entering a vertex."""
        pass

    @abstractmethod
    def get_edge_capacity(self, u: str, v: str) -> Optional[float]:
        """Get capacity of edge between u and v."""
        pass

    @abstractmethod
    def reset_flows(self):
        """Set the flow of every edge back to zero."""
        pass

    @abstractmethod
    def total_outflow(self, code: str) -> float:
        """Sum of flow leaving a vertex."""
        pass

    @abstractmethod
    def total_inflow(self, code: str) -> float:
        """Sum of flow entering a vertex."""
        pass
