from typing import Dict, List, NamedTuple, Optional, Sequence
import logging

import pandas as pd

from ..base import VertexKind
from ..network import WaterNetwork
from .edmonds_karp import (
    FlowResult,
    run_max_flow,
    run_max_flow_without_vertex,
    run_max_flow_without_edge,
)
from .decomposition import decompose_flow, strip_terminals

# Configure logging for the module
logger = logging.getLogger(__name__)


class ImpactResult(NamedTuple):
    element: str
    baseline: float
    value: float

    @property
    def loss(self) -> float:
        return self.baseline - self.value


class ResilienceAnalysis:
    """Answer what-if questions about stations and pipes going out of service.

    Every computation runs on a private copy of the network, so the graph
    handed in keeps whatever flows it had.
    """

    def __init__(self, graph: WaterNetwork):
        self.graph = graph
        self.logger = logging.getLogger(__name__)
        self._baseline: Optional[FlowResult] = None
        self._baseline_network: Optional[WaterNetwork] = None

    def baseline(self) -> FlowResult:
        """Max flow of the intact network (cached)."""
        if self._baseline is None:
            network = self.graph.copy()
            self._baseline = run_max_flow(network, reset=True)
            self._baseline_network = network
        return self._baseline

    def baseline_network(self) -> WaterNetwork:
        """Copy of the network holding the baseline max flow."""
        self.baseline()
        return self._baseline_network

    def vertex_impact(self, code: str) -> ImpactResult:
        baseline = self.baseline().value
        result = run_max_flow_without_vertex(self.graph.copy(), code)
        return ImpactResult(code, baseline, result.value)

    def edge_impact(self, a: str, b: str, unidirectional: bool = False) -> ImpactResult:
        baseline = self.baseline().value
        result = run_max_flow_without_edge(self.graph.copy(), a, b, unidirectional)
        arrow = '->' if unidirectional else '<->'
        return ImpactResult(f"{a}{arrow}{b}", baseline, result.value)

    def city_deficits(self, network: Optional[WaterNetwork] = None) -> pd.DataFrame:
        """
        Water delivered to each city against its demand.

        Args:
            network: Network at max flow, defaults to the baseline network

        Returns:
            DataFrame with columns city, demand, delivered, deficit
        """
        if network is None:
            network = self.baseline_network()

        rows = []
        for e in network.incoming(network.target_code):
            rows.append({
                'city': e.orig,
                'demand': e.capacity,
                'delivered': e.flow,
                'deficit': e.capacity - e.flow,
            })
        frame = pd.DataFrame(rows, columns=['city', 'demand', 'delivered', 'deficit'])
        # A city wired to the sink more than once is reported as one row
        return frame.groupby('city', sort=False, as_index=False).sum()

    def affected_cities(self, code: str) -> pd.DataFrame:
        """Cities that receive less water once the given station is out of service."""
        before = self.city_deficits().set_index('city')
        network = self.graph.copy()
        run_max_flow_without_vertex(network, code)
        after = self.city_deficits(network).set_index('city')

        report = pd.DataFrame({
            'demand': before['demand'],
            'delivered_before': before['delivered'],
            'delivered_after': after['delivered'],
        })
        report['loss'] = report['delivered_before'] - report['delivered_after']
        report = report[report['loss'] > 0]
        return report.reset_index().rename(columns={'index': 'city'})

    def rank_stations(self, kinds: Sequence[VertexKind] = (VertexKind.STATION,)) -> pd.DataFrame:
        """Flow lost when each vertex of the given kinds is removed, worst first."""
        codes = [code for kind in kinds for code in self.graph.vertices_of_kind(kind)]
        self.logger.info(f"Ranking {len(codes)} vertices by flow loss")
        impacts = [self.vertex_impact(code) for code in sorted(codes)]
        return self._impact_frame(impacts)

    def rank_pipes(self) -> pd.DataFrame:
        """Flow lost when each pipe is removed, worst first.

        Paired edges of a bidirectional pipe are evaluated once as a whole;
        edges touching the source or target terminals are skipped.
        """
        terminals = (self.graph.source_code, self.graph.target_code)
        impacts = []
        for e in self.graph.edges():
            if e.orig in terminals or e.dest in terminals:
                continue
            if e.reverse is not None and e.reverse < e.id:
                continue
            impacts.append(self.edge_impact(e.orig, e.dest, unidirectional=e.reverse is None))
        self.logger.info(f"Ranked {len(impacts)} pipes by flow loss")
        return self._impact_frame(impacts)

    def flow_paths(self) -> List:
        """Decompose the baseline flow into paths between real vertices."""
        network = self.baseline_network()
        paths, _ = decompose_flow(network.flow_dict(), network.source_code, network.target_code)
        return strip_terminals(paths, network.source_code, network.target_code)

    def flow_report(self) -> Dict[str, float]:
        """
        Summarise how the baseline flow is routed.

        Returns:
            Dict with the total flow, the number of paths, path flow and hop
            statistics, and how many pipes carry or are filled by the flow
        """
        network = self.baseline_network()
        paths = self.flow_paths()
        terminals = (network.source_code, network.target_code)
        pipes = [e for e in network.edges() if e.orig not in terminals and e.dest not in terminals]

        report = {
            'total_flow': self.baseline().value,
            'paths': len(paths),
            'pipes_used': sum(1 for e in pipes if e.flow > 0),
            'saturated_pipes': sum(1 for e in pipes if e.flow > 0 and e.flow >= e.capacity),
        }
        if not paths:
            return report

        frame = pd.DataFrame({
            'flow': [flow for _, flow in paths],
            'hops': [len(path) - 1 for path, _ in paths],
        })
        report.update({
            'max_path_flow': frame['flow'].max(),
            'min_path_flow': frame['flow'].min(),
            'average_path_flow': frame['flow'].mean(),
            'average_hops': frame['hops'].mean(),
            'max_hops': int(frame['hops'].max()),
        })
        return report

    @staticmethod
    def _impact_frame(impacts: List[ImpactResult]) -> pd.DataFrame:
        frame = pd.DataFrame(
            [(i.element, i.baseline, i.value, i.loss) for i in impacts],
            columns=['element', 'baseline', 'flow', 'loss']
        )
        return frame.sort_values(['loss', 'element'], ascending=[False, True], ignore_index=True)
