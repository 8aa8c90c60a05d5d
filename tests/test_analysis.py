import unittest

import pandas as pd

from water_supply import WaterNetwork, VertexKind, ResilienceAnalysis, run_max_flow, run_max_flow_without_edge
from water_supply.graph.flow import decompose_flow, strip_terminals


class WaterNetworkTestData:
    """
    Small regional network with two reservoirs, two pumping stations and three cities.

    Reservoirs feed the super-source side with their maximum delivery and
    cities drain into the super-sink with their demand. The two stations are
    joined by a bidirectional pipe.
    """

    reservoirs = {'R1': 10, 'R2': 8}
    cities = {'C1': 7, 'C2': 6, 'C3': 5}
    pipes = [
        ('R1', 'PS1', 6, False),
        ('R1', 'C1', 5, False),
        ('R2', 'PS2', 8, False),
        ('PS1', 'C1', 4, False),
        ('PS1', 'PS2', 3, True),
        ('PS2', 'C2', 6, False),
        ('PS2', 'C3', 4, False),
        ('PS1', 'C3', 2, False),
    ]

    def create_network(self) -> WaterNetwork:
        network = WaterNetwork('SuperSource', 'SuperSink')
        for code, delivery in self.reservoirs.items():
            network.add_vertex(code, VertexKind.RESERVOIR, max_delivery=delivery)
        for code in ('PS1', 'PS2'):
            network.add_vertex(code, VertexKind.STATION)
        for code, demand in self.cities.items():
            network.add_vertex(code, VertexKind.CITY, demand=demand)
        for a, b, capacity, bidirectional in self.pipes:
            network.add_pipe(a, b, capacity, bidirectional=bidirectional)
        network.add_super_source(self.reservoirs)
        network.add_super_sink(self.cities)
        return network


class TestResilienceAnalysis(unittest.TestCase):
    """
    What-if analysis on the regional network.

    Hand-computed values:
    - Intact network meets every demand: 18
    - Without PS1: R1 only reaches C1 directly (5) and R2 delivers 8: 13
    - Without PS2: R2 is cut off, R1 delivers 5 + 2 + 2: 9
    - Without the PS1-PS2 pipe: R1 delivers 9 and R2 8: 17
    - Without PS2->C2: C2 receives nothing, C1 and C3 are still met: 12
    - Without R2->PS2: R1 alone delivers its full 10
    """

    def setUp(self):
        self.network = WaterNetworkTestData().create_network()
        self.analysis = ResilienceAnalysis(self.network)

    def test_baseline(self):
        result = self.analysis.baseline()
        self.assertEqual(result.value, 18)
        self.assertIs(self.analysis.baseline(), result)

    def test_analysed_graph_is_left_untouched(self):
        self.analysis.baseline()
        self.analysis.vertex_impact('PS1')
        self.assertTrue(all(e.flow == 0 for e in self.network.edges()))

    def test_vertex_impact(self):
        self.assertEqual(self.analysis.vertex_impact('PS1').value, 13)
        impact = self.analysis.vertex_impact('PS2')
        self.assertEqual(impact.element, 'PS2')
        self.assertEqual(impact.baseline, 18)
        self.assertEqual(impact.loss, 9)

    def test_edge_impact(self):
        impact = self.analysis.edge_impact('PS1', 'PS2')
        self.assertEqual(impact.value, 17)
        self.assertEqual(impact.element, 'PS1<->PS2')
        impact = self.analysis.edge_impact('PS2', 'C2', unidirectional=True)
        self.assertEqual(impact.value, 12)
        self.assertEqual(impact.element, 'PS2->C2')

    def test_city_deficits(self):
        deficits = self.analysis.city_deficits()
        self.assertEqual(list(deficits.columns), ['city', 'demand', 'delivered', 'deficit'])
        self.assertEqual(sorted(deficits['city']), ['C1', 'C2', 'C3'])
        self.assertEqual(deficits['deficit'].sum(), 0)

    def test_city_deficits_after_outage(self):
        network = self.network.copy()
        run_max_flow_without_edge(network, 'PS2', 'C2', unidirectional=True)
        deficits = self.analysis.city_deficits(network).set_index('city')
        self.assertEqual(deficits.loc['C2', 'deficit'], 6)
        self.assertEqual(deficits.loc['C1', 'deficit'], 0)

    def test_affected_cities(self):
        affected = self.analysis.affected_cities('PS2')
        self.assertIn('C2', set(affected['city']))
        self.assertEqual(affected['loss'].sum(), 9)
        self.assertTrue((affected['loss'] > 0).all())

    def test_rank_stations(self):
        ranking = self.analysis.rank_stations()
        self.assertIsInstance(ranking, pd.DataFrame)
        self.assertEqual(list(ranking['element']), ['PS2', 'PS1'])
        self.assertEqual(list(ranking['loss']), [9, 5])

    def test_rank_stations_with_reservoirs(self):
        ranking = self.analysis.rank_stations(kinds=(VertexKind.RESERVOIR, VertexKind.STATION))
        self.assertEqual(len(ranking), 4)
        self.assertTrue((ranking['flow'] <= ranking['baseline']).all())

    def test_rank_pipes(self):
        ranking = self.analysis.rank_pipes()
        # eight pipes, the bidirectional one counted once
        self.assertEqual(len(ranking), 8)
        self.assertEqual(list(ranking['element'][:3]), ['R2->PS2', 'PS2->C2', 'R1->PS1'])
        self.assertEqual(list(ranking['loss'][:3]), [8, 6, 5])
        self.assertTrue((ranking['loss'] >= 0).all())
        self.assertTrue(ranking['loss'].is_monotonic_decreasing)

    def test_flow_paths_cover_baseline(self):
        paths = self.analysis.flow_paths()
        self.assertEqual(sum(flow for _, flow in paths), 18)
        for path, _ in paths:
            self.assertIn(path[0], ('R1', 'R2'))
            self.assertIn(path[-1], ('C1', 'C2', 'C3'))

    def test_flow_report(self):
        report = self.analysis.flow_report()
        self.assertEqual(report['total_flow'], 18)
        self.assertAlmostEqual(report['average_path_flow'] * report['paths'], 18)
        self.assertLessEqual(report['min_path_flow'], report['max_path_flow'])
        self.assertGreaterEqual(report['average_hops'], 1)
        # PS2->C2 is the only way into C2 and must run full
        self.assertGreaterEqual(report['saturated_pipes'], 1)
        self.assertLessEqual(report['saturated_pipes'], report['pipes_used'])

    def test_flow_report_without_any_path(self):
        network = WaterNetwork('SuperSource', 'SuperSink')
        network.add_vertex('R1', VertexKind.RESERVOIR)
        network.add_vertex('C1', VertexKind.CITY)
        network.add_super_source({'R1': 5})
        network.add_super_sink({'C1': 5})
        report = ResilienceAnalysis(network).flow_report()
        self.assertEqual(report, {'total_flow': 0, 'paths': 0, 'pipes_used': 0, 'saturated_pipes': 0})

    def test_city_wired_to_sink_twice(self):
        self.network.add_super_sink({'C1': 3})
        analysis = ResilienceAnalysis(self.network)

        deficits = analysis.city_deficits()
        self.assertEqual(sorted(deficits['city']), ['C1', 'C2', 'C3'])
        self.assertEqual(deficits.set_index('city').loc['C1', 'demand'], 10)

        affected = analysis.affected_cities('PS2')
        self.assertTrue(affected['city'].is_unique)
        self.assertTrue((affected['loss'] > 0).all())


class TestFlowDecomposition(unittest.TestCase):
    """Decomposition of a max flow into paths."""

    def setUp(self):
        self.network = WaterNetworkTestData().create_network()
        run_max_flow(self.network)
        self.source = self.network.source_code
        self.sink = self.network.target_code

    def test_paths_sum_to_flow(self):
        paths, edge_flows = decompose_flow(self.network.flow_dict(), self.source, self.sink)
        self.assertEqual(sum(flow for _, flow in paths), 18)
        for path, _ in paths:
            self.assertEqual(path[0], self.source)
            self.assertEqual(path[-1], self.sink)
        for (u, v), flow in edge_flows.items():
            self.assertLessEqual(flow, self.network.find_edge(u, v).capacity)

    def test_requested_flow_limits_paths(self):
        paths, _ = decompose_flow(self.network.flow_dict(), self.source, self.sink, requested_flow=7)
        self.assertEqual(sum(flow for _, flow in paths), 7)

    def test_strip_terminals_merges(self):
        paths = [(['S', 'A', 'T'], 1), (['S', 'A', 'T'], 2), (['S', 'B', 'T'], 4)]
        self.assertEqual(strip_terminals(paths, 'S', 'T'), [(['A'], 3), (['B'], 4)])

