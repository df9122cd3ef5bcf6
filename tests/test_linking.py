#!/usr/bin/env python3

"""
Unit tests for math-graph link resolution.
"""

# Standard Library
import math
import os
import sys
import unittest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from scenewrightlib.core import linking

#============================================

def graph_family() -> list:
	return [
		{'id': 'tan', 'type': 'tangentLine', 'cursorId': 'cur'},
		{'id': 'cur', 'type': 'graphCursor', 'graphId': 'g', 'x0': 2},
		{'id': 'g', 'type': 'graph', 'axesId': 'ax', 'formula': 'x^2'},
		{'id': 'ax', 'type': 'axes'},
		{'id': 'box', 'type': 'rectangle'},
	]

#============================================

class ResolveLinksTest(unittest.TestCase):
	#============================================
	def test_inherits_through_cursor(self) -> None:
		"""Ensure a tangent linked only to a cursor finds the graph and axes."""
		objects = graph_family()
		links = linking.resolve_links(objects)
		self.assertEqual(links['tan']['cursor']['id'], 'cur')
		self.assertEqual(links['tan']['graph']['id'], 'g')
		self.assertEqual(links['tan']['axes']['id'], 'ax')
		self.assertEqual(links['cur']['axes']['id'], 'ax')
		self.assertNotIn('box', links)

	#============================================
	def test_wrong_type_and_missing_refs(self) -> None:
		"""Ensure refs to missing or mistyped objects resolve to None."""
		objects = [
			{'id': 'box', 'type': 'rectangle'},
			{'id': 'g', 'type': 'graph', 'axesId': 'box'},
			{'id': 'cur', 'type': 'graphCursor', 'graphId': 'nowhere'},
			{'id': 'self', 'type': 'graph', 'axesId': 'self'},
		]
		links = linking.resolve_links(objects)
		self.assertIsNone(links['g']['axes'])
		self.assertIsNone(links['cur']['graph'])
		self.assertIsNone(links['self']['axes'])

	#============================================
	def test_emission_order_parents_first(self) -> None:
		"""Ensure every object follows what it references."""
		ordered = linking.emission_order(graph_family())
		ids = [obj['id'] for obj in ordered]
		self.assertEqual(ids, ['ax', 'g', 'cur', 'tan', 'box'])

	#============================================
	def test_emission_order_keeps_plain_order(self) -> None:
		objects = [{'id': str(index), 'type': 'circle'} for index in range(4)]
		ordered = linking.emission_order(objects)
		self.assertEqual([obj['id'] for obj in ordered], ['0', '1', '2', '3'])

#============================================

class GraphMathTest(unittest.TestCase):
	#============================================
	def test_cursor_point(self) -> None:
		"""Ensure a cursor at x0 = 2 on x^2 sits at y = 4."""
		graph = {'id': 'g', 'type': 'graph', 'formula': 'x^2'}
		cursor = {'id': 'c', 'type': 'graphCursor', 'x0': 2}
		self.assertEqual(linking.cursor_point(graph, cursor), (2, 4.0))
		undefined = {'id': 'g2', 'type': 'graph', 'formula': 'sqrt(x)'}
		self.assertIsNone(linking.cursor_point(undefined, {'x0': -4}))
		self.assertIsNone(linking.cursor_point(None, cursor))

	#============================================
	def test_graph_formula_default(self) -> None:
		self.assertEqual(linking.graph_formula({'formula': ''}), 'x^2')
		self.assertEqual(linking.graph_formula({'formula': 'sin(x)'}), 'sin(x)')
		self.assertIsNone(linking.graph_formula(None))

	#============================================
	def test_tangent_segment(self) -> None:
		"""Ensure the tangent to x^2 at 1 has slope 2."""
		((x1, y1), (x2, y2)) = linking.tangent_segment('x^2', 1, visible_span=2)
		self.assertAlmostEqual(x1, -1)
		self.assertAlmostEqual(y1, -3, places=5)
		self.assertAlmostEqual(x2, 3)
		self.assertAlmostEqual(y2, 5, places=5)
		self.assertIsNone(linking.tangent_segment('sqrt(x)', -1))

	#============================================
	def test_tangent_segment_horizontal_when_slope_undefined(self) -> None:
		segment = linking.tangent_segment('sqrt(x)', 0)
		self.assertEqual(segment[0][1], 0)
		self.assertEqual(segment[1][1], 0)

	#============================================
	def test_limit_points_directions(self) -> None:
		"""Ensure approach direction picks the sign of each offset."""
		left = linking.limit_points('x^2', 0, 'left', [1, 0.5])
		self.assertEqual([point['x'] for point in left], [-1, -0.5])
		self.assertTrue(all(point['direction'] == 'left' for point in left))
		right = linking.limit_points('x^2', 0, 'right', [1, 0.5])
		self.assertEqual([point['delta'] for point in right], [1, 0.5])
		both = linking.limit_points('x^2', 0)
		self.assertEqual(len(both), 2 * len(linking.DEFAULT_DELTA_SCHEDULE))

	#============================================
	def test_limit_points_skip_undefined(self) -> None:
		points = linking.limit_points('sqrt(x)', 0, 'both', [1])
		self.assertEqual(len(points), 1)
		self.assertEqual(points[0]['direction'], 'right')

	#============================================
	def test_estimate_limit(self) -> None:
		removable = linking.estimate_limit('sin(x)/x', 0)
		self.assertTrue(removable['exists'])
		self.assertAlmostEqual(removable['limit'], 1.0, places=4)
		jump = linking.estimate_limit('1/x', 0)
		self.assertFalse(jump['exists'])
		self.assertTrue(math.isnan(jump['limit']))
		one_sided = linking.estimate_limit('sqrt(x)', 0)
		self.assertFalse(one_sided['exists'])
		self.assertTrue(math.isnan(one_sided['left_value']))

	#============================================
	def test_label_text(self) -> None:
		"""Ensure labels format slope and y to three places, x to two."""
		graph = {'formula': 'x^2'}
		cursor = {'x0': 2}
		slope = {'valueType': 'slope', 'labelPrefix': 'm = '}
		self.assertEqual(linking.label_text(slope, graph, cursor), "m = 4.000")
		y_label = {'valueType': 'y', 'labelPrefix': 'y = ', 'labelSuffix': '!'}
		self.assertEqual(linking.label_text(y_label, graph, cursor), "y = 4.000!")
		x_label = {'valueType': 'x', 'labelPrefix': 'x = '}
		self.assertEqual(linking.label_text(x_label, graph, cursor), "x = 2.00")
		custom = {'valueType': 'custom', 'customExpression': 'hello'}
		self.assertEqual(linking.label_text(custom, None, None), "hello")
		self.assertEqual(linking.label_text({'labelPrefix': 'm = '}, graph, None), "m = ")

	#============================================
	def test_linking_status(self) -> None:
		status = linking.linking_status({'type': 'tangentLine'})
		self.assertTrue(status['needs_link'])
		self.assertEqual(status['missing_links'], ['cursorId', 'graphId'])
		status = linking.linking_status({'type': 'graphCursor', 'graphId': 'g'})
		self.assertFalse(status['needs_link'])
		status = linking.linking_status({'type': 'valueLabel'})
		self.assertFalse(status['needs_link'])
		self.assertEqual(status['eligible_targets'], ['graph', 'graphCursor'])


if __name__ == '__main__':
	unittest.main()
