#!/usr/bin/env python3

"""
Unit tests for Manim script emission.
"""

# Standard Library
import ast
import os
import sys
import unittest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from scenewrightlib.core import emitter

#============================================

def make_project(objects: list, duration=5, name='New Scene') -> dict:
	return {
		'name': 'Test',
		'scenes': [
			{'id': 'scene-1', 'name': name, 'duration': duration, 'objects': objects},
		],
	}

#============================================

def body_lines(script: str) -> list:
	return [line.strip() for line in script.splitlines()]

#============================================

class ArcMathTest(unittest.TestCase):
	#============================================
	def test_quadratic_to_cubic(self) -> None:
		"""Ensure C1 = P0 + 2/3 (Q - P0) and C2 = P2 + 2/3 (Q - P2)."""
		(c1, c2) = emitter.quadratic_to_cubic((0, 0), (1, 3), (2, 0))
		self.assertAlmostEqual(c1[0], 2 / 3)
		self.assertAlmostEqual(c1[1], 2)
		self.assertAlmostEqual(c2[0], 4 / 3)
		self.assertAlmostEqual(c2[1], 2)

	#============================================
	def test_arc_control_point(self) -> None:
		"""Ensure the curve midpoint maps to the quadratic control point."""
		self.assertEqual(emitter.arc_control_point((0, 0), (1, 1.5), (2, 0)), (1, 3))

	#============================================
	def test_arc_emits_cubic(self) -> None:
		project = make_project([
			{'id': 'arc', 'type': 'arc', 'x': 0, 'y': 0, 'x2': 2, 'y2': 0, 'cx': 1, 'cy': 1.5},
		])
		script = emitter.emit(project)
		self.assertIn("obj_0 = CubicBezier([0, 0, 0], [0.666667, 2, 0], "
			"[1.333333, 2, 0], [2, 0, 0], color=WHITE, stroke_width=2)", script)

#============================================

class EmitTest(unittest.TestCase):
	#============================================
	def test_header_and_class(self) -> None:
		script = emitter.emit(make_project([]))
		lines = script.splitlines()
		self.assertEqual(lines[0], "from manim import *")
		self.assertEqual(lines[1], "import numpy as np")
		self.assertIn("class NewScene(Scene):", lines)
		self.assertIn("    def construct(self):", lines)
		self.assertIn("        self.camera.background_color = \"#1a1a2e\"", lines)
		self.assertEqual(lines[-1], "        self.wait(5)")

	#============================================
	def test_output_is_python(self) -> None:
		"""Ensure the emitted text parses as Python source."""
		project = make_project([
			{'id': 'a', 'type': 'axes'},
			{'id': 'g', 'type': 'graph', 'axesId': 'a', 'formula': 'sin(x)'},
			{'id': 'c', 'type': 'graphCursor', 'graphId': 'g', 'x0': 1,
				'showCrosshair': True, 'showLabel': True},
			{'id': 't', 'type': 'tangentLine', 'cursorId': 'c', 'showSlopeLabel': True},
			{'id': 'l', 'type': 'limitProbe', 'graphId': 'g', 'cursorId': 'c'},
			{'id': 'v', 'type': 'valueLabel', 'graphId': 'g', 'cursorId': 'c'},
			{'id': 'txt', 'type': 'text', 'text': 'say "hi"', 'delay': 1},
			{'id': 'tex', 'type': 'latex', 'latex': '\\frac{a}{b}'},
			{'id': 'p', 'type': 'polygon', 'sides': 5},
			{'id': 'tri', 'type': 'triangle', 'rotation': 30},
			{'id': 'ln', 'type': 'line', 'keyframes': [{'time': 0.5, 'property': 'x', 'value': 2}]},
			{'id': 'ar', 'type': 'arrow', 'opacity': 0.5},
			{'id': 'd', 'type': 'dot', 'fill': '#123456'},
			{'id': 'r', 'type': 'rectangle', 'zIndex': 2},
		])
		ast.parse(emitter.emit(project))

	#============================================
	def test_deterministic(self) -> None:
		"""Ensure emitting the same project twice gives identical text."""
		project = make_project([
			{'id': 'a', 'type': 'circle', 'delay': 0.5},
			{'id': 'b', 'type': 'rectangle', 'transformFromId': 'a', 'delay': 1},
			{'id': 'c', 'type': 'text', 'text': 'hello'},
		])
		self.assertEqual(emitter.emit(project), emitter.emit(project))

	#============================================
	def test_red_circle(self) -> None:
		project = make_project([{'id': 'a', 'type': 'circle', 'radius': 2, 'fill': '#ef4444'}])
		lines = body_lines(emitter.emit(project))
		self.assertIn("obj_0 = Circle(radius=2, fill_color=RED, fill_opacity=1, "
			"stroke_color=WHITE, stroke_width=2).move_to([0, 0, 0])", lines)

	#============================================
	def test_equal_delays_one_play(self) -> None:
		"""Ensure objects sharing a delay enter in a single play call."""
		project = make_project([
			{'id': 'a', 'type': 'circle'},
			{'id': 'b', 'type': 'circle', 'x': 2},
		])
		lines = body_lines(emitter.emit(project))
		self.assertIn("self.play(GrowFromCenter(obj_0, run_time=1), "
			"GrowFromCenter(obj_1, run_time=1))", lines)
		creation_plays = [line for line in lines if line.startswith("self.play(GrowFromCenter")]
		self.assertEqual(len(creation_plays), 1)
		self.assertIn("self.play(FadeOut(obj_0), FadeOut(obj_1), run_time=0.5)", lines)

	#============================================
	def test_trailing_wait(self) -> None:
		project = make_project([{'id': 'a', 'type': 'circle'}], duration=5)
		lines = body_lines(emitter.emit(project))
		self.assertEqual(lines[-1], "self.wait(3.5)")
		project = make_project([{'id': 'a', 'type': 'circle'}], duration=1)
		lines = body_lines(emitter.emit(project))
		self.assertEqual(lines[-1], "self.wait(1)")

	#============================================
	def test_gap_wait(self) -> None:
		project = make_project([{'id': 'a', 'type': 'text', 'text': 'hi', 'delay': 2}])
		lines = body_lines(emitter.emit(project))
		index = lines.index("self.wait(2)")
		self.assertEqual(lines[index + 1], "self.play(Write(obj_0, run_time=1))")

	#============================================
	def test_transform_and_keyframes(self) -> None:
		project = make_project([
			{'id': 'a', 'type': 'circle', 'runTime': 3},
			{'id': 'b', 'type': 'rectangle', 'delay': 1, 'transformFromId': 'a',
				'transformType': 'ReplacementTransform',
				'keyframes': [
					{'time': 2, 'property': 'x', 'value': 1.5},
					{'time': 2, 'property': 'opacity', 'value': 0},
				]},
		])
		lines = body_lines(emitter.emit(project))
		self.assertIn("target_1 = Rectangle(width=2, height=1, fill_opacity=0, "
			"stroke_color=WHITE, stroke_width=2).move_to([0, 0, 0])", lines)
		self.assertIn("self.play(ReplacementTransform(obj_0, target_1, run_time=1))", lines)
		self.assertIn("self.play(target_1.animate.set_x(1.5), FadeOut(target_1), "
			"run_time=0.5)", lines)
		# the replaced circle never exits on its own
		self.assertNotIn("self.play(FadeOut(obj_0), run_time=0.5)", lines)

	#============================================
	def test_hex_fallback(self) -> None:
		project = make_project([{'id': 'a', 'type': 'dot', 'fill': '#123456'}])
		script = emitter.emit(project)
		self.assertIn("color=\"#123456\"", script)

	#============================================
	def test_unemittable_object_left_out(self) -> None:
		"""Ensure an object that cannot be emitted appears nowhere."""
		project = make_project([
			{'id': 'g', 'type': 'graph', 'formula': 'import os'},
			{'id': 'c', 'type': 'circle'},
		])
		script = emitter.emit(project)
		self.assertNotIn("obj_0", script)
		self.assertIn("obj_1 = Circle(", script)

	#============================================
	def test_axes_graph_cursor(self) -> None:
		"""Ensure a cursor at x0 = 2 on x^2 is placed through the axes."""
		project = make_project([
			{'id': 'ax', 'type': 'axes'},
			{'id': 'g', 'type': 'graph', 'axesId': 'ax', 'formula': 'x^2'},
			{'id': 'cur', 'type': 'graphCursor', 'graphId': 'g', 'x0': 2},
		])
		lines = body_lines(emitter.emit(project))
		self.assertIn("obj_0_axes = Axes(x_range=[-5, 5, 1], y_range=[-3, 3, 1], "
			"x_length=8, y_length=4, axis_config={\"color\": WHITE, \"include_ticks\": True})"
			".move_to([0, 0, 0])", lines)
		self.assertIn("obj_0 = VGroup(obj_0_axes, obj_0_x_label, obj_0_y_label)", lines)
		self.assertIn("obj_1 = obj_0_axes.plot(lambda x: x**2, x_range=[-5, 5], "
			"color=BLUE, stroke_width=3)", lines)
		self.assertIn("obj_2 = Dot(obj_0_axes.c2p(2, 4), radius=0.08, color=RED)", lines)

	#============================================
	def test_linked_objects_follow_parents(self) -> None:
		project = make_project([
			{'id': 'cur', 'type': 'graphCursor', 'graphId': 'g', 'x0': 1},
			{'id': 'g', 'type': 'graph', 'axesId': 'ax'},
			{'id': 'ax', 'type': 'axes'},
		])
		lines = body_lines(emitter.emit(project))
		axes_index = lines.index("obj_2 = VGroup(obj_2_axes, obj_2_x_label, obj_2_y_label)")
		graph_index = [i for i, line in enumerate(lines) if line.startswith("obj_1 = ")][0]
		cursor_index = [i for i, line in enumerate(lines) if line.startswith("obj_0 = ")][0]
		self.assertLess(axes_index, graph_index)
		self.assertLess(graph_index, cursor_index)

	#============================================
	def test_unlinked_graph_has_own_axes(self) -> None:
		project = make_project([{'id': 'g', 'type': 'graph', 'formula': 'x'}])
		lines = body_lines(emitter.emit(project))
		self.assertIn("obj_0 = VGroup(obj_0_axes, obj_0_curve)", lines)

	#============================================
	def test_active_scene_only(self) -> None:
		project = {
			'scenes': [
				{'id': 's1', 'name': 'Intro', 'objects': []},
				{'id': 's2', 'name': 'Intro', 'objects': []},
			],
		}
		script = emitter.emit(project)
		self.assertIn("class Intro(Scene):", script)
		self.assertIn("class Intro2(Scene):", script)
		only = emitter.emit(project, 's2')
		self.assertNotIn("class Intro(Scene):", only)
		self.assertIn("class Intro2(Scene):", only)

	#============================================
	def test_emit_scene_missing(self) -> None:
		with self.assertRaises(RuntimeError):
			emitter.ScriptEmitter().emit_scene(make_project([]), 'nope')

	#============================================
	def test_infinite_duration_string(self) -> None:
		"""Ensure an 'inf' duration falls back to the default length."""
		lines = body_lines(emitter.emit(make_project([], duration='inf')))
		self.assertEqual(lines[-1], "self.wait(5)")

	#============================================
	def test_polygon_sides_capped(self) -> None:
		project = make_project([{'id': 'p', 'type': 'polygon', 'sides': 1000}])
		self.assertIn("obj_0 = RegularPolygon(n=64, radius=1", emitter.emit(project))

#============================================

def graph_objects(extra: list, formula: str = 'x^2') -> list:
	return [
		{'id': 'ax', 'type': 'axes'},
		{'id': 'g', 'type': 'graph', 'axesId': 'ax', 'formula': formula},
	] + extra

#============================================

class CalculusObjectTest(unittest.TestCase):
	#============================================
	def test_slope_label_uses_derivative_step(self) -> None:
		"""Ensure the slope label shows the symmetric difference for the given step."""
		objects = graph_objects([
			{'id': 'cur', 'type': 'graphCursor', 'graphId': 'g', 'x0': 1},
			{'id': 't', 'type': 'tangentLine', 'cursorId': 'cur', 'showSlopeLabel': True, 'stroke': '#eab308',
				'derivativeStep': 0.5},
		], formula='x^3')
		script = emitter.emit(make_project(objects))
		# (1.5^3 - 0.5^3) / 1
		self.assertIn("obj_3_label = MathTex(r\"m = 3.250\", font_size=24, color=YELLOW)", script)
		self.assertIn("obj_3_line = Line(obj_0_axes.c2p(-1, -5.5), obj_0_axes.c2p(3, 7.5)", script)
		objects[3]['derivativeStep'] = 0.001
		script = emitter.emit(make_project(objects))
		self.assertIn("MathTex(r\"m = 3.000\"", script)

	#============================================
	def test_tangent_without_label(self) -> None:
		objects = graph_objects([
			{'id': 't', 'type': 'tangentLine', 'graphId': 'g', 'x0': 1},
		])
		script = emitter.emit(make_project(objects))
		self.assertIn("obj_2 = Line(obj_0_axes.c2p(-1, -3), obj_0_axes.c2p(3, 5)", script)
		self.assertNotIn("MathTex(r\"m =", script)

	#============================================
	def test_limit_probe_directions(self) -> None:
		"""Ensure one dot is placed per signed delta on each requested side."""
		expected = {
			'left': ["Dot(obj_0_axes.c2p(0.5, 0.25)", "Dot(obj_0_axes.c2p(0, 0)"],
			'right': ["Dot(obj_0_axes.c2p(1.5, 2.25)", "Dot(obj_0_axes.c2p(2, 4)"],
		}
		expected['both'] = expected['left'] + expected['right']
		for direction, dots in expected.items():
			objects = graph_objects([
				{'id': 'lp', 'type': 'limitProbe', 'graphId': 'g', 'x0': 1,
					'direction': direction, 'deltaSchedule': [0.5, 1]},
			])
			script = emitter.emit(make_project(objects))
			self.assertEqual(script.count("Dot(obj_0_axes.c2p("), len(dots))
			for dot in dots:
				self.assertIn(dot, script)

	#============================================
	def test_value_label_panel(self) -> None:
		objects = graph_objects([
			{'id': 'cur', 'type': 'graphCursor', 'graphId': 'g', 'x0': 1, 'showDot': True},
			{'id': 'v', 'type': 'valueLabel', 'graphId': 'g', 'cursorId': 'cur',
				'valueType': 'y', 'labelPrefix': 'y = '},
		])
		lines = body_lines(emitter.emit(make_project(objects)))
		self.assertIn("obj_3_panel = BackgroundRectangle(obj_3_text, color=BLACK, "
			"fill_opacity=0.6, buff=0.1)", lines)
		self.assertIn("obj_3 = VGroup(obj_3_panel, obj_3_text)", lines)
		objects[3]['showBackground'] = False
		script = emitter.emit(make_project(objects))
		self.assertNotIn("BackgroundRectangle", script)
		self.assertIn("obj_3 = Text(\"y = 1.000\"", script)


if __name__ == '__main__':
	unittest.main()
