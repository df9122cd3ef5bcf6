#!/usr/bin/env python3

"""
Manim script emission.

ScriptEmitter turns a validated project into the text of a Manim Community
script: one Scene subclass per scene, constructors for every object in
dependency order, then the scheduled batches as self.play and self.wait
calls. Objects that cannot be emitted are left out everywhere.
"""

import math
from scenewrightlib.core import colors as colors_lib
from scenewrightlib.core import formula as formula_lib
from scenewrightlib.core import linking
from scenewrightlib.core import schema
from scenewrightlib.core import timeline
from scenewrightlib.core import utils

#============================================

SCRIPT_HEADER = (
	'from manim import *',
	'import numpy as np',
)

INDENT = '    '

DEFAULT_TRIANGLE = ((0, 1), (-0.866, -0.5), (0.866, -0.5))

num = utils.format_number

#============================================

def arc_control_point(p0: tuple, m: tuple, p2: tuple) -> tuple:
	"""
	Quadratic control point of the curve from p0 to p2 through m.

	m is the point the curve passes through at its parametric midpoint, so
	Q = 2 M - (P0 + P2) / 2.
	"""
	qx = 2 * m[0] - (p0[0] + p2[0]) / 2
	qy = 2 * m[1] - (p0[1] + p2[1]) / 2
	return (qx, qy)

#============================================

def quadratic_to_cubic(p0: tuple, q: tuple, p2: tuple) -> tuple:
	"""
	Cubic control points equivalent to the quadratic curve P0, Q, P2.

	Returns:
		tuple: (C1, C2) with C1 = P0 + 2/3 (Q - P0), C2 = P2 + 2/3 (Q - P2)
	"""
	c1 = (p0[0] + 2 / 3 * (q[0] - p0[0]), p0[1] + 2 / 3 * (q[1] - p0[1]))
	c2 = (p2[0] + 2 / 3 * (q[0] - p2[0]), p2[1] + 2 / 3 * (q[1] - p2[1]))
	return (c1, c2)

#============================================

def _number(obj: dict, key: str, default: float) -> float:
	return utils.coerce_number(obj.get(key), default)

#============================================

def _positive(obj: dict, key: str, default: float) -> float:
	value = utils.coerce_number(obj.get(key), default)
	if value <= 0:
		return default
	return value

#============================================

def _range(raw, default: tuple) -> tuple:
	if not isinstance(raw, dict):
		return default
	low = utils.coerce_number(raw.get('min'), default[0])
	high = utils.coerce_number(raw.get('max'), default[1])
	step = utils.coerce_number(raw.get('step'), default[2])
	if low >= high:
		return default
	if step <= 0:
		step = default[2]
	return (low, high, step)

#============================================

def _range_text(values: tuple) -> str:
	return "[" + ", ".join(num(value) for value in values) + "]"

#============================================

class SceneContext():
	"""
	Per-scene state shared by the constructor builders.
	"""
	def __init__(self, objects: list):
		self.objects = objects
		self.names = timeline.variable_names(objects)
		self.links = linking.resolve_links(objects)
		self.emitted = set()
		# object id -> variable holding the Axes mobject it draws through
		self.axes_refs = {}

	#============================
	def links_for(self, obj: dict) -> dict:
		return self.links.get(obj.get('id'), {'axes': None, 'graph': None, 'cursor': None})

	#============================
	def axes_ref_for(self, obj: dict):
		obj_links = self.links_for(obj)
		for link_name in ('axes', 'graph'):
			parent = obj_links.get(link_name)
			if parent is None:
				continue
			ref = self.axes_refs.get(parent.get('id'))
			if ref is not None:
				return ref
		return None

#============================================

class ScriptEmitter():
	"""
	Emit Manim script text for a project.

	Args:
		colors: Color lookup table used for hex to constant translation.
	"""
	def __init__(self, colors: colors_lib.ColorTable = None):
		if colors is None:
			colors = colors_lib.DEFAULT_COLORS
		self.colors = colors
		self.builders = {
			'rectangle': self._build_rectangle,
			'circle': self._build_circle,
			'triangle': self._build_triangle,
			'polygon': self._build_polygon,
			'dot': self._build_dot,
			'line': self._build_line,
			'arrow': self._build_arrow,
			'arc': self._build_arc,
			'text': self._build_text,
			'latex': self._build_latex,
			'axes': self._build_axes,
			'graph': self._build_graph,
			'graphCursor': self._build_cursor,
			'tangentLine': self._build_tangent,
			'limitProbe': self._build_limit_probe,
			'valueLabel': self._build_value_label,
		}

	#============================
	def scene_class_names(self, project: dict) -> dict:
		"""
		Class name for every scene, unique within the project.
		"""
		names = {}
		used = set()
		for scene in project.get('scenes', []):
			base = utils.sanitize_class_name(scene.get('name'))
			class_name = base
			counter = 2
			while class_name in used:
				class_name = f"{base}{counter}"
				counter += 1
			used.add(class_name)
			names[scene.get('id')] = class_name
		return names

	#============================
	def scene_class_name(self, project: dict, scene_id: str):
		project = schema.validate_project(project)
		scene = schema.find_scene(project, scene_id)
		if scene is None:
			return None
		return self.scene_class_names(project).get(scene['id'])

	#============================
	def emit(self, project: dict, active_scene_id: str = None) -> str:
		"""
		Emit the script for a project.

		When active_scene_id names a scene only that scene's class is
		emitted; otherwise every scene gets a class.
		"""
		project = schema.validate_project(project)
		scenes = project['scenes']
		active = schema.find_scene(project, active_scene_id)
		if active is not None:
			scenes = [active]
		class_names = self.scene_class_names(project)
		lines = list(SCRIPT_HEADER)
		for scene in scenes:
			lines.append('')
			lines.append('')
			lines.extend(self._scene_lines(project, scene, class_names[scene['id']]))
		return "\n".join(lines) + "\n"

	#============================
	def emit_scene(self, project: dict, scene_id: str) -> str:
		project = schema.validate_project(project)
		scene = schema.find_scene(project, scene_id)
		if scene is None:
			raise RuntimeError(f"scene not found: {scene_id}")
		return self.emit(project, scene['id'])

	#============================
	def _scene_lines(self, project: dict, scene: dict, class_name: str) -> list:
		ctx = SceneContext(scene['objects'])
		background = self.colors.to_script(project['settings'].get('backgroundColor'),
			utils.python_string(schema.DEFAULT_SETTINGS['backgroundColor']))
		body = [f"self.camera.background_color = {background}"]
		for obj in linking.emission_order(ctx.objects, ctx.links):
			statements = self._construct(obj, ctx)
			if statements is None:
				continue
			body.extend(statements)
			ctx.emitted.add(obj['id'])
		emitted_objects = [obj for obj in ctx.objects if obj['id'] in ctx.emitted]
		batches = timeline.schedule(emitted_objects, ctx.names)
		if len(batches) > 0:
			body.append('')
		for batch in batches:
			body.extend(self._batch_lines(batch))
		remaining = round(scene['duration'] - timeline.schedule_end(batches), 6)
		if remaining > 0:
			body.append(f"self.wait({num(remaining)})")
		else:
			body.append("self.wait(1)")
		lines = [f"class {class_name}(Scene):", f"{INDENT}def construct(self):"]
		for statement in body:
			if statement == '':
				lines.append('')
			else:
				lines.append(INDENT * 2 + statement)
		return lines

	#============================
	def _construct(self, obj: dict, ctx: SceneContext):
		builder = self.builders.get(obj.get('type'))
		if builder is None:
			return None
		var_name = ctx.names[obj['id']]
		try:
			statements = builder(obj, var_name, ctx)
		except RuntimeError:
			# non-finite coordinates cannot be written as literals
			return None
		if not statements:
			return None
		return statements

	#============================
	def _batch_lines(self, batch: dict) -> list:
		lines = []
		wait = round(batch['wait'], 6)
		if wait > 0:
			lines.append(f"self.wait({num(wait)})")
		if len(batch['creations']) > 0:
			calls = [f"{item['animation']}({item['var']}, run_time={num(item['run_time'])})"
				for item in batch['creations']]
			lines.append(f"self.play({', '.join(calls)})")
		if len(batch['transforms']) > 0:
			calls = []
			for item in batch['transforms']:
				calls.append(f"{item['animation']}({item['source_var']}, "
					f"{item['target_var']}, run_time={num(item['run_time'])})")
			lines.append(f"self.play({', '.join(calls)})")
		if len(batch['keyframe_edits']) > 0:
			calls = []
			for entry in batch['keyframe_edits']:
				calls.extend(self._edit_calls(entry))
			lines.append(f"self.play({', '.join(calls)}, "
				f"run_time={num(timeline.EDIT_RUN_TIME)})")
		if len(batch['exits']) > 0:
			calls = [f"{item['animation']}({item['var']})" for item in batch['exits']]
			lines.append(f"self.play({', '.join(calls)}, "
				f"run_time={num(timeline.EXIT_RUN_TIME)})")
		return lines

	#============================
	def _edit_calls(self, entry: dict) -> list:
		var_name = entry['var']
		chain = []
		extra = []
		for edit in entry['edits']:
			prop = edit['property']
			value = edit['value']
			if prop == 'x':
				chain.append(f".set_x({num(value)})")
			elif prop == 'y':
				chain.append(f".set_y({num(value)})")
			elif prop == 'scale':
				chain.append(f".scale({num(value)})")
			elif prop == 'opacity':
				if value <= 0:
					extra.append(f"FadeOut({var_name})")
				else:
					chain.append(f".set_opacity({num(min(1, value))})")
			elif prop == 'rotation':
				extra.append(f"Rotate({var_name}, angle={num(edit['delta'])} * DEGREES)")
			elif prop == 'fill':
				chain.append(f".set_fill({self.colors.to_script(value)})")
			elif prop == 'stroke':
				chain.append(f".set_stroke({self.colors.to_script(value)})")
		calls = []
		if len(chain) > 0:
			calls.append(f"{var_name}.animate" + "".join(chain))
		calls.extend(extra)
		return calls

	#============================
	def _placement(self, obj: dict, move: bool = True) -> str:
		chain = ""
		if move:
			chain += f".move_to({utils.format_point(_number(obj, 'x', 0), _number(obj, 'y', 0))})"
		rotation = _number(obj, 'rotation', 0)
		if rotation != 0:
			chain += f".rotate({num(rotation)} * DEGREES)"
		z_index = _number(obj, 'zIndex', 0)
		if z_index != 0:
			chain += f".set_z_index({num(z_index)})"
		return chain

	#============================
	def _opacity_chain(self, obj: dict) -> str:
		opacity = _number(obj, 'opacity', 1)
		if opacity == 1:
			return ""
		return f".set_opacity({num(opacity)})"

	#============================
	def _shape_style(self, obj: dict, default_stroke: str = 'WHITE') -> list:
		opacity = _number(obj, 'opacity', 1)
		style = []
		fill = self.colors.normalize(obj.get('fill'))
		if colors_lib.is_hex_color(fill):
			style.append(f"fill_color={self.colors.to_script(fill)}")
			style.append(f"fill_opacity={num(opacity)}")
		else:
			style.append("fill_opacity=0")
		style.append(f"stroke_color={self.colors.to_script(obj.get('stroke'), default_stroke)}")
		style.append(f"stroke_width={num(_positive(obj, 'strokeWidth', 2))}")
		if opacity != 1:
			style.append(f"stroke_opacity={num(opacity)}")
		return style

	#============================
	def _stroke_style(self, obj: dict, default_stroke: str) -> list:
		style = [f"color={self.colors.to_script(obj.get('stroke'), default_stroke)}"]
		style.append(f"stroke_width={num(_positive(obj, 'strokeWidth', 2))}")
		return style

	#============================
	def _build_rectangle(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		args = [
			f"width={num(_positive(obj, 'width', 2))}",
			f"height={num(_positive(obj, 'height', 1))}",
		]
		args.extend(self._shape_style(obj))
		return [f"{var_name} = Rectangle({', '.join(args)}){self._placement(obj)}"]

	#============================
	def _build_circle(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		args = [f"radius={num(_positive(obj, 'radius', 1))}"]
		args.extend(self._shape_style(obj))
		return [f"{var_name} = Circle({', '.join(args)}){self._placement(obj)}"]

	#============================
	def _vertex_points(self, obj: dict, minimum: int):
		raw_vertices = obj.get('vertices')
		if not isinstance(raw_vertices, list) or len(raw_vertices) < minimum:
			return None
		x = _number(obj, 'x', 0)
		y = _number(obj, 'y', 0)
		points = []
		for vertex in raw_vertices:
			if not isinstance(vertex, dict):
				return None
			vx = vertex.get('x')
			vy = vertex.get('y')
			if not utils.is_number(vx) or not utils.is_number(vy):
				return None
			points.append(utils.format_point(x + vx, y + vy))
		return points

	#============================
	def _build_triangle(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		points = self._vertex_points(obj, 3)
		if points is None or len(points) != 3:
			x = _number(obj, 'x', 0)
			y = _number(obj, 'y', 0)
			points = [utils.format_point(x + vx, y + vy) for vx, vy in DEFAULT_TRIANGLE]
		args = points + self._shape_style(obj)
		return [f"{var_name} = Polygon({', '.join(args)}){self._placement(obj, move=False)}"]

	#============================
	def _build_polygon(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		points = self._vertex_points(obj, 3)
		if points is not None:
			args = points + self._shape_style(obj)
			return [f"{var_name} = Polygon({', '.join(args)}){self._placement(obj, move=False)}"]
		sides = int(_number(obj, 'sides', 6))
		if sides < 3:
			sides = 6
		sides = min(sides, schema.MAX_POLYGON_SIDES)
		args = [f"n={sides}", f"radius={num(_positive(obj, 'radius', 1))}"]
		args.extend(self._shape_style(obj))
		return [f"{var_name} = RegularPolygon({', '.join(args)}){self._placement(obj)}"]

	#============================
	def _build_dot(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		point = utils.format_point(_number(obj, 'x', 0), _number(obj, 'y', 0))
		args = [
			f"point={point}",
			f"radius={num(_positive(obj, 'radius', 0.1))}",
			f"color={self.colors.to_script(obj.get('fill'))}",
		]
		chain = self._opacity_chain(obj) + self._placement(obj, move=False)
		return [f"{var_name} = Dot({', '.join(args)}){chain}"]

	#============================
	def _endpoints(self, obj: dict) -> tuple:
		x = _number(obj, 'x', 0)
		y = _number(obj, 'y', 0)
		x2 = _number(obj, 'x2', x + 2)
		y2 = _number(obj, 'y2', y)
		return ((x, y), (x2, y2))

	#============================
	def _build_line(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		(start, end) = self._endpoints(obj)
		args = [utils.format_point(*start), utils.format_point(*end)]
		args.extend(self._stroke_style(obj, 'WHITE'))
		chain = self._opacity_chain(obj) + self._placement(obj, move=False)
		return [f"{var_name} = Line({', '.join(args)}){chain}"]

	#============================
	def _build_arrow(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		(start, end) = self._endpoints(obj)
		args = [utils.format_point(*start), utils.format_point(*end), "buff=0"]
		args.extend(self._stroke_style(obj, utils.python_string('#fbbf24')))
		chain = self._opacity_chain(obj) + self._placement(obj, move=False)
		return [f"{var_name} = Arrow({', '.join(args)}){chain}"]

	#============================
	def _build_arc(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		(p0, p2) = self._endpoints(obj)
		midpoint = (_number(obj, 'cx', p0[0] + 1), _number(obj, 'cy', p0[1] + 1))
		control = arc_control_point(p0, midpoint, p2)
		(c1, c2) = quadratic_to_cubic(p0, control, p2)
		args = [utils.format_point(*point) for point in (p0, c1, c2, p2)]
		args.extend(self._stroke_style(obj, 'WHITE'))
		chain = self._opacity_chain(obj) + self._placement(obj, move=False)
		return [f"{var_name} = CubicBezier({', '.join(args)}){chain}"]

	#============================
	def _build_text(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		text = obj.get('text')
		if not isinstance(text, str) or text == '':
			text = 'Text'
		args = [
			utils.python_string(text),
			f"font_size={num(_positive(obj, 'fontSize', 48))}",
			f"color={self.colors.to_script(obj.get('fill'))}",
		]
		chain = self._opacity_chain(obj) + self._placement(obj)
		return [f"{var_name} = Text({', '.join(args)}){chain}"]

	#============================
	def _build_latex(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		latex = obj.get('latex')
		if not isinstance(latex, str) or latex.strip() == '':
			latex = 'x'
		args = [utils.python_raw_string(latex), f"color={self.colors.to_script(obj.get('fill'))}"]
		chain = self._opacity_chain(obj) + self._placement(obj)
		return [f"{var_name} = MathTex({', '.join(args)}){chain}"]

	#============================
	def _group_line(self, obj: dict, var_name: str, parts: list, move: bool = False) -> str:
		chain = self._opacity_chain(obj) + self._placement(obj, move=move)
		return f"{var_name} = VGroup({', '.join(parts)}){chain}"

	#============================
	def _build_axes(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		x_range = _range(obj.get('xRange'), (-5, 5, 1))
		y_range = _range(obj.get('yRange'), (-3, 3, 1))
		include_ticks = 'False' if obj.get('showTicks') is False else 'True'
		color = self.colors.to_script(obj.get('stroke'))
		axes_var = f"{var_name}_axes"
		args = [
			f"x_range={_range_text(x_range)}",
			f"y_range={_range_text(y_range)}",
			f"x_length={num(_positive(obj, 'xLength', 8))}",
			f"y_length={num(_positive(obj, 'yLength', 4))}",
			f"axis_config={{\"color\": {color}, \"include_ticks\": {include_ticks}}}",
		]
		position = utils.format_point(_number(obj, 'x', 0), _number(obj, 'y', 0))
		statements = [f"{axes_var} = Axes({', '.join(args)}).move_to({position})"]
		parts = [axes_var]
		for key, method, default in (('xLabel', 'get_x_axis_label', 'x'),
			('yLabel', 'get_y_axis_label', 'y')):
			label = obj.get(key, default)
			if not isinstance(label, str) or label.strip() == '':
				continue
			label_var = f"{var_name}_{key[0]}_label"
			statements.append(f"{label_var} = {axes_var}.{method}({utils.python_raw_string(label)})")
			parts.append(label_var)
		statements.append(self._group_line(obj, var_name, parts))
		ctx.axes_refs[obj['id']] = axes_var
		return statements

	#============================
	def _build_graph(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		expression = formula_lib.translate_formula(linking.graph_formula(obj))
		if expression is None:
			return None
		color = self.colors.to_script(obj.get('stroke'), 'BLUE')
		stroke_width = num(_positive(obj, 'strokeWidth', 3))
		graph_range = _range(obj.get('xRange'), (-5, 5, 1))
		axes_ref = ctx.axes_ref_for(obj)
		if axes_ref is not None:
			axes_obj = ctx.links_for(obj)['axes']
			axes_range = _range(axes_obj.get('xRange'), (-5, 5, 1))
			low = max(graph_range[0], axes_range[0])
			high = min(graph_range[1], axes_range[1])
			if low >= high:
				(low, high) = (axes_range[0], axes_range[1])
			plot_args = [f"lambda x: {expression}", f"x_range={_range_text((low, high))}",
				f"color={color}", f"stroke_width={stroke_width}"]
			chain = self._opacity_chain(obj) + self._placement(obj, move=False)
			statement = f"{var_name} = {axes_ref}.plot({', '.join(plot_args)}){chain}"
			ctx.axes_refs[obj['id']] = axes_ref
			return [statement]
		# unlinked graphs draw on their own axes
		y_range = _range(obj.get('yRange'), (-5, 5, 1))
		axes_var = f"{var_name}_axes"
		curve_var = f"{var_name}_curve"
		position = utils.format_point(_number(obj, 'x', 0), _number(obj, 'y', 0))
		axes_args = [
			f"x_range={_range_text(graph_range)}",
			f"y_range={_range_text(y_range)}",
			f"x_length={num(_positive(obj, 'xLength', 8))}",
			f"y_length={num(_positive(obj, 'yLength', 4))}",
		]
		plot_args = [f"lambda x: {expression}", f"x_range={_range_text(graph_range[:2])}",
			f"color={color}", f"stroke_width={stroke_width}"]
		statements = [
			f"{axes_var} = Axes({', '.join(axes_args)}).move_to({position})",
			f"{curve_var} = {axes_var}.plot({', '.join(plot_args)})",
			self._group_line(obj, var_name, [axes_var, curve_var]),
		]
		ctx.axes_refs[obj['id']] = axes_var
		return statements

	#============================
	def _point_text(self, axes_ref, x: float, y: float) -> str:
		if axes_ref is None:
			return utils.format_point(x, y)
		return f"{axes_ref}.c2p({num(x)}, {num(y)})"

	#============================
	def _build_cursor(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		obj_links = ctx.links_for(obj)
		graph = obj_links['graph']
		color = self.colors.to_script(obj.get('fill'), 'RED')
		radius = num(_positive(obj, 'radius', 0.08))
		axes_ref = ctx.axes_ref_for(obj)
		if graph is None or axes_ref is None:
			# free cursor at its own position
			point = utils.format_point(_number(obj, 'x', 0), _number(obj, 'y', 0))
			chain = self._opacity_chain(obj) + self._placement(obj, move=False)
			return [f"{var_name} = Dot({point}, radius={radius}, color={color}){chain}"]
		point = linking.cursor_point(graph, obj)
		if point is None:
			return None
		(x0, y0) = point
		dot_args = [self._point_text(axes_ref, x0, y0), f"radius={radius}", f"color={color}"]
		if obj.get('showDot') is False:
			dot_args.append("fill_opacity=0")
		dot_text = f"Dot({', '.join(dot_args)})"
		extras = []
		if obj.get('showCrosshair') is True:
			extras.append((f"{var_name}_lines", f"{axes_ref}.get_lines_to_point("
				f"{self._point_text(axes_ref, x0, y0)}, color={color})"))
		if obj.get('showLabel') is True:
			label = utils.python_raw_string(f"({num(x0)}, {num(y0)})")
			extras.append((f"{var_name}_label", f"MathTex({label}, font_size=24, "
				f"color={color}).next_to({var_name}_dot, UR, buff=0.1)"))
		if len(extras) == 0:
			chain = self._opacity_chain(obj) + self._placement(obj, move=False)
			return [f"{var_name} = {dot_text}{chain}"]
		statements = [f"{var_name}_dot = {dot_text}"]
		parts = [f"{var_name}_dot"]
		for part_var, part_text in extras:
			statements.append(f"{part_var} = {part_text}")
			parts.append(part_var)
		statements.append(self._group_line(obj, var_name, parts))
		return statements

	#============================
	def _build_tangent(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		obj_links = ctx.links_for(obj)
		graph = obj_links['graph']
		if graph is None:
			return None
		graph_formula = linking.graph_formula(graph)
		x0 = linking.anchor_x(obj, obj_links['cursor'])
		step = _positive(obj, 'derivativeStep', 0.001)
		segment = linking.tangent_segment(graph_formula, x0,
			_positive(obj, 'visibleSpan', 2), step)
		if segment is None:
			return None
		axes_ref = ctx.axes_ref_for(obj)
		args = [self._point_text(axes_ref, *segment[0]), self._point_text(axes_ref, *segment[1])]
		args.extend(self._stroke_style(obj, utils.python_string('#eab308')))
		line_text = f"Line({', '.join(args)})"
		slope = formula_lib.derivative(graph_formula, x0, step)
		if obj.get('showSlopeLabel') is not True or math.isnan(slope):
			chain = self._opacity_chain(obj) + self._placement(obj, move=False)
			return [f"{var_name} = {line_text}{chain}"]
		color = self.colors.to_script(obj.get('stroke'), utils.python_string('#eab308'))
		label = utils.python_raw_string(f"m = {slope:.3f}")
		return [
			f"{var_name}_line = {line_text}",
			f"{var_name}_label = MathTex({label}, font_size=24, color={color})"
			f".next_to({var_name}_line, UP, buff=0.1)",
			self._group_line(obj, var_name, [f"{var_name}_line", f"{var_name}_label"]),
		]

	#============================
	def _delta_schedule(self, obj: dict) -> list:
		raw = obj.get('deltaSchedule')
		if not isinstance(raw, list):
			return list(linking.DEFAULT_DELTA_SCHEDULE)
		deltas = [value for value in raw if utils.is_number(value) and value != 0]
		if len(deltas) == 0:
			return list(linking.DEFAULT_DELTA_SCHEDULE)
		return deltas

	#============================
	def _build_limit_probe(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		obj_links = ctx.links_for(obj)
		graph = obj_links['graph']
		if graph is None:
			return None
		graph_formula = linking.graph_formula(graph)
		x0 = linking.anchor_x(obj, obj_links['cursor'])
		direction = obj.get('direction')
		if direction not in ('left', 'right', 'both'):
			direction = 'both'
		points = linking.limit_points(graph_formula, x0, direction, self._delta_schedule(obj))
		if len(points) == 0:
			return None
		axes_ref = ctx.axes_ref_for(obj)
		color = self.colors.to_script(obj.get('fill'), 'GREEN')
		radius = num(_positive(obj, 'radius', 0.06))
		dots = [f"Dot({self._point_text(axes_ref, point['x'], point['y'])}, "
			f"radius={radius}, color={color})" for point in points]
		readout = None
		if obj.get('showReadout') is not False:
			readout = self._limit_readout(graph_formula, x0)
		if readout is None:
			return [self._group_line(obj, var_name, dots)]
		return [
			f"{var_name}_points = VGroup({', '.join(dots)})",
			f"{var_name}_readout = MathTex({utils.python_raw_string(readout)}, "
			f"font_size=24, color={color}).next_to({var_name}_points, UP, buff=0.2)",
			self._group_line(obj, var_name, [f"{var_name}_points", f"{var_name}_readout"]),
		]

	#============================
	def _limit_readout(self, graph_formula: str, x0: float):
		estimate = linking.estimate_limit(graph_formula, x0)
		if estimate['exists']:
			return f"\\lim f(x) = {estimate['limit']:.3f}"
		sides = []
		if not math.isnan(estimate['left_value']):
			sides.append(f"L = {estimate['left_value']:.3f}")
		if not math.isnan(estimate['right_value']):
			sides.append(f"R = {estimate['right_value']:.3f}")
		if len(sides) == 0:
			return None
		return ",\\ ".join(sides)

	#============================
	def _build_value_label(self, obj: dict, var_name: str, ctx: SceneContext) -> list:
		obj_links = ctx.links_for(obj)
		text = linking.label_text(obj, obj_links['graph'], obj_links['cursor'])
		if text == '':
			return None
		args = [
			utils.python_string(text),
			f"font_size={num(_positive(obj, 'fontSize', 24))}",
			f"color={self.colors.to_script(obj.get('fill'))}",
		]
		position = utils.format_point(_number(obj, 'x', 0), _number(obj, 'y', 0))
		text_line = f"Text({', '.join(args)}).move_to({position})"
		if obj.get('showBackground') is False:
			chain = self._opacity_chain(obj) + self._placement(obj, move=False)
			return [f"{var_name} = {text_line}{chain}"]
		background = self.colors.to_script(obj.get('backgroundFill'), 'BLACK')
		background_opacity = utils.coerce_number(obj.get('backgroundOpacity'), 0.6)
		background_opacity = min(1, max(0, background_opacity))
		return [
			f"{var_name}_text = {text_line}",
			f"{var_name}_panel = BackgroundRectangle({var_name}_text, color={background}, "
			f"fill_opacity={num(background_opacity)}, buff=0.1)",
			self._group_line(obj, var_name, [f"{var_name}_panel", f"{var_name}_text"]),
		]

#============================================

def emit(project: dict, active_scene_id: str = None) -> str:
	return ScriptEmitter().emit(project, active_scene_id)
