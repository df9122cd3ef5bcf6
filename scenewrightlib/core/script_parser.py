#!/usr/bin/env python3

"""
Best-effort reverse parse of Manim script text into addObject operations.

Each logical statement is parsed on its own. An assignment whose right-hand
side starts with a known constructor creates an object; chained and later
standalone method calls on that variable mutate it in source order. An
object with any argument or mutation that cannot be read with confidence is
dropped rather than guessed.
"""

import ast
import math
from scenewrightlib.core import colors as colors_lib
from scenewrightlib.core import schema

#============================================

DIRECTIONS = {
	'ORIGIN': (0.0, 0.0, 0.0),
	'UP': (0.0, 1.0, 0.0),
	'DOWN': (0.0, -1.0, 0.0),
	'LEFT': (-1.0, 0.0, 0.0),
	'RIGHT': (1.0, 0.0, 0.0),
	'UL': (-1.0, 1.0, 0.0),
	'UR': (1.0, 1.0, 0.0),
	'DL': (-1.0, -1.0, 0.0),
	'DR': (1.0, -1.0, 0.0),
	'IN': (0.0, 0.0, -1.0),
	'OUT': (0.0, 0.0, 1.0),
}

CONSTANTS = {
	'PI': math.pi,
	'TAU': math.tau,
	'DEGREES': math.pi / 180,
}

CONSTRUCTOR_TYPES = {
	'Circle': 'circle',
	'Square': 'rectangle',
	'Rectangle': 'rectangle',
	'Line': 'line',
	'DashedLine': 'line',
	'Arrow': 'arrow',
	'Dot': 'dot',
	'Text': 'text',
	'MathTex': 'latex',
	'Tex': 'latex',
	'Axes': 'axes',
	'Triangle': 'triangle',
	'RegularPolygon': 'polygon',
	'Polygon': 'polygon',
	'CubicBezier': 'arc',
}

# calls that place an object relative to something this parser cannot see
RELATIVE_PLACEMENT = ('next_to', 'to_edge', 'to_corner', 'align_to', 'arrange',
	'match_x', 'match_y', 'surround')

LINE_TYPES = ('line', 'arrow', 'arc')
COLOR_FILL_TYPES = ('text', 'latex', 'dot')
TRIANGLE_VERTICES = ((0, 1), (-0.866, -0.5), (0.866, -0.5))

#============================================

def _bracket_delta(line: str) -> int:
	depth = 0
	quote = None
	escaped = False
	for char in line:
		if quote is not None:
			if escaped:
				escaped = False
			elif char == '\\':
				escaped = True
			elif char == quote:
				quote = None
			continue
		if char in ('"', "'"):
			quote = char
		elif char == '#':
			break
		elif char in '([{':
			depth += 1
		elif char in ')]}':
			depth -= 1
	return depth

#============================================

def logical_lines(text: str) -> list:
	"""
	Split script text into statements, joining bracket and backslash
	continuations.
	"""
	statements = []
	buffer = []
	depth = 0
	for raw_line in text.splitlines():
		stripped = raw_line.strip()
		continued = stripped.endswith('\\')
		if continued:
			stripped = stripped[:-1].rstrip()
		buffer.append(stripped)
		depth = max(0, depth + _bracket_delta(stripped))
		if depth > 0 or continued:
			continue
		statement = ' '.join(part for part in buffer if part != '')
		if statement != '':
			statements.append(statement)
		buffer = []
	if len(buffer) > 0:
		statement = ' '.join(part for part in buffer if part != '')
		if statement != '':
			statements.append(statement)
	return statements

#============================================

def _vector_add(left: tuple, right: tuple, sign: float = 1.0) -> tuple:
	return tuple(a + sign * b for a, b in zip(left, right))

#============================================

def evaluate_expression(node):
	"""
	Evaluate a numeric or vector expression node.

	Supports numbers, direction constants, PI, TAU, DEGREES, lists, tuples,
	np.array([...]) and + - * / between them.

	Raises:
		ValueError: for anything else.
	"""
	if isinstance(node, ast.Constant):
		if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
			try:
				return float(node.value)
			except OverflowError:
				raise ValueError("number out of range")
		raise ValueError("not a number")
	if isinstance(node, ast.Name):
		if node.id in DIRECTIONS:
			return DIRECTIONS[node.id]
		if node.id in CONSTANTS:
			return CONSTANTS[node.id]
		raise ValueError(f"unknown name {node.id}")
	if isinstance(node, ast.Attribute):
		if isinstance(node.value, ast.Name) and node.value.id == 'np' and node.attr == 'pi':
			return math.pi
		raise ValueError("unknown attribute")
	if isinstance(node, (ast.List, ast.Tuple)):
		values = [evaluate_expression(item) for item in node.elts]
		if len(values) not in (2, 3) or any(isinstance(v, tuple) for v in values):
			raise ValueError("points need two or three numbers")
		if len(values) == 2:
			values.append(0.0)
		return tuple(values)
	if isinstance(node, ast.Call):
		func = node.func
		if (isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name)
			and func.value.id == 'np' and func.attr == 'array'
			and len(node.args) == 1 and len(node.keywords) == 0):
			value = evaluate_expression(node.args[0])
			if not isinstance(value, tuple):
				raise ValueError("np.array needs a point")
			return value
		raise ValueError("unsupported call")
	if isinstance(node, ast.UnaryOp):
		value = evaluate_expression(node.operand)
		if isinstance(node.op, ast.UAdd):
			return value
		if isinstance(node.op, ast.USub):
			if isinstance(value, tuple):
				return tuple(-v for v in value)
			return -value
		raise ValueError("unsupported unary operator")
	if isinstance(node, ast.BinOp):
		left = evaluate_expression(node.left)
		right = evaluate_expression(node.right)
		left_vector = isinstance(left, tuple)
		right_vector = isinstance(right, tuple)
		if isinstance(node.op, (ast.Add, ast.Sub)):
			sign = 1.0 if isinstance(node.op, ast.Add) else -1.0
			if left_vector and right_vector:
				return _vector_add(left, right, sign)
			if not left_vector and not right_vector:
				return left + sign * right
			raise ValueError("cannot add a number to a point")
		if isinstance(node.op, ast.Mult):
			if left_vector and right_vector:
				raise ValueError("cannot multiply two points")
			if left_vector:
				return tuple(v * right for v in left)
			if right_vector:
				return tuple(v * left for v in right)
			return left * right
		if isinstance(node.op, ast.Div):
			if right_vector:
				raise ValueError("cannot divide by a point")
			if right == 0:
				raise ValueError("division by zero")
			if left_vector:
				return tuple(v / right for v in left)
			return left / right
	raise ValueError("unsupported expression")

#============================================

def _scalar(node) -> float:
	value = evaluate_expression(node)
	if isinstance(value, tuple) or not math.isfinite(value):
		raise ValueError("expected a number")
	return value

#============================================

def _point(node) -> tuple:
	value = evaluate_expression(node)
	if not isinstance(value, tuple) or not all(math.isfinite(v) for v in value):
		raise ValueError("expected a point")
	return (value[0], value[1])

#============================================

def _all_finite(value) -> bool:
	if isinstance(value, float):
		return math.isfinite(value)
	if isinstance(value, dict):
		return all(_all_finite(item) for item in value.values())
	if isinstance(value, (list, tuple)):
		return all(_all_finite(item) for item in value)
	return True

#============================================

def _string(node) -> str:
	if isinstance(node, ast.Constant) and isinstance(node.value, str):
		return node.value
	raise ValueError("expected a string literal")

#============================================

def _call_arguments(call: ast.Call) -> tuple:
	for arg in call.args:
		if isinstance(arg, ast.Starred):
			raise ValueError("starred arguments")
	kwargs = {}
	for keyword in call.keywords:
		if keyword.arg is None:
			raise ValueError("keyword unpacking")
		kwargs[keyword.arg] = keyword.value
	return (list(call.args), kwargs)

#============================================

def _call_chain(node):
	"""
	Split a.b(...).c(...) into its base and calls.

	Returns:
		tuple or None: ('call', [(name, call), ...]) when the base is a
		function call, ('var', name, [(method, call), ...]) when the base
		is a variable, otherwise None.
	"""
	calls = []
	while isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
		calls.append((node.func.attr, node))
		node = node.func.value
	if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
		calls.append((node.func.id, node))
		calls.reverse()
		return ('call', calls)
	if isinstance(node, ast.Name) and len(calls) > 0:
		calls.reverse()
		return ('var', node.id, calls)
	return None

#============================================

class ScriptParser():
	"""
	Recognize constructor assignments and mutation calls in script text.

	Args:
		colors: Color lookup table used to map constants back to hex.
	"""
	def __init__(self, colors: colors_lib.ColorTable = None):
		if colors is None:
			colors = colors_lib.DEFAULT_COLORS
		self.colors = colors
		self.recognizers = {
			'circle': self._recognize_circle,
			'rectangle': self._recognize_rectangle,
			'line': self._recognize_line,
			'arrow': self._recognize_line,
			'dot': self._recognize_dot,
			'text': self._recognize_text,
			'latex': self._recognize_latex,
			'axes': self._recognize_axes,
			'triangle': self._recognize_triangle,
			'polygon': self._recognize_polygon,
			'arc': self._recognize_arc,
		}
		self.methods = {
			'move_to': self._apply_move_to,
			'shift': self._apply_shift,
			'set_x': self._apply_set_x,
			'set_y': self._apply_set_y,
			'center': self._apply_center,
			'set_color': self._apply_set_color,
			'set_fill': self._apply_set_fill,
			'set_stroke': self._apply_set_stroke,
			'set_opacity': self._apply_set_opacity,
			'scale': self._apply_scale,
			'rotate': self._apply_rotate,
			'set_z_index': self._apply_set_z_index,
		}

	#============================
	def parse(self, text) -> list:
		"""
		Parse script text into addObject operations.

		Args:
			text: Script source.

		Returns:
			list: {'type': 'addObject', 'object': {...}} in source order.
		"""
		if not isinstance(text, str):
			return []
		entries = []
		tracked = {}
		for statement in logical_lines(text):
			if statement.startswith('#'):
				continue
			try:
				tree = ast.parse(statement)
			except (SyntaxError, ValueError, RecursionError):
				continue
			if len(tree.body) != 1:
				continue
			node = tree.body[0]
			if (isinstance(node, ast.Assign) and len(node.targets) == 1
				and isinstance(node.targets[0], ast.Name)):
				self._handle_assignment(node.targets[0].id, node.value, entries, tracked)
			elif isinstance(node, ast.Expr):
				self._handle_expression(node.value, tracked)
		operations = []
		for entry in entries:
			if entry['object'] is None:
				continue
			# mutations can still push a value past float range
			if not _all_finite(entry['object']):
				continue
			operations.append({'type': 'addObject', 'object': self._finish(entry)})
		return operations

	#============================
	def _handle_assignment(self, var_name: str, value, entries: list, tracked: dict) -> None:
		chain = _call_chain(value)
		if chain is None or chain[0] != 'call' or chain[1][0][0] not in CONSTRUCTOR_TYPES:
			# the name no longer refers to an object we know
			tracked.pop(var_name, None)
			return
		calls = chain[1]
		entry = {'name': var_name, 'object': None}
		try:
			obj = self._construct(calls[0][0], calls[0][1])
			for method, call in calls[1:]:
				self._mutate(obj, method, call)
			entry['object'] = obj
		except (ValueError, RecursionError):
			entry['object'] = None
		entries.append(entry)
		tracked[var_name] = entry

	#============================
	def _handle_expression(self, value, tracked: dict) -> None:
		chain = _call_chain(value)
		if chain is None or chain[0] != 'var':
			return
		entry = tracked.get(chain[1])
		if entry is None or entry['object'] is None:
			return
		try:
			for method, call in chain[2]:
				self._mutate(entry['object'], method, call)
		except (ValueError, RecursionError):
			entry['object'] = None

	#============================
	def _construct(self, constructor: str, call: ast.Call) -> dict:
		obj_type = CONSTRUCTOR_TYPES[constructor]
		(args, kwargs) = _call_arguments(call)
		obj = {'type': obj_type, 'x': 0.0, 'y': 0.0}
		self.recognizers[obj_type](obj, constructor, args, kwargs)
		self._apply_style(obj, kwargs)
		return obj

	#============================
	def _finish(self, entry: dict) -> dict:
		parsed = entry['object']
		obj = schema.base_object(parsed['type'])
		obj['name'] = entry['name']
		for key, value in parsed.items():
			obj[key] = _tidy(value)
		if 'fill' not in obj and 'stroke' not in obj:
			obj['stroke'] = '#ffffff'
			obj.setdefault('strokeWidth', 2)
		return obj

	#============================
	def _color(self, node) -> str:
		if isinstance(node, ast.Constant) and isinstance(node.value, str):
			resolved = self.colors.from_script(repr(node.value))
		elif isinstance(node, ast.Name):
			resolved = self.colors.from_script(node.id)
		else:
			resolved = None
		if resolved is None:
			raise ValueError("unreadable color")
		return resolved

	#============================
	def _apply_color(self, obj: dict, color: str) -> None:
		obj_type = obj['type']
		if obj_type in LINE_TYPES:
			obj['stroke'] = color
		elif obj_type in COLOR_FILL_TYPES:
			obj['fill'] = color
		else:
			obj['stroke'] = color
			if 'fill' in obj:
				obj['fill'] = color

	#============================
	def _apply_style(self, obj: dict, kwargs: dict) -> None:
		fill_opacity = None
		if 'fill_opacity' in kwargs:
			fill_opacity = _opacity(_scalar(kwargs['fill_opacity']))
		if 'color' in kwargs:
			color = self._color(kwargs['color'])
			self._apply_color(obj, color)
			if obj['type'] not in LINE_TYPES and fill_opacity:
				obj['fill'] = color
		if 'fill_color' in kwargs:
			obj['fill'] = self._color(kwargs['fill_color'])
		if 'stroke_color' in kwargs:
			obj['stroke'] = self._color(kwargs['stroke_color'])
		if 'stroke_width' in kwargs:
			obj['strokeWidth'] = _positive(_scalar(kwargs['stroke_width']))
		if fill_opacity is not None and ('fill' in obj or obj['type'] in COLOR_FILL_TYPES):
			obj['opacity'] = fill_opacity
		if 'stroke_opacity' in kwargs and 'fill' not in obj:
			obj['opacity'] = _opacity(_scalar(kwargs['stroke_opacity']))

	#============================
	def _recognize_circle(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) > 1:
			raise ValueError("unexpected positional arguments")
		radius = args[0] if len(args) == 1 else kwargs.get('radius')
		obj['radius'] = 1.0 if radius is None else _positive(_scalar(radius))

	#============================
	def _recognize_rectangle(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if constructor == 'Square':
			if len(args) > 1:
				raise ValueError("unexpected positional arguments")
			side = args[0] if len(args) == 1 else kwargs.get('side_length')
			size = 2.0 if side is None else _positive(_scalar(side))
			obj['width'] = size
			obj['height'] = size
			return
		if len(args) > 0:
			raise ValueError("positional rectangle arguments are ambiguous")
		width = kwargs.get('width')
		height = kwargs.get('height')
		obj['width'] = 4.0 if width is None else _positive(_scalar(width))
		obj['height'] = 2.0 if height is None else _positive(_scalar(height))

	#============================
	def _recognize_line(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) > 2:
			raise ValueError("unexpected positional arguments")
		start_node = args[0] if len(args) > 0 else kwargs.get('start')
		end_node = args[1] if len(args) > 1 else kwargs.get('end')
		start = (-1.0, 0.0) if start_node is None else _point(start_node)
		end = (1.0, 0.0) if end_node is None else _point(end_node)
		(obj['x'], obj['y']) = start
		(obj['x2'], obj['y2']) = end

	#============================
	def _recognize_dot(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) > 1:
			raise ValueError("unexpected positional arguments")
		point_node = args[0] if len(args) == 1 else kwargs.get('point')
		if point_node is not None:
			(obj['x'], obj['y']) = _point(point_node)
		radius = kwargs.get('radius')
		obj['radius'] = 0.08 if radius is None else _positive(_scalar(radius))

	#============================
	def _recognize_text(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) != 1:
			raise ValueError("Text needs exactly one string")
		obj['text'] = _string(args[0])
		font_size = kwargs.get('font_size')
		obj['fontSize'] = 48.0 if font_size is None else _positive(_scalar(font_size))

	#============================
	def _recognize_latex(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) == 0:
			raise ValueError("MathTex needs a string")
		parts = [_string(arg) for arg in args]
		separator = ' ' if constructor == 'MathTex' else ''
		obj['latex'] = separator.join(parts)
		if 'font_size' in kwargs:
			raise ValueError("latex objects carry no size")

	#============================
	def _recognize_axes(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) > 0:
			raise ValueError("positional axes arguments are ambiguous")
		for key, model_key in (('x_range', 'xRange'), ('y_range', 'yRange')):
			if key not in kwargs:
				continue
			node = kwargs[key]
			if not isinstance(node, (ast.List, ast.Tuple)) or len(node.elts) not in (2, 3):
				raise ValueError(f"unreadable {key}")
			values = [_scalar(item) for item in node.elts]
			axis_range = {'min': values[0], 'max': values[1]}
			if len(values) == 3:
				axis_range['step'] = values[2]
			obj[model_key] = axis_range
		for key, model_key in (('x_length', 'xLength'), ('y_length', 'yLength')):
			if key in kwargs:
				obj[model_key] = _positive(_scalar(kwargs[key]))
		config = kwargs.get('axis_config')
		if config is None:
			return
		if not isinstance(config, ast.Dict):
			raise ValueError("unreadable axis_config")
		for key_node, value_node in zip(config.keys, config.values):
			key = _string(key_node)
			if key == 'color':
				obj['stroke'] = self._color(value_node)
			elif key == 'include_ticks':
				if not isinstance(value_node, ast.Constant) or not isinstance(value_node.value, bool):
					raise ValueError("unreadable include_ticks")
				obj['showTicks'] = value_node.value

	#============================
	def _set_vertices(self, obj: dict, points: list) -> None:
		center_x = sum(point[0] for point in points) / len(points)
		center_y = sum(point[1] for point in points) / len(points)
		obj['x'] = center_x
		obj['y'] = center_y
		obj['vertices'] = [{'x': point[0] - center_x, 'y': point[1] - center_y}
			for point in points]

	#============================
	def _recognize_triangle(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) > 0:
			raise ValueError("unexpected positional arguments")
		obj['vertices'] = [{'x': vx, 'y': vy} for vx, vy in TRIANGLE_VERTICES]

	#============================
	def _recognize_polygon(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if constructor == 'RegularPolygon':
			if len(args) > 1:
				raise ValueError("unexpected positional arguments")
			sides_node = args[0] if len(args) == 1 else kwargs.get('n')
			sides = 6.0 if sides_node is None else _scalar(sides_node)
			if sides < 3 or sides > schema.MAX_POLYGON_SIDES or not float(sides).is_integer():
				raise ValueError("polygon sides out of range")
			obj['sides'] = int(sides)
			radius = kwargs.get('radius')
			obj['radius'] = 1.0 if radius is None else _positive(_scalar(radius))
			return
		if len(args) < 3:
			raise ValueError("Polygon needs at least three vertices")
		points = [_point(arg) for arg in args]
		if len(points) == 3:
			obj['type'] = 'triangle'
		self._set_vertices(obj, points)

	#============================
	def _recognize_arc(self, obj: dict, constructor: str, args: list, kwargs: dict) -> None:
		if len(args) != 4:
			raise ValueError("CubicBezier needs four points")
		(p0, c1, c2, p2) = [_point(arg) for arg in args]
		# a quadratic in cubic form has both handles pointing at the same Q
		q_start = (p0[0] + 1.5 * (c1[0] - p0[0]), p0[1] + 1.5 * (c1[1] - p0[1]))
		q_end = (p2[0] + 1.5 * (c2[0] - p2[0]), p2[1] + 1.5 * (c2[1] - p2[1]))
		if abs(q_start[0] - q_end[0]) > 1e-3 or abs(q_start[1] - q_end[1]) > 1e-3:
			raise ValueError("cubic curve is not a quadratic arc")
		q = ((q_start[0] + q_end[0]) / 2, (q_start[1] + q_end[1]) / 2)
		(obj['x'], obj['y']) = p0
		(obj['x2'], obj['y2']) = p2
		obj['cx'] = (q[0] + (p0[0] + p2[0]) / 2) / 2
		obj['cy'] = (q[1] + (p0[1] + p2[1]) / 2) / 2

	#============================
	def _mutate(self, obj: dict, method: str, call: ast.Call) -> None:
		if method in RELATIVE_PLACEMENT:
			raise ValueError(f"{method} depends on other objects")
		handler = self.methods.get(method)
		if handler is None:
			raise ValueError(f"unsupported call {method}")
		(args, kwargs) = _call_arguments(call)
		handler(obj, args, kwargs)

	#============================
	def _center(self, obj: dict) -> tuple:
		if obj['type'] in ('line', 'arrow'):
			return ((obj['x'] + obj['x2']) / 2, (obj['y'] + obj['y2']) / 2)
		return (obj['x'], obj['y'])

	#============================
	def _translate(self, obj: dict, dx: float, dy: float) -> None:
		obj['x'] += dx
		obj['y'] += dy
		for x_key, y_key in (('x2', 'y2'), ('cx', 'cy')):
			if x_key in obj:
				obj[x_key] += dx
				obj[y_key] += dy

	#============================
	def _apply_move_to(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("move_to takes one point")
		if obj['type'] == 'arc':
			raise ValueError("arc centers are not tracked")
		target = _point(args[0])
		center = self._center(obj)
		self._translate(obj, target[0] - center[0], target[1] - center[1])

	#============================
	def _apply_shift(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) == 0 or len(kwargs) > 0:
			raise ValueError("shift takes vectors")
		total = (0.0, 0.0)
		for arg in args:
			vector = _point(arg)
			total = (total[0] + vector[0], total[1] + vector[1])
		self._translate(obj, total[0], total[1])

	#============================
	def _apply_set_x(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("set_x takes one number")
		value = _scalar(args[0])
		self._translate(obj, value - self._center(obj)[0], 0.0)

	#============================
	def _apply_set_y(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("set_y takes one number")
		value = _scalar(args[0])
		self._translate(obj, 0.0, value - self._center(obj)[1])

	#============================
	def _apply_center(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) > 0 or len(kwargs) > 0:
			raise ValueError("center takes no arguments")
		if obj['type'] == 'arc':
			raise ValueError("arc centers are not tracked")
		center = self._center(obj)
		self._translate(obj, -center[0], -center[1])

	#============================
	def _apply_set_color(self, obj: dict, args: list, kwargs: dict) -> None:
		node = args[0] if len(args) == 1 else kwargs.get('color')
		if node is None or len(args) > 1:
			raise ValueError("set_color takes one color")
		self._apply_color(obj, self._color(node))

	#============================
	def _apply_set_fill(self, obj: dict, args: list, kwargs: dict) -> None:
		color_node = args[0] if len(args) > 0 else kwargs.get('color')
		opacity_node = args[1] if len(args) > 1 else kwargs.get('opacity')
		if len(args) > 2:
			raise ValueError("unexpected positional arguments")
		if color_node is not None:
			obj['fill'] = self._color(color_node)
		if opacity_node is not None:
			obj['opacity'] = _opacity(_scalar(opacity_node))

	#============================
	def _apply_set_stroke(self, obj: dict, args: list, kwargs: dict) -> None:
		color_node = args[0] if len(args) > 0 else kwargs.get('color')
		width_node = args[1] if len(args) > 1 else kwargs.get('width')
		if len(args) > 2 or 'opacity' in kwargs:
			raise ValueError("stroke opacity is not tracked separately")
		if color_node is not None:
			obj['stroke'] = self._color(color_node)
		if width_node is not None:
			obj['strokeWidth'] = _positive(_scalar(width_node))

	#============================
	def _apply_set_opacity(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("set_opacity takes one number")
		obj['opacity'] = _opacity(_scalar(args[0]))

	#============================
	def _apply_scale(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("scale takes one factor")
		factor = _positive(_scalar(args[0]))
		obj_type = obj['type']
		if obj_type in ('circle', 'dot') or (obj_type == 'polygon' and 'vertices' not in obj):
			obj['radius'] *= factor
		elif obj_type == 'rectangle':
			obj['width'] *= factor
			obj['height'] *= factor
		elif obj_type in ('triangle', 'polygon'):
			for vertex in obj['vertices']:
				vertex['x'] *= factor
				vertex['y'] *= factor
		elif obj_type == 'text':
			obj['fontSize'] *= factor
		elif obj_type in ('line', 'arrow'):
			(center_x, center_y) = self._center(obj)
			obj['x'] = center_x + (obj['x'] - center_x) * factor
			obj['y'] = center_y + (obj['y'] - center_y) * factor
			obj['x2'] = center_x + (obj['x2'] - center_x) * factor
			obj['y2'] = center_y + (obj['y2'] - center_y) * factor
		elif obj_type == 'axes':
			obj['xLength'] = obj.get('xLength', 8) * factor
			obj['yLength'] = obj.get('yLength', 4) * factor
		else:
			raise ValueError(f"cannot scale {obj_type}")

	#============================
	def _apply_rotate(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("rotate takes one angle")
		angle = _scalar(args[0])
		obj['rotation'] = obj.get('rotation', 0) + math.degrees(angle)

	#============================
	def _apply_set_z_index(self, obj: dict, args: list, kwargs: dict) -> None:
		if len(args) != 1 or len(kwargs) > 0:
			raise ValueError("set_z_index takes one number")
		obj['zIndex'] = _scalar(args[0])

#============================================

def _positive(value: float) -> float:
	if value <= 0:
		raise ValueError("expected a positive number")
	return value

#============================================

def _opacity(value: float) -> float:
	if value < 0 or value > 1:
		raise ValueError("opacity must be within 0..1")
	return value

#============================================

def _tidy(value):
	if isinstance(value, float):
		rounded = round(value, 6)
		if rounded.is_integer():
			return int(rounded)
		return rounded
	if isinstance(value, list):
		return [_tidy(item) for item in value]
	if isinstance(value, dict):
		return {key: _tidy(item) for key, item in value.items()}
	return value

#============================================

def parse_script(text, colors: colors_lib.ColorTable = None) -> list:
	return ScriptParser(colors).parse(text)
