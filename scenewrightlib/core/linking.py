#!/usr/bin/env python3

"""
Link resolution for the math-graph object family.

Axes are referenced by graphs, graphs by cursors, and cursors or graphs by
tangent lines, limit probes and value labels. A reference that is missing
or points at the wrong type resolves to None and the object renders unlinked.
"""

import math
from scenewrightlib.core import formula as formula_lib
from scenewrightlib.core import utils

#============================================

LINKED_TYPES = ('graph', 'graphCursor', 'tangentLine', 'limitProbe', 'valueLabel')
DERIVED_TYPES = ('tangentLine', 'limitProbe', 'valueLabel')
DEFAULT_DELTA_SCHEDULE = (1, 0.5, 0.1, 0.01)

#============================================

def _index_objects(objects: list) -> dict:
	index = {}
	for obj in objects:
		if not isinstance(obj, dict):
			continue
		obj_id = obj.get('id')
		if isinstance(obj_id, str) and obj_id not in index:
			index[obj_id] = obj
	return index

#============================================

def _lookup(index: dict, ref_id, obj_type: str, owner_id=None):
	if not isinstance(ref_id, str) or ref_id == '' or ref_id == owner_id:
		return None
	target = index.get(ref_id)
	if target is None or target.get('type') != obj_type:
		return None
	return target

#============================================

def resolve_links(objects: list) -> dict:
	"""
	Resolve axes, graph and cursor references for every linked object.

	Args:
		objects: Scene object list.

	Returns:
		dict: object id -> {'axes': obj or None, 'graph': obj or None,
		'cursor': obj or None}
	"""
	index = _index_objects(objects)
	links = {}
	# graphs first, cursors next, derived objects last so inheritance sees
	# the resolved parents
	for pass_types in (('graph',), ('graphCursor',), DERIVED_TYPES):
		for obj in index.values():
			obj_type = obj.get('type')
			if obj_type not in pass_types:
				continue
			owner_id = obj.get('id')
			axes = _lookup(index, obj.get('axesId'), 'axes', owner_id)
			graph = None
			cursor = None
			if obj_type == 'graphCursor':
				graph = _lookup(index, obj.get('graphId'), 'graph', owner_id)
			elif obj_type in DERIVED_TYPES:
				cursor = _lookup(index, obj.get('cursorId'), 'graphCursor', owner_id)
				graph = _lookup(index, obj.get('graphId'), 'graph', owner_id)
				if graph is None and cursor is not None:
					graph = links[cursor['id']]['graph']
			if axes is None and graph is not None:
				axes = links[graph['id']]['axes']
			if axes is None and cursor is not None:
				axes = links[cursor['id']]['axes']
			links[owner_id] = {'axes': axes, 'graph': graph, 'cursor': cursor}
	return links

#============================================

def emission_order(objects: list, links: dict = None) -> list:
	"""
	Order objects so every object follows the objects it references.

	Objects without references keep their list order.
	"""
	if links is None:
		links = resolve_links(objects)
	ordered = []
	placed = set()
	visiting = set()

	def visit(obj):
		key = id(obj)
		if key in placed or key in visiting:
			return
		visiting.add(key)
		obj_links = links.get(obj.get('id'), {})
		for link_name in ('axes', 'graph', 'cursor'):
			parent = obj_links.get(link_name)
			if parent is not None:
				visit(parent)
		visiting.discard(key)
		placed.add(key)
		ordered.append(obj)

	for obj in objects:
		if isinstance(obj, dict):
			visit(obj)
	return ordered

#============================================

def graph_formula(graph: dict) -> str:
	if graph is None:
		return None
	value = graph.get('formula')
	if not isinstance(value, str) or value.strip() == '':
		return 'x^2'
	return value

#============================================

def anchor_x(obj: dict, cursor: dict = None) -> float:
	"""
	Return the x value a cursor-driven object is anchored at.
	"""
	if cursor is not None:
		return utils.coerce_number(cursor.get('x0'), 0)
	return utils.coerce_number(obj.get('x0'), 0)

#============================================

def cursor_point(graph: dict, cursor: dict):
	"""
	Project a cursor onto its graph.

	Returns:
		tuple or None: (x0, f(x0)), or None when f is undefined at x0.
	"""
	if graph is None or cursor is None:
		return None
	x0 = utils.coerce_number(cursor.get('x0'), 0)
	y0 = formula_lib.evaluate(graph_formula(graph), x0)
	if math.isnan(y0):
		return None
	return (x0, y0)

#============================================

def tangent_segment(formula, x0: float, visible_span: float = 2, h: float = 0.001):
	"""
	Endpoints of the tangent line at x0, extending visible_span each way.

	When the slope is undefined the segment is horizontal at f(x0). When f
	itself is undefined at x0 there is no segment and None is returned.
	"""
	y0 = formula_lib.evaluate(formula, x0)
	if math.isnan(y0):
		return None
	slope = formula_lib.derivative(formula, x0, h)
	x1 = x0 - visible_span
	x2 = x0 + visible_span
	if math.isnan(slope):
		return ((x1, y0), (x2, y0))
	y1 = y0 + slope * (x1 - x0)
	y2 = y0 + slope * (x2 - x0)
	return ((x1, y1), (x2, y2))

#============================================

def limit_points(formula, x0: float, direction: str = 'both',
	delta_schedule=None) -> list:
	if delta_schedule is None:
		delta_schedule = DEFAULT_DELTA_SCHEDULE
	sides = []
	if direction in ('left', 'both'):
		sides.append(('left', -1))
	if direction in ('right', 'both'):
		sides.append(('right', 1))
	points = []
	for side, sign in sides:
		for delta in delta_schedule:
			if not utils.is_number(delta):
				continue
			offset = sign * abs(delta)
			x = x0 + offset
			y = formula_lib.evaluate(formula, x)
			if math.isnan(y):
				continue
			points.append({'x': x, 'y': y, 'delta': offset, 'direction': side})
	return points

#============================================

def estimate_limit(formula, x0: float, min_delta: float = 0.0001) -> dict:
	left_value = formula_lib.evaluate(formula, x0 - min_delta)
	right_value = formula_lib.evaluate(formula, x0 + min_delta)
	left_valid = not math.isnan(left_value)
	right_valid = not math.isnan(right_value)
	if not left_valid and not right_valid:
		return {'limit': math.nan, 'left_value': math.nan,
			'right_value': math.nan, 'exists': False}
	if left_valid and right_valid:
		exists = abs(left_value - right_value) < 0.01
		limit = (left_value + right_value) / 2 if exists else math.nan
		return {'limit': limit, 'left_value': left_value,
			'right_value': right_value, 'exists': exists}
	limit = left_value if left_valid else right_value
	return {'limit': limit, 'left_value': left_value,
		'right_value': right_value, 'exists': False}

#============================================

def label_value(label: dict, graph: dict, cursor: dict):
	"""
	Numeric value shown by a value label, or None when it cannot be computed.
	"""
	value_type = label.get('valueType', 'slope')
	if cursor is None:
		return None
	x0 = utils.coerce_number(cursor.get('x0'), 0)
	if value_type == 'x':
		return x0
	if graph is None:
		return None
	if value_type == 'y':
		value = formula_lib.evaluate(graph_formula(graph), x0)
	elif value_type == 'slope':
		step = utils.coerce_number(label.get('derivativeStep'), 0.001)
		value = formula_lib.derivative(graph_formula(graph), x0, step)
	else:
		return None
	if math.isnan(value):
		return None
	return value

#============================================

def label_text(label: dict, graph: dict, cursor: dict) -> str:
	prefix = label.get('labelPrefix') or ''
	suffix = label.get('labelSuffix') or ''
	value_type = label.get('valueType', 'slope')
	if value_type == 'custom':
		expression = label.get('customExpression')
		if isinstance(expression, str) and expression != '':
			return expression
		return prefix
	value = label_value(label, graph, cursor)
	if value is None:
		return prefix
	if value_type == 'x':
		return f"{prefix}{value:.2f}{suffix}"
	return f"{prefix}{value:.3f}{suffix}"

#============================================

def linking_status(obj: dict) -> dict:
	"""
	Report which links an object still needs.

	Returns:
		dict: needs_link, missing_links, eligible_targets
	"""
	missing_links = []
	eligible_targets = []
	if not isinstance(obj, dict):
		return {'needs_link': False, 'missing_links': [], 'eligible_targets': []}
	obj_type = obj.get('type')
	graph_id = obj.get('graphId')
	cursor_id = obj.get('cursorId')
	if obj_type == 'graphCursor':
		if not graph_id:
			missing_links.append('graphId')
			eligible_targets.append('graph')
	elif obj_type == 'tangentLine':
		if not cursor_id and not graph_id:
			missing_links.extend(['cursorId', 'graphId'])
			eligible_targets.extend(['graphCursor', 'graph'])
		elif not cursor_id:
			missing_links.append('cursorId')
			eligible_targets.append('graphCursor')
	elif obj_type == 'limitProbe':
		if not graph_id:
			missing_links.append('graphId')
			eligible_targets.extend(['graph', 'graphCursor'])
		elif not cursor_id:
			missing_links.append('cursorId')
			eligible_targets.append('graphCursor')
	elif obj_type == 'valueLabel':
		# links are optional for labels
		if not graph_id and not cursor_id:
			eligible_targets.extend(['graph', 'graphCursor'])
		elif graph_id and not cursor_id and obj.get('valueType') == 'slope':
			eligible_targets.append('graphCursor')
	return {
		'needs_link': len(missing_links) > 0,
		'missing_links': missing_links,
		'eligible_targets': eligible_targets,
	}
