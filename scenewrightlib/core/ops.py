#!/usr/bin/env python3

"""
Apply small structural edit operations to a project.

Operations come from unreliable producers, so a bad operation is skipped
with a warning instead of stopping the batch. The result always goes back
through the validator.
"""

import copy
import json
import math
from scenewrightlib.core import colors as colors_lib
from scenewrightlib.core import schema
from scenewrightlib.core import utils

#============================================

OPERATION_TYPES = (
	'addObject',
	'updateObject',
	'deleteObject',
	'addKeyframe',
	'setSceneDuration',
	'renameScene',
	'addScene',
	'deleteScene',
)

SNAKE_CASE_TYPES = {
	'add_object': 'addObject',
	'update_object': 'updateObject',
	'delete_object': 'deleteObject',
	'add_keyframe': 'addKeyframe',
	'set_scene_duration': 'setSceneDuration',
	'rename_scene': 'renameScene',
	'add_scene': 'addScene',
	'delete_scene': 'deleteScene',
}

# alias -> canonical key, applied only when the canonical key is absent
PROPERTY_ALIASES = (
	('fillColor', 'fill'),
	('color', 'fill'),
	('strokeColor', 'stroke'),
	('borderColor', 'stroke'),
	('fillOpacity', 'opacity'),
)

OUTLINED_TYPES = ('circle', 'rectangle', 'triangle', 'polygon')

#============================================

def normalize_object_props(props: dict, colors: colors_lib.ColorTable = None) -> dict:
	"""
	Fold alternate property names into fill, stroke and opacity and resolve
	named colors to hex.

	Args:
		props: Object properties or a partial update.
		colors: Color table used for named colors.

	Returns:
		dict: New dict; the input is not modified.
	"""
	if colors is None:
		colors = colors_lib.DEFAULT_COLORS
	if not isinstance(props, dict):
		return props
	result = dict(props)
	for alias, canonical in PROPERTY_ALIASES:
		if alias not in result:
			continue
		value = result.pop(alias)
		if canonical not in result:
			result[canonical] = value
	result.pop('strokeOpacity', None)
	for key in ('fill', 'stroke', 'backgroundFill'):
		if isinstance(result.get(key), str):
			result[key] = colors.normalize(result[key])
	return result

#============================================

def _regular_vertices(sides: int, radius: float) -> list:
	vertices = []
	for index in range(sides):
		angle = 2 * math.pi * index / sides - math.pi / 2
		vertices.append({
			'x': round(radius * math.cos(angle), 6),
			'y': round(radius * math.sin(angle), 6),
		})
	return vertices

#============================================

def apply_type_defaults(obj: dict) -> dict:
	"""
	Fill the type-specific defaults of a new object in place.
	"""
	obj_type = obj.get('type')
	x = utils.coerce_number(obj.get('x'), 0)
	y = utils.coerce_number(obj.get('y'), 0)
	if obj_type in ('circle', 'dot'):
		obj.setdefault('radius', 0.1 if obj_type == 'dot' else 1)
	elif obj_type == 'rectangle':
		obj.setdefault('width', 2)
		obj.setdefault('height', 1)
	elif obj_type in ('line', 'arrow'):
		obj.setdefault('x2', x + 2)
		obj.setdefault('y2', y)
		if not obj.get('stroke'):
			obj['stroke'] = '#fbbf24' if obj_type == 'arrow' else '#ffffff'
		obj.setdefault('strokeWidth', 3)
	elif obj_type == 'text':
		if not obj.get('text'):
			obj['text'] = 'Text'
		obj.setdefault('fontSize', 48)
		obj.setdefault('width', 2)
		obj.setdefault('height', 0.8)
	elif obj_type == 'latex':
		if not obj.get('latex'):
			obj['latex'] = 'x'
	elif obj_type == 'triangle':
		if not obj.get('vertices'):
			obj['vertices'] = [{'x': 0, 'y': 1}, {'x': -0.866, 'y': -0.5},
				{'x': 0.866, 'y': -0.5}]
	elif obj_type == 'axes':
		if not obj.get('xRange'):
			obj['xRange'] = {'min': -5, 'max': 5, 'step': 1}
		if not obj.get('yRange'):
			obj['yRange'] = {'min': -3, 'max': 3, 'step': 1}
		obj.setdefault('xLength', 8)
		obj.setdefault('yLength', 4)
		obj.setdefault('showTicks', True)
		obj.setdefault('xLabel', 'x')
		obj.setdefault('yLabel', 'y')
		if not obj.get('stroke'):
			obj['stroke'] = '#ffffff'
		obj.setdefault('strokeWidth', 2)
	elif obj_type == 'graph':
		obj.setdefault('formula', 'x^2')
		if not obj.get('xRange'):
			obj['xRange'] = {'min': -5, 'max': 5}
		if not obj.get('yRange'):
			obj['yRange'] = {'min': -5, 'max': 5}
		if not obj.get('stroke'):
			obj['stroke'] = '#3b82f6'
		obj.setdefault('strokeWidth', 2)
	elif obj_type == 'graphCursor':
		obj.setdefault('x0', 0)
		if not obj.get('fill'):
			obj['fill'] = '#ef4444'
		obj.setdefault('radius', 0.08)
		obj.setdefault('showDot', True)
		obj.setdefault('showCrosshair', False)
		obj.setdefault('showLabel', False)
	elif obj_type == 'tangentLine':
		obj.setdefault('x0', 0)
		obj.setdefault('derivativeStep', 0.001)
		obj.setdefault('visibleSpan', 2)
		if not obj.get('stroke'):
			obj['stroke'] = '#eab308'
		obj.setdefault('strokeWidth', 2)
	elif obj_type == 'limitProbe':
		obj.setdefault('x0', 0)
		obj.setdefault('direction', 'both')
		if not obj.get('deltaSchedule'):
			obj['deltaSchedule'] = [1, 0.5, 0.1, 0.01]
		if not obj.get('fill'):
			obj['fill'] = '#22c55e'
		obj.setdefault('radius', 0.06)
	elif obj_type == 'valueLabel':
		obj.setdefault('valueType', 'slope')
		obj.setdefault('fontSize', 24)
		if not obj.get('fill'):
			obj['fill'] = '#ffffff'
		obj.setdefault('showBackground', True)
		obj.setdefault('backgroundFill', '#000000')
		obj.setdefault('backgroundOpacity', 0.6)
	elif obj_type == 'polygon':
		if not obj.get('vertices') and not obj.get('sides'):
			obj['sides'] = 6
		sides = obj.get('sides')
		if utils.is_number(sides) and sides > schema.MAX_POLYGON_SIDES:
			raise RuntimeError(f"polygon sides must be at most {schema.MAX_POLYGON_SIDES}")
		if not obj.get('vertices') and utils.is_number(sides) and sides >= 3:
			radius = utils.coerce_number(obj.get('radius'), 1) or 1
			obj['vertices'] = _regular_vertices(int(sides), radius)
	elif obj_type == 'arc':
		obj.setdefault('x2', x + 2)
		obj.setdefault('y2', y)
		obj.setdefault('cx', x + 1)
		obj.setdefault('cy', y + 1)
		if not obj.get('stroke'):
			obj['stroke'] = '#ffffff'
		obj.setdefault('strokeWidth', 2)
	if obj_type in OUTLINED_TYPES:
		if not obj.get('stroke'):
			obj['stroke'] = '#ffffff'
		obj.setdefault('strokeWidth', 2)
	return obj

#============================================

def _describe(raw_op) -> str:
	try:
		return json.dumps(raw_op, sort_keys=True, default=str)
	except ValueError:
		return repr(raw_op)

#============================================

class OperationApplier():
	"""
	Apply operations to one deep copy of a project.

	Args:
		project: Project dict; it is copied, never modified.
		default_scene_id: Scene used by operations without a sceneId.
		colors: Color table used when normalizing properties.
	"""
	def __init__(self, project: dict, default_scene_id: str = None,
		colors: colors_lib.ColorTable = None):
		if colors is None:
			colors = colors_lib.DEFAULT_COLORS
		# validate_project works on its own deep copy
		self.project = schema.validate_project(project)
		self.default_scene_id = default_scene_id
		self.colors = colors
		self.warnings = []
		self.handlers = {
			'addObject': self._add_object,
			'updateObject': self._update_object,
			'deleteObject': self._delete_object,
			'addKeyframe': self._add_keyframe,
			'setSceneDuration': self._set_scene_duration,
			'renameScene': self._rename_scene,
			'addScene': self._add_scene,
			'deleteScene': self._delete_scene,
		}

	#============================
	def apply(self, operations) -> tuple:
		if not isinstance(operations, list):
			self.warnings.append("operations must be a list")
			return (schema.validate_project(self.project), self.warnings)
		for raw_op in operations:
			if not isinstance(raw_op, dict):
				self.warnings.append(f"skipped invalid operation: {_describe(raw_op)}")
				continue
			op = dict(raw_op)
			op_type = SNAKE_CASE_TYPES.get(op.get('type'), op.get('type'))
			if op_type not in OPERATION_TYPES:
				self.warnings.append(f"skipped invalid operation: {_describe(raw_op)}")
				continue
			try:
				self.handlers[op_type](op)
			except RuntimeError as error:
				self.warnings.append(f"operation {op_type} skipped: {error}")
		return (schema.validate_project(self.project), self.warnings)

	#============================
	def _scene(self, op: dict) -> dict:
		scene_id = op.get('sceneId') or self.default_scene_id
		if scene_id is None:
			return self.project['scenes'][0]
		for scene in self.project['scenes']:
			if scene['id'] == scene_id:
				return scene
		raise RuntimeError(f"scene not found: {scene_id}")

	#============================
	def _find_object(self, scene: dict, object_id) -> int:
		if not isinstance(object_id, str) or object_id == '':
			raise RuntimeError("objectId is required")
		for index, obj in enumerate(scene['objects']):
			if obj.get('id') == object_id:
				return index
		raise RuntimeError(f"object not found: {object_id}")

	#============================
	def _add_object(self, op: dict) -> None:
		scene = self._scene(op)
		raw_object = op.get('object')
		if not isinstance(raw_object, dict):
			raise RuntimeError("object is required")
		obj = normalize_object_props(copy.deepcopy(raw_object), self.colors)
		obj_type = obj.get('type')
		if obj_type not in schema.OBJECT_TYPES:
			raise RuntimeError(f"unknown object type: {obj_type}")
		existing_ids = set(item.get('id') for item in scene['objects'])
		obj_id = obj.get('id')
		if not isinstance(obj_id, str) or obj_id == '':
			obj['id'] = schema.new_id()
		elif obj_id in existing_ids:
			obj['id'] = schema.new_id()
			self.warnings.append(f"object id {obj_id} already exists; assigned {obj['id']}")
		if 'name' not in obj:
			count = len([item for item in scene['objects'] if item.get('type') == obj_type])
			obj['name'] = f"{obj_type[0].upper()}{obj_type[1:]} {count + 1}"
		for key, value in schema.base_object(obj_type).items():
			if key == 'keyframes':
				if not isinstance(obj.get('keyframes'), list):
					obj['keyframes'] = []
			elif key not in obj:
				obj[key] = value
		apply_type_defaults(obj)
		scene['objects'].append(obj)

	#============================
	def _update_object(self, op: dict) -> None:
		scene = self._scene(op)
		updates = op.get('updates')
		if not isinstance(updates, dict):
			raise RuntimeError("updates is required")
		index = self._find_object(scene, op.get('objectId'))
		normalized = normalize_object_props(copy.deepcopy(updates), self.colors)
		normalized.pop('id', None)
		scene['objects'][index].update(normalized)

	#============================
	def _delete_object(self, op: dict) -> None:
		scene = self._scene(op)
		index = self._find_object(scene, op.get('objectId'))
		del scene['objects'][index]

	#============================
	def _add_keyframe(self, op: dict) -> None:
		scene = self._scene(op)
		index = self._find_object(scene, op.get('objectId'))
		time_value = utils.coerce_number(op.get('time'), None)
		if time_value is None or time_value < 0:
			raise RuntimeError("time must be a non-negative number")
		prop = op.get('property')
		if not isinstance(prop, str) or prop == '':
			raise RuntimeError("property is required")
		obj = scene['objects'][index]
		keyframes = obj.get('keyframes') if isinstance(obj.get('keyframes'), list) else []
		keyframes = [kf for kf in keyframes if not (isinstance(kf, dict)
			and kf.get('time') == time_value and kf.get('property') == prop)]
		keyframes.append({'time': time_value, 'property': prop, 'value': op.get('value')})
		keyframes.sort(key=lambda kf: utils.coerce_number(kf.get('time'), 0)
			if isinstance(kf, dict) else 0)
		obj['keyframes'] = keyframes

	#============================
	def _set_scene_duration(self, op: dict) -> None:
		scene = self._scene(op)
		duration = utils.coerce_number(op.get('duration'), None)
		if duration is None or duration <= 0:
			raise RuntimeError("duration must be a positive number")
		scene['duration'] = duration

	#============================
	def _rename_scene(self, op: dict) -> None:
		name = op.get('name')
		if not isinstance(op.get('sceneId'), str):
			raise RuntimeError("sceneId is required")
		if not isinstance(name, str) or name.strip() == '':
			raise RuntimeError("name is required")
		scene = self._scene(op)
		scene['name'] = name

	#============================
	def _add_scene(self, op: dict) -> None:
		name = op.get('name')
		if not isinstance(name, str) or name.strip() == '':
			name = f"Scene {len(self.project['scenes']) + 1}"
		scene = schema.create_empty_scene(name.strip())
		duration = op.get('duration')
		if utils.is_number(duration) and duration > 0:
			scene['duration'] = duration
		self.project['scenes'].append(scene)

	#============================
	def _delete_scene(self, op: dict) -> None:
		scene_id = op.get('sceneId')
		if not isinstance(scene_id, str):
			raise RuntimeError("sceneId is required")
		if len(self.project['scenes']) <= 1:
			raise RuntimeError("cannot delete the last scene")
		scene = self._scene(op)
		self.project['scenes'].remove(scene)

#============================================

def apply_operations(project: dict, operations, default_scene_id: str = None,
	colors: colors_lib.ColorTable = None) -> tuple:
	"""
	Apply operations and return (project, warnings).
	"""
	applier = OperationApplier(project, default_scene_id, colors)
	return applier.apply(operations)
