#!/usr/bin/env python3

"""
Project model defaults and the repairing validator.

The model is plain JSON-shaped data: dicts and lists with camelCase keys.
validate_project() never raises; it repairs what it can and drops the rest.
"""

import copy
import uuid
from scenewrightlib.core import utils

#============================================

SCHEMA_VERSION = '1.0.0'

OBJECT_TYPES = (
	'rectangle',
	'triangle',
	'circle',
	'polygon',
	'dot',
	'line',
	'arrow',
	'arc',
	'text',
	'latex',
	'axes',
	'graph',
	'graphCursor',
	'tangentLine',
	'limitProbe',
	'valueLabel',
)

DEFAULT_SETTINGS = {
	'width': 1920,
	'height': 1080,
	'fps': 30,
	'backgroundColor': '#1a1a2e',
}

DEFAULT_SCENE_DURATION = 5
MIN_RUN_TIME = 0.1
MAX_POLYGON_SIDES = 64

#============================================

def new_id() -> str:
	return str(uuid.uuid4())

#============================================

def create_empty_scene(name: str = 'New Scene') -> dict:
	return {
		'id': new_id(),
		'name': name,
		'duration': DEFAULT_SCENE_DURATION,
		'objects': [],
		'animations': [],
	}

#============================================

def create_empty_project() -> dict:
	return {
		'version': SCHEMA_VERSION,
		'name': 'Untitled Project',
		'settings': dict(DEFAULT_SETTINGS),
		'scenes': [create_empty_scene('Scene 1')],
	}

#============================================

def base_object(obj_type: str) -> dict:
	"""
	Attributes every freshly authored object carries.
	"""
	return {
		'id': new_id(),
		'type': obj_type,
		'name': obj_type,
		'x': 0,
		'y': 0,
		'rotation': 0,
		'opacity': 1,
		'zIndex': 0,
		'keyframes': [],
		'runTime': 1,
		'delay': 0,
		'animationType': 'auto',
		'exitAnimationType': 'FadeOut',
	}

#============================================

def _parse_time_or(value, default: float) -> float:
	if value is None:
		return default
	try:
		return utils.parse_timecode(value)
	except RuntimeError:
		return default

#============================================

def _validate_settings(raw_settings) -> dict:
	settings = {}
	if isinstance(raw_settings, dict):
		settings.update(raw_settings)
	for key in ('width', 'height', 'fps'):
		value = utils.coerce_number(settings.get(key), DEFAULT_SETTINGS[key])
		if value <= 0:
			value = DEFAULT_SETTINGS[key]
		settings[key] = value
	background = settings.get('backgroundColor')
	if not isinstance(background, str) or background.strip() == '':
		settings['backgroundColor'] = DEFAULT_SETTINGS['backgroundColor']
	return settings

#============================================

def _validate_keyframes(raw_keyframes) -> list:
	if not isinstance(raw_keyframes, list):
		return []
	keyframes = []
	for raw in raw_keyframes:
		if not isinstance(raw, dict):
			continue
		prop = raw.get('property')
		if not isinstance(prop, str) or prop == '':
			continue
		time_value = _parse_time_or(raw.get('time'), None)
		if time_value is None or time_value < 0:
			continue
		keyframe = dict(raw)
		keyframe['time'] = time_value
		# same (time, property) pair: the later entry replaces the earlier one
		keyframes = [kf for kf in keyframes
			if not (kf['time'] == time_value and kf['property'] == prop)]
		keyframes.append(keyframe)
	keyframes.sort(key=lambda kf: kf['time'])
	return keyframes

#============================================

def _validate_object(raw: dict) -> dict:
	obj = dict(raw)
	obj_id = obj.get('id')
	if not isinstance(obj_id, str) or obj_id.strip() == '':
		obj['id'] = new_id()
	obj['x'] = utils.coerce_number(obj.get('x'), 0)
	obj['y'] = utils.coerce_number(obj.get('y'), 0)
	obj['rotation'] = utils.coerce_number(obj.get('rotation'), 0)
	opacity = utils.coerce_number(obj.get('opacity'), 1)
	obj['opacity'] = min(1, max(0, opacity))
	if 'zIndex' in obj:
		obj['zIndex'] = utils.coerce_number(obj.get('zIndex'), 0)
	obj['delay'] = max(0, _parse_time_or(obj.get('delay'), 0))
	obj['runTime'] = max(MIN_RUN_TIME, _parse_time_or(obj.get('runTime'), 1))
	obj['keyframes'] = _validate_keyframes(obj.get('keyframes'))
	return obj

#============================================

def _strip_transform(obj: dict) -> None:
	obj.pop('transformFromId', None)
	obj.pop('transformType', None)

#============================================

def _repair_transforms(objects: list) -> None:
	by_id = {obj['id']: obj for obj in objects}
	for obj in objects:
		if 'transformFromId' not in obj:
			continue
		source_id = obj.get('transformFromId')
		if not isinstance(source_id, str) or source_id not in by_id:
			_strip_transform(obj)
		elif source_id == obj['id']:
			_strip_transform(obj)
	for obj in objects:
		source_id = obj.get('transformFromId')
		seen = set()
		while isinstance(source_id, str) and source_id not in seen:
			if source_id == obj['id']:
				_strip_transform(obj)
				break
			seen.add(source_id)
			source_id = by_id[source_id].get('transformFromId')

#============================================

def _validate_scene(raw_scene: dict, used_ids: set) -> dict:
	scene = dict(raw_scene)
	scene_id = scene.get('id')
	if not isinstance(scene_id, str) or scene_id.strip() == '' or scene_id in used_ids:
		scene['id'] = new_id()
	used_ids.add(scene['id'])
	name = scene.get('name')
	if not isinstance(name, str) or name.strip() == '':
		scene['name'] = 'Untitled Scene'
	duration = _parse_time_or(scene.get('duration'), DEFAULT_SCENE_DURATION)
	if duration <= 0:
		duration = DEFAULT_SCENE_DURATION
	scene['duration'] = duration
	if not isinstance(scene.get('animations'), list):
		scene['animations'] = []
	raw_objects = scene.get('objects')
	if not isinstance(raw_objects, list):
		raw_objects = []
	objects = []
	object_ids = set()
	for raw in raw_objects:
		if not isinstance(raw, dict) or raw.get('type') not in OBJECT_TYPES:
			continue
		obj = _validate_object(raw)
		if obj['id'] in object_ids:
			continue
		object_ids.add(obj['id'])
		objects.append(obj)
	_repair_transforms(objects)
	scene['objects'] = objects
	return scene

#============================================

def validate_project(raw) -> dict:
	"""
	Repair a project so it satisfies the model invariants.

	Args:
		raw: Anything; usually a dict loaded from JSON or YAML.

	Returns:
		dict: A structurally valid project. The input is not modified.
	"""
	if not isinstance(raw, dict):
		return create_empty_project()
	project = copy.deepcopy(raw)
	version = project.get('version')
	if not isinstance(version, str) or version == '':
		project['version'] = SCHEMA_VERSION
	name = project.get('name')
	if not isinstance(name, str) or name.strip() == '':
		project['name'] = 'Untitled Project'
	project['settings'] = _validate_settings(project.get('settings'))
	raw_scenes = project.get('scenes')
	if not isinstance(raw_scenes, list):
		raw_scenes = []
	scenes = []
	used_ids = set()
	for raw_scene in raw_scenes:
		if isinstance(raw_scene, dict):
			scenes.append(_validate_scene(raw_scene, used_ids))
	if len(scenes) == 0:
		scenes.append(create_empty_scene('Scene 1'))
	project['scenes'] = scenes
	return project

#============================================

def find_scene(project: dict, scene_ref):
	"""
	Find a scene by id, falling back to a name match.
	"""
	if scene_ref is None:
		return None
	for scene in project.get('scenes', []):
		if scene.get('id') == scene_ref:
			return scene
	for scene in project.get('scenes', []):
		if scene.get('name') == scene_ref:
			return scene
	return None
