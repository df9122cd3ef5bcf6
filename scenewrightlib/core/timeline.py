#!/usr/bin/env python3

"""
Timeline semantics: which objects are visible at a time, and the ordered
batches of animation calls that realize a scene's timing metadata.
"""

from scenewrightlib.core import utils

#============================================

ENTRANCE_ANIMATIONS = (
	'Create',
	'FadeIn',
	'GrowFromCenter',
	'Write',
	'DrawBorderThenFill',
	'SpinInFromNothing',
)

EXIT_ANIMATIONS = (
	'FadeOut',
	'Uncreate',
	'Unwrite',
	'ShrinkToCenter',
)

TRANSFORM_ANIMATIONS = (
	'Transform',
	'ReplacementTransform',
	'FadeTransform',
	'TransformMatchingShapes',
	'TransformMatchingTex',
	'ClockwiseTransform',
	'CounterclockwiseTransform',
)

# after these the target mobject is the one left on screen
REPLACEMENT_TRANSFORMS = (
	'ReplacementTransform',
	'FadeTransform',
	'TransformMatchingShapes',
	'TransformMatchingTex',
)

DEFAULT_ENTRANCES = {
	'text': 'Write',
	'latex': 'Write',
	'circle': 'GrowFromCenter',
	'dot': 'GrowFromCenter',
	'graphCursor': 'GrowFromCenter',
	'polygon': 'DrawBorderThenFill',
	'triangle': 'DrawBorderThenFill',
	'valueLabel': 'FadeIn',
}

NUMERIC_KEYFRAME_PROPERTIES = ('x', 'y', 'opacity', 'rotation', 'scale')
COLOR_KEYFRAME_PROPERTIES = ('fill', 'stroke')

EDIT_RUN_TIME = 0.5
EXIT_RUN_TIME = 0.5

#============================================

def _delay(obj: dict) -> float:
	return max(0, utils.coerce_number(obj.get('delay'), 0))

#============================================

def _run_time(obj: dict) -> float:
	return max(0.1, utils.coerce_number(obj.get('runTime'), 1))

#============================================

def has_transform(obj: dict) -> bool:
	source_id = obj.get('transformFromId')
	return isinstance(source_id, str) and source_id != ''

#============================================

def active_objects(objects: list, t: float) -> list:
	"""
	Objects visible at time t.

	An object is active once its delay is reached and, unless it transforms
	from another object, until delay + runTime. A transform source stays
	hidden from the moment the transforming object's delay is reached.

	Args:
		objects: Scene object list.
		t: Scene time in seconds.

	Returns:
		list: Active objects in list order.
	"""
	replaced = set()
	for obj in objects:
		if has_transform(obj) and t >= _delay(obj):
			replaced.add(obj['transformFromId'])
	active = []
	for obj in objects:
		delay = _delay(obj)
		if t < delay:
			continue
		if not has_transform(obj) and t >= delay + _run_time(obj):
			continue
		if obj.get('id') in replaced:
			continue
		active.append(obj)
	return active

#============================================

def variable_names(objects: list) -> dict:
	"""
	Map object ids to script variable names, obj_<index> or target_<index>.
	"""
	names = {}
	for index, obj in enumerate(objects):
		obj_id = obj.get('id')
		if obj_id in names:
			continue
		if has_transform(obj):
			names[obj_id] = f"target_{index}"
		else:
			names[obj_id] = f"obj_{index}"
	return names

#============================================

def entrance_animation(obj: dict) -> str:
	requested = obj.get('animationType')
	if requested in ENTRANCE_ANIMATIONS:
		return requested
	return DEFAULT_ENTRANCES.get(obj.get('type'), 'Create')

#============================================

def exit_animation(obj: dict) -> str:
	requested = obj.get('exitAnimationType')
	if requested in EXIT_ANIMATIONS:
		return requested
	return 'FadeOut'

#============================================

def transform_animation(obj: dict) -> str:
	requested = obj.get('transformType')
	if requested in TRANSFORM_ANIMATIONS:
		return requested
	return 'Transform'

#============================================

def _keyframe_value(prop: str, value):
	if prop in NUMERIC_KEYFRAME_PROPERTIES:
		number = utils.coerce_number(value, None)
		return number
	if prop in COLOR_KEYFRAME_PROPERTIES:
		if isinstance(value, str) and value.strip() != '':
			return value
	return None

#============================================

class EventScheduler():
	"""
	Turn object timing metadata into ordered batches.

	Each batch is a dict with time, wait, creations, transforms,
	keyframe_edits, exits and duration. wait is the gap between the clock
	and the batch time; duration is how long the batch's calls run.
	"""
	def __init__(self, objects: list, names: dict = None):
		self.objects = [obj for obj in objects if isinstance(obj, dict)]
		if names is None:
			names = variable_names(self.objects)
		self.names = names
		self.object_ids = set(obj.get('id') for obj in self.objects)
		self.current = {}
		self.replaced = set()
		self.rotations = {}

	#============================
	def _events(self) -> dict:
		events = {}
		for obj in self.objects:
			if obj.get('id') not in self.names:
				continue
			delay = _delay(obj)
			events.setdefault(delay, []).append(('enter', obj, None))
			if not has_transform(obj):
				exit_time = delay + _run_time(obj)
				events.setdefault(exit_time, []).append(('exit', obj, None))
			for keyframe in obj.get('keyframes') or []:
				if not isinstance(keyframe, dict):
					continue
				time_value = utils.coerce_number(keyframe.get('time'), None)
				if time_value is None or time_value < 0:
					continue
				events.setdefault(time_value, []).append(('keyframe', obj, keyframe))
		return events

	#============================
	def _is_transform_entry(self, obj: dict) -> bool:
		if not has_transform(obj):
			return False
		return obj['transformFromId'] in self.object_ids

	#============================
	def _enter(self, obj: dict, batch: dict) -> None:
		obj_id = obj['id']
		if obj_id in self.replaced:
			# an earlier transform already took this object's place
			return
		var_name = self.names[obj_id]
		self.rotations[obj_id] = utils.coerce_number(obj.get('rotation'), 0)
		if not self._is_transform_entry(obj):
			self.current[obj_id] = var_name
			batch['creations'].append({
				'id': obj_id,
				'var': var_name,
				'animation': entrance_animation(obj),
				'run_time': _run_time(obj),
			})
			return
		source_id = obj['transformFromId']
		source_var = self.current.get(source_id, self.names.get(source_id))
		animation = transform_animation(obj)
		batch['transforms'].append({
			'id': obj_id,
			'source_id': source_id,
			'source_var': source_var,
			'target_var': var_name,
			'animation': animation,
			'run_time': _run_time(obj),
		})
		self.replaced.add(source_id)
		if animation in REPLACEMENT_TRANSFORMS:
			for other_id, other_var in list(self.current.items()):
				if other_var == source_var:
					self.current[other_id] = var_name
			self.current[source_id] = var_name
			self.current[obj_id] = var_name
		else:
			self.current[obj_id] = source_var

	#============================
	def _keyframe_edits(self, keyframe_events: list, active_ids: set) -> list:
		grouped = {}
		order = []
		for obj, keyframe in keyframe_events:
			obj_id = obj['id']
			if obj_id not in active_ids or obj_id in self.replaced:
				continue
			if obj_id not in self.current:
				continue
			prop = keyframe.get('property')
			value = _keyframe_value(prop, keyframe.get('value'))
			if value is None:
				continue
			edit = {'property': prop, 'value': value}
			if prop == 'rotation':
				edit['delta'] = value - self.rotations.get(obj_id, 0)
				self.rotations[obj_id] = value
			if obj_id not in grouped:
				grouped[obj_id] = []
				order.append(obj_id)
			grouped[obj_id].append(edit)
		edits = []
		for obj_id in order:
			edits.append({
				'id': obj_id,
				'var': self.current[obj_id],
				'edits': grouped[obj_id],
			})
		return edits

	#============================
	def _exit(self, obj: dict, batch: dict) -> None:
		obj_id = obj['id']
		if obj_id in self.replaced or obj_id not in self.current:
			return
		batch['exits'].append({
			'id': obj_id,
			'var': self.current[obj_id],
			'animation': exit_animation(obj),
			'run_time': EXIT_RUN_TIME,
		})

	#============================
	def schedule(self) -> list:
		self.current = {}
		self.replaced = set()
		self.rotations = {}
		events = self._events()
		batches = []
		clock = 0.0
		for time_value in sorted(events.keys()):
			batch = {
				'time': time_value,
				'wait': 0.0,
				'creations': [],
				'transforms': [],
				'keyframe_edits': [],
				'exits': [],
				'duration': 0.0,
			}
			keyframe_events = []
			for kind, obj, keyframe in events[time_value]:
				if kind == 'enter':
					self._enter(obj, batch)
				elif kind == 'keyframe':
					keyframe_events.append((obj, keyframe))
			active_ids = set(obj.get('id') for obj in active_objects(self.objects, time_value))
			batch['keyframe_edits'] = self._keyframe_edits(keyframe_events, active_ids)
			for kind, obj, keyframe in events[time_value]:
				if kind == 'exit':
					self._exit(obj, batch)
			duration = 0.0
			if len(batch['creations']) > 0:
				duration += max(item['run_time'] for item in batch['creations'])
			if len(batch['transforms']) > 0:
				duration += max(item['run_time'] for item in batch['transforms'])
			if len(batch['keyframe_edits']) > 0:
				duration += EDIT_RUN_TIME
			if len(batch['exits']) > 0:
				duration += EXIT_RUN_TIME
			if duration == 0:
				continue
			batch['wait'] = max(0.0, time_value - clock)
			batch['duration'] = duration
			clock = max(clock, time_value) + duration
			batches.append(batch)
		return batches

#============================================

def schedule(objects: list, names: dict = None) -> list:
	return EventScheduler(objects, names).schedule()

#============================================

def schedule_end(batches: list) -> float:
	"""
	Scene time at which the last batch finishes.
	"""
	clock = 0.0
	for batch in batches:
		clock = max(clock, batch['time']) + batch['duration']
	return clock
