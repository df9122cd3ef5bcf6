#!/usr/bin/env python3

"""
Sanity checks run on a scene before it is exported.
"""

import math
from scenewrightlib.core import formula as formula_lib
from scenewrightlib.core import linking

#============================================

LINK_TYPES = {
	'axesId': 'axes',
	'graphId': 'graph',
	'cursorId': 'graphCursor',
}

#============================================

def _label(obj: dict) -> str:
	name = obj.get('name')
	if isinstance(name, str) and name != '':
		return name
	return str(obj.get('type'))

#============================================

def _issue(level: str, message: str, obj: dict = None) -> dict:
	issue = {'level': level, 'message': message}
	if obj is not None:
		issue['object_id'] = obj.get('id')
	return issue

#============================================

def check_scene(scene: dict) -> list:
	"""
	Report problems that would make an export render less than expected.

	Args:
		scene: Validated scene dict.

	Returns:
		list: {level, message, object_id} dicts, level 'error' or 'warning'.
	"""
	issues = []
	objects = scene.get('objects') if isinstance(scene, dict) else None
	if not objects:
		issues.append(_issue('warning', "scene is empty, nothing to render"))
		return issues
	by_id = {obj.get('id'): obj for obj in objects}
	links = linking.resolve_links(objects)
	for obj in objects:
		status = linking.linking_status(obj)
		if status['needs_link']:
			missing = ", ".join(status['missing_links'])
			issues.append(_issue('error',
				f"{_label(obj)} is missing required links: {missing}", obj))
		for key, expected_type in LINK_TYPES.items():
			ref_id = obj.get(key)
			if not ref_id:
				continue
			target = by_id.get(ref_id)
			if target is None or target.get('type') != expected_type:
				issues.append(_issue('warning',
					f"{_label(obj)} {key} does not resolve, it renders unlinked", obj))
		obj_type = obj.get('type')
		if obj_type == 'graph' and obj.get('formula'):
			(valid, message) = formula_lib.check_formula(obj.get('formula'))
			if not valid:
				issues.append(_issue('error',
					f"graph {_label(obj)} has invalid formula: {message}", obj))
		elif obj_type == 'graphCursor':
			graph = links.get(obj.get('id'), {}).get('graph')
			if graph is not None and linking.cursor_point(graph, obj) is None:
				issues.append(_issue('warning',
					f"{_label(obj)} may be at an undefined point (x = {obj.get('x0', 0)})", obj))
		elif obj_type == 'tangentLine':
			graph = links.get(obj.get('id'), {}).get('graph')
			if graph is not None:
				x0 = linking.anchor_x(obj, links[obj['id']]['cursor'])
				if math.isnan(formula_lib.evaluate(linking.graph_formula(graph), x0)):
					issues.append(_issue('warning',
						f"{_label(obj)} has no tangent at x = {x0}", obj))
	return issues

#============================================

def summarize_issues(issues: list) -> dict:
	errors = [issue for issue in issues if issue['level'] == 'error']
	warnings = [issue for issue in issues if issue['level'] == 'warning']
	return {
		'error_count': len(errors),
		'warning_count': len(warnings),
		'top_issue': issues[0] if len(issues) > 0 else None,
	}
