#!/usr/bin/env python3

from scenewrightlib.core import checks
from scenewrightlib.core import emitter
from scenewrightlib.core import loader
from scenewrightlib.core import ops
from scenewrightlib.core import schema
from scenewrightlib.core import timeline
from scenewrightlib.core import utils

#============================================

class SceneProject():
	def __init__(self, project_file: str = None, data: dict = None,
		output_override: str = None, dry_run: bool = False):
		if project_file is not None:
			self.data = loader.ProjectLoader(project_file).load()
		else:
			self.data = schema.validate_project(data)
		self.project_file = project_file
		self.output_override = output_override
		self.dry_run = dry_run
		self._emitter = emitter.ScriptEmitter()
		self._sync_public_fields()

	#============================
	def _sync_public_fields(self) -> None:
		self.name = self.data['name']
		self.settings = self.data['settings']
		self.scenes = self.data['scenes']

	#============================
	def scene(self, scene_ref: str = None) -> dict:
		if scene_ref is None:
			return self.scenes[0]
		scene = schema.find_scene(self.data, scene_ref)
		if scene is None:
			raise RuntimeError(f"scene not found: {scene_ref}")
		return scene

	#============================
	def validate(self, scene_ref: str = None) -> list:
		"""
		Run export checks and return the issues found.
		"""
		if scene_ref is not None:
			scenes = [self.scene(scene_ref)]
		else:
			scenes = self.scenes
		issues = []
		for scene in scenes:
			issues.extend(checks.check_scene(scene))
		return issues

	#============================
	def plan(self, scene_ref: str = None) -> dict:
		scene = self.scene(scene_ref)
		names = timeline.variable_names(scene['objects'])
		return {
			'scene': scene['name'],
			'variables': names,
			'batches': timeline.schedule(scene['objects'], names),
		}

	#============================
	def script(self, scene_ref: str = None) -> str:
		if scene_ref is None:
			return self._emitter.emit(self.data)
		return self._emitter.emit(self.data, self.scene(scene_ref)['id'])

	#============================
	def class_name(self, scene_ref: str = None) -> str:
		return self._emitter.scene_class_name(self.data, self.scene(scene_ref)['id'])

	#============================
	def apply(self, operations: list, scene_ref: str = None) -> list:
		default_scene_id = None
		if scene_ref is not None:
			default_scene_id = self.scene(scene_ref)['id']
		(self.data, warnings) = ops.apply_operations(self.data, operations,
			default_scene_id=default_scene_id)
		self._sync_public_fields()
		return warnings

	#============================
	def run(self, scene_ref: str = None) -> str:
		issues = self.validate(scene_ref)
		if not utils.is_quiet_mode():
			for issue in issues:
				print(f"{issue['level']}: {issue['message']}")
		if self.dry_run:
			if not utils.is_quiet_mode():
				print("dry run: validation complete")
			return None
		text = self.script(scene_ref)
		if self.output_override is not None:
			with open(self.output_override, 'w') as script_file:
				script_file.write(text)
			if not utils.is_quiet_mode():
				print(f"wrote {self.output_override}")
		return text
