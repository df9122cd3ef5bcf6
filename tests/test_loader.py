#!/usr/bin/env python3

"""
Tests for project files and the project facade.
"""

# Standard Library
import json
import os
import sys
import tempfile
import unittest
from unittest import mock

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from scenewrightlib.core import loader
from scenewrightlib.core.project import SceneProject

#============================================

PROJECT_YAML = "\n".join([
	"name: Demo",
	"settings:",
	"  backgroundColor: '#000000'",
	"scenes:",
	"  - id: intro",
	"    name: Intro",
	"    duration: 4",
	"    objects:",
	"      - {id: ax, type: axes}",
	"      - {id: g, type: graph, axesId: ax, formula: 'x^2'}",
	"      - {id: cur, type: graphCursor, graphId: g, x0: 2}",
	"  - id: outro",
	"    name: Outro",
	"    objects:",
	"      - {id: t, type: text, text: bye, delay: 1}",
	"",
])

#============================================

def write_text_file(path: str, text: str) -> None:
	with open(path, 'w', encoding='utf-8') as handle:
		handle.write(text)

#============================================

class LoaderTest(unittest.TestCase):
	#============================================
	def test_load_yaml_project(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			yaml_file = os.path.join(temp_dir, "demo.yaml")
			write_text_file(yaml_file, PROJECT_YAML)
			project = loader.ProjectLoader(yaml_file).load()
		self.assertEqual(project['name'], 'Demo')
		self.assertEqual(len(project['scenes']), 2)
		self.assertEqual(project['scenes'][1]['duration'], 5)

	#============================================
	def test_load_json_project(self) -> None:
		"""Ensure JSON project files read through the same loader."""
		data = {'scenes': [{'id': 's', 'name': 'S', 'objects': [{'id': 'a', 'type': 'circle'}]}]}
		with tempfile.TemporaryDirectory() as temp_dir:
			json_file = os.path.join(temp_dir, "demo.json")
			write_text_file(json_file, json.dumps(data))
			project = loader.ProjectLoader(json_file).load()
		self.assertEqual(project['scenes'][0]['objects'][0]['type'], 'circle')

	#============================================
	def test_file_errors(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			list_file = os.path.join(temp_dir, "list.yaml")
			write_text_file(list_file, "- 1\n- 2\n")
			with self.assertRaises(RuntimeError):
				loader.ProjectLoader(list_file).load()
			broken_file = os.path.join(temp_dir, "broken.yaml")
			write_text_file(broken_file, "scenes: [\n")
			with self.assertRaises(RuntimeError):
				loader.ProjectLoader(broken_file).load()
			with self.assertRaises(RuntimeError):
				loader.ProjectLoader(os.path.join(temp_dir, "missing.yaml")).load()

	#============================================
	def test_load_operations(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			list_file = os.path.join(temp_dir, "ops.yaml")
			write_text_file(list_file, "- {type: addScene, name: Extra}\n")
			self.assertEqual(len(loader.load_operations(list_file)), 1)
			mapping_file = os.path.join(temp_dir, "ops.json")
			write_text_file(mapping_file, json.dumps({'operations': [{'type': 'addScene'}]}))
			self.assertEqual(loader.load_operations(mapping_file), [{'type': 'addScene'}])
			bad_file = os.path.join(temp_dir, "bad.yaml")
			write_text_file(bad_file, "operations: 3\n")
			with self.assertRaises(RuntimeError):
				loader.load_operations(bad_file)

	#============================================
	def test_save_project_round_trip(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			yaml_file = os.path.join(temp_dir, "demo.yaml")
			write_text_file(yaml_file, PROJECT_YAML)
			project = loader.ProjectLoader(yaml_file).load()
			for name in ("saved.json", "saved.yaml"):
				out_file = os.path.join(temp_dir, name)
				loader.save_project(project, out_file)
				self.assertEqual(loader.ProjectLoader(out_file).load(), project)

#============================================

class SceneProjectTest(unittest.TestCase):
	#============================================
	def setUp(self) -> None:
		self.temp_dir = tempfile.TemporaryDirectory()
		self.yaml_file = os.path.join(self.temp_dir.name, "demo.yaml")
		write_text_file(self.yaml_file, PROJECT_YAML)

	#============================================
	def tearDown(self) -> None:
		self.temp_dir.cleanup()

	#============================================
	def test_plan(self) -> None:
		project = SceneProject(self.yaml_file)
		plan = project.plan('Outro')
		self.assertEqual(plan['scene'], 'Outro')
		self.assertEqual(plan['variables'], {'t': 'obj_0'})
		self.assertEqual(plan['batches'][0]['wait'], 1)

	#============================================
	def test_script_for_one_scene(self) -> None:
		project = SceneProject(self.yaml_file)
		script = project.script('intro')
		self.assertIn("class Intro(Scene):", script)
		self.assertNotIn("class Outro(Scene):", script)
		self.assertIn("obj_2 = Dot(obj_0_axes.c2p(2, 4), radius=0.08, color=RED)", script)
		self.assertEqual(project.class_name('outro'), 'Outro')
		with self.assertRaises(RuntimeError):
			project.scene('nowhere')

	#============================================
	def test_run_writes_output(self) -> None:
		out_file = os.path.join(self.temp_dir.name, "demo.py")
		project = SceneProject(self.yaml_file, output_override=out_file)
		with mock.patch.dict(os.environ, {'SCENEWRIGHT_QUIET': '1'}):
			text = project.run()
		with open(out_file, 'r') as handle:
			self.assertEqual(handle.read(), text)
		self.assertIn("class Outro(Scene):", text)

	#============================================
	def test_dry_run_writes_nothing(self) -> None:
		out_file = os.path.join(self.temp_dir.name, "demo.py")
		project = SceneProject(self.yaml_file, output_override=out_file, dry_run=True)
		with mock.patch.dict(os.environ, {'SCENEWRIGHT_QUIET': '1'}):
			self.assertIsNone(project.run())
		self.assertFalse(os.path.exists(out_file))

	#============================================
	def test_apply(self) -> None:
		project = SceneProject(self.yaml_file)
		warnings = project.apply([
			{'type': 'addObject', 'object': {'type': 'circle', 'id': 'dot'}},
			{'type': 'bogus'},
		], 'outro')
		self.assertEqual(len(warnings), 1)
		self.assertEqual([obj['id'] for obj in project.scene('outro')['objects']], ['t', 'dot'])

	#============================================
	def test_validate(self) -> None:
		project = SceneProject(data={'scenes': [{'name': 'Empty'}]})
		issues = project.validate()
		self.assertEqual(len(issues), 1)
		self.assertEqual(issues[0]['level'], 'warning')


if __name__ == '__main__':
	unittest.main()
