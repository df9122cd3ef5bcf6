#!/usr/bin/env python3

import argparse
import hashlib
import os
from scenewrightlib.core import utils
from scenewrightlib.core.project import SceneProject

#============================================

QUALITY_FLAGS = {
	'low': '-ql',
	'medium': '-qm',
	'high': '-qh',
	'production': '-qp',
	'4k': '-qk',
}

#============================================

def parse_args():
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(description="Export a scenewright project to a Manim script")
	parser.add_argument('-y', '--yaml', dest='yamlfile', required=True,
		help='project file (yaml or json) with the scenes to export')
	parser.add_argument('-o', '--output', dest='output_file',
		help='output python script path')
	parser.add_argument('-s', '--scene', dest='scene',
		help='scene id or name, exports only that scene')
	parser.add_argument('-q', '--quality', dest='quality', default='medium',
		choices=sorted(QUALITY_FLAGS.keys()),
		help='render quality tier used for the cache key')
	args = parser.parse_args()
	return args

#============================================

def cache_key(script_text: str, scene_name: str, quality: str) -> str:
	"""
	Content hash a render cache can key rendered video on.
	"""
	digest = hashlib.sha256()
	for part in (script_text, scene_name, quality):
		digest.update(str(part).encode('utf-8'))
		# separator keeps ("ab", "c") and ("a", "bc") apart
		digest.update(b'\x00')
	return digest.hexdigest()

#============================================
class ScriptExporter():
	def __init__(self, yaml_file: str, output_file: str = None, scene: str = None,
		quality: str = 'medium'):
		if quality not in QUALITY_FLAGS:
			raise RuntimeError(f"unknown quality tier: {quality}")
		self.yaml_file = yaml_file
		self.output_file = output_file or self._default_output_path()
		self.scene = scene
		self.quality = quality
		self.project = SceneProject(self.yaml_file, dry_run=True)
		self.script_text = None

	#============================
	def _default_output_path(self) -> str:
		base, _ = os.path.splitext(self.yaml_file)
		return base + ".py"

	#============================
	def scene_name(self) -> str:
		return self.project.scene(self.scene)['name']

	#============================
	def class_name(self) -> str:
		return self.project.class_name(self.scene)

	#============================
	def export(self) -> None:
		self.script_text = self.project.script(self.scene)
		self._write_output()

	#============================
	def cache_key(self) -> str:
		if self.script_text is None:
			self.script_text = self.project.script(self.scene)
		return cache_key(self.script_text, self.scene_name(), self.quality)

	#============================
	def render_command(self) -> str:
		flag = QUALITY_FLAGS[self.quality]
		return f"manim {flag} {self.output_file} {self.class_name()}"

	#============================
	def _write_output(self) -> None:
		os.makedirs(os.path.dirname(self.output_file) or '.', exist_ok=True)
		with open(self.output_file, 'w') as script_file:
			script_file.write(self.script_text)

#============================================
#============================================
#============================================


def main():
	args = parse_args()
	exporter = ScriptExporter(args.yamlfile, args.output_file, scene=args.scene,
		quality=args.quality)
	exporter.export()
	if not utils.is_quiet_mode():
		print(f"wrote {exporter.output_file}")
		print(f"cache key {exporter.cache_key()}")
		print(f"render with: {exporter.render_command()}")


if __name__ == '__main__':
	main()
