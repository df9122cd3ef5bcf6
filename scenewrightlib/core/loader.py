#!/usr/bin/env python3

import json
import os
import yaml
from scenewrightlib.core import schema

#============================================

MAX_FILE_SIZE = 10 ** 7

#============================================

def _read_data(path: str):
	if not os.path.isfile(path):
		raise RuntimeError(f"file not found: {path}")
	file_size = os.path.getsize(path)
	if file_size > MAX_FILE_SIZE:
		raise RuntimeError(f"{path} is larger than 10MB")
	# JSON is a subset of YAML, one loader reads both
	with open(path, 'r') as data_file:
		try:
			data = yaml.safe_load(data_file)
		except yaml.YAMLError as error:
			raise RuntimeError(f"could not parse {path}: {error}")
	return data

#============================================

class ProjectLoader():
	def __init__(self, project_file: str):
		self.project_file = project_file

	#============================
	def load(self) -> dict:
		data = self._load_yaml()
		return schema.validate_project(data)

	#============================
	def _load_yaml(self) -> dict:
		data = _read_data(self.project_file)
		if not isinstance(data, dict):
			raise RuntimeError("project file must be a mapping at the top level")
		return data

#============================================

def load_operations(path: str) -> list:
	"""
	Read an operations file: a list, or a mapping with an operations list.
	"""
	data = _read_data(path)
	if isinstance(data, dict):
		data = data.get('operations')
	if not isinstance(data, list):
		raise RuntimeError("operations file must hold a list of operations")
	return data

#============================================

def save_project(project: dict, path: str) -> None:
	"""
	Write a project as JSON or YAML, chosen by the file extension.
	"""
	_, extension = os.path.splitext(path)
	with open(path, 'w') as data_file:
		if extension.lower() == '.json':
			json.dump(project, data_file, indent=2)
			data_file.write("\n")
		else:
			yaml.safe_dump(project, data_file, sort_keys=False)
