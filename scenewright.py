#!/usr/bin/env python3

import argparse
import yaml
from scenewrightlib.core import loader
from scenewrightlib.core import script_parser
from scenewrightlib.core import utils
from scenewrightlib.core.project import SceneProject

#============================================

def parse_args():
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(description="Scene timeline to Manim script compiler")
	parser.add_argument('-y', '--yaml', dest='yamlfile',
		help='project file (yaml or json) describing the scenes')
	parser.add_argument('-o', '--output', dest='output_file',
		help='output file, script or project depending on mode')
	parser.add_argument('-s', '--scene', dest='scene',
		help='scene id or name to work on')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='validate and check only, do not write a script')
	parser.add_argument('-p', '--dump-plan', dest='dump_plan', action='store_true',
		help='print the scheduled batches for the scene')
	parser.add_argument('-r', '--reverse', dest='reverse_file',
		help='parse a manim script and print addObject operations')
	parser.add_argument('-a', '--apply', dest='operations_file',
		help='apply an operations file to the project and save it')
	args = parser.parse_args()
	if args.reverse_file is None and args.yamlfile is None:
		parser.error("one of -y/--yaml or -r/--reverse is required")
	return args

#============================================

def reverse(script_file: str) -> list:
	with open(script_file, 'r') as handle:
		text = handle.read()
	return script_parser.parse_script(text)

#============================================

def main():
	args = parse_args()
	if args.reverse_file is not None:
		operations = reverse(args.reverse_file)
		text = yaml.safe_dump({'operations': operations}, sort_keys=False)
		if args.output_file is not None:
			with open(args.output_file, 'w') as handle:
				handle.write(text)
			if not utils.is_quiet_mode():
				print(f"wrote {len(operations)} operations to {args.output_file}")
			return
		print(text)
		return
	project = SceneProject(args.yamlfile, output_override=args.output_file,
		dry_run=args.dry_run)
	if args.operations_file is not None:
		operations = loader.load_operations(args.operations_file)
		warnings = project.apply(operations, args.scene)
		if not utils.is_quiet_mode():
			for warning in warnings:
				print(f"warning: {warning}")
		output_file = args.output_file or args.yamlfile
		loader.save_project(project.data, output_file)
		if not utils.is_quiet_mode():
			print(f"wrote {output_file}")
		return
	if args.dump_plan:
		print(yaml.safe_dump(project.plan(args.scene), sort_keys=False))
		return
	text = project.run(args.scene)
	if text is not None and args.output_file is None:
		print(text)


if __name__ == '__main__':
	main()
