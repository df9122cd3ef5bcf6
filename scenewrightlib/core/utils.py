#!/usr/bin/env python3

import math
import os
import re
from decimal import Decimal
from decimal import InvalidOperation

#============================================

def is_quiet_mode() -> bool:
	value = os.environ.get('SCENEWRIGHT_QUIET', '')
	return value not in ('', '0')

#============================================

def is_number(value) -> bool:
	if isinstance(value, bool):
		return False
	if not isinstance(value, (int, float)):
		return False
	return math.isfinite(value)

#============================================

def parse_timecode(raw_time) -> float:
	if raw_time is None:
		raise RuntimeError("time value is required")
	if isinstance(raw_time, bool):
		raise RuntimeError("time values must be int, float, or timecode string")
	if isinstance(raw_time, (int, float)):
		if not math.isfinite(raw_time):
			raise RuntimeError("time value must be finite")
		return float(raw_time)
	if isinstance(raw_time, str):
		value = raw_time.strip()
		if value.endswith('s') and ':' not in value:
			value = value[:-1].strip()
		try:
			parts = value.split(':')
			seconds = Decimal(parts.pop())
			minutes = Decimal(0)
			hours = Decimal(0)
			if len(parts) > 0:
				minutes = Decimal(parts.pop())
			if len(parts) > 0:
				hours = Decimal(parts.pop())
			total = hours * Decimal(3600) + minutes * Decimal(60) + seconds
		except InvalidOperation:
			raise RuntimeError(f"invalid time value: {raw_time}")
		# inf, nan and values past float range
		result = float(total)
		if not math.isfinite(result):
			raise RuntimeError(f"invalid time value: {raw_time}")
		return result
	raise RuntimeError("time values must be int, float, or timecode string")

#============================================

def coerce_number(value, default: float) -> float:
	if is_number(value):
		return value
	if isinstance(value, str):
		try:
			number = float(value.strip())
		except ValueError:
			return default
		if math.isfinite(number):
			return number
	return default

#============================================

def format_number(value) -> str:
	"""
	Format a number as a short Python literal.

	Integral values drop the decimal point, other values are rounded to six
	places with trailing zeros removed.
	"""
	number = float(value)
	if not math.isfinite(number):
		raise RuntimeError(f"cannot format non-finite number: {value}")
	number = round(number, 6)
	if number == 0:
		return "0"
	if number.is_integer():
		return str(int(number))
	text = f"{number:.6f}".rstrip('0').rstrip('.')
	return text

#============================================

def format_point(x, y) -> str:
	return f"[{format_number(x)}, {format_number(y)}, 0]"

#============================================

def python_string(value: str) -> str:
	escaped = value.replace("\\", "\\\\").replace('"', '\\"')
	escaped = escaped.replace("\n", "\\n").replace("\r", "\\r")
	return f"\"{escaped}\""

#============================================

def python_raw_string(value: str) -> str:
	# raw strings cannot hold a quote or end with a backslash
	if '"' in value or '\n' in value or value.endswith("\\"):
		return python_string(value)
	return f"r\"{value}\""

#============================================

def sanitize_class_name(name) -> str:
	if not isinstance(name, str):
		return "Scene1"
	cleaned = re.sub(r"[^a-zA-Z0-9\s]", "", name)
	words = [word for word in cleaned.split() if word]
	class_name = "".join(word[0].upper() + word[1:].lower() for word in words)
	if class_name == "":
		return "Scene1"
	if class_name[0].isdigit():
		class_name = "Scene" + class_name
	return class_name
