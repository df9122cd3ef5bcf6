#!/usr/bin/env python3

"""
Bidirectional color lookup between model hex strings and Manim color names.
"""

import re
import types
import PIL.ImageColor
from scenewrightlib.core import utils

#============================================

HEX_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# Manim constant name -> canonical model hex
MANIM_COLORS = {
	'WHITE': '#ffffff',
	'BLACK': '#000000',
	'RED': '#ef4444',
	'BLUE': '#3b82f6',
	'GREEN': '#22c55e',
	'YELLOW': '#eab308',
	'ORANGE': '#f97316',
	'PURPLE': '#a855f7',
	'PINK': '#ec4899',
	'TEAL': '#14b8a6',
	'GOLD': '#ca8a04',
	'MAROON': '#7f1d1d',
	'GREY': '#6b7280',
	'GRAY': '#6b7280',
	'BLUE_A': '#c7e9f1',
	'BLUE_B': '#9cdceb',
	'BLUE_C': '#58c4dd',
	'BLUE_D': '#29abca',
	'BLUE_E': '#1c758a',
	'GREEN_A': '#c9e2ae',
	'GREEN_B': '#a6cf8c',
	'GREEN_C': '#83c167',
	'GREEN_D': '#77b05d',
	'GREEN_E': '#699c52',
	'RED_A': '#f7a1a3',
	'RED_B': '#ff8080',
	'RED_C': '#fc6255',
	'RED_D': '#e65a4c',
	'RED_E': '#cf5044',
	'YELLOW_A': '#fff1b6',
	'YELLOW_B': '#ffea94',
	'YELLOW_C': '#ffff00',
	'YELLOW_D': '#f4d345',
	'YELLOW_E': '#e8c11c',
}

# pure primaries that still read best as a named constant
HEX_ALIASES = {
	'#ff0000': 'RED',
	'#00ff00': 'GREEN',
	'#0000ff': 'BLUE',
	'#ff00ff': 'PINK',
	'#00ffff': 'TEAL',
	'#ffa500': 'ORANGE',
	'#800080': 'PURPLE',
}

# lower-case names used by people and language models
CSS_COLORS = {
	'red': '#ef4444',
	'blue': '#3b82f6',
	'green': '#22c55e',
	'yellow': '#eab308',
	'orange': '#f97316',
	'purple': '#a855f7',
	'pink': '#ec4899',
	'white': '#ffffff',
	'black': '#000000',
	'cyan': '#06b6d4',
	'magenta': '#d946ef',
	'lime': '#84cc16',
	'teal': '#14b8a6',
	'indigo': '#6366f1',
	'violet': '#8b5cf6',
	'gray': '#6b7280',
	'grey': '#6b7280',
	'gold': '#ca8a04',
	'silver': '#a8a29e',
	'navy': '#1e3a5f',
	'maroon': '#7f1d1d',
	'aqua': '#06b6d4',
	'coral': '#f87171',
	'salmon': '#fb923c',
}

#============================================

def is_hex_color(value) -> bool:
	return isinstance(value, str) and HEX_PATTERN.match(value.strip()) is not None

#============================================

class ColorTable():
	"""
	Immutable color lookup shared by the emitter, the reverse parser and the
	ops normalizer.

	Args:
		names: Manim constant name to hex mapping.
		aliases: extra hex values that should emit as a constant name.
		css_names: lower-case color words accepted on input.
	"""
	def __init__(self, names: dict = None, aliases: dict = None,
		css_names: dict = None):
		if names is None:
			names = MANIM_COLORS
		if aliases is None:
			aliases = HEX_ALIASES
		if css_names is None:
			css_names = CSS_COLORS
		name_to_hex = {}
		for name, hex_value in names.items():
			name_to_hex[name.upper()] = hex_value.lower()
		hex_to_name = {}
		for name, hex_value in name_to_hex.items():
			if hex_value not in hex_to_name:
				hex_to_name[hex_value] = name
		for hex_value, name in aliases.items():
			if hex_value.lower() not in hex_to_name:
				hex_to_name[hex_value.lower()] = name.upper()
		css_to_hex = {}
		for name, hex_value in css_names.items():
			css_to_hex[name.lower()] = hex_value.lower()
		self._name_to_hex = types.MappingProxyType(name_to_hex)
		self._hex_to_name = types.MappingProxyType(hex_to_name)
		self._css_to_hex = types.MappingProxyType(css_to_hex)

	#============================
	def hex_for(self, name: str):
		if not isinstance(name, str):
			return None
		return self._name_to_hex.get(name.strip().upper())

	#============================
	def name_for(self, hex_value: str):
		if not isinstance(hex_value, str):
			return None
		return self._hex_to_name.get(hex_value.strip().lower())

	#============================
	def normalize(self, value):
		"""
		Resolve a color word or hex string to a lower-case hex string.

		Values that are not strings, or strings that are not colors at all,
		are returned unchanged.
		"""
		if not isinstance(value, str):
			return value
		text = value.strip()
		if is_hex_color(text):
			return text.lower()
		lowered = text.lower()
		if lowered in self._css_to_hex:
			return self._css_to_hex[lowered]
		manim_hex = self.hex_for(text)
		if manim_hex is not None:
			return manim_hex
		try:
			rgb = PIL.ImageColor.getrgb(lowered)
		except ValueError:
			return value
		return "#{:02x}{:02x}{:02x}".format(rgb[0], rgb[1], rgb[2])

	#============================
	def to_script(self, value, default: str = 'WHITE') -> str:
		hex_value = self.normalize(value)
		if not is_hex_color(hex_value):
			return default
		name = self.name_for(hex_value)
		if name is not None:
			return name
		return utils.python_string(hex_value)

	#============================
	def from_script(self, token: str):
		if not isinstance(token, str):
			return None
		text = token.strip()
		if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
			inner = text[1:-1].strip()
			if is_hex_color(inner):
				return inner.lower()
			resolved = self.normalize(inner)
			if is_hex_color(resolved):
				return resolved
			return None
		if re.match(r"^[A-Za-z_]\w*$", text) is None:
			return None
		return self.hex_for(text)

#============================================

DEFAULT_COLORS = ColorTable()
