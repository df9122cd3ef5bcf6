#!/usr/bin/env python3

"""
Unit tests for the color lookup table.
"""

# Standard Library
import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from scenewrightlib.core import colors

#============================================

@pytest.mark.parametrize("value, expected", [
	("#EF4444", "#ef4444"),
	("red", "#ef4444"),
	("Blue", "#3b82f6"),
	("BLUE_C", "#58c4dd"),
	("rebeccapurple", "#663399"),
	("not a color", "not a color"),
	(None, None),
])
def test_normalize(value, expected) -> None:
	"""
	Ensure color words and hex strings resolve to lower-case hex.
	"""
	assert colors.DEFAULT_COLORS.normalize(value) == expected

#============================================

@pytest.mark.parametrize("value, expected", [
	("#ef4444", "RED"),
	("#ff0000", "RED"),
	("#ffffff", "WHITE"),
	("#6b7280", "GREY"),
	("#123456", "\"#123456\""),
	("green", "GREEN"),
	("", "WHITE"),
])
def test_to_script(value, expected) -> None:
	"""
	Ensure known colors emit as constants and others as hex literals.
	"""
	assert colors.DEFAULT_COLORS.to_script(value) == expected

#============================================

@pytest.mark.parametrize("token, expected", [
	("RED", "#ef4444"),
	("'#FF0000'", "#ff0000"),
	("\"blue\"", "#3b82f6"),
	("NOT_A_COLOR", None),
	("RED + 1", None),
])
def test_from_script(token, expected) -> None:
	"""
	Ensure script color tokens map back to model hex strings.
	"""
	assert colors.DEFAULT_COLORS.from_script(token) == expected

#============================================

def test_table_is_read_only() -> None:
	"""
	Ensure the shared lookup maps cannot be changed in place.
	"""
	table = colors.ColorTable()
	with pytest.raises(TypeError):
		table._name_to_hex['RED'] = '#000000'

#============================================

def test_custom_table() -> None:
	"""
	Ensure a table built from custom maps uses only those maps.
	"""
	table = colors.ColorTable(names={'ACCENT': '#010203'}, aliases={}, css_names={})
	assert table.to_script('#010203') == 'ACCENT'
	assert table.hex_for('accent') == '#010203'
	assert table.name_for('#ef4444') is None
