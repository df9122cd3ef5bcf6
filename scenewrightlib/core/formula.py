#!/usr/bin/env python3

"""
Formula handling for graph objects.

Formulas are written in conventional infix notation in terms of x, for
example "x^2" or "sin(x) + ln(x)". Translation is a token substitution over
a fixed vocabulary; it never rearranges or simplifies the expression.
"""

import functools
import math
import re
import numpy

#============================================

FUNCTION_NAMES = {
	'sin': 'np.sin',
	'cos': 'np.cos',
	'tan': 'np.tan',
	'exp': 'np.exp',
	'log': 'np.log',
	'ln': 'np.log',
	'sqrt': 'np.sqrt',
	'abs': 'np.abs',
}

CONSTANT_NAMES = {
	'pi': 'np.pi',
	'e': 'np.e',
}

TOKEN_PATTERN = re.compile(
	r"(?P<space>\s+)"
	r"|(?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?)"
	r"|(?P<name>[A-Za-z_]\w*)"
	r"|(?P<op>\*\*|[-+*/^(),])"
)

MAX_SAMPLES = 500

#============================================

def _tokenize(formula: str):
	tokens = []
	position = 0
	while position < len(formula):
		match = TOKEN_PATTERN.match(formula, position)
		if match is None:
			return None
		tokens.append((match.lastgroup, match.group(0)))
		position = match.end()
	return tokens

#============================================

def _next_significant(tokens: list, index: int):
	for kind, text in tokens[index + 1:]:
		if kind != 'space':
			return text
	return None

#============================================

def translate_formula(formula):
	"""
	Translate a user formula into a numpy expression string.

	Args:
		formula: Formula text in terms of x.

	Returns:
		str or None: Python expression using the `np` namespace, or None when
		the formula uses anything outside the supported vocabulary.
	"""
	compiled = _compile_formula(formula) if isinstance(formula, str) else None
	if compiled is None:
		return None
	return compiled[0]

#============================================

@functools.lru_cache(maxsize=512)
def _compile_formula(formula: str):
	if formula.strip() == '':
		return None
	tokens = _tokenize(formula)
	if tokens is None:
		return None
	parts = []
	for index, (kind, text) in enumerate(tokens):
		if kind == 'name':
			if text == 'x':
				parts.append(text)
			elif text in FUNCTION_NAMES:
				if _next_significant(tokens, index) != '(':
					return None
				parts.append(FUNCTION_NAMES[text])
			elif text in CONSTANT_NAMES:
				parts.append(CONSTANT_NAMES[text])
			else:
				return None
		elif kind == 'op' and text == '^':
			parts.append('**')
		else:
			parts.append(text)
	translated = ''.join(parts).strip()
	try:
		code = compile(translated, '<formula>', 'eval')
	except SyntaxError:
		return None
	return (translated, code)

#============================================

def evaluate(formula, x) -> float:
	"""
	Evaluate a formula at x.

	Returns NaN when the formula cannot be translated or is undefined at x.
	"""
	compiled = _compile_formula(formula) if isinstance(formula, str) else None
	if compiled is None:
		return math.nan
	namespace = {'__builtins__': {}, 'np': numpy}
	with numpy.errstate(all='ignore'):
		try:
			result = eval(compiled[1], namespace, {'x': numpy.float64(x)})
			value = float(result)
		except (ArithmeticError, ValueError, TypeError, NameError):
			return math.nan
	if not math.isfinite(value):
		return math.nan
	return value

#============================================

def derivative(formula, x, h: float = 0.001) -> float:
	if not h or h <= 0:
		h = 0.001
	f_plus = evaluate(formula, x + h)
	f_minus = evaluate(formula, x - h)
	if math.isnan(f_plus) or math.isnan(f_minus):
		return math.nan
	return (f_plus - f_minus) / (2 * h)

#============================================

def sample(formula, x_min: float, x_max: float, samples: int = 200) -> list:
	safe_samples = min(max(2, int(samples)), MAX_SAMPLES)
	step = (x_max - x_min) / (safe_samples - 1)
	points = []
	for index in range(safe_samples):
		x = x_min + index * step
		y = evaluate(formula, x)
		if not math.isnan(y):
			points.append((x, y))
	return points

#============================================

def check_formula(formula) -> tuple:
	if not isinstance(formula, str) or formula.strip() == '':
		return (False, "formula cannot be empty")
	if translate_formula(formula) is None:
		return (False, "formula uses unsupported syntax")
	for x in (-1, 0, 1):
		if math.isnan(evaluate(formula, x)):
			return (False, "formula produces invalid results")
	return (True, None)
