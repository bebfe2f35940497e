"""Raw value resolution and best-effort type coercion for extracted scalars."""

import re
from typing import Any

from lxml import etree

_WHITESPACE_RE = re.compile(r'\s+')
_NON_INTEGER_RE = re.compile(r'[^0-9\-]')
_NON_NUMBER_RE = re.compile(r'[^0-9.\-]')
_INTEGER_PREFIX_RE = re.compile(r'-?[0-9]+')
_NUMBER_PREFIX_RE = re.compile(r'-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)')

TRUTHY_VALUES = frozenset({'true', 'yes', '1', 'on'})


def _match_text(match: Any) -> str:
	# Attribute values and text() results come back from lxml as str subclasses
	if isinstance(match, str):
		return str(match)
	if isinstance(match, (etree._Comment, etree._ProcessingInstruction)):
		return match.text or ''
	if isinstance(match, etree._Element):
		return str(match.xpath('string()'))
	return str(match)


def resolve_raw_value(result: Any) -> str | None:
	"""Collapse an XPath result into a single stripped string, or ``None`` when nothing matched.

	Node-sets use their first match only: attributes give their literal value, elements their
	text content. Scalar results (from ``string()``, ``count()``, boolean expressions) are stringified.
	"""
	if result is None:
		return None

	if isinstance(result, list):
		if not result:
			return None
		value = _match_text(result[0])
	elif isinstance(result, bool):
		value = 'true' if result else 'false'
	elif isinstance(result, float) and result.is_integer():
		# count() and sum() return floats
		value = str(int(result))
	else:
		value = str(result)

	return value.strip()


def _to_integer(raw: str) -> int:
	match = _INTEGER_PREFIX_RE.match(_NON_INTEGER_RE.sub('', raw))
	return int(match.group()) if match else 0


def _to_number(raw: str) -> float:
	match = _NUMBER_PREFIX_RE.match(_NON_NUMBER_RE.sub('', raw))
	return float(match.group()) if match else 0.0


def coerce_value(raw: str, value_type: str | None) -> Any:
	"""Convert a resolved string to the declared type. Never raises.

	Numeric coercion drops every character that is not part of a number, so ``'1.1k'`` becomes
	``1.1`` and ``'$19.99'`` becomes ``19.99``. Unknown types return ``raw`` unchanged.
	"""
	if value_type == 'string':
		return _WHITESPACE_RE.sub(' ', raw).strip()
	if value_type == 'integer':
		return _to_integer(raw)
	if value_type in ('number', 'float'):
		return _to_number(raw)
	if value_type == 'boolean':
		return raw.lower() in TRUTHY_VALUES
	return raw
