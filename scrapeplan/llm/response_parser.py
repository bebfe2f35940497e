"""Decodes JSON from model replies that may be wrapped in markdown code fences."""

import json
import re
from typing import Any

from pydantic import BaseModel

_FENCE_OPEN_RE = re.compile(r'\A```(?:json)?\s*')
_FENCE_CLOSE_RE = re.compile(r'\s*```\Z')


class ResponseParseError(ValueError):
	"""Raised when a model reply does not contain valid JSON

	Attributes:
		text: The reply text after code fence stripping
	"""

	def __init__(self, message: str, text: str):
		self.text = text
		super().__init__(message)


def strip_code_fences(text: str) -> str:
	"""Remove a leading ```json (or bare ```) fence and a trailing ``` fence."""
	text = text.strip()
	text = _FENCE_OPEN_RE.sub('', text)
	return _FENCE_CLOSE_RE.sub('', text)


def parse_json_response(content: Any) -> Any:
	"""Parse a model reply into JSON data.

	Dicts and pydantic models are returned as plain data; anything else is treated as text.

	Raises:
		ResponseParseError: If the text is not valid JSON.
	"""
	if isinstance(content, dict):
		return content
	if isinstance(content, BaseModel):
		return content.model_dump()

	text = strip_code_fences(content if isinstance(content, str) else str(content))
	try:
		return json.loads(text)
	except json.JSONDecodeError as e:
		preview = text if len(text) <= 200 else text[:200] + '...'
		raise ResponseParseError(f'Model reply is not valid JSON ({e.msg}): {preview}', text=text) from e
