"""JSON schema helpers for prompts and structured output."""

from typing import Any

from pydantic import BaseModel

_STRICT_UNSUPPORTED_KEYWORDS = frozenset({'title', 'default', 'minLength', 'maxLength', 'pattern', 'format'})


class SchemaOptimizer:
	"""Turns pydantic JSON schemas into self-contained schemas models handle well."""

	@classmethod
	def inline_refs(cls, schema: dict[str, Any]) -> dict[str, Any]:
		"""Replace every ``$ref`` into ``$defs``/``definitions`` with the referenced schema.

		Raises:
			ValueError: If a reference cannot be resolved or the schema is recursive.
		"""
		definitions = {**schema.get('definitions', {}), **schema.get('$defs', {})}
		root = {key: value for key, value in schema.items() if key not in ('$defs', 'definitions')}
		return cls._inline(root, definitions, ())

	@classmethod
	def _inline(cls, obj: Any, definitions: dict[str, Any], resolving: tuple[str, ...]) -> Any:
		if isinstance(obj, dict):
			ref = obj.get('$ref')
			if isinstance(ref, str):
				name = ref.rsplit('/', 1)[-1]
				if name in resolving:
					raise ValueError(f'Recursive schema reference is not supported: {ref}')
				if name not in definitions:
					raise ValueError(f'Unresolvable schema reference: {ref}')
				siblings = {key: value for key, value in obj.items() if key != '$ref'}
				resolved = cls._inline(definitions[name], definitions, resolving + (name,))
				return {**resolved, **cls._inline(siblings, definitions, resolving)}
			return {key: cls._inline(value, definitions, resolving) for key, value in obj.items()}
		if isinstance(obj, list):
			return [cls._inline(item, definitions, resolving) for item in obj]
		return obj

	@classmethod
	def create_optimized_json_schema(cls, model: type[BaseModel]) -> dict[str, Any]:
		"""Build a strict, reference-free schema for ``response_format`` structured output.

		Every object gets ``additionalProperties: false`` and lists all of its properties as required.
		"""
		return cls._make_strict(cls.inline_refs(model.model_json_schema()))

	@classmethod
	def _make_strict(cls, obj: Any) -> Any:
		if isinstance(obj, dict):
			strict = {key: cls._make_strict(value) for key, value in obj.items() if key not in _STRICT_UNSUPPORTED_KEYWORDS}
			# 'properties' maps field names to schemas, so its keys must survive even if named 'title'
			if isinstance(obj.get('properties'), dict):
				strict['properties'] = {name: cls._make_strict(value) for name, value in obj['properties'].items()}
			if strict.get('type') == 'object' and isinstance(strict.get('properties'), dict):
				strict['additionalProperties'] = False
				strict['required'] = list(strict['properties'])
			return strict
		if isinstance(obj, list):
			return [cls._make_strict(item) for item in obj]
		return obj
