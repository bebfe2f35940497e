"""Requirements models: what the caller wants extracted, as a pydantic model or a JSON Schema dict."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model

from scrapeplan.llm.schema import SchemaOptimizer

logger = logging.getLogger(__name__)

Requirements = type[BaseModel] | dict[str, Any]

# Keywords that indicate composition patterns we don't support
_UNSUPPORTED_KEYWORDS = frozenset(
	{
		'allOf',
		'oneOf',
		'not',
		'if',
		'then',
		'else',
		'dependentSchemas',
		'dependentRequired',
	}
)

# Primitive JSON Schema type → Python type
_PRIMITIVE_MAP: dict[str, type] = {
	'string': str,
	'number': float,
	'integer': int,
	'boolean': bool,
	'null': type(None),
}


class _RequirementsBase(BaseModel):
	model_config = ConfigDict(extra='forbid')


def _check_unsupported(schema: dict) -> None:
	"""Raise ValueError if the schema uses unsupported composition keywords."""
	for kw in _UNSUPPORTED_KEYWORDS:
		if kw in schema:
			raise ValueError(f'Unsupported JSON Schema keyword: {kw}')


def _nullable_variant(schema: dict) -> dict | None:
	"""Return the non-null branch of an ``anyOf: [X, {type: null}]`` optional, else None."""
	variants = schema.get('anyOf')
	if not isinstance(variants, list):
		return None
	non_null = [variant for variant in variants if variant.get('type') != 'null']
	if len(non_null) == 1 and len(variants) == 2:
		return non_null[0]
	return None


def _resolve_type(schema: dict, name: str) -> Any:
	"""Recursively resolve a JSON Schema node to a Python type."""
	_check_unsupported(schema)

	if 'anyOf' in schema:
		inner = _nullable_variant(schema)
		if inner is None:
			raise ValueError('Unsupported JSON Schema keyword: anyOf (only optional X | null is supported)')
		return _resolve_type(inner, name) | None

	json_type = schema.get('type', 'string')

	# Enums are constrained to str
	if 'enum' in schema:
		return str

	if json_type == 'object':
		if schema.get('properties'):
			return _build_model(schema, name)
		return dict

	if json_type == 'array':
		items_schema = schema.get('items')
		if items_schema:
			item_type = _resolve_type(items_schema, f'{name}_item')
			return list[item_type]
		return list

	base = _PRIMITIVE_MAP.get(json_type, str)
	if schema.get('nullable', False):
		return base | None
	return base


def _build_model(schema: dict, name: str) -> type[BaseModel]:
	"""Build a pydantic model from an object-type JSON Schema node.

	Fields not listed in ``required`` are optional and default to None, since extraction may not find them.
	"""
	_check_unsupported(schema)

	required_fields = set(schema.get('required', []))
	fields: dict[str, Any] = {}

	for prop_name, prop_schema in schema.get('properties', {}).items():
		prop_type = _resolve_type(prop_schema, f'{name}_{prop_name}')

		field_kwargs: dict[str, Any] = {}
		if 'description' in prop_schema:
			field_kwargs['description'] = prop_schema['description']

		if prop_name in required_fields:
			fields[prop_name] = (prop_type, Field(..., **field_kwargs))
		else:
			fields[prop_name] = (prop_type | None, Field(prop_schema.get('default'), **field_kwargs))

	return create_model(name, __base__=_RequirementsBase, **fields)


def requirements_json_schema(requirements: Requirements) -> dict[str, Any]:
	"""Return the reference-free JSON Schema of a requirements model.

	Dict requirements may be a plain object schema or wrapped as ``{"schema": {...}}``.

	Raises:
		ValueError: If the schema is not an object schema with properties.
	"""
	if isinstance(requirements, type) and issubclass(requirements, BaseModel):
		schema = requirements.model_json_schema()
	elif isinstance(requirements, dict):
		schema = requirements.get('schema', requirements) if 'properties' not in requirements else requirements
	else:
		raise ValueError(f'Requirements must be a pydantic model class or a JSON Schema dict, got {type(requirements).__name__}')

	schema = SchemaOptimizer.inline_refs(schema)

	if schema.get('type', 'object') != 'object':
		raise ValueError(f'Requirements schema must have type "object", got {schema.get("type")!r}')
	if not schema.get('properties'):
		raise ValueError('Requirements schema must have at least one property')
	return schema


def requirements_properties(requirements: Requirements) -> dict[str, Any]:
	"""The ``properties`` section of the requirements schema, as embedded in prompts."""
	return requirements_json_schema(requirements)['properties']


def requirements_model(requirements: Requirements) -> type[BaseModel]:
	"""Return a pydantic model for the requirements, building one at runtime for dict schemas.

	Raises:
		ValueError: If the schema is invalid or uses unsupported features.
	"""
	if isinstance(requirements, type) and issubclass(requirements, BaseModel):
		return requirements

	schema = requirements_json_schema(requirements)
	model_name = schema.get('title', 'ExtractionRequirements')
	logger.debug(f'Building requirements model {model_name!r} with fields {list(schema["properties"])}')
	return _build_model(schema, model_name)
