"""Converts persisted XPath schema JSON into the typed field definitions the extractor walks."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from scrapeplan.extraction.views import (
	EmptyArrayField,
	ExtractionSchema,
	FieldDefinition,
	InvalidSchemaError,
	MalformedField,
	ObjectArrayField,
	ObjectField,
	PrimitiveArrayField,
	PrimitiveField,
)

logger = logging.getLogger(__name__)

# Persisted key names, canonical first
_XPATH_KEYS = ('xpath', 'path_query')
_CONTAINER_KEYS = ('container_xpath', 'container_path_query')
_CONTEXT_KEYS = ('context_xpath', 'context_path_query')
_PROPERTIES_KEYS = ('properties', 'fields')

_TYPE_ALIASES = {'float': 'number'}


def deep_stringify_keys(obj: Any) -> Any:
	"""Return a copy of ``obj`` where every mapping key is a ``str``, at any depth.

	List and tuple order is preserved (tuples come back as lists). Scalars are returned unchanged.
	"""
	if isinstance(obj, Mapping):
		return {str(key): deep_stringify_keys(value) for key, value in obj.items()}
	if isinstance(obj, (list, tuple)):
		return [deep_stringify_keys(item) for item in obj]
	return obj


def _first_present(definition: dict[str, Any], keys: tuple[str, ...]) -> Any:
	for key in keys:
		value = definition.get(key)
		if value is not None:
			return value
	return None


def _parse_primitive(definition: dict[str, Any], xpath: Any) -> FieldDefinition:
	if not isinstance(xpath, str):
		return MalformedField(raw=definition)

	value_type = definition.get('type') or 'string'
	value_type = _TYPE_ALIASES.get(value_type, value_type) if isinstance(value_type, str) else 'string'
	transform = definition.get('transform')

	return PrimitiveField(
		xpath=xpath,
		value_type=value_type,
		transform=transform if isinstance(transform, str) else None,
	)


def _parse_fields(properties: Mapping[str, Any]) -> dict[str, FieldDefinition]:
	return {name: parse_field_definition(definition) for name, definition in properties.items()}


def _parse_object(definition: dict[str, Any]) -> FieldDefinition:
	properties = _first_present(definition, _PROPERTIES_KEYS)
	context_xpath = _first_present(definition, _CONTEXT_KEYS)

	if not isinstance(properties, Mapping):
		return MalformedField(raw=definition)
	if context_xpath is not None and not isinstance(context_xpath, str):
		return MalformedField(raw=definition)

	return ObjectField(context_xpath=context_xpath, fields=_parse_fields(properties))


def _parse_array(definition: dict[str, Any]) -> FieldDefinition:
	container_xpath = _first_present(definition, _CONTAINER_KEYS)

	if 'item_fields' in definition:
		items, items_key = definition['item_fields'], 'item_fields'
	elif 'item' in definition:
		items, items_key = definition['item'], 'item'
	else:
		items, items_key = definition.get('items'), 'items'

	if container_xpath is None or items is None:
		return EmptyArrayField()
	if not isinstance(container_xpath, str) or not isinstance(items, Mapping):
		return MalformedField(raw=definition)

	item_xpath = _first_present(items, _XPATH_KEYS)
	if items_key == 'item' or (items_key == 'items' and item_xpath is not None):
		item = _parse_primitive(items, item_xpath)
		if not isinstance(item, PrimitiveField):
			return MalformedField(raw=definition)
		return PrimitiveArrayField(container_xpath=container_xpath, item=item)

	return ObjectArrayField(container_xpath=container_xpath, item_fields=_parse_fields(items))


def parse_field_definition(definition: Any) -> FieldDefinition:
	"""Classify one persisted field definition into its typed variant.

	Never raises: anything that is not shaped like a known field becomes a ``MalformedField``.
	"""
	if not isinstance(definition, Mapping):
		return MalformedField(raw=definition)

	field_type = definition.get('type')
	if field_type == 'array':
		return _parse_array(definition)
	if field_type == 'object':
		return _parse_object(definition)

	xpath = _first_present(definition, _XPATH_KEYS)
	if xpath is not None:
		return _parse_primitive(definition, xpath)

	# Untagged definitions are recognised by their structural keys
	if _first_present(definition, _CONTAINER_KEYS) is not None:
		return _parse_array(definition)
	if _first_present(definition, _PROPERTIES_KEYS) is not None:
		return _parse_object(definition)

	return MalformedField(raw=definition)


def parse_extraction_schema(schema: ExtractionSchema | Mapping[str, Any] | str | bytes) -> ExtractionSchema:
	"""Normalize a persisted XPath schema into an ``ExtractionSchema``.

	Accepts an already parsed schema, a mapping, or a JSON document.

	Raises:
		InvalidSchemaError: If the JSON cannot be decoded or the top level is not an object.
	"""
	if isinstance(schema, ExtractionSchema):
		return schema

	if isinstance(schema, (str, bytes)):
		try:
			schema = json.loads(schema)
		except json.JSONDecodeError as e:
			raise InvalidSchemaError(f'Extraction schema is not valid JSON: {e}') from e

	normalized = deep_stringify_keys(schema)
	if not isinstance(normalized, dict):
		raise InvalidSchemaError(f'Extraction schema must be a JSON object of field definitions, got {type(schema).__name__}')

	parsed = ExtractionSchema(fields=_parse_fields(normalized))
	malformed = [name for name, definition in parsed.fields.items() if isinstance(definition, MalformedField)]
	if malformed:
		logger.debug(f'Top-level fields with malformed definitions will extract as null: {malformed}')
	return parsed
