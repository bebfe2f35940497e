"""Schema-driven XPath extraction.

Example:
    from scrapeplan.extraction import extract

    schema = {
        'repos': {
            'type': 'array',
            'container_xpath': '//article',
            'items': {'name': {'xpath': './/h3', 'type': 'string'}},
        }
    }
    data = extract(html, schema)
"""

from scrapeplan.extraction.schema_utils import deep_stringify_keys, parse_extraction_schema, parse_field_definition
from scrapeplan.extraction.service import SchemaExtractor, extract
from scrapeplan.extraction.values import coerce_value, resolve_raw_value
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

__all__ = [
	# Engine
	'SchemaExtractor',
	'extract',
	# Schema normalization
	'deep_stringify_keys',
	'parse_extraction_schema',
	'parse_field_definition',
	# Scalars
	'resolve_raw_value',
	'coerce_value',
	# Models
	'ExtractionSchema',
	'FieldDefinition',
	'PrimitiveField',
	'ObjectField',
	'PrimitiveArrayField',
	'ObjectArrayField',
	'EmptyArrayField',
	'MalformedField',
	'InvalidSchemaError',
]
