"""Pydantic models for the XPath extraction schema."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Declared value types understood by coerce_value(); anything else passes through as a raw string
VALUE_TYPES = ('string', 'integer', 'number', 'boolean')


class InvalidSchemaError(ValueError):
	"""Raised when an extraction schema document cannot be interpreted at all."""

	pass


class _FrozenField(BaseModel):
	model_config = ConfigDict(extra='forbid', frozen=True)


class PrimitiveField(_FrozenField):
	"""A single scalar read from the current context."""

	kind: Literal['primitive'] = 'primitive'
	xpath: str
	value_type: str = Field(default='string', description='string, integer, number, boolean or a pass-through type')
	transform: str | None = Field(default=None, description='Reserved annotation, not applied by the extractor')


class ObjectField(_FrozenField):
	"""A nested mapping, optionally evaluated against a narrowed context."""

	kind: Literal['object'] = 'object'
	context_xpath: str | None = None
	fields: dict[str, 'FieldDefinition'] = Field(default_factory=dict)


class PrimitiveArrayField(_FrozenField):
	"""One scalar per container match, read with ``item.xpath`` relative to the match."""

	kind: Literal['primitive_array'] = 'primitive_array'
	container_xpath: str
	item: PrimitiveField


class ObjectArrayField(_FrozenField):
	"""One nested mapping per container match."""

	kind: Literal['object_array'] = 'object_array'
	container_xpath: str
	item_fields: dict[str, 'FieldDefinition'] = Field(default_factory=dict)


class EmptyArrayField(_FrozenField):
	"""An array definition missing its container or its items. Always extracts to ``[]``."""

	kind: Literal['empty_array'] = 'empty_array'


class MalformedField(_FrozenField):
	"""A definition that is not shaped like any known field. Always extracts to ``None``."""

	kind: Literal['malformed'] = 'malformed'
	raw: Any = None


FieldDefinition = Annotated[
	PrimitiveField | ObjectField | PrimitiveArrayField | ObjectArrayField | EmptyArrayField | MalformedField,
	Field(discriminator='kind'),
]

ObjectField.model_rebuild()
ObjectArrayField.model_rebuild()


class ExtractionSchema(_FrozenField):
	"""A parsed extraction schema: top-level field name -> field definition.

	Build one with ``parse_extraction_schema()`` from the persisted JSON form.
	"""

	fields: dict[str, FieldDefinition] = Field(default_factory=dict)
