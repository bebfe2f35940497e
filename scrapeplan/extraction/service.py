"""Applies an XPath extraction schema to HTML documents without any model calls."""

import logging
from collections.abc import Mapping
from typing import Any

from scrapeplan.dom.document import DocumentContext, XPathEvaluator, parse_html
from scrapeplan.extraction.schema_utils import parse_extraction_schema
from scrapeplan.extraction.values import coerce_value, resolve_raw_value
from scrapeplan.extraction.views import (
	EmptyArrayField,
	ExtractionSchema,
	FieldDefinition,
	ObjectArrayField,
	ObjectField,
	PrimitiveArrayField,
	PrimitiveField,
)

logger = logging.getLogger(__name__)


class SchemaExtractor:
	"""Walks an extraction schema in lock-step with a parsed document.

	The schema is normalized once at construction; ``extract()`` is pure and can be called
	repeatedly on different documents.

	Usage:
		extractor = SchemaExtractor(json.loads(Path('repos_schema.json').read_text()))
		data = extractor.extract(html)
	"""

	def __init__(
		self,
		schema: ExtractionSchema | Mapping[str, Any] | str | bytes,
		evaluator: XPathEvaluator | None = None,
	):
		self.schema = parse_extraction_schema(schema)
		self.evaluator = evaluator or XPathEvaluator()

	def extract(self, document: str | bytes | DocumentContext) -> dict[str, Any]:
		"""Extract data from an HTML string or an already parsed lxml tree."""
		context = parse_html(document)
		return self._extract_fields(context, self.schema.fields)

	def _extract_fields(self, context: DocumentContext, fields: dict[str, FieldDefinition]) -> dict[str, Any]:
		return {name: self._extract_field(context, definition) for name, definition in fields.items()}

	def _extract_field(self, context: DocumentContext, definition: FieldDefinition) -> Any:
		if isinstance(definition, PrimitiveField):
			return self._extract_primitive(context, definition)
		if isinstance(definition, ObjectField):
			return self._extract_object(context, definition)
		if isinstance(definition, PrimitiveArrayField):
			return [self._extract_primitive(match, definition.item) for match in self._containers(context, definition)]
		if isinstance(definition, ObjectArrayField):
			return [self._extract_fields(match, definition.item_fields) for match in self._containers(context, definition)]
		if isinstance(definition, EmptyArrayField):
			return []
		# MalformedField
		return None

	def _containers(self, context: DocumentContext, definition: PrimitiveArrayField | ObjectArrayField) -> list[Any]:
		result = self.evaluator.evaluate(context, definition.container_xpath)
		matches = result if isinstance(result, list) else []
		logger.debug(f'Container {definition.container_xpath!r} matched {len(matches)} nodes')
		return matches

	def _extract_object(self, context: DocumentContext, definition: ObjectField) -> dict[str, Any] | None:
		if definition.context_xpath is not None:
			narrowed = self.evaluator.narrow(context, definition.context_xpath)
			if narrowed is None:
				logger.debug(f'Context {definition.context_xpath!r} matched nothing, object is null')
				return None
			context = narrowed

		return self._extract_fields(context, definition.fields)

	def _extract_primitive(self, context: DocumentContext, definition: PrimitiveField) -> Any:
		result = self.evaluator.evaluate(context, definition.xpath)
		raw_value = resolve_raw_value(result)
		if raw_value is None:
			return None
		return coerce_value(raw_value, definition.value_type)


def extract(document: str | bytes | DocumentContext, schema: ExtractionSchema | Mapping[str, Any] | str | bytes) -> dict[str, Any]:
	"""Extract structured data from ``document`` with an XPath extraction schema.

	Raises:
		InvalidSchemaError: If ``schema`` is not an object of field definitions.
	"""
	return SchemaExtractor(schema).extract(document)
