"""Generates reusable XPath extraction schemas from a sample document with a chat model."""

import logging
from typing import Any

from scrapeplan.dom.document import DocumentContext
from scrapeplan.dom.preprocessor import preprocess_html
from scrapeplan.extraction.schema_utils import parse_extraction_schema
from scrapeplan.extraction.views import InvalidSchemaError
from scrapeplan.generator.prompts import build_schema_prompt
from scrapeplan.generator.requirements import Requirements, requirements_properties
from scrapeplan.llm.base import BaseChatModel
from scrapeplan.llm.messages import SystemMessage, UserMessage
from scrapeplan.llm.response_parser import parse_json_response

logger = logging.getLogger(__name__)


class SchemaGenerator:
	"""Asks a chat model for an XPath schema that extracts ``requirements`` from pages like the sample.

	The returned schema is plain JSON-compatible data, ready to be saved and fed to ``SchemaExtractor``.
	"""

	def __init__(self, llm: BaseChatModel | None = None, max_repeated_items: int | None = 3):
		if llm is None:
			from scrapeplan.config import create_chat_model

			llm = create_chat_model()
		self.llm = llm
		self.max_repeated_items = max_repeated_items

	async def generate(self, html: str | bytes | DocumentContext, requirements: Requirements) -> dict[str, Any]:
		"""Generate an XPath extraction schema.

		Raises:
			ValueError: If ``requirements`` is not a usable object schema.
			ResponseParseError: If the model reply is not JSON.
			InvalidSchemaError: If the reply is JSON but not an object of field definitions.
			ModelProviderError: If the provider call fails.
		"""
		properties = requirements_properties(requirements)
		processed_html = preprocess_html(html, max_repeated_items=self.max_repeated_items)

		messages = [
			SystemMessage(content=build_schema_prompt(properties)),
			UserMessage(content=processed_html),
		]

		logger.info(f'Generating XPath schema for fields {list(properties)} with {self.llm.name}')
		response = await self.llm.ainvoke(messages)

		schema = parse_json_response(response.completion)
		if not isinstance(schema, dict):
			raise InvalidSchemaError(f'Generated schema must be a JSON object, got {type(schema).__name__}')

		# A schema that cannot be parsed is never returned or saved
		parse_extraction_schema(schema)

		missing = [name for name in properties if name not in schema]
		if missing:
			logger.warning(f'Generated schema has no definition for requested fields: {missing}')
		return schema
