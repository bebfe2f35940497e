"""Direct extraction mode: the chat model reads the page and returns the data, no schema involved."""

import logging
from typing import Any

from scrapeplan.dom.document import DocumentContext
from scrapeplan.dom.preprocessor import preprocess_html
from scrapeplan.generator.prompts import build_extraction_prompt
from scrapeplan.generator.requirements import Requirements, requirements_model, requirements_properties
from scrapeplan.llm.base import BaseChatModel
from scrapeplan.llm.messages import SystemMessage, UserMessage
from scrapeplan.llm.response_parser import parse_json_response

logger = logging.getLogger(__name__)


class LLMExtractor:
	"""Extracts data with one model call per document.

	Use this for one-off pages; for many similar pages generate a schema once instead.
	"""

	def __init__(self, llm: BaseChatModel | None = None):
		if llm is None:
			from scrapeplan.config import create_chat_model

			llm = create_chat_model()
		self.llm = llm

	async def extract(self, html: str | bytes | DocumentContext, requirements: Requirements) -> dict[str, Any]:
		output_model = requirements_model(requirements)
		properties = requirements_properties(requirements)

		# Repeated items are kept: the model must see every item to return it
		processed_html = preprocess_html(html, max_repeated_items=None)

		messages = [
			SystemMessage(content=build_extraction_prompt(properties)),
			UserMessage(content=processed_html),
		]

		logger.info(f'Extracting fields {list(properties)} directly with {self.llm.name}')
		response = await self.llm.ainvoke(messages, output_format=output_model)
		return parse_json_response(response.completion)
