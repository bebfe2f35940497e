"""
High-level scraping flow.

With a schema path, the XPath schema is loaded from disk, or generated from the first document and
saved there, and every later call runs offline. Without one, each call asks the model directly.
"""

import json
import logging
from pathlib import Path
from typing import Any

from scrapeplan.dom.document import DocumentContext, parse_html
from scrapeplan.extraction.service import SchemaExtractor
from scrapeplan.generator.llm_extractor import LLMExtractor
from scrapeplan.generator.requirements import Requirements
from scrapeplan.generator.service import SchemaGenerator
from scrapeplan.llm.base import BaseChatModel

logger = logging.getLogger(__name__)


async def load_or_generate_schema(
	html: str | bytes | DocumentContext,
	requirements: Requirements,
	schema_path: str | Path,
	llm: BaseChatModel | None = None,
) -> dict[str, Any]:
	"""Return the cached XPath schema at ``schema_path``, generating and saving it if missing."""
	path = Path(schema_path)
	if path.exists():
		logger.debug(f'Using cached XPath schema {path}')
		return json.loads(path.read_text(encoding='utf-8'))

	schema = await SchemaGenerator(llm=llm).generate(html, requirements)

	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(json.dumps(schema, indent=2, ensure_ascii=False), encoding='utf-8')
	logger.info(f'Saved generated XPath schema to {path}')
	return schema


async def scrape(
	html: str | bytes | DocumentContext,
	requirements: Requirements,
	schema_path: str | Path | None = None,
	llm: BaseChatModel | None = None,
) -> dict[str, Any]:
	"""Extract ``requirements`` from an HTML page.

	Args:
	    html: HTML string or parsed lxml tree
	    requirements: Pydantic model class or JSON Schema dict describing the output
	    schema_path: Where the reusable XPath schema is cached; ``None`` uses direct LLM extraction
	    llm: Chat model for generation or direct extraction, defaults to the configured one

	Returns:
	    Extracted data keyed by requirement field names
	"""
	if schema_path is None:
		return await LLMExtractor(llm=llm).extract(html, requirements)

	document = parse_html(html)
	schema = await load_or_generate_schema(document, requirements, schema_path, llm=llm)
	return SchemaExtractor(schema).extract(document)
