"""Reusable XPath extraction plans for families of similar HTML pages.

Example:
    from pydantic import BaseModel
    from scrapeplan import scrape

    class Repo(BaseModel):
        name: str
        url: str

    class Repos(BaseModel):
        repos: list[Repo]

    data = await scrape(html, Repos, schema_path='repos_schema.json')
"""

from scrapeplan.config import Config, configure, create_chat_model
from scrapeplan.extraction import (
	ExtractionSchema,
	InvalidSchemaError,
	SchemaExtractor,
	coerce_value,
	deep_stringify_keys,
	extract,
	parse_extraction_schema,
	resolve_raw_value,
)
from scrapeplan.generator import LLMExtractor, SchemaGenerator
from scrapeplan.llm import ChatOpenAI, ModelProviderError, ModelRateLimitError, ResponseParseError
from scrapeplan.service import load_or_generate_schema, scrape

__all__ = [
	# Offline extraction
	'extract',
	'SchemaExtractor',
	'ExtractionSchema',
	'parse_extraction_schema',
	'deep_stringify_keys',
	'resolve_raw_value',
	'coerce_value',
	# LLM-backed steps
	'scrape',
	'load_or_generate_schema',
	'SchemaGenerator',
	'LLMExtractor',
	'ChatOpenAI',
	# Configuration
	'Config',
	'configure',
	'create_chat_model',
	# Errors
	'InvalidSchemaError',
	'ModelProviderError',
	'ModelRateLimitError',
	'ResponseParseError',
]
