"""Process-wide model configuration for schema generation and direct extraction.

The extraction engine never reads this module; only the LLM-backed steps do.

Example:
    import scrapeplan

    scrapeplan.configure(model='gpt-4o', api_key=os.environ['OPENAI_API_KEY'])
"""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from scrapeplan.llm.openai.chat import ChatOpenAI

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gpt-4o-mini'
DEFAULT_BASE_URL = 'https://api.openai.com/v1'


class Config(BaseModel):
	"""Model provider settings. Defaults are read from the environment when the object is created."""

	model_config = ConfigDict(extra='forbid', validate_assignment=True)

	model: str = Field(default_factory=lambda: os.getenv('SCRAPEPLAN_MODEL', DEFAULT_MODEL))
	api_key: str | None = Field(default_factory=lambda: os.getenv('OPENAI_API_KEY'), repr=False)
	base_url: str = Field(default_factory=lambda: os.getenv('OPENAI_BASE_URL', DEFAULT_BASE_URL))
	temperature: float | None = 0.0
	timeout: float = Field(default=120.0, gt=0)
	max_retries: int = Field(default=5, ge=0)


CONFIG = Config()


def get_config() -> Config:
	return CONFIG


def configure(**overrides: Any) -> Config:
	"""Replace the process-wide configuration.

	Unspecified settings keep their current values. Unknown settings raise a pydantic ``ValidationError``.
	"""
	global CONFIG
	CONFIG = Config.model_validate({**CONFIG.model_dump(), **overrides})
	logger.debug(f'Configured model {CONFIG.model} at {CONFIG.base_url}')
	return CONFIG


def reset_config() -> Config:
	"""Rebuild the configuration from the environment, discarding ``configure()`` overrides."""
	global CONFIG
	CONFIG = Config()
	return CONFIG


def create_chat_model(model: str | None = None) -> ChatOpenAI:
	"""Build a chat model from the current configuration, optionally overriding the model name."""
	config = get_config()
	return ChatOpenAI(
		model=model or config.model,
		api_key=config.api_key,
		base_url=config.base_url,
		temperature=config.temperature,
		timeout=config.timeout,
		max_retries=config.max_retries,
	)
