from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar, overload

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, RateLimitError
from openai.types.chat.chat_completion import ChatCompletion
from openai.types.shared_params.response_format_json_schema import (
	JSONSchema,
	ResponseFormatJSONSchema,
)
from pydantic import BaseModel

from scrapeplan.llm.base import BaseChatModel
from scrapeplan.llm.exceptions import ModelProviderError, ModelRateLimitError
from scrapeplan.llm.messages import BaseMessage
from scrapeplan.llm.response_parser import parse_json_response
from scrapeplan.llm.schema import SchemaOptimizer
from scrapeplan.llm.views import ChatInvokeCompletion, ChatInvokeUsage

logger = logging.getLogger(__name__)
T = TypeVar('T', bound=BaseModel)


@dataclass
class ChatOpenAI(BaseChatModel):
	"""
	A wrapper around an OpenAI-compatible /chat/completions API.

	Examples:
		```python
	        from scrapeplan import ChatOpenAI, SchemaGenerator

	        llm = ChatOpenAI(model='gpt-4o', base_url='http://localhost:8000/v1')

	        schema = await SchemaGenerator(llm=llm).generate(html, requirements)
		```

	Args:
	    model: The model identifier
	    api_key: API key, falls back to OPENAI_API_KEY
	    base_url: Any endpoint exposing the OpenAI chat completions API
	    temperature: Sampling temperature
	    timeout: Request timeout in seconds
	    max_retries: Retries after the first attempt for rate limits, 5xx responses and connection errors
	"""

	model: str = 'gpt-4o-mini'

	# Generation params
	temperature: float | None = 0.0
	max_tokens: int | None = None
	seed: int | None = None

	# Client params
	api_key: str | None = None
	base_url: str | httpx.URL = 'https://api.openai.com/v1'
	timeout: float | httpx.Timeout | None = 120.0
	max_retries: int = 5
	default_headers: Mapping[str, str] | None = None
	http_client: httpx.AsyncClient | None = None

	@property
	def provider(self) -> str:
		return 'openai'

	@property
	def name(self) -> str:
		return str(self.model)

	def _get_api_key(self) -> str:
		key = self.api_key or os.getenv('OPENAI_API_KEY')
		if not key:
			raise ModelProviderError('Missing OpenAI API key', status_code=401, model=self.name)
		return key

	def _get_client_params(self) -> dict[str, Any]:
		base_params = {
			'api_key': self._get_api_key(),
			'base_url': self.base_url,
			'timeout': self.timeout,
			'max_retries': self.max_retries,
			'default_headers': self.default_headers,
		}

		client_params = {k: v for k, v in base_params.items() if v is not None}

		if self.http_client is not None:
			client_params['http_client'] = self.http_client

		return client_params

	def get_client(self) -> AsyncOpenAI:
		if not hasattr(self, '_client'):
			self._client = AsyncOpenAI(**self._get_client_params())
		return self._client

	async def aclose(self) -> None:
		"""Close the client created by this model. A caller-supplied ``http_client`` is left open."""
		client = getattr(self, '_client', None)
		if client is None:
			return
		if self.http_client is None:
			await client.close()
		del self._client

	def _get_usage(self, response: ChatCompletion) -> ChatInvokeUsage | None:
		if response.usage is None:
			return None

		return ChatInvokeUsage(
			prompt_tokens=response.usage.prompt_tokens,
			completion_tokens=response.usage.completion_tokens,
			total_tokens=response.usage.total_tokens,
		)

	@overload
	async def ainvoke(
		self, messages: list[BaseMessage], output_format: None = None, **kwargs: Any
	) -> ChatInvokeCompletion[str]: ...

	@overload
	async def ainvoke(self, messages: list[BaseMessage], output_format: type[T], **kwargs: Any) -> ChatInvokeCompletion[T]: ...

	async def ainvoke(
		self, messages: list[BaseMessage], output_format: type[T] | None = None, **kwargs: Any
	) -> ChatInvokeCompletion[T] | ChatInvokeCompletion[str]:
		"""
		Invoke the model with the given messages.

		Args:
		    messages: List of chat messages
		    output_format: Optional Pydantic model class for structured output

		Returns:
		    Either a string response or an instance of output_format
		"""
		request_params: dict[str, Any] = {}
		if self.temperature is not None:
			request_params['temperature'] = self.temperature
		if self.max_tokens is not None:
			request_params['max_tokens'] = self.max_tokens
		if self.seed is not None:
			request_params['seed'] = self.seed

		if output_format is not None:
			response_format_schema: JSONSchema = {
				'name': 'extraction_output',
				'strict': True,
				'schema': SchemaOptimizer.create_optimized_json_schema(output_format),
			}
			request_params['response_format'] = ResponseFormatJSONSchema(
				json_schema=response_format_schema,
				type='json_schema',
			)

		try:
			response = await self.get_client().chat.completions.create(
				model=self.model,
				messages=[message.model_dump() for message in messages],  # type: ignore[misc]
				**request_params,
			)

			if not response.choices:
				raise ModelProviderError('Provider returned no choices', model=self.name)

			content = response.choices[0].message.content or ''
			usage = self._get_usage(response)

			if output_format is None:
				return ChatInvokeCompletion(completion=content, usage=usage)

			parsed = output_format.model_validate(parse_json_response(content))
			return ChatInvokeCompletion(completion=parsed, usage=usage)

		except ModelProviderError:
			raise

		except RateLimitError as e:
			raise ModelRateLimitError(message=e.message, model=self.name) from e

		except APITimeoutError as e:
			raise ModelProviderError(message=str(e), status_code=504, model=self.name) from e

		except APIConnectionError as e:
			raise ModelProviderError(message=str(e), model=self.name) from e

		except APIStatusError as e:
			raise ModelProviderError(message=e.message, status_code=e.status_code, model=self.name) from e

		except Exception as e:
			logger.error(f'Chat completion failed: {e}')
			raise ModelProviderError(message=str(e), model=self.name) from e
