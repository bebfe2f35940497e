from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar('T')


class ChatInvokeUsage(BaseModel):
	"""Token usage reported by the provider for one call."""

	prompt_tokens: int
	completion_tokens: int
	total_tokens: int


class ChatInvokeCompletion(BaseModel, Generic[T]):
	"""Response from a chat model invocation."""

	completion: T
	usage: ChatInvokeUsage | None = None
