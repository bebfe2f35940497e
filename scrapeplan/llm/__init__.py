"""
Chat model layer used for schema generation and direct LLM extraction.
"""

from scrapeplan.llm.base import BaseChatModel
from scrapeplan.llm.exceptions import ModelError, ModelProviderError, ModelRateLimitError
from scrapeplan.llm.messages import AssistantMessage, BaseMessage, SystemMessage, UserMessage
from scrapeplan.llm.openai.chat import ChatOpenAI
from scrapeplan.llm.response_parser import ResponseParseError, parse_json_response, strip_code_fences
from scrapeplan.llm.views import ChatInvokeCompletion, ChatInvokeUsage

__all__ = [
	# Models
	'BaseChatModel',
	'ChatOpenAI',
	# Messages
	'BaseMessage',
	'SystemMessage',
	'UserMessage',
	'AssistantMessage',
	# Results
	'ChatInvokeCompletion',
	'ChatInvokeUsage',
	# Errors
	'ModelError',
	'ModelProviderError',
	'ModelRateLimitError',
	'ResponseParseError',
	# Reply parsing
	'parse_json_response',
	'strip_code_fences',
]
