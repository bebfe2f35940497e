"""Shared fixtures for scrapeplan tests."""

from unittest.mock import AsyncMock

import pytest

from scrapeplan.llm.base import BaseChatModel
from scrapeplan.llm.views import ChatInvokeCompletion

REPOS_HTML = """
<html>
<head><title>Trending</title><script>window.state = {"x": 1};</script></head>
<body>
	<div data-testid="results-list">
		<article class="repo">
			<h3><a href="/octo/alpha">octo / alpha</a></h3>
			<p class="description">  First
				repository  </p>
			<a class="stars" href="/octo/alpha/stargazers">1,204 stars</a>
			<a class="tag" href="/topics/python">python</a>
			<a class="tag" href="/topics/cli">cli</a>
		</article>
		<article class="repo">
			<h3><a href="/octo/beta">octo / beta</a></h3>
			<a class="stars" href="/octo/beta/stargazers">1.1k stars</a>
		</article>
		<article class="repo">
			<span class="placeholder">No title</span>
		</article>
	</div>
	<footer><span id="updated" data-ts="2024-05-01">Updated today</span></footer>
</body>
</html>
"""


def create_mock_llm(completion: str | dict = '{}', model_name: str = 'mock-llm') -> AsyncMock:
	"""Create a mock chat model whose ainvoke returns ``completion``."""
	llm = AsyncMock(spec=BaseChatModel)
	llm.model = model_name
	llm.provider = 'mock'
	llm.name = model_name
	llm.ainvoke.return_value = ChatInvokeCompletion(completion=completion, usage=None)
	return llm


@pytest.fixture
def repos_html() -> str:
	return REPOS_HTML


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
	"""Keep configure() calls and real credentials from leaking between tests."""
	from scrapeplan import config

	monkeypatch.setenv('OPENAI_API_KEY', 'test-api-key')
	monkeypatch.delenv('OPENAI_BASE_URL', raising=False)
	monkeypatch.delenv('SCRAPEPLAN_MODEL', raising=False)
	config.reset_config()
	yield
	config.reset_config()
