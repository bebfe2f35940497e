"""Tests for schema generation, direct LLM extraction and the scrape flow."""

import json

import pytest
from pydantic import BaseModel

from scrapeplan.extraction.views import InvalidSchemaError
from scrapeplan.generator.llm_extractor import LLMExtractor
from scrapeplan.generator.service import SchemaGenerator
from scrapeplan.llm.messages import SystemMessage, UserMessage
from scrapeplan.llm.openai.chat import ChatOpenAI
from scrapeplan.llm.response_parser import ResponseParseError
from scrapeplan.service import load_or_generate_schema, scrape
from tests.ci.conftest import create_mock_llm

GENERATED_SCHEMA = {
	'repos': {
		'type': 'array',
		'container_xpath': '//article',
		'items': {
			'name': {'xpath': './/h3', 'type': 'string', 'transform': 'trim'},
			'url': {'xpath': './/h3/a/@href', 'type': 'string'},
		},
	}
}


class Repo(BaseModel):
	name: str | None
	url: str | None


class Repos(BaseModel):
	repos: list[Repo]


class TestSchemaGenerator:
	"""Tests for SchemaGenerator.generate."""

	@pytest.mark.asyncio
	async def test_returns_parsed_schema_from_fenced_reply(self, repos_html):
		llm = create_mock_llm('```json\n' + json.dumps(GENERATED_SCHEMA) + '\n```')

		schema = await SchemaGenerator(llm=llm).generate(repos_html, Repos)

		assert schema == GENERATED_SCHEMA

	@pytest.mark.asyncio
	async def test_prompt_contains_requirements_and_preprocessed_html(self, repos_html):
		llm = create_mock_llm(json.dumps(GENERATED_SCHEMA))

		await SchemaGenerator(llm=llm).generate(repos_html, Repos)

		messages = llm.ainvoke.call_args.args[0]
		assert isinstance(messages[0], SystemMessage)
		assert isinstance(messages[1], UserMessage)
		assert '"repos"' in messages[0].content
		assert 'container_xpath' in messages[0].content
		assert '<script' not in messages[1].content
		assert 'octo / alpha' in messages[1].content
		assert llm.ainvoke.call_args.kwargs.get('output_format') is None

	@pytest.mark.asyncio
	async def test_accepts_json_schema_requirements(self, repos_html):
		llm = create_mock_llm(json.dumps({'title': {'xpath': '//h3'}}))
		requirements = {'type': 'object', 'properties': {'title': {'type': 'string'}}}

		schema = await SchemaGenerator(llm=llm).generate(repos_html, requirements)

		assert schema == {'title': {'xpath': '//h3'}}

	@pytest.mark.asyncio
	async def test_non_json_reply_raises(self, repos_html):
		llm = create_mock_llm('I could not find any repositories.')

		with pytest.raises(ResponseParseError):
			await SchemaGenerator(llm=llm).generate(repos_html, Repos)

	@pytest.mark.asyncio
	async def test_non_object_reply_raises(self, repos_html):
		llm = create_mock_llm('[{"xpath": "//h3"}]')

		with pytest.raises(InvalidSchemaError):
			await SchemaGenerator(llm=llm).generate(repos_html, Repos)

	def test_default_llm_comes_from_configuration(self):
		import scrapeplan

		scrapeplan.configure(model='gpt-4o', api_key='configured-key')

		generator = SchemaGenerator()

		assert isinstance(generator.llm, ChatOpenAI)
		assert generator.llm.model == 'gpt-4o'
		assert generator.llm.api_key == 'configured-key'


class TestLLMExtractor:
	"""Tests for direct extraction."""

	@pytest.mark.asyncio
	async def test_returns_structured_output_as_dict(self, repos_html):
		llm = create_mock_llm()
		llm.ainvoke.return_value.completion = Repos(repos=[Repo(name='octo / alpha', url='/octo/alpha')])

		data = await LLMExtractor(llm=llm).extract(repos_html, Repos)

		assert data == {'repos': [{'name': 'octo / alpha', 'url': '/octo/alpha'}]}
		assert llm.ainvoke.call_args.kwargs['output_format'] is Repos

	@pytest.mark.asyncio
	async def test_does_not_truncate_repeated_items(self, repos_html):
		llm = create_mock_llm()
		llm.ainvoke.return_value.completion = Repos(repos=[])
		html = repos_html.replace('</div>\n\t<footer>', '<article>fourth</article><article>fifth</article></div><footer>')

		await LLMExtractor(llm=llm).extract(html, Repos)

		assert 'fifth' in llm.ainvoke.call_args.args[0][1].content

	@pytest.mark.asyncio
	async def test_json_schema_requirements_get_a_runtime_model(self, repos_html):
		llm = create_mock_llm()
		llm.ainvoke.return_value.completion = {'title': 'x'}
		requirements = {'type': 'object', 'properties': {'title': {'type': 'string'}}}

		data = await LLMExtractor(llm=llm).extract(repos_html, requirements)

		assert data == {'title': 'x'}
		output_format = llm.ainvoke.call_args.kwargs['output_format']
		assert set(output_format.model_fields) == {'title'}


class TestScrape:
	"""Tests for the schema caching flow."""

	@pytest.mark.asyncio
	async def test_generates_saves_and_extracts(self, repos_html, tmp_path):
		schema_path = tmp_path / 'schemas' / 'repos.json'
		llm = create_mock_llm(json.dumps(GENERATED_SCHEMA))

		data = await scrape(repos_html, Repos, schema_path=schema_path, llm=llm)

		assert json.loads(schema_path.read_text()) == GENERATED_SCHEMA
		assert data == {
			'repos': [
				{'name': 'octo / alpha', 'url': '/octo/alpha'},
				{'name': 'octo / beta', 'url': '/octo/beta'},
				{'name': None, 'url': None},
			]
		}
		llm.ainvoke.assert_awaited_once()

	@pytest.mark.asyncio
	async def test_cached_schema_skips_model(self, repos_html, tmp_path):
		schema_path = tmp_path / 'repos.json'
		schema_path.write_text(json.dumps({'first': {'xpath': '//h3', 'type': 'string'}}))
		llm = create_mock_llm()

		data = await scrape(repos_html, Repos, schema_path=schema_path, llm=llm)

		assert data == {'first': 'octo / alpha'}
		llm.ainvoke.assert_not_awaited()

	@pytest.mark.asyncio
	async def test_second_call_reuses_generated_schema(self, repos_html, tmp_path):
		schema_path = tmp_path / 'repos.json'
		llm = create_mock_llm(json.dumps(GENERATED_SCHEMA))

		first = await scrape(repos_html, Repos, schema_path=str(schema_path), llm=llm)
		second = await scrape(repos_html, Repos, schema_path=str(schema_path), llm=llm)

		assert first == second
		assert llm.ainvoke.await_count == 1

	@pytest.mark.asyncio
	async def test_without_schema_path_uses_direct_extraction(self, repos_html):
		llm = create_mock_llm()
		llm.ainvoke.return_value.completion = Repos(repos=[])

		data = await scrape(repos_html, Repos, llm=llm)

		assert data == {'repos': []}
		assert llm.ainvoke.call_args.kwargs['output_format'] is Repos

	@pytest.mark.asyncio
	async def test_invalid_generated_schema_is_not_saved(self, repos_html, tmp_path):
		schema_path = tmp_path / 'repos.json'
		llm = create_mock_llm('"not an object"')

		with pytest.raises(InvalidSchemaError):
			await load_or_generate_schema(repos_html, Repos, schema_path, llm=llm)

		assert not schema_path.exists()
