"""
Command-line interface for scrapeplan.

    scrapeplan extract page.html repos_schema.json
    scrapeplan generate page.html requirements.json -o repos_schema.json
    scrapeplan scrape page.html requirements.json --schema repos_schema.json
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from scrapeplan.logging_config import setup_logging

# Data goes to stdout so it can be piped; status messages go to stderr
console = Console(stderr=True)


def _read_json(path: Path, what: str) -> Any:
	try:
		return json.loads(path.read_text(encoding='utf-8'))
	except json.JSONDecodeError as e:
		raise click.ClickException(f'{what} {path} is not valid JSON: {e}') from e


def _emit(data: Any, output: Path | None = None) -> None:
	text = json.dumps(data, indent=2, ensure_ascii=False)
	if output is None:
		click.echo(text)
		return
	output.parent.mkdir(parents=True, exist_ok=True)
	output.write_text(text, encoding='utf-8')
	console.print(f'[green]✓[/green] Wrote [cyan]{output}[/cyan]')


def _run(coro) -> Any:
	from scrapeplan.llm.exceptions import ModelProviderError

	try:
		return asyncio.run(coro)
	except ModelProviderError as e:
		raise click.ClickException(f'Model provider error ({e.status_code}): {e.message}') from e
	# InvalidSchemaError and ResponseParseError are ValueErrors
	except ValueError as e:
		raise click.ClickException(str(e)) from e


@click.group()
@click.option(
	'--log-level',
	type=click.Choice(['debug', 'info', 'warning', 'error'], case_sensitive=False),
	default=None,
	help='Logging level (default: SCRAPEPLAN_LOGGING_LEVEL or info)',
)
def cli(log_level: str | None) -> None:
	"""Reusable XPath extraction plans for similar HTML pages."""
	setup_logging(log_level)


@cli.command()
@click.argument('html_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('schema_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('-o', '--output', type=click.Path(dir_okay=False, path_type=Path), help='Write JSON here instead of stdout')
def extract(html_file: Path, schema_file: Path, output: Path | None) -> None:
	"""Apply an XPath schema to an HTML file. No model calls."""
	from scrapeplan.extraction.service import SchemaExtractor
	from scrapeplan.extraction.views import InvalidSchemaError

	try:
		extractor = SchemaExtractor(_read_json(schema_file, 'Schema'))
	except InvalidSchemaError as e:
		raise click.ClickException(str(e)) from e

	_emit(extractor.extract(html_file.read_bytes()), output)


@cli.command()
@click.argument('html_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('requirements_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('-o', '--output', type=click.Path(dir_okay=False, path_type=Path), help='Write the schema here instead of stdout')
@click.option('--model', default=None, help='Model name (default: configured model)')
def generate(html_file: Path, requirements_file: Path, output: Path | None, model: str | None) -> None:
	"""Generate an XPath schema for a JSON Schema requirements file."""
	from scrapeplan.config import create_chat_model
	from scrapeplan.generator.service import SchemaGenerator

	requirements = _read_json(requirements_file, 'Requirements')
	generator = SchemaGenerator(llm=create_chat_model(model))

	console.print(f'[bold]Generating XPath schema[/bold] with [cyan]{generator.llm.name}[/cyan]...')
	schema = _run(generator.generate(html_file.read_bytes(), requirements))
	_emit(schema, output)


@cli.command()
@click.argument('html_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('requirements_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
	'--schema',
	'schema_path',
	type=click.Path(dir_okay=False, path_type=Path),
	default=None,
	help='Cached XPath schema; generated and saved here when missing. Omit for direct LLM extraction.',
)
@click.option('-o', '--output', type=click.Path(dir_okay=False, path_type=Path), help='Write JSON here instead of stdout')
@click.option('--model', default=None, help='Model name (default: configured model)')
def scrape(html_file: Path, requirements_file: Path, schema_path: Path | None, output: Path | None, model: str | None) -> None:
	"""Extract requirements from an HTML file, reusing or creating a cached schema."""
	from scrapeplan.config import create_chat_model
	from scrapeplan.service import scrape as scrape_page

	requirements = _read_json(requirements_file, 'Requirements')
	llm = None
	if schema_path is None or not schema_path.exists():
		llm = create_chat_model(model)

	data = _run(scrape_page(html_file.read_bytes(), requirements, schema_path=schema_path, llm=llm))
	_emit(data, output)


def main() -> None:
	cli()


if __name__ == '__main__':
	main()
