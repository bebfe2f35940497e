from scrapeplan.generator.llm_extractor import LLMExtractor
from scrapeplan.generator.requirements import Requirements, requirements_json_schema, requirements_model, requirements_properties
from scrapeplan.generator.service import SchemaGenerator

__all__ = [
	'SchemaGenerator',
	'LLMExtractor',
	'Requirements',
	'requirements_json_schema',
	'requirements_model',
	'requirements_properties',
]
