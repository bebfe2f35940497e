import json
from typing import Any

XPATH_SCHEMA_FORMAT = """## XPath Schema Format

For each field in requirements, generate the corresponding XPath definition:

1. **For primitive types** (string, integer, number, boolean):
   ```json
   {
     "field_name": {
       "xpath": "//div[@class='example']",
       "type": "string",
       "transform": "trim"
     }
   }
   ```

2. **For nested objects**:
   ```json
   {
     "author": {
       "type": "object",
       "context_xpath": "//div[@class='author']",
       "properties": {
         "name": {"xpath": ".//span[@class='name']", "type": "string"}
       }
     }
   }
   ```

3. **For arrays of objects**:
   ```json
   {
     "items_list": {
       "type": "array",
       "container_xpath": "//div[@class='item']",
       "items": {
         "name": {"xpath": ".//h3", "type": "string", "transform": "trim"},
         "price": {"xpath": ".//span[@class='price']", "type": "number", "transform": "to_float"}
       }
     }
   }
   ```

4. **For arrays of strings**:
   ```json
   {
     "tags": {
       "type": "array",
       "container_xpath": ".//a[@class='tag']",
       "items": {
         "xpath": ".",
         "type": "string",
         "transform": "trim"
       }
     }
   }
   ```
"""

XPATH_RULES = """## XPath Rules

- Use `container_xpath` to identify repeating elements for arrays
- Use relative XPaths (starting with `.//` or `.`) for fields inside arrays and objects
- Do NOT use `/text()` - just select the element, we extract text automatically
- Use `@attr` to extract attribute values (e.g., `@href`, `@src`), especially for fields ending in `link` or `url`
- AVOID dynamic/hashed class names like `Box-sc-62in7e-0`, `css-1a2b3c`
- Prefer semantic attributes: `@data-testid`, `@role`, `@aria-label`
- Prefer tag structure: `//article//h3/a` over class-based selectors
- Available transforms: "trim", "to_int", "to_float", "strip_tags"
"""


def build_schema_prompt(requirements_properties: dict[str, Any]) -> str:
	"""System prompt asking the model for an XPath extraction schema."""
	return f"""You are an expert at analyzing HTML structure and generating XPath expressions.

## Task
Analyze the provided HTML and generate an XPath schema that can extract data
matching the requirements schema below. Return ONLY valid JSON, no other text.

## Requirements Schema (what to extract)
```json
{json.dumps(requirements_properties, indent=2)}
```

{XPATH_SCHEMA_FORMAT}
{XPATH_RULES}
## Output

Return ONLY the JSON XPath schema. No explanations, no markdown code blocks.
"""


def build_extraction_prompt(requirements_properties: dict[str, Any]) -> str:
	"""System prompt for direct extraction, where the model returns the data itself."""
	return f"""You are a web data extraction expert.

## Task
Extract data from the provided HTML according to the JSON schema.
Return ONLY valid JSON, no other text.
STRICTLY FOLLOW the requirements schema provided.

## Requirements Schema (what to extract)
```json
{json.dumps(requirements_properties, indent=2)}
```
"""
