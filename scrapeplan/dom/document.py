# @file purpose: lxml-backed HTML parsing and XPath evaluation used by the schema extractor

import logging
from typing import Any, TypeAlias

from lxml import etree
from lxml import html as lxml_html

logger = logging.getLogger(__name__)

DocumentContext: TypeAlias = etree._Element | etree._ElementTree

_EMPTY_DOCUMENT = '<html><body></body></html>'


def is_document_context(obj: Any) -> bool:
	return isinstance(obj, (etree._Element, etree._ElementTree))


def parse_html(content: str | bytes | DocumentContext) -> DocumentContext:
	"""Parse HTML into an lxml tree. Fragments are wrapped in html/body like a browser would.

	Already parsed trees and elements are returned as-is.
	"""
	if is_document_context(content):
		return content

	if isinstance(content, str):
		if not content.strip():
			content = _EMPTY_DOCUMENT
		elif content.lstrip().startswith('<?xml'):
			# lxml refuses str input carrying an encoding declaration
			content = content.encode('utf-8')
	elif not content.strip():
		content = _EMPTY_DOCUMENT.encode()

	try:
		return lxml_html.document_fromstring(content).getroottree()
	except etree.ParserError:
		# Comment-only or doctype-only input has no root element
		return lxml_html.document_fromstring(_EMPTY_DOCUMENT).getroottree()


def _owner_element(value: Any) -> etree._Element | None:
	"""Element an attribute or text result belongs to, as XPath's parent axis sees it."""
	getparent = getattr(value, 'getparent', None)
	parent = getparent() if getparent is not None else None
	if parent is not None and getattr(value, 'is_tail', False):
		# A tail text node is a sibling of the element lxml hangs it on
		return parent.getparent()
	return parent


class XPathEvaluator:
	"""Evaluates XPath expressions against a document context.

	The extractor only ever reads through this class, so subclasses can observe or
	redirect queries without touching the document.
	"""

	def evaluate(self, context: Any, xpath: str) -> Any:
		"""Return the raw XPath result: a node-set list, or a scalar for string/number/boolean expressions.

		An expression lxml cannot compile or evaluate is treated as matching nothing.
		"""
		if not is_document_context(context):
			return self._evaluate_on_value(context, xpath)
		return self._xpath(context, xpath)

	def _xpath(self, context: DocumentContext, xpath: str) -> Any:
		try:
			return context.xpath(xpath)
		except etree.XPathError as e:
			logger.warning(f'XPath {xpath!r} could not be evaluated, treating as no match: {e}')
			return []

	def _evaluate_on_value(self, value: Any, xpath: str) -> Any:
		"""Evaluate ``xpath`` with an attribute or text result as the context node.

		lxml only accepts elements as a context, so the value is stood in for by a detached
		text-only element, which has the same string-value. Queries climbing with ``..`` or
		starting at the document root run against the owning element instead.
		"""
		query = xpath.strip()
		if query in ('.', 'self::node()'):
			return [value]

		if query.startswith('..') or query.startswith('/'):
			owner = _owner_element(value)
			if owner is None:
				return []
			return self._xpath(owner, '.' + query[2:] if query.startswith('..') else query)

		stand_in = etree.Element('value')
		stand_in.text = str(value)
		return self._xpath(stand_in, query)

	def narrow(self, context: DocumentContext, xpath: str) -> etree._Element | None:
		"""Return the first element matched by ``xpath``, or ``None``."""
		result = self.evaluate(context, xpath)
		if isinstance(result, list) and result and isinstance(result[0], etree._Element):
			return result[0]
		return None
