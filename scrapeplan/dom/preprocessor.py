"""
HTML size reduction before a document is sent to a model.

Schema generation and direct extraction both send raw page markup to the LLM. This module
removes markup that never carries extractable content and trims long runs of repeated items so
the prompt stays small.
"""

import copy
import logging
import re

from lxml import etree
from lxml import html as lxml_html

from scrapeplan.dom.document import DocumentContext, is_document_context, parse_html

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ('script', 'style', 'noscript', 'svg', 'path', 'meta', 'link', 'head')

# Repeated-item lists commonly found on listing and search pages
REPEATED_ITEM_XPATHS = (
	'//*[@data-testid="results-list"]/*',
	'//*[contains(concat(" ", normalize-space(@class), " "), " search-results ")]/*',
	'//*[contains(concat(" ", normalize-space(@class), " "), " list-items ")]/*',
	'//ul[contains(concat(" ", normalize-space(@class), " "), " results ")]/li',
	'//*[contains(concat(" ", normalize-space(@class), " "), " product-list ")]/*',
	'//table/tbody/tr',
)

_WHITESPACE_RE = re.compile(r'\s+')


def _remove(element: etree._Element) -> None:
	"""Remove an element but keep its tail text in the parent."""
	if isinstance(element, lxml_html.HtmlMixin):
		element.drop_tree()
		return
	parent = element.getparent()
	if parent is None:
		return
	if element.tail:
		previous = element.getprevious()
		if previous is not None:
			previous.tail = (previous.tail or '') + element.tail
		else:
			parent.text = (parent.text or '') + element.tail
	parent.remove(element)


def _strip_non_content(root: etree._Element) -> int:
	tags = ' | '.join(f'//{tag}' for tag in NON_CONTENT_TAGS)
	removed = 0
	for element in root.xpath(tags):
		# Nested matches (path inside svg) are already gone with their ancestor
		if element.getroottree().getroot() is root:
			_remove(element)
			removed += 1
	return removed


def _strip_style_attributes(root: etree._Element) -> None:
	for element in root.iter():
		if isinstance(element.tag, str):
			element.attrib.pop('style', None)


def truncate_repeated_items(root: etree._Element, max_items: int = 3) -> int:
	"""Keep only the first ``max_items`` children of each repeated-item list.

	The cap applies per parent element, not across the whole document: two separate result
	lists each keep their first ``max_items`` items.

	Returns:
		Number of elements removed
	"""
	removed = 0
	for xpath in REPEATED_ITEM_XPATHS:
		seen: dict[etree._Element, int] = {}
		for item in root.xpath(xpath):
			parent = item.getparent()
			if parent is None:
				continue
			seen[parent] = seen.get(parent, 0) + 1
			if seen[parent] > max_items:
				_remove(item)
				removed += 1
	return removed


def preprocess_html(html: str | bytes | DocumentContext, max_repeated_items: int | None = 3) -> str:
	"""Reduce HTML for a model prompt.

	Args:
	    html: HTML string or parsed lxml tree (never modified; trees are copied)
	    max_repeated_items: Items to keep per repeated-item list, ``None`` to keep all

	Returns:
	    Cleaned HTML with whitespace runs collapsed to single spaces
	"""
	document = copy.deepcopy(html) if is_document_context(html) else parse_html(html)
	root = document.getroot() if isinstance(document, etree._ElementTree) else document

	original_length = len(lxml_html.tostring(root, encoding='unicode'))

	removed_tags = _strip_non_content(root)
	_strip_style_attributes(root)
	removed_items = truncate_repeated_items(root, max_repeated_items) if max_repeated_items is not None else 0

	content = _WHITESPACE_RE.sub(' ', lxml_html.tostring(root, encoding='unicode')).strip()

	logger.debug(
		f'Preprocessed HTML {original_length} -> {len(content)} chars '
		f'({removed_tags} non-content elements, {removed_items} repeated items removed)'
	)
	return content
