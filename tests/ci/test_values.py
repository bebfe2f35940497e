"""Tests for raw value resolution and type coercion."""

import pytest
from lxml import html as lxml_html

from scrapeplan.extraction.values import coerce_value, resolve_raw_value


@pytest.fixture
def page():
	return lxml_html.document_fromstring(
		'<html><body>'
		'<a id="link" href=" /octo/alpha " title="Alpha">  Alpha <b>repo</b>  </a>'
		'<p id="empty"></p>'
		'<ul><li>one</li><li>two</li></ul>'
		'</body></html>'
	)


class TestResolveRawValue:
	"""Tests for resolve_raw_value against real lxml results."""

	def test_empty_node_set_is_absent(self, page):
		"""An empty node-set resolves to None."""
		assert resolve_raw_value(page.xpath('//table')) is None

	def test_none_is_absent(self):
		"""None stays None."""
		assert resolve_raw_value(None) is None

	def test_element_uses_full_text_content(self, page):
		"""Elements resolve to their stripped text including descendants."""
		assert resolve_raw_value(page.xpath('//a[@id="link"]')) == 'Alpha repo'

	def test_attribute_uses_literal_value_not_element_text(self, page):
		"""Attribute matches resolve to the stripped attribute value."""
		assert resolve_raw_value(page.xpath('//a[@id="link"]/@href')) == '/octo/alpha'
		assert resolve_raw_value(page.xpath('//a[@id="link"]/@title')) == 'Alpha'

	def test_first_match_wins(self, page):
		"""Only the first node of a node-set is used."""
		assert resolve_raw_value(page.xpath('//li')) == 'one'

	def test_empty_element_is_empty_string_not_absent(self, page):
		"""An element without text is an empty string, not None."""
		assert resolve_raw_value(page.xpath('//p[@id="empty"]')) == ''

	def test_text_node_result(self, page):
		"""Text node matches resolve to their text."""
		assert resolve_raw_value(page.xpath('//li/text()')) == 'one'

	def test_string_function_result(self, page):
		"""string() results pass through as text."""
		assert resolve_raw_value(page.xpath('string(//a/@title)')) == 'Alpha'

	def test_count_result_renders_as_integer(self, page):
		"""Integral numbers render without a decimal point."""
		assert resolve_raw_value(page.xpath('count(//li)')) == '2'

	def test_fractional_number_result(self):
		"""Fractional numbers keep their decimals."""
		assert resolve_raw_value(2.5) == '2.5'

	def test_boolean_result(self, page):
		"""boolean() results render as true or false."""
		assert resolve_raw_value(page.xpath('boolean(//li)')) == 'true'
		assert resolve_raw_value(page.xpath('boolean(//table)')) == 'false'

	def test_scalar_string_is_stripped(self):
		"""Plain strings are stripped."""
		assert resolve_raw_value('  padded  ') == 'padded'


class TestCoerceValue:
	"""Tests for coerce_value."""

	@pytest.mark.parametrize(
		'raw, value_type, expected',
		[
			('  42 cats', 'integer', 42),
			('$19.99', 'number', 19.99),
			('YES', 'boolean', True),
			('no', 'boolean', False),
			('  Multi   space   text ', 'string', 'Multi space text'),
		],
	)
	def test_reference_cases(self, raw, value_type, expected):
		"""One representative value per type."""
		assert coerce_value(raw, value_type) == expected

	def test_integer_drops_separators(self):
		"""Thousands separators and units are dropped."""
		assert coerce_value('1,204 stars', 'integer') == 1204

	def test_integer_keeps_leading_minus(self):
		"""A leading minus sign survives."""
		assert coerce_value('-17 °C', 'integer') == -17

	def test_integer_empty_after_stripping_is_zero(self):
		"""Text without digits coerces to 0."""
		assert coerce_value('n/a', 'integer') == 0
		assert coerce_value('', 'integer') == 0

	def test_integer_stops_at_second_minus(self):
		"""Parsing stops at the first character that cannot continue the number."""
		assert coerce_value('10-20', 'integer') == 10

	def test_integer_lone_minus_is_zero(self):
		"""A minus sign on its own is 0."""
		assert coerce_value('-', 'integer') == 0

	def test_integer_drops_decimal_point(self):
		"""The decimal point is stripped, so the digits run together."""
		assert coerce_value('3.5', 'integer') == 35

	def test_number_drops_magnitude_suffix(self):
		"""Suffixes such as k are dropped, not applied."""
		assert coerce_value('1.1k', 'number') == 1.1

	def test_number_empty_after_stripping_is_zero(self):
		"""Text without digits coerces to 0.0."""
		assert coerce_value('free', 'number') == 0.0

	def test_number_with_multiple_points_uses_leading_prefix(self):
		"""Only the leading valid number is used."""
		assert coerce_value('v1.2.3', 'number') == 1.2

	def test_number_negative_and_leading_point(self):
		"""Negative numbers and a leading point both parse."""
		assert coerce_value('-0.5', 'number') == -0.5
		assert coerce_value('.75', 'number') == 0.75

	def test_number_result_is_float(self):
		"""Whole numbers still come back as float."""
		value = coerce_value('7', 'number')
		assert value == 7.0
		assert isinstance(value, float)

	def test_float_alias(self):
		"""float behaves like number."""
		assert coerce_value('2.5 kg', 'float') == 2.5

	@pytest.mark.parametrize('raw', ['true', 'True', 'yes', '1', 'on', 'ON'])
	def test_boolean_truthy(self, raw):
		"""Recognised truthy words are True regardless of case."""
		assert coerce_value(raw, 'boolean') is True

	@pytest.mark.parametrize('raw', ['false', '0', 'off', 'y', '', 'enabled'])
	def test_boolean_everything_else_is_false(self, raw):
		"""Anything else is False."""
		assert coerce_value(raw, 'boolean') is False

	def test_string_collapses_newlines_and_tabs(self):
		"""Every whitespace run becomes one space."""
		assert coerce_value('First\n\t\t repository', 'string') == 'First repository'

	def test_unknown_type_passes_raw_through(self):
		"""Unknown or missing types return the raw value untouched."""
		assert coerce_value('  2024-05-01 ', 'date') == '  2024-05-01 '
		assert coerce_value('x', None) == 'x'
