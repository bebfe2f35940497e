from scrapeplan.dom.document import DocumentContext, XPathEvaluator, parse_html
from scrapeplan.dom.preprocessor import preprocess_html, truncate_repeated_items

__all__ = ['DocumentContext', 'XPathEvaluator', 'parse_html', 'preprocess_html', 'truncate_repeated_items']
