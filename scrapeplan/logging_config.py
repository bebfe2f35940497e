import logging
import os
import sys

LOG_FORMAT = '%(levelname)-8s [%(name)s] %(message)s'

_LEVELS = {
	'debug': logging.DEBUG,
	'info': logging.INFO,
	'warning': logging.WARNING,
	'error': logging.ERROR,
	'critical': logging.CRITICAL,
}


def setup_logging(level: str | None = None, stream=None) -> logging.Logger:
	"""Configure the ``scrapeplan`` logger.

	The level comes from ``level`` or the SCRAPEPLAN_LOGGING_LEVEL env var (default ``info``).
	Calling it again replaces the handler instead of adding another one.
	"""
	level_name = (level or os.getenv('SCRAPEPLAN_LOGGING_LEVEL', 'info')).lower()
	log_level = _LEVELS.get(level_name, logging.INFO)

	logger = logging.getLogger('scrapeplan')
	for handler in list(logger.handlers):
		if getattr(handler, '_scrapeplan_handler', False):
			logger.removeHandler(handler)

	handler = logging.StreamHandler(stream or sys.stderr)
	handler._scrapeplan_handler = True  # type: ignore[attr-defined]
	handler.setFormatter(logging.Formatter(LOG_FORMAT))
	logger.addHandler(handler)
	logger.setLevel(log_level)
	logger.propagate = False

	# Silence noisy HTTP client loggers
	for third_party in ('httpx', 'httpcore', 'openai'):
		logging.getLogger(third_party).setLevel(logging.WARNING)

	return logger
