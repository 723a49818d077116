"""Logging configuration helpers for the learning path service."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: str = "INFO") -> Logger:
	"""Configure basic logging for the application and return its logger."""
	logging.basicConfig(
		level=getattr(logging, str(level).upper(), logging.INFO),
		format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
	)
	# passlib warns about bcrypt version probing on every start
	logging.getLogger("passlib").setLevel(logging.ERROR)
	return logging.getLogger("learnpath")
