"""Logging configuration for ontology-cards."""

import sys

from loguru import logger

_FORMAT = "{level.icon} {message}"
_VERBOSE_FORMAT = "{level.icon} {name}:{function}: {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Configure loguru to log to stderr.

    stdout is left alone: the CLI prints cards there and the MCP server
    speaks its protocol over it.
    """
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=_FORMAT)
