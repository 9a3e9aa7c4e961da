"""Logging configuration for model-search."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure loguru on stderr.

    ``verbose`` wins over ``quiet``. Stdout is left alone so JSON output
    and the MCP stdio transport stay clean.
    """
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")
