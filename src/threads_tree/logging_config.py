"""Logging setup shared by the CLI and the MCP server."""

import os
import sys

from loguru import logger

_VERBOSE_FORMAT = "{level.icon} <dim>{name}:{function}</dim> {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Route loguru to stderr (stdout belongs to command output and MCP stdio).

    ``THREADS_LOG_LEVEL`` overrides the level picked from ``verbose``.
    """
    logger.remove()
    level = os.environ.get("THREADS_LOG_LEVEL") or ("DEBUG" if verbose else "INFO")
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=_VERBOSE_FORMAT if verbose else "{level.icon} {message}",
    )
