"""Logging configuration"""
import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", format_str: str = DEFAULT_FORMAT) -> None:
    """Configure root logging to stdout and quiet the HTTP stack."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_str,
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
