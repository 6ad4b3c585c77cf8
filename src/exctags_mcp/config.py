"""Environment-driven settings and logging setup."""

import logging
import os
import sys
from typing import Optional

from .parser import IdentifierStyle, KindConfig, ScannerOptions

DEFAULT_LOG_LEVEL = "WARNING"


def storage_path() -> Optional[str]:
    """Index storage directory override (CODE_INDEX_PATH)."""
    return os.environ.get("CODE_INDEX_PATH")


def github_token() -> Optional[str]:
    return os.environ.get("GITHUB_TOKEN")


def kind_config(spec: Optional[str] = None) -> KindConfig:
    """Kind selection from an explicit spec, else EXCTAGS_KINDS, else defaults."""
    if spec is None:
        spec = os.environ.get("EXCTAGS_KINDS")
    return KindConfig.from_spec(spec)


def scanner_options(identifier_style: Optional[str] = None) -> ScannerOptions:
    """Scanner options from an explicit style, else EXCTAGS_IDENTIFIER_STYLE."""
    if identifier_style is None:
        identifier_style = os.environ.get("EXCTAGS_IDENTIFIER_STYLE", "dotted")
    return ScannerOptions(identifier_style=IdentifierStyle.from_name(identifier_style))


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to stderr; stdout carries the MCP stdio stream."""
    level_name = (level or os.environ.get("EXCTAGS_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
