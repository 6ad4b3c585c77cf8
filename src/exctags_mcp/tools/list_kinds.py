"""Describe the parser: name, file extensions, and kinds."""

from typing import Optional

from .. import config
from ..parser import EXTENSIONS, KindSpecError, PARSER_NAME, kind_table


def list_kinds(kinds: Optional[str] = None) -> dict:
    """List kinds with their enabled state under a kind selection string."""
    try:
        kind_config = config.kind_config(kinds)
    except KindSpecError as e:
        return {"error": str(e)}

    return {
        "parser": PARSER_NAME,
        "extensions": list(EXTENSIONS),
        "kinds": kind_table(kind_config),
    }
