"""Parser package for extracting tags from Elixir source code."""

from .lexical import (
    IdentifierStyle,
    is_identifier_start,
    is_identifier_char,
    scan_identifier,
    skip_whitespace,
)
from .kinds import (
    TagKind,
    KindConfig,
    KindSpecError,
    BASE_KINDS,
    EXTENDED_KINDS,
    PARSER_NAME,
    EXTENSIONS,
    LANGUAGE_EXTENSIONS,
    kind_table,
)
from .tags import Tag, slugify, make_tag_id
from .scanner import (
    ScannerOptions,
    ScanContext,
    emit_tag,
    parse_directive,
    scan_line,
    scan_lines,
    parse_file,
)
from .hierarchy import TagNode, build_tag_tree, flatten_tree

__all__ = [
    "IdentifierStyle",
    "is_identifier_start",
    "is_identifier_char",
    "scan_identifier",
    "skip_whitespace",
    "TagKind",
    "KindConfig",
    "KindSpecError",
    "BASE_KINDS",
    "EXTENDED_KINDS",
    "PARSER_NAME",
    "EXTENSIONS",
    "LANGUAGE_EXTENSIONS",
    "kind_table",
    "Tag",
    "slugify",
    "make_tag_id",
    "ScannerOptions",
    "ScanContext",
    "emit_tag",
    "parse_directive",
    "scan_line",
    "scan_lines",
    "parse_file",
    "TagNode",
    "build_tag_tree",
    "flatten_tree",
]
