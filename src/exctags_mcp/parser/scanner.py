"""Line-oriented Elixir tag scanner.

Definitions are found by looking at the first word of each line. A line
whose first non-blank character is `d` is scanned for a directive keyword
(def, defp, defmacro, defmodule, ...) and the identifier following it
becomes the tag name. Nothing else on the line is inspected, so arguments,
guards and `do` blocks are ignored.

The most recently seen `defmodule` name is used as the scope of later
function tags in the same file. Modules are not nested: there is no
block-end detection, so the last module seen applies until the next one.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .kinds import EXTENDED_KINDS, KindConfig, TagKind
from .lexical import (
    IdentifierStyle,
    is_identifier_start,
    scan_identifier,
    skip_whitespace,
)
from .tags import SCOPE_LABEL, Tag, make_tag_id

logger = logging.getLogger(__name__)

TagSink = Callable[[Tag], None]


# Directive keyword -> kind of tag it introduces
DIRECTIVES = {
    "def": TagKind.FUNCTION,
    "defp": TagKind.FUNCTION,
    "defmacro": TagKind.MACRO,
    "defmacrop": TagKind.MACRO,
    "defrecord": TagKind.RECORD,
    "defmodule": TagKind.MODULE,
    "defprotocol": TagKind.PROTOCOL,
    "defimpl": TagKind.IMPL,
}


@dataclass(frozen=True)
class ScannerOptions:
    """Scan-time policy choices."""
    identifier_style: IdentifierStyle = IdentifierStyle.DOTTED
    extended_kinds: bool = True     # recognize defprotocol / defimpl
    scope_functions: bool = True    # attribute def/defp tags to the current module
    alpha_function_names: bool = True  # function names must start with a letter


@dataclass
class ScanContext:
    """Mutable state for scanning one file."""
    filename: str
    sink: TagSink
    options: ScannerOptions = field(default_factory=ScannerOptions)
    kinds: KindConfig = field(default_factory=KindConfig)
    module: str = ""
    line_number: int = 0
    line_text: str = ""
    byte_offset: int = 0
    byte_length: int = 0


def emit_tag(
    ctx: ScanContext,
    name: str,
    kind: TagKind,
    module: Optional[str] = None
) -> None:
    """Forward a tag for the current line to the sink.

    Does nothing when the name is empty or the kind is disabled. A scope
    is attached only for a non-empty module.
    """
    if not name or not ctx.kinds.is_enabled(kind):
        return

    tag = Tag(
        name=name,
        kind=kind.label,
        file=ctx.filename,
        line=ctx.line_number,
        signature=ctx.line_text.strip(),
        source_line=ctx.line_text,
        scope=(SCOPE_LABEL, module) if module else None,
        byte_offset=ctx.byte_offset,
        byte_length=ctx.byte_length,
    )
    tag.id = make_tag_id(ctx.filename, tag.qualified_name, ctx.line_number)
    ctx.sink(tag)


def parse_directive(line: str, pos: int, ctx: ScanContext) -> None:
    """Dispatch on the directive keyword starting at pos."""
    style = ctx.options.identifier_style
    directive, pos = scan_identifier(line, pos, style)
    pos = skip_whitespace(line, pos)

    kind = DIRECTIVES.get(directive)
    if kind is None:
        # import, require, alias, defstruct, ...
        return
    if kind in EXTENDED_KINDS and not ctx.options.extended_kinds:
        return

    if kind is TagKind.FUNCTION:
        if ctx.options.alpha_function_names and (
            pos >= len(line) or not is_identifier_start(line[pos])
        ):
            return
        name, _ = scan_identifier(line, pos, style)
        module = ctx.module if ctx.options.scope_functions else None
        emit_tag(ctx, name, kind, module)
    elif kind is TagKind.MODULE:
        name, _ = scan_identifier(line, pos, style)
        emit_tag(ctx, name, kind)
        ctx.module = name
    else:
        name, _ = scan_identifier(line, pos, style)
        emit_tag(ctx, name, kind)


def scan_line(line: str, ctx: ScanContext) -> None:
    """Apply the directive state machine to one line."""
    pos = skip_whitespace(line, 0)
    if pos >= len(line):
        return

    c = line[pos]
    if c == "#":  # comment
        return
    if c == "@":  # module attributes; heredoc strings often start in column one
        return
    if c == "d":
        parse_directive(line, pos, ctx)


def scan_lines(
    lines: Iterable[str],
    filename: str,
    options: Optional[ScannerOptions] = None,
    kinds: Optional[KindConfig] = None,
    sink: Optional[TagSink] = None
) -> list[Tag]:
    """Scan a file supplied as a sequence of lines.

    Byte offsets are accurate when the lines keep their line terminators;
    terminators are stripped before scanning either way.

    Args:
        lines: File content, one line per item, in file order
        filename: File path recorded on each tag
        options: Scanner policy (defaults to ScannerOptions())
        kinds: Enabled kinds (defaults to all)
        sink: Receives each tag as it is found. When omitted, tags are
            collected and returned.

    Returns:
        The collected tags, or an empty list when a sink was given
    """
    collected: list[Tag] = []
    ctx = ScanContext(
        filename=filename,
        sink=sink or collected.append,
        options=options or ScannerOptions(),
        kinds=kinds or KindConfig(),
    )

    offset = 0
    for number, raw in enumerate(lines, start=1):
        size = len(raw.encode("utf-8"))
        ctx.line_number = number
        ctx.line_text = raw.rstrip("\r\n")
        ctx.byte_offset = offset
        ctx.byte_length = size
        scan_line(ctx.line_text, ctx)
        offset += size

    logger.debug("Scanned %s: %d lines, %d tags", filename, ctx.line_number, len(collected))
    return collected


def parse_file(
    content: str,
    filename: str,
    options: Optional[ScannerOptions] = None,
    kinds: Optional[KindConfig] = None
) -> list[Tag]:
    """Scan Elixir source text and return its tags in file order."""
    lines = io.StringIO(content, newline="")
    return scan_lines(lines, filename, options=options, kinds=kinds)
