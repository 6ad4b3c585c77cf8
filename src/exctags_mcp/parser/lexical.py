"""Character classifiers and identifier scanning for Elixir source lines."""

from enum import Enum


class IdentifierStyle(Enum):
    """Punctuation allowed inside an identifier run, besides alphanumerics and '_'."""
    DOTTED = "dotted"           # Foo.Bar captured as one token
    PREDICATE = "predicate"     # valid? / save! captured as one token

    @property
    def extra_chars(self) -> frozenset[str]:
        if self is IdentifierStyle.DOTTED:
            return frozenset("_.")
        return frozenset("_?!")

    @classmethod
    def from_name(cls, name: str) -> "IdentifierStyle":
        """Look up a style by its value ("dotted" or "predicate")."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown identifier style: {name}") from None


def is_identifier_start(c: str) -> bool:
    """True iff c is an alphabetic character."""
    return c.isalpha()


def is_identifier_char(c: str, style: IdentifierStyle = IdentifierStyle.DOTTED) -> bool:
    """True iff c may appear inside an identifier under the given style."""
    return c.isalnum() or c in style.extra_chars


def scan_identifier(
    line: str,
    pos: int,
    style: IdentifierStyle = IdentifierStyle.DOTTED
) -> tuple[str, int]:
    """Scan the maximal run of identifier characters starting at pos.

    The character that stops the run is not consumed. An empty run is a
    normal result, not an error.

    Args:
        line: Source line (newline already stripped)
        pos: Cursor position into line
        style: Identifier character class for the whole run

    Returns:
        (identifier text, advanced cursor position)
    """
    end = pos
    length = len(line)
    while end < length and is_identifier_char(line[end], style):
        end += 1
    return line[pos:end], end


def skip_whitespace(line: str, pos: int) -> int:
    """Advance pos past any run of whitespace."""
    length = len(line)
    while pos < length and line[pos].isspace():
        pos += 1
    return pos
