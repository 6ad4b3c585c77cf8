"""Tag kinds, kind selection, and parser registration metadata."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TagKind(Enum):
    """The closed set of definition kinds the scanner can emit."""
    MACRO = ("d", "macro", "macro definitions")
    FUNCTION = ("f", "function", "functions")
    MODULE = ("m", "module", "modules")
    RECORD = ("r", "record", "record definitions")
    PROTOCOL = ("p", "protocol", "protocol definitions")
    IMPL = ("l", "impl", "protocol implementations")

    def __init__(self, letter: str, label: str, description: str):
        self.letter = letter
        self.label = label
        self.description = description
        self.default_enabled = True

    @classmethod
    def from_letter(cls, letter: str) -> "TagKind":
        for kind in cls:
            if kind.letter == letter:
                return kind
        raise ValueError(f"Unknown kind letter: {letter!r}")

    @classmethod
    def from_label(cls, label: str) -> "TagKind":
        for kind in cls:
            if kind.label == label:
                return kind
        raise ValueError(f"Unknown kind: {label!r}")


BASE_KINDS = (TagKind.MACRO, TagKind.FUNCTION, TagKind.MODULE, TagKind.RECORD)
EXTENDED_KINDS = (TagKind.PROTOCOL, TagKind.IMPL)


class KindSpecError(ValueError):
    """Raised for a malformed kind selection string."""


@dataclass
class KindConfig:
    """Which kinds are enabled for output."""
    enabled: set[TagKind] = field(
        default_factory=lambda: {k for k in TagKind if k.default_enabled}
    )

    def is_enabled(self, kind: TagKind) -> bool:
        return kind in self.enabled

    def enable(self, kind: TagKind) -> None:
        self.enabled.add(kind)

    def disable(self, kind: TagKind) -> None:
        self.enabled.discard(kind)

    @classmethod
    def from_spec(cls, spec: Optional[str]) -> "KindConfig":
        """Build a config from a ctags-style kind selection string.

        A plain run of letters ("fm") enables exactly those kinds. A run of
        +/- prefixed letters ("+p-l") adjusts the defaults instead. Empty
        or None yields the defaults.

        Raises:
            KindSpecError: On unknown letters or a dangling sign
        """
        config = cls()
        spec = (spec or "").strip()
        if not spec:
            return config

        if spec[0] not in "+-":
            config.enabled = {_letter_to_kind(c, spec) for c in spec}
            return config

        sign = None
        for c in spec:
            if c in "+-":
                sign = c
                continue
            if sign is None:
                raise KindSpecError(f"Kind letter without +/- in {spec!r}")
            kind = _letter_to_kind(c, spec)
            if sign == "+":
                config.enable(kind)
            else:
                config.disable(kind)

        if spec[-1] in "+-":
            raise KindSpecError(f"Dangling {spec[-1]!r} in kind spec {spec!r}")

        return config

    def to_spec(self) -> str:
        """Letters of the enabled kinds, in declaration order."""
        return "".join(k.letter for k in TagKind if k in self.enabled)


def _letter_to_kind(letter: str, spec: str) -> TagKind:
    try:
        return TagKind.from_letter(letter)
    except ValueError:
        raise KindSpecError(f"Unknown kind letter {letter!r} in {spec!r}") from None


# Parser registration metadata
PARSER_NAME = "Elixir"
EXTENSIONS = ("ex", "exs")

LANGUAGE_EXTENSIONS = {
    ".ex": "elixir",
    ".exs": "elixir",
}


def kind_table(config: Optional[KindConfig] = None) -> list[dict]:
    """Describe every kind for hosts that list or toggle kinds."""
    config = config or KindConfig()
    return [
        {
            "letter": kind.letter,
            "name": kind.label,
            "description": kind.description,
            "enabled": config.is_enabled(kind),
        }
        for kind in TagKind
    ]
