"""Tag dataclass and utility functions."""

from dataclasses import dataclass
from typing import Optional

SCOPE_LABEL = "module"


@dataclass
class Tag:
    """A definition found by the line scanner."""
    name: str                       # Identifier after the directive (e.g., "handle_call")
    kind: str                       # "macro" | "function" | "module" | "record" | "protocol" | "impl"
    file: str                       # Source file path (e.g., "lib/foo.ex")
    line: int = 0                   # Line number (1-indexed)
    signature: str = ""             # The source line, stripped
    source_line: str = ""           # The source line as written, newline removed
    scope: Optional[tuple[str, str]] = None  # ("module", "Foo.Bar") when scoped
    id: str = ""                    # Unique ID: "file-slug::QualifiedName:line"
    byte_offset: int = 0            # Start byte of the line in the raw file
    byte_length: int = 0            # Byte length of the line, newline included

    @property
    def module(self) -> Optional[str]:
        """Scope value, if the tag is scoped."""
        return self.scope[1] if self.scope else None

    @property
    def qualified_name(self) -> str:
        if self.scope:
            return f"{self.scope[1]}.{self.name}"
        return self.name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "qualified_name": self.qualified_name,
            "kind": self.kind,
            "file": self.file,
            "line": self.line,
            "signature": self.signature,
            "source_line": self.source_line,
            "scope": {"kind": self.scope[0], "name": self.scope[1]} if self.scope else None,
            "byte_offset": self.byte_offset,
            "byte_length": self.byte_length,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Tag":
        scope = d.get("scope")
        return cls(
            name=d["name"],
            kind=d["kind"],
            file=d["file"],
            line=d.get("line", 0),
            signature=d.get("signature", ""),
            source_line=d.get("source_line", ""),
            scope=(scope["kind"], scope["name"]) if scope else None,
            id=d.get("id", ""),
            byte_offset=d.get("byte_offset", 0),
            byte_length=d.get("byte_length", 0),
        )


def slugify(text: str) -> str:
    """Convert file path to slug format.

    Replace / with - and . with - for use in tag IDs.
    Example: lib/foo.ex -> lib-foo-ex
    """
    return text.replace("/", "-").replace(".", "-")


def make_tag_id(file_path: str, qualified_name: str, line: int) -> str:
    """Generate unique tag ID.

    Multi-clause functions share a name, so the line is part of the ID.
    Format: {file_slug}::{qualified_name}:{line}
    Example: lib-foo-ex::Foo.bar:12
    """
    return f"{slugify(file_path)}::{qualified_name}:{line}"
