"""Write tags in the ctags extended file format."""

from pathlib import Path
from typing import Iterable, Union

from ..parser.kinds import PARSER_NAME
from ..parser.tags import Tag

PROGRAM_NAME = "exctags-mcp"


def search_pattern(text: str) -> str:
    """Build a ctags /^...$/ address for one source line.

    Backslashes and slashes are escaped so vi-style readers can search for
    the line verbatim.
    """
    escaped = text.replace("\\", "\\\\").replace("/", "\\/")
    return f"/^{escaped}$/"


def format_tag_line(tag: Tag) -> str:
    """Format one tag as a ctags line, addressed by a search pattern.

    Example: bar<TAB>lib/foo.ex<TAB>/^  def bar(x), do: x$/;"<TAB>kind:function<TAB>module:Foo
    """
    # Indexes written before source_line existed only carry the stripped line
    fields = [
        tag.name,
        tag.file,
        search_pattern(tag.source_line or tag.signature) + ';"',
        f"kind:{tag.kind}",
    ]
    if tag.scope:
        fields.append(f"{tag.scope[0]}:{tag.scope[1]}")
    return "\t".join(fields)


def header_lines(sort: bool = True) -> list[str]:
    return [
        "!_TAG_FILE_FORMAT\t2\t/extended format/",
        f"!_TAG_FILE_SORTED\t{1 if sort else 0}\t/0=unsorted, 1=sorted/",
        f"!_TAG_PROGRAM_NAME\t{PROGRAM_NAME}\t/{PARSER_NAME} tags/",
    ]


def write_tags_file(
    tags: Iterable[Tag],
    path: Union[str, Path],
    sort: bool = True
) -> int:
    """Write a tags file and return the number of tag lines written."""
    tags = list(tags)
    if sort:
        tags.sort(key=lambda t: (t.name, t.file, t.line))

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for line in header_lines(sort):
            f.write(line + "\n")
        for tag in tags:
            f.write(format_tag_line(tag) + "\n")

    return len(tags)
