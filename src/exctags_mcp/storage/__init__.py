"""Storage package for index save/load and tags file output."""

from .index_store import TagIndex, IndexStore, score_tag
from .tags_file import format_tag_line, write_tags_file

__all__ = ["TagIndex", "IndexStore", "score_tag", "format_tag_line", "write_tags_file"]
