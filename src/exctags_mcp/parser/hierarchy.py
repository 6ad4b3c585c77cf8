"""Build tag tree hierarchy for file outlines."""

from dataclasses import dataclass, field

from .tags import Tag


@dataclass
class TagNode:
    """A node in the tag tree with children."""
    tag: Tag
    children: list["TagNode"] = field(default_factory=list)


def build_tag_tree(tags: list[Tag]) -> list[TagNode]:
    """Build a hierarchical tree from a flat tag list.

    Scoped tags become children of the most recent preceding module tag
    with the same name. Module tags and unscoped tags are roots. File
    order is kept at every level.
    """
    roots = []
    modules: dict[str, TagNode] = {}

    for tag in tags:
        node = TagNode(tag=tag)
        parent = modules.get(tag.module) if tag.module else None
        if parent:
            parent.children.append(node)
        else:
            roots.append(node)

        if tag.kind == "module":
            modules[tag.name] = node

    return roots


def flatten_tree(nodes: list[TagNode], depth: int = 0) -> list[tuple[Tag, int]]:
    """Flatten tag tree with depth information.

    Returns list of (tag, depth) tuples for indentation.
    """
    result = []
    for node in nodes:
        result.append((node.tag, depth))
        result.extend(flatten_tree(node.children, depth + 1))
    return result
