"""Get file outline - tags in a specific file, grouped by module."""

from typing import Optional

from ..parser import Tag, TagNode, build_tag_tree
from ..storage import IndexStore


def get_file_outline(
    repo: str,
    file_path: str,
    storage_path: Optional[str] = None
) -> dict:
    """Get tags in a file with module members nested under their module.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        file_path: Path to file within repository
        storage_path: Custom storage path

    Returns:
        Dict with tags outline
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    tags = [Tag.from_dict(t) for t in index.tags_in_file(file_path)]
    tree = build_tag_tree(tags)

    return {
        "repo": f"{owner}/{name}",
        "file": file_path,
        "tag_count": len(tags),
        "tags": [_node_to_dict(n) for n in tree]
    }


def _node_to_dict(node: TagNode) -> dict:
    """Convert TagNode to output dict."""
    result = {
        "id": node.tag.id,
        "kind": node.tag.kind,
        "name": node.tag.name,
        "signature": node.tag.signature,
        "line": node.tag.line,
    }

    if node.children:
        result["children"] = [_node_to_dict(c) for c in node.children]

    return result
