"""Get tag details and source line."""

from typing import Optional

from ..storage import IndexStore


def _tag_result(tag: dict, source: Optional[str]) -> dict:
    return {
        "id": tag["id"],
        "kind": tag["kind"],
        "name": tag["name"],
        "qualified_name": tag.get("qualified_name", tag["name"]),
        "file": tag["file"],
        "line": tag["line"],
        "scope": tag.get("scope"),
        "source": source or ""
    }


def get_tag(
    repo: str,
    tag_id: str,
    storage_path: Optional[str] = None
) -> dict:
    """Get a tag and the source line it was found on.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        tag_id: Tag ID from get_file_outline or search_tags
        storage_path: Custom storage path

    Returns:
        Dict with tag details and source line
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    tag = index.get_tag(tag_id)
    if not tag:
        return {"error": f"Tag not found: {tag_id}"}

    return _tag_result(tag, store.get_tag_source(owner, name, tag_id))


def get_tags(
    repo: str,
    tag_ids: list[str],
    storage_path: Optional[str] = None
) -> dict:
    """Get several tags in one call.

    Returns:
        Dict with tags list and per-id errors
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    tags = []
    errors = []

    for tag_id in tag_ids:
        tag = index.get_tag(tag_id)

        if not tag:
            errors.append({"id": tag_id, "error": f"Tag not found: {tag_id}"})
            continue

        tags.append(_tag_result(tag, store.get_tag_source(owner, name, tag_id)))

    return {
        "tags": tags,
        "errors": errors
    }
