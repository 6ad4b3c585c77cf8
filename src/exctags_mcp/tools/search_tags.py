"""Search tags across a repository."""

from typing import Optional

from ..storage import IndexStore


def search_tags(
    repo: str,
    query: str,
    kind: Optional[str] = None,
    module: Optional[str] = None,
    file_pattern: Optional[str] = None,
    max_results: int = 10,
    storage_path: Optional[str] = None
) -> dict:
    """Search for tags matching a query.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        query: Search query
        kind: Optional filter by tag kind
        module: Optional filter by enclosing module (or the module tag itself)
        file_pattern: Optional glob pattern to filter files
        max_results: Maximum results to return
        storage_path: Custom storage path

    Returns:
        Dict with search results
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    scored = index.search(query, kind=kind, file_pattern=file_pattern, module=module)

    results = [
        {
            "id": tag["id"],
            "kind": tag["kind"],
            "name": tag["name"],
            "qualified_name": tag.get("qualified_name", tag["name"]),
            "file": tag["file"],
            "line": tag["line"],
            "signature": tag.get("signature", ""),
            "score": score
        }
        for score, tag in scored[:max_results]
    ]

    return {
        "repo": f"{owner}/{name}",
        "query": query,
        "result_count": len(results),
        "results": results
    }
