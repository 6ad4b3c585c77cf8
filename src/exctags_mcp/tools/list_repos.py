"""List indexed repositories."""

from typing import Optional

from ..storage import IndexStore


def list_repos(storage_path: Optional[str] = None) -> dict:
    """List indexed repositories, sorted by repo id, with overall tag totals."""
    store = IndexStore(base_path=storage_path)
    repos = sorted(store.list_repos(), key=lambda r: r["repo"])

    return {
        "count": len(repos),
        "total_tags": sum(r["tag_count"] for r in repos),
        "repos": repos,
    }
