"""Get file tree for an indexed repository."""

from collections import Counter
from typing import Optional

from ..storage import IndexStore


def get_file_tree(
    repo: str,
    path_prefix: str = "",
    storage_path: Optional[str] = None
) -> dict:
    """Get the indexed Elixir files as a tree, optionally filtered by path prefix.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        path_prefix: Optional path prefix to filter
        storage_path: Custom storage path

    Returns:
        Dict with hierarchical tree structure
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    files = [f for f in index.source_files if f.startswith(path_prefix)]
    tag_counts = Counter(t.get("file") for t in index.tags)

    return {
        "repo": f"{owner}/{name}",
        "path_prefix": path_prefix,
        "tree": _build_tree(files, tag_counts, path_prefix) if files else []
    }


def _build_tree(files: list[str], tag_counts: Counter, path_prefix: str) -> list[dict]:
    """Build nested tree from flat file list."""
    root: dict = {}

    for file_path in files:
        rel_path = file_path[len(path_prefix):].lstrip("/")
        parts = rel_path.split("/")

        current = root
        for part in parts[:-1]:
            current = current.setdefault(part, {"type": "dir", "children": {}})["children"]

        current[parts[-1]] = {
            "path": file_path,
            "type": "file",
            "script": file_path.endswith(".exs"),
            "tag_count": tag_counts.get(file_path, 0)
        }

    return _dict_to_list(root)


def _dict_to_list(node_dict: dict) -> list[dict]:
    """Convert tree dict to list format, directories and files sorted by name."""
    result = []

    for name, node in sorted(node_dict.items()):
        if node.get("type") == "file":
            result.append(node)
        else:
            result.append({
                "path": name + "/",
                "type": "dir",
                "children": _dict_to_list(node.get("children", {}))
            })

    return result
