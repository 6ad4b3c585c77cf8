"""Export an indexed repository as a ctags tags file."""

import logging
from pathlib import Path
from typing import Optional

from ..parser import Tag
from ..storage import IndexStore, write_tags_file

logger = logging.getLogger(__name__)


def export_tags(
    repo: str,
    output_path: str,
    sort: bool = True,
    storage_path: Optional[str] = None
) -> dict:
    """Write every tag of an indexed repository to a tags file."""
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    path = Path(output_path).expanduser()
    try:
        count = write_tags_file((Tag.from_dict(t) for t in index.tags), path, sort=sort)
    except OSError as e:
        logger.warning("Failed to write tags file %s: %s", path, e)
        return {"error": f"Failed to write {path}: {e}"}

    return {
        "repo": f"{owner}/{name}",
        "output_path": str(path),
        "tag_count": count,
        "sorted": sort
    }
