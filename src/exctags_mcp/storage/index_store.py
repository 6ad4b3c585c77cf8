"""Index storage with save/load and byte-offset line retrieval."""

import fnmatch
import json
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..parser.tags import Tag

logger = logging.getLogger(__name__)


@dataclass
class TagIndex:
    """Tag index for a repository's Elixir sources."""
    repo: str                    # "owner/repo"
    owner: str
    name: str
    indexed_at: str              # ISO timestamp
    source_files: list[str]      # All indexed file paths
    kinds: dict[str, int]        # Kind label -> tag count
    tags: list[dict]             # Serialized Tag dicts

    def get_tag(self, tag_id: str) -> Optional[dict]:
        """Find a tag by ID."""
        for tag in self.tags:
            if tag.get("id") == tag_id:
                return tag
        return None

    def tags_in_file(self, file_path: str) -> list[dict]:
        return [t for t in self.tags if t.get("file") == file_path]

    def search(
        self,
        query: str,
        kind: Optional[str] = None,
        file_pattern: Optional[str] = None,
        module: Optional[str] = None
    ) -> list[tuple[int, dict]]:
        """Search tags with weighted scoring.

        Returns (score, tag) pairs, best first.
        """
        query_lower = query.lower()
        query_words = set(query_lower.split())

        scored = []
        for tag in self.tags:
            # Apply filters
            if kind and tag.get("kind") != kind:
                continue
            if file_pattern and not self._match_pattern(tag.get("file", ""), file_pattern):
                continue
            if module and not self._in_module(tag, module):
                continue

            score = score_tag(tag, query_lower, query_words)
            if score > 0:
                scored.append((score, tag))

        # Stable sort keeps file order among equal scores
        scored.sort(key=lambda x: x[0], reverse=True)
        return scored

    def _match_pattern(self, file_path: str, pattern: str) -> bool:
        """Match file path against glob pattern."""
        return fnmatch.fnmatch(file_path, pattern) or fnmatch.fnmatch(file_path, f"*/{pattern}")

    def _in_module(self, tag: dict, module: str) -> bool:
        if tag.get("kind") == "module" and tag.get("name") == module:
            return True
        scope = tag.get("scope")
        return bool(scope) and scope.get("name") == module


def score_tag(tag: dict, query_lower: str, query_words: set) -> int:
    """Calculate search score for a tag."""
    score = 0

    # 1. Exact name match (highest weight)
    name_lower = tag.get("name", "").lower()
    if query_lower == name_lower:
        score += 20
    elif query_lower in name_lower:
        score += 10

    # 2. Name word overlap
    for word in query_words:
        if word in name_lower:
            score += 5

    # 3. Qualified name ("Foo.bar" queries)
    qualified_lower = tag.get("qualified_name", "").lower()
    if query_lower != name_lower and query_lower in qualified_lower:
        score += 8

    # 4. Signature words
    sig_lower = tag.get("signature", "").lower()
    for word in query_words:
        if word in sig_lower:
            score += 2

    # 5. Enclosing module
    scope = tag.get("scope") or {}
    scope_lower = scope.get("name", "").lower()
    for word in query_words:
        if word in scope_lower:
            score += 3

    return score


class IndexStore:
    """Storage for tag indexes with byte-offset line retrieval."""

    def __init__(self, base_path: Optional[str] = None):
        """Initialize store.

        Args:
            base_path: Base directory for storage. Defaults to ~/.exctags-index/
        """
        if base_path:
            self.base_path = Path(base_path)
        else:
            self.base_path = Path.home() / ".exctags-index"

        self.base_path.mkdir(parents=True, exist_ok=True)

    def _index_path(self, owner: str, name: str) -> Path:
        """Path to index JSON file."""
        return self.base_path / f"{owner}-{name}.json"

    def _content_dir(self, owner: str, name: str) -> Path:
        """Path to raw content directory."""
        return self.base_path / f"{owner}-{name}"

    def save_index(
        self,
        owner: str,
        name: str,
        source_files: list[str],
        tags: list[Tag],
        raw_files: dict[str, str]
    ) -> TagIndex:
        """Save index and raw files to storage.

        Args:
            owner: Repository owner ("local" for folders)
            name: Repository name
            source_files: List of indexed file paths
            tags: Tags from every file, in scan order
            raw_files: Dict mapping file path to raw content

        Returns:
            TagIndex object
        """
        kinds: dict[str, int] = {}
        for tag in tags:
            kinds[tag.kind] = kinds.get(tag.kind, 0) + 1

        index = TagIndex(
            repo=f"{owner}/{name}",
            owner=owner,
            name=name,
            indexed_at=datetime.now().isoformat(),
            source_files=source_files,
            kinds=kinds,
            tags=[t.to_dict() for t in tags]
        )

        index_path = self._index_path(owner, name)
        with open(index_path, "w", encoding="utf-8") as f:
            json.dump(self._index_to_dict(index), f, indent=2)

        # Raw files are written with newline="" so stored byte offsets stay valid
        content_dir = self._content_dir(owner, name)
        content_dir.mkdir(parents=True, exist_ok=True)

        for file_path, content in raw_files.items():
            file_dest = content_dir / file_path
            file_dest.parent.mkdir(parents=True, exist_ok=True)
            with open(file_dest, "w", encoding="utf-8", newline="") as f:
                f.write(content)

        logger.debug("Saved index %s with %d tags", index.repo, len(tags))
        return index

    def load_index(self, owner: str, name: str) -> Optional[TagIndex]:
        """Load index from storage."""
        index_path = self._index_path(owner, name)

        if not index_path.exists():
            return None

        with open(index_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return TagIndex(
            repo=data["repo"],
            owner=data["owner"],
            name=data["name"],
            indexed_at=data["indexed_at"],
            source_files=data["source_files"],
            kinds=data["kinds"],
            tags=data["tags"]
        )

    def get_tag_source(self, owner: str, name: str, tag_id: str) -> Optional[str]:
        """Read the tag's source line using stored byte offsets."""
        index = self.load_index(owner, name)
        if not index:
            return None

        tag = index.get_tag(tag_id)
        if not tag:
            return None

        file_path = self._content_dir(owner, name) / tag["file"]

        if not file_path.exists():
            return None

        with open(file_path, "rb") as f:
            f.seek(tag["byte_offset"])
            source_bytes = f.read(tag["byte_length"])

        return source_bytes.decode("utf-8", errors="replace").rstrip("\r\n")

    def list_repos(self) -> list[dict]:
        """List all indexed repositories."""
        repos = []

        for index_file in self.base_path.glob("*.json"):
            try:
                with open(index_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                repos.append({
                    "repo": data["repo"],
                    "indexed_at": data["indexed_at"],
                    "tag_count": len(data["tags"]),
                    "file_count": len(data["source_files"]),
                    "kinds": data["kinds"]
                })
            except (OSError, ValueError, KeyError) as e:
                logger.warning("Skipping unreadable index %s: %s", index_file, e)
                continue

        return repos

    def resolve_repo(self, repo: str) -> Optional[tuple[str, str]]:
        """Resolve "owner/name" or a bare name to (owner, name)."""
        if "/" in repo:
            owner, name = repo.split("/", 1)
            return owner, name

        matching = [r for r in self.list_repos() if r["repo"].endswith(f"/{repo}")]
        if not matching:
            return None
        owner, name = matching[0]["repo"].split("/", 1)
        return owner, name

    def delete_index(self, owner: str, name: str) -> bool:
        """Delete an index and its raw files."""
        index_path = self._index_path(owner, name)
        content_dir = self._content_dir(owner, name)

        deleted = False

        if index_path.exists():
            index_path.unlink()
            deleted = True

        if content_dir.exists():
            shutil.rmtree(content_dir)
            deleted = True

        return deleted

    def _index_to_dict(self, index: TagIndex) -> dict:
        """Convert TagIndex to dict."""
        return {
            "repo": index.repo,
            "owner": index.owner,
            "name": index.name,
            "indexed_at": index.indexed_at,
            "source_files": index.source_files,
            "kinds": index.kinds,
            "tags": index.tags,
        }
