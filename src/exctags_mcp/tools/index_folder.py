"""Index local folder tool - walk, scan, save."""

import logging
from pathlib import Path
from typing import Optional

from .. import config
from ..parser import KindSpecError, LANGUAGE_EXTENSIONS, parse_file
from ..storage import IndexStore

logger = logging.getLogger(__name__)


# Directory names to skip wherever they appear in a path (shared with index_repo.py)
SKIP_DIRS = {
    "deps", "_build", ".elixir_ls",
    "node_modules", ".git",
    "test_data", "testdata", "fixtures",
}

# Consecutive directory runs to skip
SKIP_DIR_RUNS = [
    ("priv", "static"),
]


def should_skip_file(path: str) -> bool:
    """Check if file should be skipped based on its directory segments."""
    # Normalize path separators for matching
    dirs = path.replace("\\", "/").split("/")[:-1]
    if any(d in SKIP_DIRS for d in dirs):
        return True
    for run in SKIP_DIR_RUNS:
        for i in range(len(dirs) - len(run) + 1):
            if tuple(dirs[i:i + len(run)]) == run:
                return True
    return False


def discover_local_files(
    folder_path: Path,
    max_files: int = 500,
    max_size: int = 500 * 1024,  # 500KB
) -> list[Path]:
    """Discover Elixir source files in a local folder.

    Args:
        folder_path: Root folder to scan
        max_files: Maximum number of files to index
        max_size: Maximum file size in bytes

    Returns:
        List of Path objects for source files
    """
    files = []

    for file_path in folder_path.rglob("*"):
        if not file_path.is_file():
            continue

        try:
            rel_path = file_path.relative_to(folder_path).as_posix()
        except ValueError:
            continue

        if should_skip_file(rel_path):
            continue

        if file_path.suffix not in LANGUAGE_EXTENSIONS:
            continue

        try:
            if file_path.stat().st_size > max_size:
                continue
        except OSError:
            continue

        files.append(file_path)

    # lib/ sources first, then shallower paths
    def priority_key(file_path: Path) -> tuple:
        rel_path = file_path.relative_to(folder_path).as_posix()
        in_lib = 0 if rel_path.startswith("lib/") else 1
        return (in_lib, rel_path.count("/"), rel_path)

    files.sort(key=priority_key)
    return files[:max_files]


def index_folder(
    path: str,
    kinds: Optional[str] = None,
    identifier_style: Optional[str] = None,
    storage_path: Optional[str] = None
) -> dict:
    """Index a local folder containing Elixir code.

    Args:
        path: Path to local folder (absolute or relative)
        kinds: Kind selection string, e.g. "+p-l" or "fm"
        identifier_style: "dotted" or "predicate"
        storage_path: Custom storage path (default: ~/.exctags-index/)

    Returns:
        Dict with indexing results
    """
    folder_path = Path(path).expanduser().resolve()

    if not folder_path.exists():
        return {"success": False, "error": f"Folder not found: {path}"}

    if not folder_path.is_dir():
        return {"success": False, "error": f"Path is not a directory: {path}"}

    try:
        kind_config = config.kind_config(kinds)
        options = config.scanner_options(identifier_style)
    except (KindSpecError, ValueError) as e:
        return {"success": False, "error": str(e)}

    warnings = []

    try:
        source_files = discover_local_files(folder_path)

        if not source_files:
            return {"success": False, "error": "No Elixir files found"}

        all_tags = []
        raw_files = {}
        parsed_files = []

        for file_path in source_files:
            rel_path = file_path.relative_to(folder_path).as_posix()

            try:
                with open(file_path, "r", encoding="utf-8", errors="replace", newline="") as f:
                    content = f.read()
            except OSError as e:
                logger.warning("Failed to read %s: %s", file_path, e)
                warnings.append(f"Failed to read {rel_path}: {e}")
                continue

            tags = parse_file(content, rel_path, options=options, kinds=kind_config)
            all_tags.extend(tags)
            raw_files[rel_path] = content
            parsed_files.append(rel_path)

        if not all_tags:
            return {"success": False, "error": "No tags extracted from files"}

        # Folder name as repo name, "local" as owner
        repo_name = folder_path.name
        owner = "local"

        store = IndexStore(base_path=storage_path)
        index = store.save_index(
            owner=owner,
            name=repo_name,
            source_files=parsed_files,
            tags=all_tags,
            raw_files=raw_files
        )
        logger.info("Indexed %s: %d files, %d tags", index.repo, len(parsed_files), len(all_tags))

        result = {
            "success": True,
            "repo": index.repo,
            "folder_path": str(folder_path),
            "indexed_at": index.indexed_at,
            "file_count": len(parsed_files),
            "tag_count": len(all_tags),
            "kinds": index.kinds,
            "files": parsed_files[:20],  # Limit files in response
        }

        if warnings:
            result["warnings"] = warnings

        if len(source_files) >= 500:
            result["note"] = "Folder has many files; indexed first 500"

        return result

    except Exception as e:
        logger.exception("Indexing %s failed", folder_path)
        return {"success": False, "error": f"Indexing failed: {str(e)}"}
