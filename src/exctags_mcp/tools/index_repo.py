"""Index repository tool - fetch, scan, save."""

import asyncio
import logging
import os
from typing import Optional
from urllib.parse import urlparse

import httpx
import pathspec

from .. import config
from ..parser import KindSpecError, LANGUAGE_EXTENSIONS, parse_file
from ..storage import IndexStore
from .index_folder import should_skip_file

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"


def parse_github_url(url: str) -> tuple[str, str]:
    """Split a repository reference into (owner, repo).

    Accepts "owner/repo", "github.com/owner/repo" and full https URLs,
    with or without a trailing ".git".
    """
    path = urlparse(url).path if "://" in url else url
    parts = [p for p in path.split("/") if p]
    if parts and parts[0] == "github.com":
        parts = parts[1:]
    if len(parts) < 2:
        raise ValueError(f"Could not parse GitHub URL: {url}")
    return parts[0], parts[1].removesuffix(".git")


async def _github_get(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    endpoint: str,
    token: Optional[str] = None,
    raw: bool = False,
    params: Optional[dict] = None
) -> httpx.Response:
    """GET one repository endpoint; raises httpx.HTTPStatusError on 4xx/5xx."""
    headers = {"Accept": RAW_MEDIA_TYPE if raw else JSON_MEDIA_TYPE}
    if token:
        headers["Authorization"] = f"token {token}"

    response = await client.get(
        f"{GITHUB_API}/repos/{owner}/{repo}/{endpoint}",
        params=params,
        headers=headers,
    )
    response.raise_for_status()
    return response


async def fetch_repo_tree(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    token: Optional[str] = None
) -> list[dict]:
    """All paths of the default branch, from one recursive git/trees call."""
    response = await _github_get(
        client, owner, repo, "git/trees/HEAD", token, params={"recursive": "1"}
    )
    return response.json().get("tree", [])


async def fetch_file_content(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    path: str,
    token: Optional[str] = None
) -> str:
    response = await _github_get(client, owner, repo, f"contents/{path}", token, raw=True)
    return response.text


def discover_source_files(
    tree_entries: list[dict],
    gitignore_content: Optional[str] = None,
    max_files: int = 500,
    max_size: int = 500 * 1024  # 500KB
) -> list[str]:
    """Discover Elixir source files from tree entries.

    Applies filtering pipeline:
    1. Type filter (blobs only)
    2. Extension filter (.ex / .exs)
    3. Skip list patterns
    4. Size limit
    5. .gitignore matching
    6. File count limit, lib/ first
    """
    gitignore_spec = None
    if gitignore_content:
        gitignore_spec = pathspec.PathSpec.from_lines(
            "gitwildmatch",
            gitignore_content.splitlines()
        )

    files = []

    for entry in tree_entries:
        if entry.get("type") != "blob":
            continue

        path = entry.get("path", "")
        size = entry.get("size", 0)

        _, ext = os.path.splitext(path)
        if ext not in LANGUAGE_EXTENSIONS:
            continue

        if should_skip_file(path):
            continue

        if size > max_size:
            continue

        if gitignore_spec and gitignore_spec.match_file(path):
            continue

        files.append(path)

    if len(files) > max_files:
        def priority_key(path):
            in_lib = 0 if path.startswith("lib/") else 1
            return (in_lib, path.count("/"), path)

        files.sort(key=priority_key)
        files = files[:max_files]

    return files


async def index_repo(
    url: str,
    kinds: Optional[str] = None,
    identifier_style: Optional[str] = None,
    github_token: Optional[str] = None,
    storage_path: Optional[str] = None
) -> dict:
    """Index the Elixir sources of a GitHub repository.

    Args:
        url: GitHub repository URL or owner/repo string
        kinds: Kind selection string, e.g. "+p-l" or "fm"
        identifier_style: "dotted" or "predicate"
        github_token: GitHub API token (optional, for private repos/higher rate limits)
        storage_path: Custom storage path (default: ~/.exctags-index/)

    Returns:
        Dict with indexing results
    """
    try:
        owner, repo = parse_github_url(url)
        kind_config = config.kind_config(kinds)
        options = config.scanner_options(identifier_style)
    except (KindSpecError, ValueError) as e:
        return {"success": False, "error": str(e)}

    if not github_token:
        github_token = config.github_token()

    warnings = []

    try:
        async with httpx.AsyncClient() as client:
            try:
                tree_entries = await fetch_repo_tree(client, owner, repo, github_token)
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    return {"success": False, "error": f"Repository not found: {owner}/{repo}"}
                elif e.response.status_code == 403:
                    return {"success": False, "error": "GitHub API rate limit exceeded. Set GITHUB_TOKEN."}
                raise

            try:
                gitignore_content = await fetch_file_content(client, owner, repo, ".gitignore", github_token)
            except httpx.HTTPError:
                gitignore_content = None

            source_files = discover_source_files(tree_entries, gitignore_content)
            if not source_files:
                return {"success": False, "error": "No Elixir files found"}

            semaphore = asyncio.Semaphore(10)

            async def fetch_with_limit(path: str) -> tuple[str, str]:
                async with semaphore:
                    try:
                        return path, await fetch_file_content(client, owner, repo, path, github_token)
                    except httpx.HTTPError as e:
                        logger.warning("Failed to fetch %s/%s:%s: %s", owner, repo, path, e)
                        warnings.append(f"Failed to fetch {path}")
                        return path, ""

            file_contents = await asyncio.gather(*(fetch_with_limit(p) for p in source_files))

        # Each file gets its own scan context inside parse_file
        all_tags = []
        raw_files = {}
        parsed_files = []

        for path, content in file_contents:
            if not content:
                continue

            tags = parse_file(content, path, options=options, kinds=kind_config)
            all_tags.extend(tags)
            raw_files[path] = content
            parsed_files.append(path)

        if not all_tags:
            return {"success": False, "error": "No tags extracted"}

        store = IndexStore(base_path=storage_path)
        index = store.save_index(
            owner=owner,
            name=repo,
            source_files=parsed_files,
            tags=all_tags,
            raw_files=raw_files
        )
        logger.info("Indexed %s: %d files, %d tags", index.repo, len(parsed_files), len(all_tags))

        result = {
            "success": True,
            "repo": index.repo,
            "indexed_at": index.indexed_at,
            "file_count": len(parsed_files),
            "tag_count": len(all_tags),
            "kinds": index.kinds,
            "files": parsed_files[:20],  # Limit files in response
        }

        if len(source_files) >= 500:
            warnings.append("Repository has many files; indexed first 500")

        if warnings:
            result["warnings"] = warnings

        return result

    except Exception as e:
        logger.exception("Indexing %s/%s failed", owner, repo)
        return {"success": False, "error": f"Indexing failed: {str(e)}"}
