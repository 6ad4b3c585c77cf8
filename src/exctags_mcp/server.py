"""MCP server for exctags-mcp."""

import asyncio
import json
import logging

from mcp.server import Server
from mcp.types import Tool, TextContent

from . import config
from .parser import TagKind
from .tools.index_repo import index_repo
from .tools.index_folder import index_folder
from .tools.list_repos import list_repos
from .tools.list_kinds import list_kinds
from .tools.get_file_tree import get_file_tree
from .tools.get_file_outline import get_file_outline
from .tools.get_tag import get_tag, get_tags
from .tools.search_tags import search_tags
from .tools.export_tags import export_tags

logger = logging.getLogger(__name__)

KIND_LABELS = [k.label for k in TagKind]

_REPO_PROPERTY = {
    "type": "string",
    "description": "Repository identifier (owner/repo or just repo name)"
}

_SCAN_PROPERTIES = {
    "kinds": {
        "type": "string",
        "description": "Kind selection: letters to enable exactly (e.g. 'fm') or +/- adjustments (e.g. '+p-l'). Letters: d=macro f=function m=module r=record p=protocol l=impl."
    },
    "identifier_style": {
        "type": "string",
        "description": "Identifier characters: 'dotted' captures Foo.Bar as one name, 'predicate' captures valid? and save!",
        "enum": ["dotted", "predicate"]
    },
}


server = Server("exctags-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="index_repo",
            description="Index the Elixir sources (.ex, .exs) of a GitHub repository. Fetches files, scans them for definitions, and saves the tags to local storage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "GitHub repository URL or owner/repo string"
                    },
                    **_SCAN_PROPERTIES,
                },
                "required": ["url"]
            }
        ),
        Tool(
            name="index_folder",
            description="Index a local folder of Elixir sources. Walks the directory, scans .ex and .exs files for definitions, and saves the tags to local storage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to local folder (absolute or relative, supports ~ for home directory)"
                    },
                    **_SCAN_PROPERTIES,
                },
                "required": ["path"]
            }
        ),
        Tool(
            name="list_repos",
            description="List all indexed repositories.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="list_kinds",
            description="Describe the Elixir parser: file extensions and tag kinds with their letters and enabled state.",
            inputSchema={
                "type": "object",
                "properties": {
                    "kinds": _SCAN_PROPERTIES["kinds"]
                }
            }
        ),
        Tool(
            name="get_file_tree",
            description="Get the indexed files of a repository as a tree, optionally filtered by path prefix.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO_PROPERTY,
                    "path_prefix": {
                        "type": "string",
                        "description": "Optional path prefix to filter (e.g., 'lib/my_app')",
                        "default": ""
                    }
                },
                "required": ["repo"]
            }
        ),
        Tool(
            name="get_file_outline",
            description="Get all tags in a file, with functions nested under the module they were found in.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO_PROPERTY,
                    "file_path": {
                        "type": "string",
                        "description": "Path to the file within the repository (e.g., 'lib/my_app.ex')"
                    }
                },
                "required": ["repo", "file_path"]
            }
        ),
        Tool(
            name="get_tag",
            description="Get a tag and the source line it was defined on.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO_PROPERTY,
                    "tag_id": {
                        "type": "string",
                        "description": "Tag ID from get_file_outline or search_tags"
                    }
                },
                "required": ["repo", "tag_id"]
            }
        ),
        Tool(
            name="get_tags",
            description="Get several tags and their source lines in one call.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO_PROPERTY,
                    "tag_ids": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "List of tag IDs to retrieve"
                    }
                },
                "required": ["repo", "tag_ids"]
            }
        ),
        Tool(
            name="search_tags",
            description="Search tags by name across an indexed repository.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO_PROPERTY,
                    "query": {
                        "type": "string",
                        "description": "Search query (matches names, qualified names, source lines, modules)"
                    },
                    "kind": {
                        "type": "string",
                        "description": "Optional filter by tag kind",
                        "enum": KIND_LABELS
                    },
                    "module": {
                        "type": "string",
                        "description": "Optional filter by enclosing module name"
                    },
                    "file_pattern": {
                        "type": "string",
                        "description": "Optional glob pattern to filter files (e.g., 'lib/**/*.ex')"
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of results to return",
                        "default": 10
                    }
                },
                "required": ["repo", "query"]
            }
        ),
        Tool(
            name="export_tags",
            description="Write an indexed repository's tags to a ctags-format tags file.",
            inputSchema={
                "type": "object",
                "properties": {
                    "repo": _REPO_PROPERTY,
                    "output_path": {
                        "type": "string",
                        "description": "Destination tags file path"
                    },
                    "sort": {
                        "type": "boolean",
                        "description": "Sort tags by name",
                        "default": True
                    }
                },
                "required": ["repo", "output_path"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    storage_path = config.storage_path()

    try:
        if name == "index_repo":
            result = await index_repo(
                url=arguments["url"],
                kinds=arguments.get("kinds"),
                identifier_style=arguments.get("identifier_style"),
                storage_path=storage_path
            )
        elif name == "index_folder":
            result = index_folder(
                path=arguments["path"],
                kinds=arguments.get("kinds"),
                identifier_style=arguments.get("identifier_style"),
                storage_path=storage_path
            )
        elif name == "list_repos":
            result = list_repos(storage_path=storage_path)
        elif name == "list_kinds":
            result = list_kinds(kinds=arguments.get("kinds"))
        elif name == "get_file_tree":
            result = get_file_tree(
                repo=arguments["repo"],
                path_prefix=arguments.get("path_prefix", ""),
                storage_path=storage_path
            )
        elif name == "get_file_outline":
            result = get_file_outline(
                repo=arguments["repo"],
                file_path=arguments["file_path"],
                storage_path=storage_path
            )
        elif name == "get_tag":
            result = get_tag(
                repo=arguments["repo"],
                tag_id=arguments["tag_id"],
                storage_path=storage_path
            )
        elif name == "get_tags":
            result = get_tags(
                repo=arguments["repo"],
                tag_ids=arguments["tag_ids"],
                storage_path=storage_path
            )
        elif name == "search_tags":
            result = search_tags(
                repo=arguments["repo"],
                query=arguments["query"],
                kind=arguments.get("kind"),
                module=arguments.get("module"),
                file_pattern=arguments.get("file_pattern"),
                max_results=arguments.get("max_results", 10),
                storage_path=storage_path
            )
        elif name == "export_tags":
            result = export_tags(
                repo=arguments["repo"],
                output_path=arguments["output_path"],
                sort=arguments.get("sort", True),
                storage_path=storage_path
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}, indent=2))]


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    config.configure_logging()
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
