"""Tests for tools module."""

import httpx
import pytest
from exctags_mcp.tools import index_repo as index_repo_module
from exctags_mcp.tools.index_repo import (
    parse_github_url,
    discover_source_files,
    fetch_file_content,
    fetch_repo_tree,
    index_repo,
)
from exctags_mcp.tools.index_folder import index_folder, should_skip_file
from exctags_mcp.tools.get_file_outline import get_file_outline
from exctags_mcp.tools.get_file_tree import get_file_tree
from exctags_mcp.tools.get_tag import get_tag, get_tags
from exctags_mcp.tools.search_tags import search_tags
from exctags_mcp.tools.export_tags import export_tags
from exctags_mcp.tools.list_kinds import list_kinds
from exctags_mcp.tools.list_repos import list_repos


ACCOUNTS_SOURCE = """defmodule MyApp.Accounts do
  alias MyApp.Repo

  def get_user(id), do: Repo.get(User, id)
  defp hash(pw), do: pw
end
"""

WEB_SOURCE = """defmodule MyAppWeb.UserController do
  def show(conn, params) do
    conn
  end
end

defprotocol MyApp.Greeter do
  def greet(who)
end
"""


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "my_app"
    (root / "lib" / "my_app").mkdir(parents=True)
    (root / "lib" / "my_app_web").mkdir(parents=True)
    (root / "deps" / "plug" / "lib").mkdir(parents=True)
    (root / "lib" / "my_app" / "accounts.ex").write_text(ACCOUNTS_SOURCE, encoding="utf-8")
    (root / "lib" / "my_app_web" / "user_controller.ex").write_text(WEB_SOURCE, encoding="utf-8")
    (root / "deps" / "plug" / "lib" / "plug.ex").write_text("defmodule Plug do\nend\n", encoding="utf-8")
    (root / "README.md").write_text("def not_elixir\n", encoding="utf-8")
    return root


@pytest.fixture
def indexed(project, tmp_path):
    storage = str(tmp_path / "index")
    result = index_folder(str(project), storage_path=storage)
    assert result["success"] is True
    return storage


def test_parse_github_url_full():
    """Test parsing full GitHub URL."""
    assert parse_github_url("https://github.com/elixir-lang/elixir") == ("elixir-lang", "elixir")


def test_parse_github_url_with_git():
    """Test parsing URL with .git suffix."""
    assert parse_github_url("https://github.com/phoenixframework/phoenix.git") == ("phoenixframework", "phoenix")


def test_parse_github_url_short():
    """Test parsing owner/repo shorthand."""
    assert parse_github_url("owner/repo") == ("owner", "repo")


def test_parse_github_url_variants():
    """Test schemeless hosts, trailing slashes and bad input."""
    assert parse_github_url("github.com/owner/repo") == ("owner", "repo")
    assert parse_github_url("https://github.com/owner/repo/tree/main/") == ("owner", "repo")
    with pytest.raises(ValueError):
        parse_github_url("https://github.com/owner")


def test_should_skip_file():
    """Test skip patterns."""
    assert should_skip_file("deps/plug/lib/plug.ex") is True
    assert should_skip_file("_build/dev/lib/x.ex") is True
    assert should_skip_file("lib/my_app.ex") is False


def test_should_skip_file_matches_whole_segments():
    """Test skip names match directory segments, not substrings."""
    assert should_skip_file("lib/nodeps/x.ex") is False
    assert should_skip_file("lib/deps_helper.ex") is False
    assert should_skip_file("apps/web/deps/x/lib/x.ex") is True
    assert should_skip_file("deps\\x\\lib\\x.ex") is True
    assert should_skip_file("priv/static/assets/app.ex") is True
    assert should_skip_file("apps/web/priv/static/x.ex") is True
    assert should_skip_file("priv/repo/seeds.exs") is False
    assert should_skip_file("lib/static/priv.ex") is False


def test_discover_source_files():
    """Test file discovery from tree entries."""
    tree_entries = [
        {"path": "lib/my_app.ex", "type": "blob", "size": 1000},
        {"path": "test/my_app_test.exs", "type": "blob", "size": 500},
        {"path": "deps/jason/lib/jason.ex", "type": "blob", "size": 500},
        {"path": "README.md", "type": "blob", "size": 200},
        {"path": "lib", "type": "tree"},
        {"path": "lib/generated/big.ex", "type": "blob", "size": 100},
    ]

    files = discover_source_files(tree_entries, gitignore_content="lib/generated/\n")

    assert files == ["lib/my_app.ex", "test/my_app_test.exs"]


def test_discover_source_files_prioritizes_lib():
    """Test that lib/ files are kept first when over the limit."""
    tree_entries = [
        {"path": f"test/file{i}_test.exs", "type": "blob", "size": 100}
        for i in range(300)
    ] + [
        {"path": f"lib/file{i}.ex", "type": "blob", "size": 100}
        for i in range(300)
    ]

    files = discover_source_files(tree_entries, max_files=100)
    assert len(files) == 100
    assert all(f.startswith("lib/") for f in files)


def test_index_folder(project, tmp_path):
    """Test indexing a local folder."""
    result = index_folder(str(project), storage_path=str(tmp_path / "index"))

    assert result["success"] is True
    assert result["repo"] == "local/my_app"
    assert result["file_count"] == 2
    assert result["kinds"] == {"module": 2, "function": 4, "protocol": 1}
    assert not any(f.startswith("deps/") for f in result["files"])


def test_index_folder_kind_selection(project, tmp_path):
    """Test kind selection is honored and validated."""
    result = index_folder(str(project), kinds="m", storage_path=str(tmp_path / "index"))
    assert result["kinds"] == {"module": 2}

    result = index_folder(str(project), kinds="+z", storage_path=str(tmp_path / "index"))
    assert result["success"] is False
    assert "z" in result["error"]


def test_index_folder_errors(tmp_path):
    """Test missing and empty folders."""
    assert index_folder(str(tmp_path / "missing"))["success"] is False

    empty = tmp_path / "empty"
    empty.mkdir()
    result = index_folder(str(empty), storage_path=str(tmp_path / "index"))
    assert result == {"success": False, "error": "No Elixir files found"}


def test_file_outline(indexed):
    """Test outline nests functions under their module."""
    outline = get_file_outline("my_app", "lib/my_app/accounts.ex", storage_path=indexed)

    assert outline["tag_count"] == 3
    module = outline["tags"][0]
    assert module["name"] == "MyApp.Accounts"
    assert [c["name"] for c in module["children"]] == ["get_user", "hash"]


def test_file_outline_unknown_repo(indexed):
    """Test unknown repository."""
    assert "error" in get_file_outline("nope", "lib/x.ex", storage_path=indexed)


def test_file_tree(indexed):
    """Test the file tree with tag counts."""
    result = get_file_tree("local/my_app", path_prefix="lib", storage_path=indexed)

    dirs = {d["path"]: d for d in result["tree"]}
    assert set(dirs) == {"my_app/", "my_app_web/"}
    accounts = dirs["my_app/"]["children"][0]
    assert accounts["path"] == "lib/my_app/accounts.ex"
    assert accounts["tag_count"] == 3


def test_get_tag_and_tags(indexed):
    """Test fetching tags with their source lines."""
    outline = get_file_outline("my_app", "lib/my_app/accounts.ex", storage_path=indexed)
    get_user_id = outline["tags"][0]["children"][0]["id"]

    tag = get_tag("my_app", get_user_id, storage_path=indexed)
    assert tag["qualified_name"] == "MyApp.Accounts.get_user"
    assert tag["source"] == "  def get_user(id), do: Repo.get(User, id)"

    many = get_tags("my_app", [get_user_id, "missing"], storage_path=indexed)
    assert len(many["tags"]) == 1
    assert many["errors"][0]["id"] == "missing"


def test_search_tags(indexed):
    """Test search with kind and module filters."""
    result = search_tags("my_app", "show", storage_path=indexed)
    assert result["results"][0]["qualified_name"] == "MyAppWeb.UserController.show"

    result = search_tags("my_app", "greeter", kind="protocol", storage_path=indexed)
    assert [r["name"] for r in result["results"]] == ["MyApp.Greeter"]

    result = search_tags("my_app", "get", module="MyAppWeb.UserController", storage_path=indexed)
    assert result["result_count"] == 0


def test_export_tags(indexed, tmp_path):
    """Test exporting a tags file."""
    out = tmp_path / "tags"
    result = export_tags("my_app", str(out), storage_path=indexed)

    assert result["tag_count"] == 7
    text = out.read_text(encoding="utf-8")
    assert "get_user\tlib/my_app/accounts.ex\t/^  def get_user(id), do: Repo.get(User, id)$/;\"\tkind:function\tmodule:MyApp.Accounts" in text


def test_list_repos(indexed):
    """Test listing repos with totals."""
    result = list_repos(storage_path=indexed)
    assert result["count"] == 1
    assert result["total_tags"] == 7


def test_list_kinds():
    """Test the kind table tool."""
    result = list_kinds("-l")
    assert result["parser"] == "Elixir"
    assert result["extensions"] == ["ex", "exs"]
    assert {k["name"]: k["enabled"] for k in result["kinds"]}["impl"] is False
    assert "error" in list_kinds("+?")


@pytest.mark.asyncio
async def test_index_repo_with_stubbed_github(monkeypatch, tmp_path):
    """Test repository indexing without network access."""
    async def fake_tree(client, owner, repo, token=None):
        return [
            {"path": "lib/a.ex", "type": "blob", "size": 10},
            {"path": "mix.exs", "type": "blob", "size": 10},
            {"path": "lib/skipped.ex", "type": "blob", "size": 10},
        ]

    files = {
        ".gitignore": "lib/skipped.ex\n",
        "lib/a.ex": "defmodule A do\n  def run, do: :ok\nend\n",
        "mix.exs": "defmodule A.MixProject do\n  def project, do: []\nend\n",
    }

    async def fake_content(client, owner, repo, path, token=None):
        return files[path]

    monkeypatch.setattr(index_repo_module, "fetch_repo_tree", fake_tree)
    monkeypatch.setattr(index_repo_module, "fetch_file_content", fake_content)

    result = await index_repo("acme/widgets", storage_path=str(tmp_path))

    assert result["success"] is True
    assert result["repo"] == "acme/widgets"
    assert result["tag_count"] == 4
    assert result["kinds"] == {"module": 2, "function": 2}
    assert "lib/skipped.ex" not in result["files"]


@pytest.mark.asyncio
async def test_index_repo_without_gitignore(monkeypatch, tmp_path):
    """Test a missing .gitignore does not stop indexing."""
    async def fake_tree(client, owner, repo, token=None):
        return [{"path": "lib/a.ex", "type": "blob", "size": 10}]

    async def fake_content(client, owner, repo, path, token=None):
        if path == ".gitignore":
            raise httpx.HTTPError("404 Not Found")
        return "defmodule A do\nend\n"

    monkeypatch.setattr(index_repo_module, "fetch_repo_tree", fake_tree)
    monkeypatch.setattr(index_repo_module, "fetch_file_content", fake_content)

    result = await index_repo("acme/widgets", storage_path=str(tmp_path))

    assert result["success"] is True
    assert result["files"] == ["lib/a.ex"]


@pytest.mark.asyncio
async def test_github_requests_share_one_helper():
    """Test tree and content fetches set media types and the token header."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/git/trees/HEAD"):
            return httpx.Response(200, json={"tree": [{"path": "lib/a.ex", "type": "blob"}]})
        if request.url.path.endswith("/contents/lib/a.ex"):
            return httpx.Response(200, text="defmodule A do\nend\n")
        return httpx.Response(404)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        tree = await fetch_repo_tree(client, "acme", "widgets", token="secret")
        text = await fetch_file_content(client, "acme", "widgets", "lib/a.ex")
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_file_content(client, "acme", "widgets", ".gitignore")

    assert tree == [{"path": "lib/a.ex", "type": "blob"}]
    assert text == "defmodule A do\nend\n"

    tree_request, content_request, _ = seen
    assert str(tree_request.url) == "https://api.github.com/repos/acme/widgets/git/trees/HEAD?recursive=1"
    assert tree_request.headers["Accept"] == "application/vnd.github.v3+json"
    assert tree_request.headers["Authorization"] == "token secret"
    assert content_request.headers["Accept"] == "application/vnd.github.v3.raw"
    assert "Authorization" not in content_request.headers
