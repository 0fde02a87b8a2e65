"""Tests for the API operation groups wired through a real client and a mocked transport."""

import json

import httpx
import pytest

from repo_adapter.services.github.api.client import GitHubAPIClient
from repo_adapter.services.github.api.contents import ContentsOperations
from repo_adapter.services.github.errors import GitHubAPIError
from repo_adapter.services.github.github_service import GitHubRepositoryAdapter

BASE_URL = "https://api.github.test"


@pytest.fixture
def github(make_transport):
    """Adapter over an in-memory GitHub: one branch, one tree, .gitkeep files in 'api' only."""
    state = {"ref_sha": "C1"}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if request.method == "GET" and path == "/repos/o/r/git/ref/heads/main":
            return httpx.Response(
                200,
                json={"ref": "refs/heads/main", "object": {"sha": state["ref_sha"], "type": "commit"}},
            )
        if request.method == "GET" and path == "/repos/o/r/git/ref/heads/gone":
            return httpx.Response(404, json={"message": "Not Found"})
        if request.method == "GET" and path == "/repos/o/r/git/trees/C1":
            return httpx.Response(
                200,
                json={
                    "sha": "T1",
                    "tree": [{"path": "README.md", "mode": "100644", "type": "blob", "sha": "s1", "size": 3}],
                    "truncated": False,
                },
            )
        if request.method == "POST" and path == "/repos/o/r/git/trees":
            return httpx.Response(201, json={"sha": "T2", "tree": json.loads(request.content)["tree"]})
        if request.method == "POST" and path == "/repos/o/r/git/commits":
            return httpx.Response(201, json={"sha": "C2"})
        if request.method == "PATCH" and path == "/repos/o/r/git/refs/heads/main":
            state["ref_sha"] = json.loads(request.content)["sha"]
            return httpx.Response(200, json={"ref": "refs/heads/main", "object": {"sha": state["ref_sha"]}})
        if path == "/repos/o/r/contents/api/.gitkeep":
            if request.method == "GET":
                return httpx.Response(
                    200, json={"name": ".gitkeep", "path": "api/.gitkeep", "type": "file", "sha": "keep-sha"}
                )
            return httpx.Response(200, json={"content": None, "commit": {"sha": "C3"}})
        if path == "/repos/o/r/contents/idl/echo.thrift":
            if request.headers["Accept"] == "application/vnd.github.raw+json":
                return httpx.Response(200, content=b"service Echo {}")
            return httpx.Response(
                200, json={"name": "echo.thrift", "path": "idl/echo.thrift", "type": "file", "sha": "echo-sha"}
            )
        if path == "/repos/o/r/tarball/v1":
            return httpx.Response(302, headers={"Location": "https://codeload.github.test/o/r/tar.gz/v1"})
        if request.url.host == "codeload.github.test":
            return httpx.Response(200, content=b"\x1f\x8barchive")
        return httpx.Response(404, json={"message": "Not Found"})

    client = GitHubAPIClient(token="t", base_url=BASE_URL, transport=make_transport(handler))
    adapter = GitHubRepositoryAdapter(client=client)
    adapter.state = state
    return adapter


class TestPushOverHttp:
    @pytest.mark.asyncio
    async def test_push_request_sequence(self, github, recorded_requests):
        commit_sha = await github.push_files_to_repository(
            {"idl/new.thrift": b"struct A {}"}, "o", "r", "main", "add idl"
        )

        assert commit_sha == "C2"
        assert github.state["ref_sha"] == "C2"
        assert [(r.method, r.url.path) for r in recorded_requests] == [
            ("GET", "/repos/o/r/git/ref/heads/main"),
            ("GET", "/repos/o/r/git/trees/C1"),
            ("POST", "/repos/o/r/git/trees"),
            ("POST", "/repos/o/r/git/commits"),
            ("PATCH", "/repos/o/r/git/refs/heads/main"),
        ]

        tree_body = json.loads(recorded_requests[2].content)
        assert tree_body["base_tree"] == "C1"
        assert [entry["path"] for entry in tree_body["tree"]] == ["idl/new.thrift", "README.md"]

        commit_body = json.loads(recorded_requests[3].content)
        assert commit_body == {"message": "add idl", "tree": "T2", "parents": ["C1"]}

        ref_body = json.loads(recorded_requests[4].content)
        assert ref_body == {"sha": "C2", "force": True}

    @pytest.mark.asyncio
    async def test_unknown_branch_stops_after_ref_lookup(self, github, recorded_requests):
        with pytest.raises(GitHubAPIError) as exc_info:
            await github.push_files_to_repository({"a": b"a"}, "o", "r", "gone", "msg")

        assert exc_info.value.status_code == 404
        assert len(recorded_requests) == 1


class TestReadsOverHttp:
    @pytest.mark.asyncio
    async def test_get_file_uses_ref_parameter(self, github, recorded_requests):
        result = await github.get_file("o", "r", "idl/echo.thrift", "v1")

        assert result.name == "idl/echo.thrift"
        assert result.content == b"service Echo {}"
        assert recorded_requests[0].url.params["ref"] == "v1"

    @pytest.mark.asyncio
    async def test_get_file_without_ref_omits_parameter(self, github, recorded_requests):
        await github.get_file("o", "r", "idl/echo.thrift", "")

        assert "ref" not in recorded_requests[0].url.params

    @pytest.mark.asyncio
    async def test_latest_commit_hash_is_blob_sha(self, github):
        assert await github.get_latest_commit_hash("o", "r", "idl/echo.thrift", "main") == "echo-sha"

    @pytest.mark.asyncio
    async def test_archive_download(self, github, recorded_requests):
        archive = await github.get_repository_archive("o", "r", "v1")

        assert archive == b"\x1f\x8barchive"
        assert [str(r.url) for r in recorded_requests] == [
            f"{BASE_URL}/repos/o/r/tarball/v1",
            "https://codeload.github.test/o/r/tar.gz/v1",
        ]
        assert "Authorization" not in recorded_requests[1].headers


class TestDeleteDirsOverHttp:
    @pytest.mark.asyncio
    async def test_deletes_existing_and_skips_missing(self, github, recorded_requests):
        await github.delete_dirs("o", "r", "rpc", "api")

        assert [(r.method, r.url.path) for r in recorded_requests] == [
            ("GET", "/repos/o/r/contents/rpc/.gitkeep"),
            ("GET", "/repos/o/r/contents/api/.gitkeep"),
            ("DELETE", "/repos/o/r/contents/api/.gitkeep"),
        ]
        assert recorded_requests[1].url.params["ref"] == "main"
        assert json.loads(recorded_requests[2].content) == {
            "message": "Delete folder api",
            "sha": "keep-sha",
            "branch": "main",
        }


def raw_path(request: httpx.Request) -> bytes:
    """The request path as sent on the wire, without the query string."""
    return request.url.raw_path.split(b"?", 1)[0]


@pytest.fixture
def any_path_github(make_transport):
    """Adapter over a GitHub that answers every contents path and branch name."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if "/contents/" in path:
            if request.method == "DELETE":
                return httpx.Response(200, json={"content": None, "commit": {"sha": "C3"}})
            if request.headers["Accept"] == "application/vnd.github.raw+json":
                return httpx.Response(200, content=path.encode())
            name = path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={"name": name, "path": path, "type": "file", "sha": f"sha:{path}"})
        if request.method == "GET" and "/git/ref/" in path:
            return httpx.Response(200, json={"ref": "refs/heads/x", "object": {"sha": "C1", "type": "commit"}})
        if request.method == "GET" and path == "/repos/o/r/git/trees/C1":
            return httpx.Response(200, json={"sha": "T1", "tree": [], "truncated": False})
        if request.method == "POST" and path == "/repos/o/r/git/trees":
            return httpx.Response(201, json={"sha": "T2", "tree": []})
        if request.method == "POST" and path == "/repos/o/r/git/commits":
            return httpx.Response(201, json={"sha": "C2"})
        if request.method == "PATCH" and "/git/refs/" in path:
            return httpx.Response(200, json={"ref": "refs/heads/x", "object": {"sha": "C2"}})
        if "/tarball/" in path:
            return httpx.Response(302, headers={"Location": "https://codeload.github.test/o/r"})
        if request.url.host == "codeload.github.test":
            return httpx.Response(200, content=b"archive")
        return httpx.Response(404, json={"message": "Not Found"})

    client = GitHubAPIClient(token="t", base_url=BASE_URL, transport=make_transport(handler))
    return GitHubRepositoryAdapter(client=client)


SPECIAL_PATHS = [
    ("docs/C#/intro.md", b"docs/C%23/intro.md"),
    ("a?b/c.go", b"a%3Fb/c.go"),
    ("50%41off.md", b"50%2541off.md"),
    ("my docs/read me.md", b"my%20docs/read%20me.md"),
]


class TestPathEscaping:
    """Paths and branch names with URL delimiters reach GitHub unchanged."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("file_path,escaped", SPECIAL_PATHS)
    async def test_get_file(self, any_path_github, recorded_requests, file_path, escaped):
        result = await any_path_github.get_file("o", "r", file_path, "v1")

        request = recorded_requests[0]
        assert request.url.path == f"/repos/o/r/contents/{file_path}"
        assert raw_path(request) == b"/repos/o/r/contents/" + escaped
        assert request.url.params["ref"] == "v1"
        assert result.name == file_path
        assert result.content == f"/repos/o/r/contents/{file_path}".encode()

    @pytest.mark.asyncio
    async def test_get_file_with_parsed_url(self, any_path_github, recorded_requests):
        file_path, owner, repo_name = any_path_github.parse_url(
            "https://github.com/o/r/blob/main/a?b/c.go?plain=1"
        )

        await any_path_github.get_file(owner, repo_name, file_path, "main")

        assert file_path == "a?b/c.go"
        assert recorded_requests[0].url.path == "/repos/o/r/contents/a?b/c.go"
        assert dict(recorded_requests[0].url.params) == {"ref": "main"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("file_path,escaped", SPECIAL_PATHS)
    async def test_latest_commit_hash(self, any_path_github, recorded_requests, file_path, escaped):
        sha = await any_path_github.get_latest_commit_hash("o", "r", file_path, "main")

        assert sha == f"sha:/repos/o/r/contents/{file_path}"
        assert raw_path(recorded_requests[0]) == b"/repos/o/r/contents/" + escaped

    @pytest.mark.asyncio
    async def test_delete_dirs(self, any_path_github, recorded_requests):
        await any_path_github.delete_dirs("o", "r", "C#", "50% off")

        assert [(r.method, raw_path(r)) for r in recorded_requests] == [
            ("GET", b"/repos/o/r/contents/C%23/.gitkeep"),
            ("DELETE", b"/repos/o/r/contents/C%23/.gitkeep"),
            ("GET", b"/repos/o/r/contents/50%25%20off/.gitkeep"),
            ("DELETE", b"/repos/o/r/contents/50%25%20off/.gitkeep"),
        ]
        assert json.loads(recorded_requests[1].content)["sha"] == "sha:/repos/o/r/contents/C#/.gitkeep"

    @pytest.mark.asyncio
    async def test_push_to_branch_with_delimiters(self, any_path_github, recorded_requests):
        await any_path_github.push_files_to_repository(
            {"C#/a.cs": b"class A {}"}, "o", "r", "fix/C#?v2", "msg"
        )

        assert raw_path(recorded_requests[0]) == b"/repos/o/r/git/ref/heads/fix/C%23%3Fv2"
        assert recorded_requests[-1].method == "PATCH"
        assert raw_path(recorded_requests[-1]) == b"/repos/o/r/git/refs/heads/fix/C%23%3Fv2"
        tree_body = json.loads(recorded_requests[2].content)
        assert tree_body["tree"][0]["path"] == "C#/a.cs"

    @pytest.mark.asyncio
    async def test_archive_ref_is_one_segment(self, any_path_github, recorded_requests):
        await any_path_github.get_repository_archive("o", "r", "release/1.0#rc")

        assert raw_path(recorded_requests[0]) == b"/repos/o/r/tarball/release%2F1.0%23rc"


class TestNonFileContents:
    """get_contents only accepts regular files."""

    @pytest.fixture
    def contents_answer(self, make_transport):
        def _build(body):
            client = GitHubAPIClient(
                token="t",
                base_url=BASE_URL,
                transport=make_transport(lambda request: httpx.Response(200, json=body)),
            )
            return ContentsOperations(client)

        return _build

    @pytest.mark.asyncio
    async def test_symlink_is_rejected(self, contents_answer):
        contents = contents_answer(
            {"name": "link", "path": "idl/link", "type": "symlink", "sha": "s", "target": "../x"}
        )

        with pytest.raises(ValueError, match="symlink"):
            await contents.get_contents("o", "r", "idl/link", "main")

    @pytest.mark.asyncio
    async def test_submodule_is_rejected(self, contents_answer):
        contents = contents_answer({"name": "vendor", "path": "vendor", "type": "submodule", "sha": "s"})

        with pytest.raises(ValueError, match="submodule"):
            await contents.get_contents("o", "r", "vendor")

    @pytest.mark.asyncio
    async def test_directory_listing_is_rejected(self, contents_answer):
        contents = contents_answer([{"name": "a.thrift", "path": "idl/a.thrift", "type": "file", "sha": "s"}])

        with pytest.raises(ValueError, match="directory"):
            await contents.get_contents("o", "r", "idl")

    @pytest.mark.asyncio
    async def test_regular_file_is_returned(self, contents_answer):
        contents = contents_answer({"name": "a.thrift", "path": "idl/a.thrift", "type": "file", "sha": "s"})

        info = await contents.get_contents("o", "r", "idl/a.thrift")

        assert info.sha == "s"
        assert info.is_file
