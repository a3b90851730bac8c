"""MCP SDK 서버에 파일 도구와 클라이언트 루트를 연결한 동작 테스트예요."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session

from hashfile_service.app.mcp_server import ClientRootsSync, build_mcp_server
from hashfile_service.app.roots import RootsManager
from hashfile_service.app.tools.defaults import build_default_tool_registry
from tests.conftest import parse_file_hash


def _server(roots_manager: RootsManager):
    return build_mcp_server(
        tool_registry=build_default_tool_registry(roots_manager=roots_manager),
        roots_manager=roots_manager,
        name="hashfile",
        version="0.1.0",
        instructions="read first",
    )


def _text(result: types.CallToolResult) -> str:
    content = result.content[0]
    assert isinstance(content, types.TextContent)
    return content.text


class _ClientRoots:
    """테스트 클라이언트가 ``roots/list``에 돌려줄 루트를 들고 있어요."""

    def __init__(self, *paths: Path) -> None:
        self.paths = list(paths)
        self.error: str | None = None
        self.calls = 0

    async def __call__(self, context: Any) -> types.ListRootsResult | types.ErrorData:
        del context
        self.calls += 1
        if self.error is not None:
            return types.ErrorData(code=types.INTERNAL_ERROR, message=self.error)
        return types.ListRootsResult(roots=[types.Root(uri=path.as_uri()) for path in self.paths])


# ─── 도구 목록과 호출 ───


@pytest.mark.asyncio
async def test_tools_list() -> None:
    async with create_connected_server_and_client_session(_server(RootsManager())) as client:
        result = await client.list_tools()
    tools = {tool.name: tool for tool in result.tools}
    assert set(tools) == {"read_text_file", "edit_text_file"}
    assert tools["edit_text_file"].inputSchema["required"] == ["path", "file_hash", "operations"]


@pytest.mark.asyncio
async def test_tools_call_read_then_edit(tmp_path: Path) -> None:
    target = tmp_path / "a.txt"
    target.write_text("hello\nworld\n", encoding="utf-8")

    async with create_connected_server_and_client_session(_server(RootsManager())) as client:
        read = await client.call_tool("read_text_file", {"path": str(target)})
        assert read.isError is False
        text = _text(read)
        assert text.startswith("1:0b|hello\n2:f3|world\n---\n")

        edit = await client.call_tool(
            "edit_text_file",
            {
                "path": str(target),
                "file_hash": parse_file_hash(text),
                "operations": [{"op_type": "replace", "anchor": "2:f3", "content": "there"}],
            },
        )
    assert edit.isError is False
    assert _text(edit) == f"Successfully edited {target}"
    assert target.read_text(encoding="utf-8") == "hello\nthere\n"


@pytest.mark.asyncio
async def test_tools_call_failure_is_tool_error(tmp_path: Path) -> None:
    async with create_connected_server_and_client_session(_server(RootsManager())) as client:
        result = await client.call_tool("read_text_file", {"path": str(tmp_path / "none.txt")})
    assert result.isError is True
    assert _text(result).startswith("Error: File not found")


@pytest.mark.asyncio
async def test_tools_call_missing_arguments_reach_the_tool() -> None:
    async with create_connected_server_and_client_session(_server(RootsManager())) as client:
        result = await client.call_tool("edit_text_file", {"path": "/tmp/none.txt"})
    assert result.isError is True
    assert _text(result).startswith("Error: ")


@pytest.mark.asyncio
async def test_tools_call_unknown_tool() -> None:
    async with create_connected_server_and_client_session(_server(RootsManager())) as client:
        result = await client.call_tool("nope", {})
    assert result.isError is True
    assert _text(result) == "Error: Unknown tool: nope"


# ─── 클라이언트 루트 ───


@pytest.mark.asyncio
async def test_client_roots_are_fetched_before_first_call(tmp_path: Path) -> None:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    (allowed / "a.txt").write_text("a\n", encoding="utf-8")
    (tmp_path / "b.txt").write_text("b\n", encoding="utf-8")
    roots_manager = RootsManager()
    client_roots = _ClientRoots(allowed)

    async with create_connected_server_and_client_session(
        _server(roots_manager), list_roots_callback=client_roots
    ) as client:
        inside = await client.call_tool("read_text_file", {"path": str(allowed / "a.txt")})
        outside = await client.call_tool("read_text_file", {"path": str(tmp_path / "b.txt")})

    assert inside.isError is False
    assert outside.isError is True
    assert "outside the permitted roots" in _text(outside)
    assert client_roots.calls == 1
    assert roots_manager.list_client_roots() == [allowed.as_uri()]


@pytest.mark.asyncio
async def test_empty_client_roots_keep_configured_roots_closed(tmp_path: Path) -> None:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    (allowed / "a.txt").write_text("a\n", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("secret\n", encoding="utf-8")
    roots_manager = RootsManager([str(allowed)])

    async with create_connected_server_and_client_session(
        _server(roots_manager), list_roots_callback=_ClientRoots()
    ) as client:
        secret = await client.call_tool("read_text_file", {"path": str(tmp_path / "secret.txt")})
        inside = await client.call_tool("read_text_file", {"path": str(allowed / "a.txt")})

    assert secret.isError is True
    assert _text(secret) == f"Error: Path is outside the permitted roots: {tmp_path / 'secret.txt'}"
    assert inside.isError is True
    assert roots_manager.list_roots() == [str(allowed)]


@pytest.mark.asyncio
async def test_client_roots_cannot_widen_configured_roots(tmp_path: Path) -> None:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    (tmp_path / "secret.txt").write_text("secret\n", encoding="utf-8")
    roots_manager = RootsManager([str(allowed)])

    async with create_connected_server_and_client_session(
        _server(roots_manager), list_roots_callback=_ClientRoots(tmp_path)
    ) as client:
        secret = await client.call_tool("read_text_file", {"path": str(tmp_path / "secret.txt")})

    assert secret.isError is True
    assert "outside the permitted roots" in _text(secret)


@pytest.mark.asyncio
async def test_roots_list_changed_fetches_again(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    for directory in (first, second):
        directory.mkdir()
        (directory / "f.txt").write_text("x\n", encoding="utf-8")
    client_roots = _ClientRoots(first)

    async with create_connected_server_and_client_session(
        _server(RootsManager()), list_roots_callback=client_roots
    ) as client:
        before = await client.call_tool("read_text_file", {"path": str(second / "f.txt")})
        client_roots.paths = [second]
        await client.send_roots_list_changed()
        after = await client.call_tool("read_text_file", {"path": str(second / "f.txt")})

    assert before.isError is True
    assert after.isError is False
    assert client_roots.calls == 2


@pytest.mark.asyncio
async def test_roots_error_reply_keeps_configured_roots(tmp_path: Path) -> None:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    (allowed / "a.txt").write_text("a\n", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("secret\n", encoding="utf-8")
    roots_manager = RootsManager([str(allowed)])
    client_roots = _ClientRoots()
    client_roots.error = "roots unavailable"

    async with create_connected_server_and_client_session(
        _server(roots_manager), list_roots_callback=client_roots
    ) as client:
        inside = await client.call_tool("read_text_file", {"path": str(allowed / "a.txt")})
        secret = await client.call_tool("read_text_file", {"path": str(tmp_path / "secret.txt")})

    assert inside.isError is False
    assert secret.isError is True
    assert roots_manager.list_client_roots() is None
    # 실패하면 다음 호출에서 다시 요청해요.
    assert client_roots.calls == 2


@pytest.mark.asyncio
async def test_client_without_roots_capability_uses_configured_roots(tmp_path: Path) -> None:
    allowed = tmp_path / "allowed"
    allowed.mkdir()
    (tmp_path / "secret.txt").write_text("secret\n", encoding="utf-8")
    roots_manager = RootsManager([str(allowed)])

    async with create_connected_server_and_client_session(_server(roots_manager)) as client:
        secret = await client.call_tool("read_text_file", {"path": str(tmp_path / "secret.txt")})

    assert secret.isError is True
    assert roots_manager.list_client_roots() is None


# ─── ClientRootsSync ───


class _FakeSession:
    def __init__(self, *, supports_roots: bool, roots: list[str] | None = None, fail: bool = False) -> None:
        self.supports_roots = supports_roots
        self.roots = roots or []
        self.fail = fail
        self.list_calls = 0

    def check_client_capability(self, capability: types.ClientCapabilities) -> bool:
        assert capability.roots is not None
        return self.supports_roots

    async def list_roots(self) -> types.ListRootsResult:
        self.list_calls += 1
        if self.fail:
            raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message="boom"))
        return types.ListRootsResult(roots=[types.Root(uri=uri) for uri in self.roots])


@pytest.mark.asyncio
async def test_roots_sync_fetches_only_when_stale(tmp_path: Path) -> None:
    roots_manager = RootsManager()
    sync = ClientRootsSync(roots_manager)
    session = _FakeSession(supports_roots=True, roots=[tmp_path.as_uri()])

    await sync.refresh(session)  # type: ignore[arg-type]
    await sync.refresh(session)  # type: ignore[arg-type]
    assert session.list_calls == 1
    assert sync.stale is False
    assert roots_manager.list_client_roots() == [tmp_path.as_uri()]

    sync.mark_stale()
    await sync.refresh(session)  # type: ignore[arg-type]
    assert session.list_calls == 2


@pytest.mark.asyncio
async def test_roots_sync_skips_clients_without_capability() -> None:
    sync = ClientRootsSync(RootsManager())
    session = _FakeSession(supports_roots=False)

    await sync.refresh(session)  # type: ignore[arg-type]
    assert session.list_calls == 0
    assert sync.stale is False


@pytest.mark.asyncio
async def test_roots_sync_stays_stale_after_error() -> None:
    roots_manager = RootsManager()
    sync = ClientRootsSync(roots_manager)
    session = _FakeSession(supports_roots=True, fail=True)

    await sync.refresh(session)  # type: ignore[arg-type]
    assert sync.stale is True
    assert roots_manager.list_client_roots() is None
