"""HTTP API 테스트예요. lifespan을 직접 열고 ASGI 전송으로 호출해요."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from hashfile_service.app.main import create_app
from hashfile_service.app.settings import Settings
from tests.conftest import anchor_for, parse_file_hash

AUTH = {"Authorization": "Bearer test-token"}


@pytest_asyncio.fixture
async def client(test_settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
            yield http_client


# ─── health / 인증 ───


@pytest.mark.asyncio
async def test_health(client: httpx.AsyncClient) -> None:
    assert (await client.get("/v1/health/live")).json() == {"status": "ok"}
    assert (await client.get("/v1/health/ready")).json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_requires_bearer_token(client: httpx.AsyncClient, tmp_path: Path) -> None:
    response = await client.post("/v1/files/read", json={"path": str(tmp_path)})
    assert response.status_code == 401

    response = await client.get("/v1/roots", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401


# ─── files ───


@pytest.mark.asyncio
async def test_read_and_edit_file(client: httpx.AsyncClient, tmp_path: Path) -> None:
    content = "first\nsecond\nlast\n"
    target = tmp_path / "doc.txt"
    target.write_text(content, encoding="utf-8")

    read = await client.post("/v1/files/read", json={"path": str(target)}, headers=AUTH)
    assert read.status_code == 200
    body = read.json()
    assert body["ok"] is True
    assert body["text"].startswith("1:41|first\n")
    assert body["metadata"]["total_lines"] == 3

    edit = await client.post(
        "/v1/files/edit",
        json={
            "path": str(target),
            "file_hash": parse_file_hash(body["text"]),
            "operations": [
                {"op_type": "insert_before", "anchor": anchor_for(content, 3), "content": "inserted"},
                {"op_type": "delete", "anchor": anchor_for(content, 2)},
            ],
        },
        headers=AUTH,
    )
    assert edit.status_code == 200
    assert edit.json()["ok"] is True
    assert edit.json()["metadata"] == {"operations_applied": 2, "total_lines": 3}
    assert target.read_text(encoding="utf-8") == "first\ninserted\nlast\n"


@pytest.mark.asyncio
async def test_edit_failure_is_reported_in_body(client: httpx.AsyncClient, tmp_path: Path) -> None:
    target = tmp_path / "doc.txt"
    target.write_text("first\n", encoding="utf-8")

    response = await client.post(
        "/v1/files/edit",
        json={"path": str(target), "file_hash": "000000", "operations": []},
        headers=AUTH,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["error_code"] == "FILE_CONFLICT"
    assert body["text"].startswith("Error: File ")


@pytest.mark.asyncio
async def test_edit_request_validation(client: httpx.AsyncClient) -> None:
    response = await client.post("/v1/files/edit", json={"path": "/tmp/x"}, headers=AUTH)
    assert response.status_code == 422


# ─── roots ───


@pytest.mark.asyncio
async def test_roots_get_and_put(client: httpx.AsyncClient, tmp_path: Path) -> None:
    assert (await client.get("/v1/roots", headers=AUTH)).json() == {"roots": []}

    allowed = tmp_path / "allowed"
    allowed.mkdir()
    outside = tmp_path / "outside.txt"
    outside.write_text("x\n", encoding="utf-8")

    put = await client.put("/v1/roots", json={"roots": [allowed.as_uri()]}, headers=AUTH)
    assert put.status_code == 200
    assert put.json() == {"roots": [allowed.as_uri()]}

    read = await client.post("/v1/files/read", json={"path": str(outside)}, headers=AUTH)
    assert read.json()["error_code"] == "PATH_OUT_OF_SCOPE"


@pytest.mark.asyncio
async def test_roots_put_rejects_invalid_entries(client: httpx.AsyncClient) -> None:
    response = await client.put("/v1/roots", json={"roots": ["relative/dir"]}, headers=AUTH)
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_FAILED"
    assert "relative/dir" in body["message"]
    assert body["retryable"] is False
    assert body["trace_id"]


@pytest.mark.asyncio
async def test_roots_put_empty_list_denies_everything(client: httpx.AsyncClient, tmp_path: Path) -> None:
    target = tmp_path / "a.txt"
    target.write_text("a\n", encoding="utf-8")
    assert (await client.post("/v1/files/read", json={"path": str(target)}, headers=AUTH)).json()["ok"] is True

    put = await client.put("/v1/roots", json={"roots": []}, headers=AUTH)
    assert put.json() == {"roots": []}

    read = await client.post("/v1/files/read", json={"path": str(target)}, headers=AUTH)
    assert read.json()["error_code"] == "PATH_OUT_OF_SCOPE"
