"""
Tests for the attendance backend client.

Uses mocked httpx responses; no backend needed.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from asis_command.directory import LOG_TABLE, BackendClient, BackendError, _rut_variants
from asis_command.models import CommandCategory, CommandLogEntry, LogStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _mock_response(status_code: int, json_data=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else []
    resp.text = json.dumps(json_data if json_data is not None else [])
    return resp


def _person_row(**overrides):
    row = {
        "id": "p-1",
        "rut": "18866264-1",
        "nombre": "Ana Pérez",
        "cargo": "Enfermera",
        "terminal_code": "T01",
        "horario": "DIA 08:00-17:00",
        "status": "ACTIVO",
    }
    row.update(overrides)
    return row


def _make_mock_client(*responses):
    """Create an AsyncMock httpx client answering requests in order."""
    client = AsyncMock()
    client.request = AsyncMock(side_effect=list(responses))
    return client


def _patch_httpx_client(client):
    """Return a patch context manager that injects a mock httpx.AsyncClient."""
    mock_ctx = AsyncMock()
    mock_ctx.__aenter__ = AsyncMock(return_value=client)
    mock_ctx.__aexit__ = AsyncMock(return_value=False)
    return patch("asis_command.directory.httpx.AsyncClient", return_value=mock_ctx)


@pytest.fixture
def backend():
    return BackendClient(url="http://backend.test", key="secret", timeout=5)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestConfig:
    def test_env_defaults(self, monkeypatch):
        monkeypatch.delenv("ASIS_BACKEND_URL", raising=False)
        monkeypatch.delenv("ASIS_BACKEND_KEY", raising=False)
        monkeypatch.delenv("ASIS_BACKEND_TIMEOUT", raising=False)

        client = BackendClient()

        assert client.url == "http://localhost:54321"
        assert client.key == ""
        assert client.timeout == 10.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ASIS_BACKEND_URL", "http://db.internal:8000/")
        monkeypatch.setenv("ASIS_BACKEND_KEY", "k")
        monkeypatch.setenv("ASIS_BACKEND_TIMEOUT", "2.5")

        client = BackendClient()

        assert client.url == "http://db.internal:8000"
        assert client.key == "k"
        assert client.timeout == 2.5

    def test_auth_headers(self, backend):
        headers = backend._headers()
        assert headers["apikey"] == "secret"
        assert headers["Authorization"] == "Bearer secret"

    def test_no_auth_headers_without_key(self):
        headers = BackendClient(url="http://backend.test", key="")._headers()
        assert "apikey" not in headers
        assert "Authorization" not in headers

    def test_rest_base_url(self, backend):
        with patch("asis_command.directory.httpx.AsyncClient") as mock_cls:
            backend._client()
        assert mock_cls.call_args.kwargs["base_url"] == "http://backend.test/rest/v1"
        assert mock_cls.call_args.kwargs["timeout"] == 5


class TestRutVariants:
    def test_variants_in_order(self):
        assert _rut_variants("18866264-1") == ["18866264-1", "18.866.264-1", "188662641"]

    def test_no_duplicates(self):
        variants = _rut_variants("1234567-4")
        assert len(variants) == len(set(variants))


# ---------------------------------------------------------------------------
# Person lookup
# ---------------------------------------------------------------------------

class TestFindPerson:
    @pytest.mark.asyncio
    async def test_found(self, backend):
        client = _make_mock_client(_mock_response(200, [_person_row()]))
        with _patch_httpx_client(client):
            person = await backend.find_person("18866264-1")

        assert person.identifier == "18866264-1"
        assert person.full_name == "Ana Pérez"
        assert person.role == "Enfermera"
        assert person.schedule == "DIA 08:00-17:00"
        assert not person.is_inactive

        method, path = client.request.await_args.args
        params = client.request.await_args.kwargs["params"]
        assert (method, path) == ("GET", "/staff")
        assert params["rut"] == "eq.18866264-1"
        assert params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_found_by_dotted_variant(self, backend):
        client = _make_mock_client(
            _mock_response(200, []),
            _mock_response(200, [_person_row(rut="18.866.264-1")]),
        )
        with _patch_httpx_client(client):
            person = await backend.find_person("18866264-1")

        assert person is not None
        assert client.request.await_count == 2
        assert client.request.await_args.kwargs["params"]["rut"] == "eq.18.866.264-1"

    @pytest.mark.asyncio
    async def test_not_found(self, backend):
        client = _make_mock_client(*[_mock_response(200, []) for _ in range(3)])
        with _patch_httpx_client(client):
            person = await backend.find_person("18866264-1")

        assert person is None
        assert client.request.await_count == 3

    @pytest.mark.asyncio
    async def test_inactive_status(self, backend):
        client = _make_mock_client(_mock_response(200, [_person_row(status="desvinculado")]))
        with _patch_httpx_client(client):
            person = await backend.find_person("18866264-1")

        assert person.is_inactive

    @pytest.mark.asyncio
    async def test_empty_rut_skips_request(self, backend):
        client = _make_mock_client()
        with _patch_httpx_client(client):
            assert await backend.find_person("") is None
        client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_http_error_status(self, backend):
        client = _make_mock_client(_mock_response(500, {"message": "boom"}))
        with _patch_httpx_client(client):
            with pytest.raises(BackendError, match="HTTP 500"):
                await backend.find_person("18866264-1")

    @pytest.mark.asyncio
    async def test_transport_error(self, backend):
        client = AsyncMock()
        client.request = AsyncMock(side_effect=httpx.ConnectError("Connection refused"))
        with _patch_httpx_client(client):
            with pytest.raises(BackendError, match="Connection refused"):
                await backend.find_person("18866264-1")


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

class TestWrites:
    @pytest.mark.asyncio
    async def test_insert(self, backend):
        client = _make_mock_client(_mock_response(201))
        with _patch_httpx_client(client):
            await backend.insert("attendance_vacaciones", {"rut": "18866264-1"})

        method, path = client.request.await_args.args
        kwargs = client.request.await_args.kwargs
        assert (method, path) == ("POST", "/attendance_vacaciones")
        assert kwargs["json"] == {"rut": "18866264-1"}
        assert kwargs["headers"] == {"Prefer": "return=minimal"}

    @pytest.mark.asyncio
    async def test_insert_rejected(self, backend):
        client = _make_mock_client(_mock_response(409, {"message": "duplicate"}))
        with _patch_httpx_client(client):
            with pytest.raises(BackendError):
                await backend.insert("attendance_vacaciones", {})

    @pytest.mark.asyncio
    async def test_write_log(self, backend):
        entry = CommandLogEntry(
            command_text="vacaciones para 18866264-1 desde el lunes por 5 días",
            parsed_intent=CommandCategory.VACATION,
            payload_json={"startDate": "2026-01-19"},
            executed_by="supervisor@example.com",
            status=LogStatus.OK,
        )
        client = _make_mock_client(_mock_response(201))
        with _patch_httpx_client(client):
            await backend.write_log(entry)

        path = client.request.await_args.args[1]
        row = client.request.await_args.kwargs["json"]
        assert path == f"/{LOG_TABLE}"
        assert row["parsed_intent"] == "VACACIONES"
        assert row["status"] == "OK"
        assert "error_message" not in row
        assert "terminal_code" not in row

    @pytest.mark.asyncio
    async def test_fetch_logs(self, backend):
        rows = [{"id": 2}, {"id": 1}]
        client = _make_mock_client(_mock_response(200, rows))
        with _patch_httpx_client(client):
            result = await backend.fetch_logs(limit=5, executed_by="supervisor@example.com")

        params = client.request.await_args.kwargs["params"]
        assert result == rows
        assert params["order"] == "created_at.desc"
        assert params["limit"] == "5"
        assert params["executed_by"] == "eq.supervisor@example.com"
