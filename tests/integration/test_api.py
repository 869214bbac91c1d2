"""Integration tests for API endpoints."""

from __future__ import annotations

from types import SimpleNamespace

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fieldservice.db.engine import get_db
from fieldservice.main import app
from fieldservice.models import Base
from tests.factories import ORDER_FIELDS


@pytest_asyncio.fixture
async def client():
    """Test client backed by a fresh in-memory database."""
    test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    test_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def override_get_db():
        async with test_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
    await test_engine.dispose()


async def _signup(client, email="joao@rm.com.br", password="senha-forte-1", name="João"):
    resp = await client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201
    # Tests authenticate explicitly, never through the stored cookie
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest_asyncio.fixture
async def auth_headers(client):
    return await _signup(client)


async def _create_order(client, headers, **overrides):
    resp = await client.post("/api/service-orders", json=dict(ORDER_FIELDS, **overrides), headers=headers)
    assert resp.status_code == 201
    return resp.json()


# ── Health / auth ─────────────────────────────────────────

async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_signup_returns_token_and_cookie(client):
    resp = await client.post(
        "/api/auth/signup", json={"email": "Novo@RM.com.br", "password": "senha-forte-1"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["technician"]["email"] == "novo@rm.com.br"
    assert data["token"]
    assert "session_token" in resp.headers.get("set-cookie", "")


async def test_signup_validation_and_duplicate(client):
    resp = await client.post("/api/auth/signup", json={"email": "a@rm.com.br", "password": "curta"})
    assert resp.status_code == 400

    resp = await client.post("/api/auth/signup", json={"password": "senha-forte-1"})
    assert resp.status_code == 400

    await _signup(client, email="a@rm.com.br")
    resp = await client.post("/api/auth/signup", json={"email": "a@rm.com.br", "password": "senha-forte-1"})
    assert resp.status_code == 409


async def test_login_and_me(client):
    await _signup(client, email="login@rm.com.br")

    bad = await client.post("/api/auth/login", json={"email": "login@rm.com.br", "password": "errada-123"})
    assert bad.status_code == 401
    unknown = await client.post("/api/auth/login", json={"email": "ninguem@rm.com.br", "password": "errada-123"})
    assert unknown.status_code == 401
    assert bad.json()["detail"] == unknown.json()["detail"]

    resp = await client.post("/api/auth/login", json={"email": "login@rm.com.br", "password": "senha-forte-1"})
    assert resp.status_code == 200
    token = resp.json()["token"]
    client.cookies.clear()

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["technician"]["email"] == "login@rm.com.br"


async def test_session_cookie_is_accepted(client):
    resp = await client.post("/api/auth/signup", json={"email": "cookie@rm.com.br", "password": "senha-forte-1"})
    token = resp.json()["token"]
    client.cookies.clear()

    me = await client.get("/api/auth/me", headers={"Cookie": f"session_token={token}"})
    assert me.status_code == 200


async def test_update_me(client, auth_headers):
    resp = await client.put("/api/auth/me", json={"phone": "11988887777"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["technician"]["phone"] == "11988887777"
    assert resp.json()["technician"]["name"] == "João"


async def test_logout_revokes_token(client, auth_headers):
    resp = await client.post("/api/auth/logout", headers=auth_headers)
    assert resp.status_code == 200
    client.cookies.clear()

    resp = await client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 401


async def test_requests_without_capability_are_rejected(client):
    assert (await client.get("/api/service-orders")).status_code == 401
    assert (await client.get("/api/clients")).status_code == 401
    resp = await client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


# ── Service orders ────────────────────────────────────────

async def test_order_flow(client, auth_headers):
    order = await _create_order(client, auth_headers)
    assert order["status"] == "Pendente"
    assert order["total_value"] is None
    order_id = order["id"]

    for old, new, value in [("Compressor", "Compressor novo", 50.00), ("Filtro", "Filtro novo", 25.50)]:
        resp = await client.post(
            f"/api/service-orders/{order_id}/parts",
            json={"old_part": old, "new_part": new, "part_value": value},
            headers=auth_headers,
        )
        assert resp.status_code == 201

    resp = await client.get(f"/api/service-orders/{order_id}", headers=auth_headers)
    assert resp.json()["total_value"] == 75.50

    resp = await client.patch(f"/api/service-orders/{order_id}", json={"status": "Concluída"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["completion_datetime"] is not None

    resp = await client.patch(f"/api/service-orders/{order_id}", json={"status": "Pendente"}, headers=auth_headers)
    assert resp.status_code == 400


async def test_create_order_missing_fields(client, auth_headers):
    resp = await client.post("/api/service-orders", json={"client_name": "Acme"}, headers=auth_headers)
    assert resp.status_code == 400
    assert "location" in resp.json()["detail"]


async def test_orders_are_private_to_their_technician(client, auth_headers):
    order = await _create_order(client, auth_headers)
    other = await _signup(client, email="maria@rm.com.br", name="Maria")

    resp = await client.get(f"/api/service-orders/{order['id']}", headers=other)
    assert resp.status_code == 404
    resp = await client.get(f"/api/service-orders/{order['id']}/report", headers=other)
    assert resp.status_code == 404
    resp = await client.get("/api/service-orders", headers=other)
    assert resp.json() == []


async def test_partial_update_keeps_omitted_fields(client, auth_headers):
    order = await _create_order(client, auth_headers, internal_notes="cachorro bravo")

    resp = await client.put(
        f"/api/service-orders/{order['id']}", json={"service_description": "Limpeza"}, headers=auth_headers,
    )
    assert resp.json()["internal_notes"] == "cachorro bravo"

    resp = await client.patch(
        f"/api/service-orders/{order['id']}", json={"internal_notes": None}, headers=auth_headers,
    )
    assert resp.json()["internal_notes"] is None
    assert resp.json()["service_description"] == "Limpeza"


async def test_list_filter_and_stats(client, auth_headers):
    first = await _create_order(client, auth_headers)
    await _create_order(client, auth_headers, status="Em Andamento")

    resp = await client.get("/api/service-orders", params={"status": "Pendente"}, headers=auth_headers)
    assert [o["id"] for o in resp.json()] == [first["id"]]

    resp = await client.get("/api/service-orders", params={"status": "nope"}, headers=auth_headers)
    assert resp.status_code == 400

    stats = (await client.get("/api/service-orders/stats", headers=auth_headers)).json()
    assert stats == {"pending": 1, "in_progress": 1, "completed": 0, "cancelled": 0, "total": 2}


async def test_delete_order(client, auth_headers):
    order = await _create_order(client, auth_headers)
    resp = await client.delete(f"/api/service-orders/{order['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "id": order["id"]}

    resp = await client.get(f"/api/service-orders/{order['id']}/photos", headers=auth_headers)
    assert resp.status_code == 404


# ── Dependent records ─────────────────────────────────────

async def test_photos(client, auth_headers):
    order = await _create_order(client, auth_headers)
    base = f"/api/service-orders/{order['id']}/photos"

    resp = await client.post(base, json={"photo_url": "https://cdn/p.jpg", "photo_type": "problem"}, headers=auth_headers)
    assert resp.status_code == 201
    photo = resp.json()
    assert photo["media_url"] == "https://cdn/p.jpg"
    assert photo["media_type"] == "image"

    resp = await client.post(
        base,
        json={"media_url": "https://cdn/v.mp4", "photo_type": "solution", "media_type": "video", "duration_seconds": 61},
        headers=auth_headers,
    )
    assert resp.status_code == 400

    resp = await client.get(base, params={"photo_type": "problem"}, headers=auth_headers)
    assert [p["id"] for p in resp.json()] == [photo["id"]]

    resp = await client.delete(f"{base}/{photo['id']}", headers=auth_headers)
    assert resp.status_code == 200
    resp = await client.delete(f"{base}/{photo['id']}", headers=auth_headers)
    assert resp.status_code == 404


async def test_signature_upsert(client, auth_headers):
    order = await _create_order(client, auth_headers)
    url = f"/api/service-orders/{order['id']}/signature"

    resp = await client.get(url, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() is None

    first = await client.post(url, json={"signature_data": "data:image/png;base64,A"}, headers=auth_headers)
    second = await client.put(url, json={"signature_data": "data:image/png;base64,B"}, headers=auth_headers)
    assert first.status_code == second.status_code == 200
    assert first.json()["id"] == second.json()["id"]

    resp = await client.get(url, headers=auth_headers)
    assert resp.json()["signature_data"] == "data:image/png;base64,B"

    resp = await client.post(url, json={}, headers=auth_headers)
    assert resp.status_code == 400


async def test_remove_part_updates_total(client, auth_headers):
    order = await _create_order(client, auth_headers)
    base = f"/api/service-orders/{order['id']}/parts"
    part = (await client.post(
        base, json={"old_part": "Relé", "new_part": "Relé novo", "part_value": 30}, headers=auth_headers,
    )).json()

    resp = await client.delete(f"{base}/{part['id']}", headers=auth_headers)
    assert resp.status_code == 200
    resp = await client.get(f"/api/service-orders/{order['id']}", headers=auth_headers)
    assert resp.json()["total_value"] is None


# ── Reports ───────────────────────────────────────────────

async def test_report_json_and_html(client, auth_headers):
    order = await _create_order(client, auth_headers)

    resp = await client.get(f"/api/service-orders/{order['id']}/report", headers=auth_headers)
    assert resp.status_code == 200
    report = resp.json()
    assert report["header"]["os_number"] == order["os_number"]
    assert report["parts"] == []
    assert report["signature"] is None

    resp = await client.get(f"/api/service-orders/{order['id']}/report.html", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert f"OS #{order['os_number']}" in resp.text


# ── Clients ───────────────────────────────────────────────

async def test_client_directory(client, auth_headers):
    resp = await client.post("/api/clients", json={"name": "Mercado Bom Preço"}, headers=auth_headers)
    assert resp.status_code == 400

    resp = await client.post(
        "/api/clients",
        json={"name": "Mercado Bom Preço", "phone": "1133334444", "email": "Contato@Mercado.com"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["email"] == "contato@mercado.com"

    # Shared across technicians
    other = await _signup(client, email="maria@rm.com.br", name="Maria")
    resp = await client.get("/api/clients", params={"search": "mercado"}, headers=other)
    assert [c["id"] for c in resp.json()] == [created["id"]]

    resp = await client.patch(f"/api/clients/{created['id']}", json={"city": "Santos"}, headers=other)
    assert resp.status_code == 200
    assert resp.json()["city"] == "Santos"
    assert resp.json()["phone"] == "1133334444"

    resp = await client.delete(f"/api/clients/{created['id']}", headers=auth_headers)
    assert resp.status_code == 200
    resp = await client.get(f"/api/clients/{created['id']}", headers=auth_headers)
    assert resp.status_code == 404


async def test_part_value_must_be_finite_and_non_negative(client, auth_headers):
    order = await _create_order(client, auth_headers)
    url = f"/api/service-orders/{order['id']}/parts"
    headers = dict(auth_headers, **{"Content-Type": "application/json"})

    # 1e309 overflows to infinity when decoded
    resp = await client.post(url, content=b'{"old_part":"a","new_part":"b","part_value":1e309}', headers=headers)
    assert resp.status_code == 400

    resp = await client.post(url, json={"old_part": "a", "new_part": "b", "part_value": -1}, headers=auth_headers)
    assert resp.status_code == 400

    resp = await client.get(f"/api/service-orders/{order['id']}", headers=auth_headers)
    assert resp.json()["total_value"] is None
    assert (await client.get(url, headers=auth_headers)).json() == []


async def test_pdf_failure_returns_json_error(client, auth_headers, monkeypatch):
    order = await _create_order(client, auth_headers)
    monkeypatch.setattr("xhtml2pdf.pisa.CreatePDF", lambda *args, **kwargs: SimpleNamespace(err=1))

    resp = await client.get(f"/api/service-orders/{order['id']}/report.pdf", headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json() == {"detail": "PDF generation failed"}
