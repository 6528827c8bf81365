"""Integration tests for the skip job HTTP interface."""

from __future__ import annotations

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from skipjobs.db import crud
from skipjobs.db.engine import create_engine_for, create_session_factory, create_tables, get_db
from skipjobs.dependencies import get_mailer, get_sms_transport
from skipjobs.main import create_app
from tests.fakes import FakeMailer, FakeTransport, YARD_LAT, YARD_LNG

MISSING_ID = "6f1c2b9e-7d1a-4c4e-9a51-1f2d3c4b5a69"


@pytest_asyncio.fixture
async def env(settings):
    """App wired to an in-memory database and fake SMS/email transports."""
    engine = create_engine_for("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    factory = create_session_factory(engine)

    async with factory() as db:
        customer = await crud.create_customer(db, "Acme Ltd", address="14 Mill Road, Navan")
        driver = await crud.create_driver(db, "J. Doe", phone="087 123 4567")

    sms = FakeTransport()
    mailer = FakeMailer()
    app = create_app(settings)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sms_transport] = lambda: sms
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield {
            "client": client, "sms": sms, "mailer": mailer,
            "customer_id": customer.id, "driver_id": driver.id,
        }

    app.dependency_overrides.clear()
    await engine.dispose()


async def _create(env, **overrides):
    body = {
        "customer_id": env["customer_id"],
        "driver_id": env["driver_id"],
        "truck_reg": "191-D-1234",
        "job_date": "2025-03-14",
        "skip_size": "14",
        "office_action": "pick_drop",
    }
    body.update(overrides)
    resp = await env["client"].post("/api/skip-jobs", json=body)
    assert resp.status_code == 201
    return resp.json()


# ── full lifecycle ───────────────────────────────────────

async def test_office_to_driver_round_trip(env):
    client = env["client"]

    created = await _create(env)
    job = created["job"]
    assert created["sms_sent"] is True
    assert job["docket_no"] == "250314-0001-IMR"
    assert job["status"] == "created"
    assert job["customer"]["name"] == "Acme Ltd"

    resp = await client.post(f"/api/skip-jobs/{job['id']}/send")
    assert resp.status_code == 200
    sent = resp.json()
    assert sent["job"]["status"] == "sent"
    assert sent["message_sent"] is True
    assert sent["driver_link"] == f"https://dispatch.test/driver/skip/{job['job_token']}"
    assert sent["driver_link"] in env["sms"].sent[-1][1]

    resp = await client.get(f"/api/skip-jobs/by-token/{job['job_token']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == job["id"]

    resp = await client.post(f"/api/skip-jobs/{job['id']}/start")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["job"]["status"] == "in_progress"

    resp = await client.post("/api/skip-jobs/complete", json={
        "token": job["job_token"],
        "action": "pick_drop",
        "pick_size": "12",
        "drop_size": "14",
        "lat": 53.7001,
        "lng": -6.3502,
        "accuracy_m": 9,
        "customer_signature": "M. Murphy",
    })
    assert resp.status_code == 200
    done = resp.json()
    assert done["success"] is True
    assert done["email_sent"] is True
    assert done["docket_no"] == "250314-0001-IMR"
    completion = done["completion"]
    assert (completion["pick_lat"], completion["pick_lng"]) == (YARD_LAT, YARD_LNG)
    assert (completion["drop_lat"], completion["drop_lng"]) == (53.7001, -6.3502)
    assert [loc["role"] for loc in completion["locations"]] == ["yard", "site", "driver_position"]
    assert env["mailer"].sent[0]["attachments"][0][0] == "250314-0001-IMR.pdf"

    resp = await client.get(f"/api/skip-jobs/{job['id']}/history")
    assert resp.status_code == 200
    assert [(h["old_status"], h["new_status"], h["changed_by"]) for h in resp.json()] == [
        (None, "created", "office"),
        ("created", "sent", "office"),
        ("sent", "in_progress", "driver"),
        ("in_progress", "completed", "driver"),
    ]

    resp = await client.put(
        f"/api/completions/{completion['id']}/weight",
        json={"net_weight_kg": 3120, "material_type": "Mixed C&D"},
    )
    assert resp.status_code == 200
    assert resp.json()["completion"]["net_weight_kg"] == 3120
    assert resp.json()["completion"]["material_type"] == "Mixed C&D"


# ── error shapes ─────────────────────────────────────────

async def test_validation_error_shape(env):
    resp = await env["client"].post("/api/skip-jobs", json={"truck_reg": "", "job_date": "2025-13-01"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert "customer_id must be a valid UUID" in body["details"]
    assert "truck_reg is required" in body["details"]
    assert "job_date must be a valid date (YYYY-MM-DD)" in body["details"]


async def test_malformed_body_uses_validation_shape(env):
    resp = await env["client"].post("/api/skip-jobs/complete", json={"token": "t", "action": "drop", "lat": "north"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert body["details"][0].startswith("lat:")


async def test_unknown_job_is_404(env):
    resp = await env["client"].get(f"/api/skip-jobs/{MISSING_ID}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Job not found"}


async def test_unknown_token_is_404(env):
    resp = await env["client"].get("/api/skip-jobs/by-token/not-a-token")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Invalid or expired token"}


async def test_second_completion_is_rejected(env):
    job = (await _create(env))["job"]
    payload = {"token": job["job_token"], "action": "drop", "drop_size": "14"}

    first = await env["client"].post("/api/skip-jobs/complete", json=payload)
    second = await env["client"].post("/api/skip-jobs/complete", json=payload)

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json() == {"error": "Job already completed"}


async def test_completed_job_cannot_be_edited_or_deleted(env):
    job = (await _create(env))["job"]
    await env["client"].post(
        "/api/skip-jobs/complete", json={"token": job["job_token"], "action": "pick", "pick_size": "12"},
    )

    edit = await env["client"].put(f"/api/skip-jobs/{job['id']}", json={"notes": "late"})
    delete = await env["client"].delete(f"/api/skip-jobs/{job['id']}")

    assert edit.status_code == 400
    assert edit.json() == {"error": "Cannot edit completed jobs"}
    assert delete.status_code == 400
    assert delete.json() == {"error": "Cannot delete completed jobs"}


# ── office edits ─────────────────────────────────────────

async def test_partial_update_and_delete(env):
    client = env["client"]
    job = (await _create(env, notes="Back gate"))["job"]

    resp = await client.put(f"/api/skip-jobs/{job['id']}", json={"truck_reg": "07-MH-99", "notes": None})
    assert resp.status_code == 200
    updated = resp.json()["job"]
    assert updated["truck_reg"] == "07-MH-99"
    assert updated["notes"] is None
    assert updated["skip_size"] == "14"

    resp = await client.delete(f"/api/skip-jobs/{job['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    assert (await client.get(f"/api/skip-jobs/{job['id']}")).status_code == 404
    history = (await client.get(f"/api/skip-jobs/{job['id']}/history")).json()
    assert history[-1]["new_status"] == "cancelled"


async def test_list_and_filter_jobs(env):
    client = env["client"]
    first = (await _create(env))["job"]
    await _create(env, job_date="2025-03-15")
    await client.post(f"/api/skip-jobs/{first['id']}/send")

    all_jobs = (await client.get("/api/skip-jobs")).json()
    assert [j["job_date"] for j in all_jobs] == ["2025-03-15", "2025-03-14"]

    sent = (await client.get("/api/skip-jobs", params={"status": "sent"})).json()
    assert [j["id"] for j in sent] == [first["id"]]

    resp = await client.get("/api/skip-jobs", params={"status": "lost"})
    assert resp.status_code == 400


async def test_skip_locations(env):
    client = env["client"]
    job = (await _create(env))["job"]
    await client.post("/api/skip-jobs/complete", json={
        "token": job["job_token"], "action": "drop", "drop_size": "14", "lat": 53.7, "lng": -6.35,
    })

    resp = await client.get("/api/skip-jobs/locations")
    assert resp.status_code == 200
    locations = resp.json()
    assert len(locations) == 1
    assert locations[0]["docket_no"] == "250314-0001-IMR"
    assert locations[0]["customer_name"] == "Acme Ltd"
    assert (locations[0]["lat"], locations[0]["lng"]) == (53.7, -6.35)


async def test_acme_drop_scenario(env):
    client = env["client"]
    created = await _create(env, skip_size="20", office_action="drop")
    job = created["job"]
    assert job["status"] == "created"
    assert created["sms_sent"] is True

    sent = (await client.post(f"/api/skip-jobs/{job['id']}/send")).json()
    assert sent["job"]["status"] == "sent"
    assert job["job_token"] in sent["driver_link"]

    started = (await client.post(f"/api/skip-jobs/{job['id']}/start")).json()
    assert started["job"]["status"] == "in_progress"

    resp = await client.post("/api/skip-jobs/complete", json={
        "token": job["job_token"], "action": "drop", "drop_size": "20", "lat": 53.5, "lng": -6.4,
    })
    assert resp.status_code == 200
    completion = resp.json()["completion"]
    assert completion["drop_lat"] == 53.5
    assert completion["drop_size"] == "20"
    assert completion["pick_lat"] is None

    final = (await client.get(f"/api/skip-jobs/{job['id']}")).json()
    assert final["status"] == "completed"
    assert final["completion"]["id"] == completion["id"]
