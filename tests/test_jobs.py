from datetime import timedelta
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from stringdesk.catalog.service import load_catalog
from stringdesk.jobs.guard import TransitionGuard
from stringdesk.jobs.lifecycle import Rejected, RejectionReason
from stringdesk.jobs.models import Job
from stringdesk.jobs.service import JobService
from stringdesk.shared.models import utcnow


async def _create_job(async_client: AsyncClient, headers: dict, client_record: dict, racquet_record: dict, **body):
    response = await async_client.post(
        "/v1/jobs",
        json={"client_id": client_record["id"], "racquet_id": racquet_record["id"], **body},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


async def _backdate(db_session: AsyncSession, job_id: str, days: int) -> None:
    job = await db_session.get(Job, UUID(job_id))
    job.created_at = utcnow() - timedelta(days=days)
    await db_session.commit()


@pytest.mark.asyncio
async def test_resolve_spec_preview(async_client: AsyncClient, stringer_headers, client_record, racquet_record):
    response = await async_client.post(
        "/v1/jobs/resolve-spec",
        json={
            "client_id": client_record["id"],
            "racquet_id": racquet_record["id"],
            "override": {"main_string_model_id": 301, "tension_cross": 50},
        },
        headers=stringer_headers,
    )
    assert response.status_code == 200
    spec = response.json()
    assert spec["main_brand_id"] == 3
    assert spec["main_string_model_id"] == 301
    assert spec["main_label"] == "Solinco Hyper-G"
    assert spec["tension_main"] == 52
    assert spec["sources"]["tension_main"] == "client"
    assert spec["tension_cross"] == 50
    assert spec["cross_string_model_id"] is None


@pytest.mark.asyncio
async def test_stringing_job_stores_only_explicit_choices(
    async_client: AsyncClient, stringer_headers, client_record, racquet_record
):
    job = await _create_job(
        async_client, stringer_headers, client_record, racquet_record, stringing={"tension_main": 55}
    )
    assert job["job_status"] == "pending"
    assert job["next_status"] == "in_progress"
    assert job["stringing_detail"]["tension_main"] == 55
    assert job["stringing_detail"]["main_string_model_id"] is None

    response = await async_client.get(f"/v1/jobs/{job['id']}/spec", headers=stringer_headers)
    spec = response.json()
    assert spec["tension_main"] == 55
    assert spec["sources"]["tension_main"] == "override"
    assert spec["main_string_model_id"] == 101
    assert spec["sources"]["main_string_model_id"] == "client"

    racquet = await async_client.get(f"/v1/racquets/{racquet_record['id']}", headers=stringer_headers)
    assert racquet.json()["last_stringing_date"] is not None


@pytest.mark.asyncio
async def test_cross_side_falls_back_to_previous_job(
    async_client: AsyncClient, db_session: AsyncSession, stringer_headers, client_record, racquet_record
):
    first = await _create_job(
        async_client, stringer_headers, client_record, racquet_record,
        stringing={"cross_string_model_id": 201, "tension_cross": 50, "price": 30},
    )
    await _backdate(db_session, first["id"], days=30)

    second = await _create_job(async_client, stringer_headers, client_record, racquet_record)

    spec = (await async_client.get(f"/v1/jobs/{second['id']}/spec", headers=stringer_headers)).json()
    assert (spec["main_brand_id"], spec["main_string_model_id"], spec["tension_main"]) == (1, 101, 52)
    assert (spec["cross_brand_id"], spec["cross_string_model_id"], spec["tension_cross"]) == (2, 201, 50)
    assert spec["sources"]["cross_string_model_id"] == "history"
    assert spec["price"] == 30

    # the older job never sees the newer one
    spec = (await async_client.get(f"/v1/jobs/{first['id']}/spec", headers=stringer_headers)).json()
    assert spec["price"] == 30
    assert spec["sources"]["price"] == "override"


@pytest.mark.asyncio
async def test_stringing_notes_used_without_job_history(
    async_client: AsyncClient, stringer_headers, client_record, racquet_record
):
    await async_client.patch(
        f"/v1/racquets/{racquet_record['id']}",
        json={"stringing_notes": "Crosses: ALU Power @ 23 kg"},
        headers=stringer_headers,
    )
    response = await async_client.post(
        "/v1/jobs/resolve-spec",
        json={"client_id": client_record["id"], "racquet_id": racquet_record["id"]},
        headers=stringer_headers,
    )
    spec = response.json()
    assert spec["cross_string_model_id"] == 201
    assert spec["tension_cross"] == 50.7
    assert spec["main_string_model_id"] == 101


@pytest.mark.asyncio
async def test_advance_through_lifecycle(async_client: AsyncClient, stringer_headers, client_record, racquet_record):
    job = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    url = f"/v1/jobs/{job['id']}/advance"

    visited = []
    for _ in range(3):
        response = await async_client.post(url, headers=stringer_headers)
        assert response.status_code == 200
        visited.append(response.json()["job_status"])
    assert visited == ["in_progress", "completed", "picked_up"]

    final = response.json()
    assert final["completed_date"] is not None
    assert final["next_status"] is None

    response = await async_client.post(url, headers=stringer_headers)
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "terminal"


@pytest.mark.asyncio
async def test_skipping_a_status_is_rejected(
    async_client: AsyncClient, stringer_headers, client_record, racquet_record
):
    job = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    url = f"/v1/jobs/{job['id']}/advance"
    await async_client.post(url, json={"target": "in_progress"}, headers=stringer_headers)

    response = await async_client.post(url, json={"target": "picked_up"}, headers=stringer_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == {
        "reason": "not_next",
        "message": "Job can only move from in_progress to completed",
        "current_status": "in_progress",
        "next_status": "completed",
    }

    response = await async_client.get(f"/v1/jobs/{job['id']}", headers=stringer_headers)
    assert response.json()["job_status"] == "in_progress"


@pytest.mark.asyncio
async def test_completion_consumes_inventory_once(
    async_client: AsyncClient, stringer_headers, client_record, racquet_record
):
    item = (await async_client.post(
        "/v1/inventory",
        json={"string_brand_id": 1, "string_model_id": 101, "stock_quantity": 6, "min_stock_level": 5},
        headers=stringer_headers,
    )).json()
    job = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    url = f"/v1/jobs/{job['id']}/advance"

    await async_client.post(url, headers=stringer_headers)
    await async_client.post(url, headers=stringer_headers)
    await async_client.post(url, headers=stringer_headers)

    items = (await async_client.get("/v1/inventory", headers=stringer_headers)).json()
    assert items[0]["id"] == item["id"]
    assert items[0]["stock_quantity"] == 5
    assert items[0]["is_low_stock"] is True


@pytest.mark.asyncio
async def test_advance_rejected_while_another_is_in_flight(
    db_session: AsyncSession, async_client: AsyncClient, stringer, stringer_headers, client_record, racquet_record
):
    job = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    job_id = UUID(job["id"])
    guard = TransitionGuard()
    guard.claim(job_id)

    service = JobService(db_session, await load_catalog(db_session), guard=guard)
    db_job, result = await service.advance(job_id, stringer.id)

    assert isinstance(result, Rejected)
    assert result.reason == RejectionReason.IN_FLIGHT
    assert db_job.job_status.value == "pending"
    assert guard.is_in_flight(job_id)


@pytest.mark.asyncio
async def test_inactive_racquet_rejected(async_client: AsyncClient, stringer_headers, client_record, racquet_record):
    await async_client.delete(f"/v1/racquets/{racquet_record['id']}", headers=stringer_headers)
    response = await async_client.post(
        "/v1/jobs",
        json={"client_id": client_record["id"], "racquet_id": racquet_record["id"]},
        headers=stringer_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Racquet is inactive"


@pytest.mark.asyncio
async def test_racquet_of_another_client_rejected(
    async_client: AsyncClient, stringer_headers, racquet_record
):
    other = (await async_client.post(
        "/v1/clients", json={"full_name": "Marcelo Rios"}, headers=stringer_headers
    )).json()
    response = await async_client.post(
        "/v1/jobs",
        json={"client_id": other["id"], "racquet_id": racquet_record["id"]},
        headers=stringer_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Racquet does not belong to this client"


@pytest.mark.asyncio
async def test_regrip_job_has_no_stringing_spec(
    async_client: AsyncClient, stringer_headers, client_record, racquet_record
):
    response = await async_client.post(
        "/v1/jobs",
        json={
            "client_id": client_record["id"],
            "racquet_id": racquet_record["id"],
            "job_type": "regrip",
            "stringing": {"tension_main": 50},
        },
        headers=stringer_headers,
    )
    assert response.status_code == 400

    job = await _create_job(async_client, stringer_headers, client_record, racquet_record, job_type="regrip")
    assert job["stringing_detail"] is None

    response = await async_client.get(f"/v1/jobs/{job['id']}/spec", headers=stringer_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_jobs_by_status(async_client: AsyncClient, stringer_headers, client_record, racquet_record):
    first = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    await _create_job(async_client, stringer_headers, client_record, racquet_record, job_type="repair")
    await async_client.post(f"/v1/jobs/{first['id']}/advance", headers=stringer_headers)

    response = await async_client.get("/v1/jobs", params={"status": "in_progress"}, headers=stringer_headers)
    assert [j["id"] for j in response.json()] == [first["id"]]

    response = await async_client.get("/v1/jobs", headers=stringer_headers)
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_update_job_notes(async_client: AsyncClient, stringer_headers, client_record, racquet_record):
    job = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    response = await async_client.patch(
        f"/v1/jobs/{job['id']}", json={"job_notes": "Hybrid, pre-stretch mains"}, headers=stringer_headers
    )
    assert response.status_code == 200
    assert response.json()["job_notes"] == "Hybrid, pre-stretch mains"


@pytest.mark.asyncio
async def test_next_job_inherits_what_the_previous_job_resolved(
    async_client: AsyncClient, stringer_headers, client_record, racquet_record
):
    await async_client.patch(
        f"/v1/racquets/{racquet_record['id']}",
        json={"stringing_notes": "Crosses: Xcel @ 50"},
        headers=stringer_headers,
    )
    first = await _create_job(
        async_client, stringer_headers, client_record, racquet_record,
        stringing={"main_string_model_id": 201},
    )
    first_spec = (await async_client.get(f"/v1/jobs/{first['id']}/spec", headers=stringer_headers)).json()
    assert (first_spec["cross_string_model_id"], first_spec["tension_cross"]) == (102, 50)

    response = await async_client.post(
        "/v1/jobs/resolve-spec",
        json={"client_id": client_record["id"], "racquet_id": racquet_record["id"]},
        headers=stringer_headers,
    )
    spec = response.json()
    assert (spec["cross_brand_id"], spec["cross_string_model_id"], spec["tension_cross"]) == (1, 102, 50)
    assert spec["sources"]["cross_string_model_id"] == "history"

    qr = await async_client.get(f"/v1/racquets/{racquet_record['id']}/qr", headers=stringer_headers)
    snapshot = qr.json()["descriptor"]["stringing_snapshot"]
    assert snapshot["job_id"] == first["id"]
    assert (snapshot["cross_string_model_id"], snapshot["tension_cross"]) == (102, 50)
    assert snapshot["main_string_model_id"] == 201


@pytest.mark.asyncio
async def test_brand_only_choice_is_kept(async_client: AsyncClient, stringer_headers, client_record, racquet_record):
    job = await _create_job(
        async_client, stringer_headers, client_record, racquet_record, stringing={"cross_brand_id": 3}
    )
    assert job["stringing_detail"]["cross_brand_id"] == 3
    assert job["stringing_detail"]["cross_string_model_id"] is None

    spec = (await async_client.get(f"/v1/jobs/{job['id']}/spec", headers=stringer_headers)).json()
    assert spec["cross_brand_id"] == 3
    assert spec["sources"]["cross_brand_id"] == "override"
    assert spec["cross_string_model_id"] is None


@pytest.mark.asyncio
async def test_advance_releases_its_claim(
    db_session: AsyncSession, async_client: AsyncClient, stringer, stringer_headers, client_record, racquet_record
):
    job = await _create_job(async_client, stringer_headers, client_record, racquet_record)
    job_id = UUID(job["id"])
    guard = TransitionGuard()

    service = JobService(db_session, await load_catalog(db_session), guard=guard)
    db_job, result = await service.advance(job_id, stringer.id)

    assert not isinstance(result, Rejected)
    assert db_job.job_status.value == "in_progress"
    assert not guard.is_in_flight(job_id)
