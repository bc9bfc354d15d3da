"""
API Tests for attendance marking (QR scan targets and the legacy scan-qr route)
"""
import pytest
from sqlalchemy import select

from eventhub.core.config import settings
from eventhub.models import Participant, Volunteer
from conftest import event_payload


async def setup_event(student_client, **overrides):
    organizer_client, organizer = await student_client()
    response = await organizer_client.post("/api/events/create", json=event_payload(**overrides))
    assert response.status_code == 201
    return response.json()['eventId'], organizer_client, organizer


async def attended(db_session, model, event_id, usn):
    return await db_session.scalar(
        select(model.attended).where(model.event_id == event_id, model.student_usn == usn)
    )


class TestMarkParticipantAttendance:

    @pytest.mark.asyncio
    async def test_mark_once(self, student_client, db_session):
        event_id, _, _ = await setup_event(student_client)
        client, student = await student_client()
        await client.post(f"/api/events/{event_id}/join")

        response = await client.post(
            "/api/mark-participant-attendance", json={"eventId": str(event_id), "usn": student['usn']}
        )

        assert response.status_code == 200
        assert response.json()['message'] == "Participant attendance marked successfully"
        assert await attended(db_session, Participant, event_id, student['usn']) is True

    @pytest.mark.asyncio
    async def test_mark_twice(self, student_client):
        event_id, _, _ = await setup_event(student_client)
        client, student = await student_client()
        await client.post(f"/api/events/{event_id}/join")
        body = {"eventId": event_id, "usn": student['usn']}

        await client.post("/api/mark-participant-attendance", json=body)
        response = await client.post("/api/mark-participant-attendance", json=body)

        assert response.status_code == 400
        assert response.json()['error'] == "Participant already checked in"

    @pytest.mark.asyncio
    async def test_not_registered(self, student_client):
        event_id, _, _ = await setup_event(student_client)
        client, student = await student_client()

        response = await client.post(
            "/api/mark-participant-attendance", json={"eventId": event_id, "usn": student['usn']}
        )

        assert response.status_code == 404
        assert response.json()['error'] == "Participant not found for this event"

    @pytest.mark.asyncio
    async def test_cannot_mark_another_student(self, student_client, db_session):
        event_id, _, _ = await setup_event(student_client)
        victim_client, victim = await student_client()
        await victim_client.post(f"/api/events/{event_id}/join")
        client, _ = await student_client()

        response = await client.post(
            "/api/mark-participant-attendance", json={"eventId": event_id, "usn": victim['usn']}
        )

        assert response.status_code == 403
        assert await attended(db_session, Participant, event_id, victim['usn']) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"eventId": 1}, {"usn": "1BM23CS101"}])
    async def test_missing_fields(self, student_client, body):
        client, _ = await student_client()

        response = await client.post("/api/mark-participant-attendance", json=body)

        assert response.status_code == 400
        assert response.json()['error'] == "USN and Event ID are required"

    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        response = await client.post("/api/mark-participant-attendance", json={"eventId": 1, "usn": "1BM23CS101"})
        assert response.status_code == 401


class TestMarkVolunteerAttendance:

    @pytest.mark.asyncio
    async def test_mark_volunteer(self, student_client, db_session):
        event_id, _, _ = await setup_event(student_client)
        client, student = await student_client()
        await client.post(f"/api/events/{event_id}/volunteer")
        body = {"eventId": event_id, "usn": student['usn']}

        first = await client.post("/api/mark-volunteer-attendance", json=body)
        second = await client.post("/api/mark-volunteer-attendance", json=body)

        assert first.json()['message'] == "Volunteer attendance marked successfully"
        assert second.status_code == 400
        assert second.json()['error'] == "Volunteer already checked in"
        assert await attended(db_session, Volunteer, event_id, student['usn']) is True

    @pytest.mark.asyncio
    async def test_participant_is_not_volunteer(self, student_client):
        event_id, _, _ = await setup_event(student_client)
        client, student = await student_client()
        await client.post(f"/api/events/{event_id}/join")

        response = await client.post(
            "/api/mark-volunteer-attendance", json={"eventId": event_id, "usn": student['usn']}
        )

        assert response.status_code == 404
        assert response.json()['error'] == "Volunteer not found for this event"


class TestScanAttendance:

    @pytest.mark.asyncio
    async def test_scan_qr_text(self, student_client, db_session):
        event_id, _, _ = await setup_event(student_client)
        client, student = await student_client()
        await client.post(f"/api/events/{event_id}/join")

        response = await client.post("/api/scan-attendance", json={"qrText": f"eventId:{event_id}"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Participant attendance marked successfully",
            "eventId": event_id,
        }
        assert await attended(db_session, Participant, event_id, student['usn']) is True

    @pytest.mark.asyncio
    async def test_scan_as_volunteer(self, student_client):
        event_id, _, _ = await setup_event(student_client)
        client, _ = await student_client()
        await client.post(f"/api/events/{event_id}/volunteer")

        response = await client.post(
            "/api/scan-attendance", json={"qrText": f"eventId:{event_id}", "role": "volunteer"}
        )

        assert response.json()['message'] == "Volunteer attendance marked successfully"

    @pytest.mark.asyncio
    async def test_invalid_qr_text(self, student_client):
        client, _ = await student_client()

        response = await client.post("/api/scan-attendance", json={"qrText": "https://example.com"})

        assert response.status_code == 400
        assert response.json()['error'] == "Invalid QR code"


class TestLegacyScanQr:

    @pytest.mark.asyncio
    async def test_marks_without_session(self, student_client, client, db_session):
        event_id, _, _ = await setup_event(student_client)
        participant_client, student = await student_client()
        await participant_client.post(f"/api/events/{event_id}/join")

        response = await client.get("/api/scan-qr", params={"usn": student['usn'], "eid": str(event_id)})

        assert response.status_code == 200
        assert response.json()['message'] == "Participant status updated to checked in"
        assert await attended(db_session, Participant, event_id, student['usn']) is True

    @pytest.mark.asyncio
    async def test_missing_params(self, client, db_session):
        response = await client.get("/api/scan-qr", params={"usn": "1BM23CS101"})

        assert response.status_code == 400
        assert response.json()['error'] == "USN and Event ID are required"

    @pytest.mark.asyncio
    async def test_disabled(self, client, db_session, monkeypatch):
        monkeypatch.setattr(settings, "LEGACY_SCAN_QR_ENABLED", False)

        response = await client.get("/api/scan-qr", params={"usn": "1BM23CS101", "eid": "1"})

        assert response.status_code == 410
        assert response.json()['error'] == "scan-qr is no longer available"
