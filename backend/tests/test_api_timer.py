"""
Tests API pour le chrono partagé (lecture, actions du staff, flux SSE).
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

from app.routers import timer as timer_router
from app.schemas.timer import TimerView
from app.services.timer_service import TimerConflictError

URL = "/api/v1/timer"
NOW = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def fake_view(status="running", version=2, remaining=3600):
    return TimerView(
        status=status,
        end_time=NOW + timedelta(seconds=remaining) if status == "running" else None,
        duration=3600,
        remaining_seconds=remaining if status == "running" else None,
        version=version,
    )


def test_lecture_publique(client):
    with patch("app.routers.timer.timer_service.get_timer"), \
         patch("app.routers.timer.timer_service.to_view", return_value=fake_view()):
        response = client.get(URL)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "running"
    assert data["remaining_seconds"] == 3600


def test_action_sans_session(client):
    response = client.post(URL, json={"action": "start", "duration": 60})
    assert response.status_code == 401


def test_demarrage(staff_client):
    with patch("app.routers.timer.timer_service.start_timer") as mock_start, \
         patch("app.routers.timer.timer_service.to_view", return_value=fake_view(remaining=60)):
        response = staff_client.post(URL, json={"action": "start", "duration": 60})

    assert response.status_code == 200
    assert mock_start.call_args.args[1:] == (60, None)


def test_demarrage_sans_duree(staff_client):
    with patch("app.routers.timer.timer_service.start_timer", side_effect=ValueError("durée obligatoire")):
        response = staff_client.post(URL, json={"action": "start"})
    assert response.status_code == 400


def test_duree_negative(staff_client):
    response = staff_client.post(URL, json={"action": "start", "duration": -5})
    assert response.status_code == 400


def test_action_inconnue(staff_client):
    response = staff_client.post(URL, json={"action": "pause"})
    assert response.status_code == 400


def test_arret_et_reinitialisation(staff_client):
    with patch("app.routers.timer.timer_service.stop_timer") as mock_stop, \
         patch("app.routers.timer.timer_service.reset_timer") as mock_reset, \
         patch("app.routers.timer.timer_service.to_view", return_value=fake_view("not_started")):
        assert staff_client.post(URL, json={"action": "stop"}).status_code == 200
        assert staff_client.post(URL, json={"action": "reset", "expected_version": 3}).status_code == 200

    mock_stop.assert_called_once()
    assert mock_reset.call_args.args[1] == 3


def test_conflit_de_version(staff_client):
    with patch("app.routers.timer.timer_service.stop_timer", side_effect=TimerConflictError("obsolète")):
        response = staff_client.post(URL, json={"action": "stop", "expected_version": 1})
    assert response.status_code == 409


# ============================================================
# Flux SSE
# ============================================================

async def collect(stream):
    return [chunk async for chunk in stream]


def test_flux_emet_seulement_les_changements():
    request = MagicMock()
    request.is_disconnected = AsyncMock(side_effect=[False, False, False, True])
    views = [fake_view(version=2), fake_view(version=2, remaining=3599), fake_view("not_started", version=3)]

    with patch.object(timer_router, "_load_timer_view", side_effect=views), \
         patch.object(timer_router.settings, "TIMER_EVENTS_POLL_SECONDS", 0):
        events = asyncio.run(collect(timer_router.timer_event_stream(request)))

    assert len(events) == 2
    assert events[0].startswith("event: timer\ndata: ")
    payload = json.loads(events[1].split("data: ", 1)[1])
    assert payload["status"] == "not_started"
    assert payload["version"] == 3


def test_flux_client_deconnecte():
    request = MagicMock()
    request.is_disconnected = AsyncMock(return_value=True)

    with patch.object(timer_router, "_load_timer_view") as mock_load:
        events = asyncio.run(collect(timer_router.timer_event_stream(request)))

    assert events == []
    mock_load.assert_not_called()
