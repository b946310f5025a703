"""
Tests API pour POST /api/v1/setup et les routes de service.
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.schemas.setup import SetupCounts

URL = "/api/v1/setup"
PAYLOAD = {"admin_name": "chef", "admin_password": "motdepasse123"}


def test_premier_demarrage_ouvert(client):
    counts = SetupCounts(staff_count=0, team_count=0, checkpoint_count=0)
    with patch("app.routers.setup.setup_service.has_staff", return_value=False), \
         patch("app.routers.setup.setup_service.seed_initial_data", return_value=counts):
        response = client.post(URL, json=PAYLOAD)

    assert response.status_code == 200
    assert response.json()["data"]["staff_count"] == 0


def test_deja_initialise_sans_session(client):
    with patch("app.routers.setup.setup_service.has_staff", return_value=True), \
         patch("app.routers.setup.setup_service.seed_initial_data") as mock_seed:
        response = client.post(URL, json=PAYLOAD)

    assert response.status_code == 401
    mock_seed.assert_not_called()


def test_deja_initialise_avec_session_staff(staff_client):
    counts = SetupCounts(staff_count=1, team_count=4, checkpoint_count=3)
    with patch("app.routers.setup.setup_service.has_staff", return_value=True), \
         patch("app.routers.setup.setup_service.seed_initial_data", return_value=counts):
        response = staff_client.post(URL, json=PAYLOAD)

    assert response.status_code == 200


def test_mot_de_passe_trop_court(client):
    response = client.post(URL, json={"admin_name": "chef", "admin_password": "court"})
    assert response.status_code == 400


def test_erreur_base_de_donnees_renvoie_500(client):
    error = OperationalError("SELECT", {}, Exception("connexion refusée"))
    with patch("app.routers.setup.setup_service.has_staff", side_effect=error):
        response = client.post(URL, json=PAYLOAD)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "connexion refusée" in body["debug"]


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_configuration_client(client):
    response = client.get("/api/v1/client-config")
    assert response.status_code == 200
    body = response.json()
    assert body["location_report_interval_seconds"] == 60
    assert body["timer_events_url"] == "/api/v1/timer/events"
