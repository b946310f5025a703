"""
Tests API pour POST /api/v1/checkin.
Le service est mocké : on vérifie l'authentification, l'autorisation et le format des réponses.
"""

from unittest.mock import patch

from app.schemas.checkin import CheckinResult

URL = "/api/v1/checkin"
SERVICE = "app.routers.checkin.checkin_service.attempt_checkin"


def test_passage_sans_session_refuse(client):
    response = client.post(URL, json={"teamId": 5, "checkpointId": 2})
    assert response.status_code == 401


def test_passage_equipe_succes(team_client):
    result = CheckinResult(success=True, message="Passage validé ! 10 points gagnés.", points_added=10, checkin_id=1)
    with patch(SERVICE, return_value=result) as mock_service:
        response = team_client.post(URL, json={"teamId": 5, "checkpointId": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["points_added"] == 10
    assert mock_service.call_args.args[1:] == (5, 2)


def test_passage_deja_valide_reste_200(team_client):
    result = CheckinResult(success=False, message="Ce checkpoint a déjà été validé par votre équipe.")
    with patch(SERVICE, return_value=result):
        response = team_client.post(URL, json={"team_id": 5, "checkpoint_id": 2})

    assert response.status_code == 200
    assert response.json()["success"] is False


def test_passage_pour_une_autre_equipe_interdit(team_client):
    with patch(SERVICE) as mock_service:
        response = team_client.post(URL, json={"teamId": 6, "checkpointId": 2})

    assert response.status_code == 403
    mock_service.assert_not_called()


def test_staff_peut_valider_pour_toute_equipe(staff_client):
    result = CheckinResult(success=True, message="ok", points_added=20, checkin_id=3)
    with patch(SERVICE, return_value=result):
        response = staff_client.post(URL, json={"teamId": 6, "checkpointId": 2})

    assert response.status_code == 200


def test_champ_manquant_renvoie_400(team_client):
    response = team_client.post(URL, json={"teamId": 5})

    assert response.status_code == 400
    assert response.json()["success"] is False
