"""
Tests unitaires pour le service de passage aux checkpoints.
Couverture : doublon séquentiel, somme des points, checkpoint / équipe inconnus,
doublon concurrent rejeté par la contrainte d'unicité, échec de l'incrément.
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker

from app.database import Base
from app.models.checkin import Checkin
from app.models.checkpoint import Checkpoint
from app.models.team import Team
from app.services.checkin_service import attempt_checkin


# --- Helpers ---

def add_team(db, name="Rouge", code="red123", score=0):
    team = Team(name=name, color="#FF5555", team_code=code, total_score=score)
    db.add(team)
    db.commit()
    return team


def add_checkpoint(db, name="Départ", points=10):
    cp = Checkpoint(name=name, latitude=35.72, longitude=139.77, point_value=points)
    db.add(cp)
    db.commit()
    return cp


def score_of(db, team_id):
    db.expire_all()
    return db.get(Team, team_id).total_score


# ============================================================
# Passages séquentiels (SQLite)
# ============================================================

def test_premier_passage_accepte_et_credite(db):
    team = add_team(db)
    cp = add_checkpoint(db, points=20)

    result = attempt_checkin(db, team.id, cp.id)

    assert result.success is True
    assert result.points_added == 20
    assert result.checkin_id is not None
    assert score_of(db, team.id) == 20


def test_double_passage_refuse_score_credite_une_fois(db):
    team = add_team(db)
    cp = add_checkpoint(db, points=15)

    first = attempt_checkin(db, team.id, cp.id)
    second = attempt_checkin(db, team.id, cp.id)

    assert first.success is True
    assert second.success is False
    assert "déjà" in second.message
    assert score_of(db, team.id) == 15
    rows = db.execute(select(Checkin).where(Checkin.team_id == team.id)).scalars().all()
    assert len(rows) == 1


def test_score_egal_a_la_somme_des_checkpoints_distincts(db):
    team = add_team(db)
    checkpoints = [add_checkpoint(db, name=f"CP{i}", points=p) for i, p in enumerate([10, 20, 30, 0])]

    for cp in checkpoints:
        assert attempt_checkin(db, team.id, cp.id).success is True
    # Un doublon au milieu ne change rien
    attempt_checkin(db, team.id, checkpoints[1].id)

    assert score_of(db, team.id) == 60


def test_checkpoint_a_zero_point(db):
    team = add_team(db, score=5)
    cp = add_checkpoint(db, points=0)

    result = attempt_checkin(db, team.id, cp.id)

    assert result.success is True
    assert result.points_added == 0
    assert score_of(db, team.id) == 5


def test_checkpoint_introuvable(db):
    team = add_team(db)

    result = attempt_checkin(db, team.id, 999)

    assert result.success is False
    assert "introuvable" in result.message
    assert score_of(db, team.id) == 0


def test_equipe_introuvable(db):
    cp = add_checkpoint(db)

    result = attempt_checkin(db, 999, cp.id)

    assert result.success is False
    assert "Équipe" in result.message
    assert db.execute(select(Checkin)).scalars().all() == []


def test_deux_equipes_meme_checkpoint(db):
    red = add_team(db, name="Rouge", code="red")
    blue = add_team(db, name="Bleue", code="blue")
    cp = add_checkpoint(db, points=10)

    assert attempt_checkin(db, red.id, cp.id).success is True
    assert attempt_checkin(db, blue.id, cp.id).success is True
    assert score_of(db, red.id) == 10
    assert score_of(db, blue.id) == 10


# ============================================================
# Concurrence et erreurs de persistance (session mockée)
# ============================================================

def make_db(existing=None, checkpoint=None, team=None):
    db = MagicMock()
    db.execute.return_value.scalar.return_value = existing
    db.get.side_effect = lambda model, _id: checkpoint if model is Checkpoint else team
    return db


def test_doublon_concurrent_rejete_par_contrainte():
    """La vérification passe, mais l'INSERT viole uq_checkin_team_checkpoint → refus propre."""
    cp = MagicMock(point_value=10)
    db = make_db(existing=None, checkpoint=cp, team=MagicMock())
    db.flush.side_effect = IntegrityError("INSERT", {}, Exception("unique"))

    result = attempt_checkin(db, 5, 2)

    assert result.success is False
    assert "déjà" in result.message
    db.rollback.assert_called_once()
    db.commit.assert_not_called()


def test_echec_increment_annule_le_passage():
    """Insertion et incrément partagent la transaction : l'échec de l'incrément annule tout."""
    cp = MagicMock(point_value=10)
    db = make_db(existing=None, checkpoint=cp, team=MagicMock())
    calls = {"n": 0}

    def execute(stmt, *args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            result = MagicMock()
            result.scalar.return_value = None
            return result
        raise OperationalError("UPDATE", {}, Exception("connexion perdue"))

    db.execute.side_effect = execute

    with pytest.raises(OperationalError):
        attempt_checkin(db, 5, 2)

    db.rollback.assert_called_once()
    db.commit.assert_not_called()


def test_doublon_existant_aucune_ecriture():
    db = make_db(existing=MagicMock())

    result = attempt_checkin(db, 5, 2)

    assert result.success is False
    db.add.assert_not_called()
    db.commit.assert_not_called()


# ============================================================
# Doublon concurrent sur une vraie base (fichier SQLite, deux sessions)
# ============================================================

def test_doublon_concurrent_score_credite_une_fois(tmp_path):
    """
    Une autre requête valide le même passage entre la vérification et l'insertion :
    exactement un passage est enregistré et les points sont crédités une seule fois.
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'rally.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    setup = Session()
    team = Team(name="Rouge", color="#FF5555", team_code="red123", total_score=0)
    cp = Checkpoint(name="Départ", latitude=35.72, longitude=139.77, point_value=10)
    setup.add_all([team, cp])
    setup.commit()
    team_id, cp_id = team.id, cp.id
    setup.close()

    db = Session()
    other = Session()
    concurrent = {}
    real_execute = db.execute

    def execute_then_race(stmt, *args, **kwargs):
        if concurrent:
            return real_execute(stmt, *args, **kwargs)
        # Résultat lu entièrement : aucun verrou de lecture pendant l'écriture concurrente
        frozen = real_execute(stmt, *args, **kwargs).freeze()
        # La requête concurrente passe juste après notre vérification de doublon
        concurrent["result"] = attempt_checkin(other, team_id, cp_id)
        return frozen()

    try:
        with patch.object(db, "execute", side_effect=execute_then_race):
            result = attempt_checkin(db, team_id, cp_id)

        assert concurrent["result"].success is True
        assert result.success is False
        assert "déjà" in result.message

        check = Session()
        assert check.get(Team, team_id).total_score == 10
        rows = check.execute(select(Checkin).where(Checkin.team_id == team_id)).scalars().all()
        assert len(rows) == 1
        check.close()
    finally:
        db.close()
        other.close()
        engine.dispose()
