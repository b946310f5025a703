# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from app.models.team import Team  # noqa: F401
from app.models.checkpoint import Checkpoint  # noqa: F401  (doit précéder staff et checkin)
from app.models.checkin import Checkin  # noqa: F401
from app.models.location import TeamLatestLocation, TeamLocation  # noqa: F401
from app.models.timer import TimerState  # noqa: F401
from app.models.staff import Staff  # noqa: F401
from app.models.auth_session import AuthSession  # noqa: F401
