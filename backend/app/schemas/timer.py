"""
Schémas Pydantic pour le chrono partagé.

status renvoyé = statut effectif : un chrono running dont end_time est dépassé
est présenté comme finished avant même que la ligne soit réécrite.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

TimerStatus = Literal["not_started", "running", "finished"]


class TimerAction(BaseModel):
    action: Literal["start", "stop", "reset"]
    duration: Optional[int] = None          # Secondes, obligatoire pour start
    expected_version: Optional[int] = None  # Concurrence optimiste (facultatif)

    @field_validator("duration")
    @classmethod
    def duration_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("La durée doit être strictement positive.")
        return v


class TimerView(BaseModel):
    status: TimerStatus
    end_time: Optional[datetime]
    duration: int
    remaining_seconds: Optional[int]  # None tant que le chrono n'a pas démarré
    version: int


class TimerResponse(BaseModel):
    success: bool
    data: TimerView
