"""In-memory Store - Process-local storage for development and tests.

Used when Firestore is not configured. Data is lost on restart.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..core.models import HydrationLog, SleepLog, Survey, WeightGoal, WeightLog
from ..core.ports import SurveyRepository, WeightGoalRepository


logger = logging.getLogger(__name__)


class MemorySurveyRepository(SurveyRepository):
    """Surveys kept in a dict keyed by id."""

    def __init__(self) -> None:
        self._surveys: dict[str, Survey] = {}

    def get(self, survey_id: str) -> Survey | None:
        return self._surveys.get(survey_id)

    def add(self, survey: Survey) -> Survey:
        self._surveys[survey.id] = survey
        return survey


class MemoryWeightGoalRepository(WeightGoalRepository):
    """Weight goals kept in a dict keyed by id."""

    def __init__(self) -> None:
        self._goals: dict[str, WeightGoal] = {}

    def get(self, goal_id: str) -> WeightGoal | None:
        return self._goals.get(goal_id)

    def add(self, goal: WeightGoal) -> WeightGoal:
        self._goals[goal.id] = goal
        return goal

    def update(self, goal_id: str, fields: dict[str, Any]) -> WeightGoal | None:
        goal = self._goals.get(goal_id)
        if goal is None:
            logger.warning("Goal not found for update: %s", goal_id[:8])
            return None
        updated = goal.model_copy(update=fields)
        self._goals[goal_id] = updated
        return updated


class MemoryLogStore:
    """Weight, hydration and sleep logs kept in lists."""

    def __init__(self) -> None:
        self._weight_logs: list[WeightLog] = []
        self._hydration_logs: list[HydrationLog] = []
        self._sleep_logs: list[SleepLog] = []

    def add_weight_log(self, log: WeightLog) -> WeightLog:
        self._weight_logs.append(log)
        return log

    def list_weight_logs(self, goal_id: str) -> list[WeightLog]:
        """Logs for a goal, newest first."""
        logs = [log for log in self._weight_logs if log.goal_id == goal_id]
        return sorted(logs, key=lambda log: log.created_at, reverse=True)

    def add_hydration_log(self, log: HydrationLog) -> HydrationLog:
        self._hydration_logs.append(log)
        return log

    def list_hydration_logs(self, start_date: date, end_date: date) -> list[HydrationLog]:
        return [log for log in self._hydration_logs if start_date <= log.log_date <= end_date]

    def add_sleep_log(self, log: SleepLog) -> SleepLog:
        self._sleep_logs.append(log)
        return log

    def list_sleep_logs(self, start_date: date, end_date: date) -> list[SleepLog]:
        return [log for log in self._sleep_logs if start_date <= log.log_date <= end_date]


@dataclass
class MemoryStore:
    """All repositories backed by process memory."""

    surveys: MemorySurveyRepository = field(default_factory=MemorySurveyRepository)
    goals: MemoryWeightGoalRepository = field(default_factory=MemoryWeightGoalRepository)
    logs: MemoryLogStore = field(default_factory=MemoryLogStore)
    backend: str = "memory"

    def ping(self) -> bool:
        return True
