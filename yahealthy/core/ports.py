"""Repository ports - storage contracts the engine reads through.

Implementations live in the shell (Firestore, in-memory). The engine
never holds persistent state of its own.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .models import Survey, WeightGoal


class SurveyRepository(ABC):
    """Read access to stored surveys."""

    @abstractmethod
    def get(self, survey_id: str) -> Optional[Survey]:
        """Fetch a survey by id.

        Returns:
            Survey if found, None otherwise
        """


class WeightGoalRepository(ABC):
    """Read/update access to stored weight goals.

    Callers must serialize updates per goal id; implementations are not
    required to lock.
    """

    @abstractmethod
    def get(self, goal_id: str) -> Optional[WeightGoal]:
        """Fetch a goal by id.

        Returns:
            WeightGoal if found, None otherwise
        """

    @abstractmethod
    def update(self, goal_id: str, fields: dict[str, Any]) -> Optional[WeightGoal]:
        """Apply field updates to a goal.

        Returns:
            The updated goal, or None if it does not exist
        """
