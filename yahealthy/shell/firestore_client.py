"""Firestore Client - Persistence for surveys, goals and daily logs.

This module handles all database I/O for the health tracker.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from google.cloud import firestore

from ..core.errors import EngineError
from ..core.models import HydrationLog, SleepLog, Survey, WeightGoal, WeightLog
from ..core.ports import SurveyRepository, WeightGoalRepository


logger = logging.getLogger(__name__)


class StorageError(EngineError):
    """The storage backend failed to complete a request."""

    code = "StorageError"


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
    """

    project_id: str | None = None
    database: str | None = None


class HealthFirestoreClient:
    """Lazily connected Firestore client.

    Collection layout:
        surveys/{survey_id}: { gender, age, height_cm, ... }
        weight_goals/{goal_id}: { start_weight_kg, current_weight_kg, ... }
        weight_logs/{log_id}: { goal_id, weight_kg, progress, ... }
        hydration_logs/{log_id}: { log_date, liters_consumed, ... }
        sleep_logs/{log_id}: { log_date, sleep_hours, ... }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def collection(self, name: str) -> firestore.CollectionReference:
        return self.client.collection(name)

    def document(self, collection: str, doc_id: str) -> firestore.DocumentReference:
        return self.client.collection(collection).document(doc_id)

    def ping(self) -> bool:
        """Check that Firestore answers a trivial query."""
        try:
            list(self.collection("surveys").limit(1).stream())
            return True
        except Exception as e:
            logger.error("Firestore ping failed: %s", str(e))
            return False


def _fetch(db: HealthFirestoreClient, collection: str, doc_id: str) -> dict | None:
    try:
        doc = db.document(collection, doc_id).get()
    except Exception as e:
        logger.error("Failed to fetch %s/%s: %s", collection, doc_id[:8], str(e))
        raise StorageError(f"Failed to fetch from {collection}") from e
    if not doc.exists:
        return None
    return doc.to_dict()


def _store(db: HealthFirestoreClient, collection: str, doc_id: str, data: dict) -> None:
    try:
        db.document(collection, doc_id).set(data)
    except Exception as e:
        logger.error("Failed to save %s/%s: %s", collection, doc_id[:8], str(e))
        raise StorageError(f"Failed to save to {collection}") from e


def _dated(model: HydrationLog | SleepLog) -> dict:
    data = model.model_dump()
    # Store dates as ISO strings so range queries compare lexically
    data["log_date"] = model.log_date.isoformat()
    return data


def _query_dated(db: HealthFirestoreClient, collection: str, start_date: date, end_date: date) -> list[dict]:
    logger.debug("Fetching %s from %s to %s", collection, start_date, end_date)
    try:
        query = (
            db.collection(collection)
            .where("log_date", ">=", start_date.isoformat())
            .where("log_date", "<=", end_date.isoformat())
            .order_by("log_date")
        )
        return [doc.to_dict() for doc in query.stream()]
    except Exception as e:
        logger.error("Failed to query %s: %s", collection, str(e))
        raise StorageError(f"Failed to query {collection}") from e


class FirestoreSurveyRepository(SurveyRepository):
    """Surveys stored one document per survey."""

    COLLECTION = "surveys"

    def __init__(self, db: HealthFirestoreClient) -> None:
        self._db = db

    def get(self, survey_id: str) -> Survey | None:
        logger.debug("Fetching survey: %s", survey_id[:8])
        data = _fetch(self._db, self.COLLECTION, survey_id)
        return Survey(**data) if data is not None else None

    def add(self, survey: Survey) -> Survey:
        logger.info("Saving survey: %s", survey.id[:8])
        _store(self._db, self.COLLECTION, survey.id, survey.model_dump())
        return survey


class FirestoreWeightGoalRepository(WeightGoalRepository):
    """Weight goals stored one document per goal."""

    COLLECTION = "weight_goals"

    def __init__(self, db: HealthFirestoreClient) -> None:
        self._db = db

    def get(self, goal_id: str) -> WeightGoal | None:
        logger.debug("Fetching goal: %s", goal_id[:8])
        data = _fetch(self._db, self.COLLECTION, goal_id)
        return WeightGoal(**data) if data is not None else None

    def add(self, goal: WeightGoal) -> WeightGoal:
        logger.info("Saving goal: %s", goal.id[:8])
        _store(self._db, self.COLLECTION, goal.id, goal.model_dump())
        return goal

    def update(self, goal_id: str, fields: dict[str, Any]) -> WeightGoal | None:
        logger.info("Updating goal %s: %s", goal_id[:8], sorted(fields))
        if self.get(goal_id) is None:
            logger.warning("Goal not found for update: %s", goal_id[:8])
            return None
        try:
            self._db.document(self.COLLECTION, goal_id).update(fields)
        except Exception as e:
            logger.error("Failed to update goal: %s", str(e))
            raise StorageError("Failed to update weight goal") from e
        return self.get(goal_id)


class FirestoreLogStore:
    """Weight, hydration and sleep logs, one document per entry."""

    def __init__(self, db: HealthFirestoreClient) -> None:
        self._db = db

    def add_weight_log(self, log: WeightLog) -> WeightLog:
        logger.info("Saving weight log for goal %s", log.goal_id[:8])
        _store(self._db, "weight_logs", log.id, log.model_dump())
        return log

    def list_weight_logs(self, goal_id: str) -> list[WeightLog]:
        """Logs for a goal, newest first."""
        try:
            query = (
                self._db.collection("weight_logs")
                .where("goal_id", "==", goal_id)
                .order_by("created_at", direction=firestore.Query.DESCENDING)
            )
            return [WeightLog(**doc.to_dict()) for doc in query.stream()]
        except Exception as e:
            logger.error("Failed to list weight logs: %s", str(e))
            raise StorageError("Failed to list weight logs") from e

    def add_hydration_log(self, log: HydrationLog) -> HydrationLog:
        logger.info("Saving hydration log for %s", log.log_date)
        _store(self._db, "hydration_logs", log.id, _dated(log))
        return log

    def list_hydration_logs(self, start_date: date, end_date: date) -> list[HydrationLog]:
        return [HydrationLog(**data) for data in _query_dated(self._db, "hydration_logs", start_date, end_date)]

    def add_sleep_log(self, log: SleepLog) -> SleepLog:
        logger.info("Saving sleep log for %s", log.log_date)
        _store(self._db, "sleep_logs", log.id, _dated(log))
        return log

    def list_sleep_logs(self, start_date: date, end_date: date) -> list[SleepLog]:
        return [SleepLog(**data) for data in _query_dated(self._db, "sleep_logs", start_date, end_date)]


@dataclass
class FirestoreStore:
    """All repositories backed by one Firestore client."""

    db: HealthFirestoreClient
    surveys: FirestoreSurveyRepository = field(init=False)
    goals: FirestoreWeightGoalRepository = field(init=False)
    logs: FirestoreLogStore = field(init=False)
    backend: str = "firestore"

    def __post_init__(self) -> None:
        self.surveys = FirestoreSurveyRepository(self.db)
        self.goals = FirestoreWeightGoalRepository(self.db)
        self.logs = FirestoreLogStore(self.db)

    def ping(self) -> bool:
        return self.db.ping()
