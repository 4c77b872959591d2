"""Unit tests for Pydantic models - validation rules."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from yahealthy.core.models import (
    Survey,
    SurveyInput,
    WaterReminderInput,
    WeightGoal,
    WeightGoalInput,
    WeightLogInput,
)


SURVEY_FIELDS = {
    "gender": "male",
    "age": 30,
    "height_cm": 180,
    "weight_kg": 90,
    "target_weight_kg": 80,
    "target_days": 100,
    "lifestyle": "moderate",
}


class TestSurveyInput:
    """Tests for SurveyInput model."""

    def test_valid_survey(self):
        """Valid survey is created successfully."""
        survey = SurveyInput(**SURVEY_FIELDS)
        assert survey.gender == "male"
        assert survey.target_days == 100

    def test_choices_normalized(self):
        """Gender and lifestyle are case-insensitive."""
        survey = SurveyInput(**{**SURVEY_FIELDS, "gender": " Female ", "lifestyle": "VERY_ACTIVE"})
        assert survey.gender == "female"
        assert survey.lifestyle == "very_active"

    @pytest.mark.parametrize(
        "field,value",
        [("age", 9), ("age", 121), ("height_cm", 99), ("height_cm", 251),
         ("weight_kg", 400), ("weight_kg", 29), ("target_weight_kg", 301),
         ("target_days", 0), ("gender", "unknown"), ("lifestyle", "couch")],
    )
    def test_out_of_bounds(self, field, value):
        """Fields outside their documented bounds are rejected."""
        with pytest.raises(ValidationError):
            SurveyInput(**{**SURVEY_FIELDS, field: value})


class TestSurvey:
    """Tests for the stored Survey model."""

    def test_auto_id_and_timestamp(self):
        """Stored surveys get an id and an aware creation time."""
        survey = Survey(**SURVEY_FIELDS)
        assert len(survey.id) == 36
        assert survey.created_at.tzinfo is not None

    def test_frozen(self):
        """Stored surveys are immutable."""
        survey = Survey(**SURVEY_FIELDS)
        with pytest.raises(ValidationError):
            survey.weight_kg = 85


class TestWeightGoal:
    """Tests for WeightGoalInput and WeightGoal models."""

    def test_weigh_in_days(self):
        """Weigh-in days use three-letter names."""
        goal = WeightGoalInput(start_weight_kg=90, target_weight_kg=80, weigh_in_days=["Mon", "Thu"])
        assert goal.weigh_in_days == ["Mon", "Thu"]

    def test_unknown_weekday(self):
        """Unknown day names are rejected."""
        with pytest.raises(ValidationError):
            WeightGoalInput(start_weight_kg=90, target_weight_kg=80, weigh_in_days=["Monday"])

    @pytest.mark.parametrize("target", [90, 95])
    def test_target_not_below_start(self, target):
        """A target at or above the start weight is rejected."""
        with pytest.raises(ValidationError, match="target_weight_kg must be below start_weight_kg"):
            WeightGoalInput(start_weight_kg=90, target_weight_kg=target)

    def test_defaults(self):
        """A goal starts with no logs."""
        goal = WeightGoal(
            start_weight_kg=90, target_weight_kg=80, current_weight_kg=90,
            created_at=datetime(2024, 12, 1, tzinfo=timezone.utc),
        )
        assert goal.logs_count == 0
        assert goal.survey_id is None


class TestWeightLogInput:
    """Tests for WeightLogInput model."""

    def test_minimal(self):
        """Only goal and weight are required."""
        log = WeightLogInput(goal_id="g", weight_kg=88.5)
        assert log.water_liters is None
        assert log.notes is None

    def test_notes_limit(self):
        """Notes are capped at 500 characters."""
        WeightLogInput(goal_id="g", weight_kg=88.5, notes="x" * 500)
        with pytest.raises(ValidationError):
            WeightLogInput(goal_id="g", weight_kg=88.5, notes="x" * 501)

    @pytest.mark.parametrize(
        "field,value",
        [("weight_kg", 400), ("water_liters", -1), ("water_liters", 21), ("sleep_hours", 25)],
    )
    def test_out_of_bounds(self, field, value):
        """Weight, water and sleep bounds are enforced."""
        with pytest.raises(ValidationError):
            WeightLogInput(**{"goal_id": "g", "weight_kg": 88.5, field: value})

    def test_empty_goal_id(self):
        """A goal id is required."""
        with pytest.raises(ValidationError):
            WeightLogInput(goal_id="", weight_kg=88.5)


class TestWaterReminderInput:
    """Tests for WaterReminderInput model."""

    def test_defaults(self):
        """Reminders run 08:00 to 20:00 every two hours by default."""
        request = WaterReminderInput(weight_kg=70)
        assert (request.start_hour, request.end_hour, request.interval_hours) == (8, 20, 2)

    def test_inverted_window(self):
        """End hour before start hour is rejected."""
        with pytest.raises(ValidationError):
            WaterReminderInput(weight_kg=70, start_hour=20, end_hour=8)
