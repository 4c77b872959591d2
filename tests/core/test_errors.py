"""Unit tests for engine errors and input parsing."""

import pytest

from yahealthy.core.errors import (
    EngineError,
    InvalidGoal,
    NotFound,
    ValidationError,
    error_payload,
    parse_input,
)
from yahealthy.core.models import WeightLogInput


class TestParseInput:
    """Tests for parse_input."""

    def test_valid_mapping(self):
        """A valid mapping becomes a model."""
        log = parse_input(WeightLogInput, {"goal_id": "g", "weight_kg": 88.5})
        assert isinstance(log, WeightLogInput)
        assert log.weight_kg == 88.5

    def test_model_passes_through(self):
        """An already validated model is returned as is."""
        log = WeightLogInput(goal_id="g", weight_kg=88.5)
        assert parse_input(WeightLogInput, log) is log

    def test_one_message_per_field(self):
        """Each violated field is reported by name."""
        with pytest.raises(ValidationError) as exc_info:
            parse_input(WeightLogInput, {"goal_id": "g", "weight_kg": 400, "sleep_hours": 30})

        errors = exc_info.value.errors
        assert len(errors) == 2
        assert errors[0].startswith("weight_kg:")
        assert errors[1].startswith("sleep_hours:")

    def test_missing_field(self):
        """Missing required fields are reported."""
        with pytest.raises(ValidationError) as exc_info:
            parse_input(WeightLogInput, {"goal_id": "g"})
        assert exc_info.value.errors[0].startswith("weight_kg:")


class TestErrorPayload:
    """Tests for error_payload."""

    def test_validation_details(self):
        """Validation errors carry their field messages."""
        payload = error_payload(ValidationError(["weight_kg: too large"]))
        assert payload == {
            "error": "ValidationError",
            "message": "weight_kg: too large",
            "details": ["weight_kg: too large"],
        }

    def test_not_found(self):
        """Other errors carry kind and message only."""
        payload = error_payload(NotFound("Weight goal not found: g"))
        assert payload == {"error": "NotFound", "message": "Weight goal not found: g"}

    def test_hierarchy(self):
        """All engine errors share one base class."""
        assert issubclass(InvalidGoal, EngineError)
        assert issubclass(ValidationError, EngineError)
