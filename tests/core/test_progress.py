"""Unit tests for weight-goal progress - pure functions, no mocks needed."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from yahealthy.core.errors import InvalidGoal, NotFound, ValidationError
from yahealthy.core.models import Survey, SurveyInput, WeightGoal, WeightGoalInput, WeightLogInput
from yahealthy.core.ports import SurveyRepository, WeightGoalRepository
from yahealthy.core.progress import (
    apply_weight_log,
    calculate_progress,
    create_weight_goal,
    expected_progress,
    record_weight_log,
    summarize_goal,
)
from yahealthy.core.thresholds import ProgressThresholds


START = datetime(2024, 12, 1, 8, 0, tzinfo=timezone.utc)


def make_goal(**overrides) -> WeightGoal:
    fields = {
        "id": "goal-1",
        "start_weight_kg": 90,
        "target_weight_kg": 80,
        "current_weight_kg": 90,
        "created_at": START,
    }
    fields.update(overrides)
    return WeightGoal(**fields)


def make_survey() -> SurveyInput:
    return SurveyInput(
        gender="male", age=30, height_cm=180, weight_kg=90,
        target_weight_kg=80, target_days=100, lifestyle="moderate",
    )


class DictSurveys(SurveyRepository):
    def __init__(self, *surveys: Survey) -> None:
        self.items = {s.id: s for s in surveys}

    def get(self, survey_id: str) -> Optional[Survey]:
        return self.items.get(survey_id)


class DictGoals(WeightGoalRepository):
    def __init__(self, *goals: WeightGoal) -> None:
        self.items = {g.id: g for g in goals}

    def get(self, goal_id: str) -> Optional[WeightGoal]:
        return self.items.get(goal_id)

    def update(self, goal_id: str, fields: dict[str, Any]) -> Optional[WeightGoal]:
        self.items[goal_id] = self.items[goal_id].model_copy(update=fields)
        return self.items[goal_id]


class TestCreateWeightGoal:
    """Tests for create_weight_goal."""

    def test_starts_at_start_weight(self):
        """New goal has current weight equal to start and no logs."""
        goal = create_weight_goal(
            WeightGoalInput(start_weight_kg=90, target_weight_kg=80, weigh_in_days=["Mon"]),
            now=START,
        )
        assert goal.current_weight_kg == 90
        assert goal.logs_count == 0
        assert goal.weigh_in_days == ["Mon"]
        assert goal.created_at == START
        assert goal.id


class TestCalculateProgress:
    """Tests for calculate_progress."""

    def test_partial_progress(self):
        """1.5 kg of 10 kg is 15%."""
        assert calculate_progress(90, 80, 88.5) == (1.5, 8.5, 15)

    def test_gain_is_zero_progress(self):
        """Gaining above start shows negative loss and 0%."""
        lost, remaining, progress = calculate_progress(90, 80, 92)
        assert lost == -2.0
        assert remaining == 12.0
        assert progress == 0

    def test_past_target_capped(self):
        """Going below target caps progress at 100 with nothing remaining."""
        lost, remaining, progress = calculate_progress(90, 80, 78)
        assert lost == 12.0
        assert remaining == 0.0
        assert progress == 100

    def test_nothing_to_lose(self):
        """Target at or above start is an invalid goal."""
        with pytest.raises(InvalidGoal):
            calculate_progress(80, 80, 79)
        with pytest.raises(InvalidGoal):
            calculate_progress(80, 85, 79)


class TestExpectedProgress:
    """Tests for expected_progress."""

    def test_without_survey(self):
        """No survey means no timeframe."""
        assert expected_progress(make_goal(), None, START + timedelta(days=5)) is None

    def test_linear_timeframe(self):
        """20 of 100 days elapsed is 20%."""
        result = expected_progress(make_goal(), make_survey(), START + timedelta(days=20))
        assert result == pytest.approx(20.0)

    def test_capped_at_100(self):
        """Past the deadline the expectation stays at 100%."""
        assert expected_progress(make_goal(), make_survey(), START + timedelta(days=400)) == 100.0

    def test_no_elapsed_time(self):
        """At creation there is no expectation yet."""
        assert expected_progress(make_goal(), make_survey(), START) is None


class TestApplyWeightLog:
    """Tests for apply_weight_log."""

    def test_first_weigh_in(self):
        """88.5 kg on a 90 to 80 goal: 1.5 lost, 8.5 remaining, 15%."""
        outcome = apply_weight_log(
            make_goal(), None, WeightLogInput(goal_id="goal-1", weight_kg=88.5), now=START
        )
        log = outcome.log

        assert log.lost_kg == 1.5
        assert log.remaining_kg == 8.5
        assert log.progress == 15
        assert log.is_weight_loss is True
        assert log.progress_status == "yellow"
        assert log.created_at == START
        assert outcome.celebration is not None
        assert outcome.celebration.remaining_kg == 8.5
        assert outcome.updated_goal_fields == {"current_weight_kg": 88.5, "logs_count": 1}

    def test_gain_since_last_weigh_in(self):
        """Weight up since the previous log is not a loss and not celebrated."""
        goal = make_goal(current_weight_kg=88.5, logs_count=1)
        outcome = apply_weight_log(goal, None, WeightLogInput(goal_id="goal-1", weight_kg=89))

        assert outcome.log.is_weight_loss is False
        assert outcome.log.lost_kg == 1.0
        assert outcome.log.progress == 10
        assert outcome.celebration is None
        assert outcome.updated_goal_fields["logs_count"] == 2

    def test_first_log_compares_with_start(self):
        """Before any log, the start weight is the previous weight."""
        goal = make_goal(current_weight_kg=85)
        outcome = apply_weight_log(goal, None, WeightLogInput(goal_id="goal-1", weight_kg=89))
        assert outcome.log.is_weight_loss is True

    def test_goal_reached(self):
        """Reaching the target celebrates completion."""
        outcome = apply_weight_log(make_goal(), None, WeightLogInput(goal_id="goal-1", weight_kg=79.5))
        assert outcome.log.progress == 100
        assert outcome.log.remaining_kg == 0.0
        assert outcome.log.progress_status == "green"
        assert "Goal reached" in outcome.celebration.message

    def test_unknown_goal(self):
        """Missing goal fails with NotFound."""
        with pytest.raises(NotFound):
            apply_weight_log(None, None, WeightLogInput(goal_id="missing", weight_kg=88))

    def test_mismatched_goal(self):
        """A goal that is not the log's goal fails with NotFound."""
        with pytest.raises(NotFound):
            apply_weight_log(make_goal(), None, WeightLogInput(goal_id="other", weight_kg=88))

    def test_invalid_goal(self):
        """A goal with nothing to lose fails with InvalidGoal."""
        goal = make_goal(target_weight_kg=90)
        with pytest.raises(InvalidGoal):
            apply_weight_log(goal, None, WeightLogInput(goal_id="goal-1", weight_kg=88))

    def test_out_of_range_weight(self):
        """A 400 kg weigh-in fails with ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            apply_weight_log(make_goal(), None, {"goal_id": "goal-1", "weight_kg": 400})
        assert exc_info.value.errors[0].startswith("weight_kg:")

    def test_missing_goal_id(self):
        """A weigh-in without a goal id fails with ValidationError."""
        with pytest.raises(ValidationError):
            apply_weight_log(make_goal(), None, {"weight_kg": 88.5})

    def test_raw_mapping(self):
        """A valid mapping is accepted like the model."""
        outcome = apply_weight_log(make_goal(), None, {"goal_id": "goal-1", "weight_kg": 88.5})
        assert outcome.log.progress == 15

    def test_graded_against_timeframe(self):
        """With a linked survey, progress is graded against elapsed time."""
        log = WeightLogInput(goal_id="goal-1", weight_kg=88.5)
        survey = make_survey()

        ahead = apply_weight_log(make_goal(), survey, log, now=START + timedelta(days=10))
        on_track = apply_weight_log(make_goal(), survey, log, now=START + timedelta(days=20))
        behind = apply_weight_log(make_goal(), survey, log, now=START + timedelta(days=50))

        assert ahead.log.progress_status == "green"
        assert on_track.log.progress_status == "yellow"
        assert behind.log.progress_status == "red"

    def test_custom_thresholds(self):
        """Configured progress bands are used without a timeframe."""
        outcome = apply_weight_log(
            make_goal(), None, WeightLogInput(goal_id="goal-1", weight_kg=88.5),
            thresholds=ProgressThresholds(green_min=10, yellow_min=5),
        )
        assert outcome.log.progress_status == "green"

    def test_default_hydration_and_sleep_targets(self):
        """Water and sleep on a log are classified against the defaults."""
        outcome = apply_weight_log(
            make_goal(), None,
            WeightLogInput(goal_id="goal-1", weight_kg=88.5, water_liters=2.0, sleep_hours=7.5),
        )
        assert outcome.log.hydration.status == "yellow"
        assert outcome.log.hydration.percentage == 80
        assert outcome.log.sleep.status == "green"
        assert outcome.log.sleep.percentage == 94

    def test_survey_hydration_and_sleep_targets(self):
        """A linked survey supplies personal targets."""
        outcome = apply_weight_log(
            make_goal(), make_survey(),
            WeightLogInput(goal_id="goal-1", weight_kg=88.5, water_liters=2.0, sleep_hours=7.5),
            now=START + timedelta(days=10),
        )
        assert outcome.log.hydration.status == "red"
        assert outcome.log.hydration.percentage == 67
        assert outcome.log.sleep.percentage == 100

    def test_omitted_habits_not_classified(self):
        """Without water or sleep there is nothing to classify."""
        outcome = apply_weight_log(make_goal(), None, WeightLogInput(goal_id="goal-1", weight_kg=88.5))
        assert outcome.log.hydration is None
        assert outcome.log.sleep is None

    def test_goal_snapshot_unchanged(self):
        """The goal passed in is not mutated."""
        goal = make_goal()
        apply_weight_log(goal, None, WeightLogInput(goal_id="goal-1", weight_kg=88.5))
        assert goal.current_weight_kg == 90
        assert goal.logs_count == 0


class TestRecordWeightLog:
    """Tests for record_weight_log."""

    def test_updates_goal(self):
        """The goal's current weight and log count are persisted."""
        goals = DictGoals(make_goal())
        outcome = record_weight_log(
            goals, DictSurveys(), WeightLogInput(goal_id="goal-1", weight_kg=88.5),
            clock=lambda: START,
        )
        assert outcome.log.created_at == START
        assert goals.items["goal-1"].current_weight_kg == 88.5
        assert goals.items["goal-1"].logs_count == 1

    def test_uses_linked_survey(self):
        """The goal's survey supplies hydration targets."""
        survey = Survey(**make_survey().model_dump(), id="survey-1")
        goals = DictGoals(make_goal(survey_id="survey-1"))
        outcome = record_weight_log(
            goals, DictSurveys(survey),
            WeightLogInput(goal_id="goal-1", weight_kg=88.5, water_liters=3.0),
            clock=lambda: START + timedelta(days=10),
        )
        assert outcome.log.hydration.percentage == 100

    def test_unknown_goal(self):
        """Unknown goal id fails with NotFound."""
        with pytest.raises(NotFound):
            record_weight_log(DictGoals(), DictSurveys(), WeightLogInput(goal_id="nope", weight_kg=88))

    def test_sequential_logs(self):
        """Each weigh-in is compared with the one before it."""
        goals = DictGoals(make_goal())
        surveys = DictSurveys()
        first = record_weight_log(goals, surveys, WeightLogInput(goal_id="goal-1", weight_kg=88))
        second = record_weight_log(goals, surveys, WeightLogInput(goal_id="goal-1", weight_kg=88.5))
        third = record_weight_log(goals, surveys, WeightLogInput(goal_id="goal-1", weight_kg=87))

        assert [first.log.is_weight_loss, second.log.is_weight_loss, third.log.is_weight_loss] == [
            True, False, True,
        ]
        assert goals.items["goal-1"].logs_count == 3
        assert goals.items["goal-1"].current_weight_kg == 87


class TestSummarizeGoal:
    """Tests for summarize_goal."""

    def test_halfway(self):
        """Halfway to target is 50%."""
        summary = summarize_goal(make_goal(current_weight_kg=85, logs_count=4))
        assert summary.lost_kg == 5.0
        assert summary.remaining_kg == 5.0
        assert summary.progress == 50
        assert summary.logs_count == 4
