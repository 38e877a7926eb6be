"""Tests for data models."""

from datetime import datetime

import pytest

from guided_lift.models.exercises import (
    COMMON_EXERCISES,
    SAMPLE_WORKOUTS,
    EquipmentType,
    Exercise,
    MuscleGroup,
)
from guided_lift.models.records import NewPR, WorkoutLog, WorkoutSummary, calculate_xp
from guided_lift.models.session import SessionSettings, SessionStatus
from guided_lift.models.workout import (
    SetInput,
    SetLog,
    WorkoutDefinition,
    WorkoutExercise,
)


class TestExercise:
    """Tests for Exercise model."""

    def test_exercise_to_dict(self):
        """Test exercise serialization."""
        exercise = Exercise(
            name="Bench Press",
            muscle_group=MuscleGroup.CHEST,
            equipment=EquipmentType.BARBELL,
            aliases=["BB Bench"],
        )
        data = exercise.to_dict()

        assert data["name"] == "Bench Press"
        assert data["muscle_group"] == "chest"
        assert data["equipment"] == "barbell"
        assert data["aliases"] == ["BB Bench"]

    def test_exercise_from_dict(self):
        """Test exercise deserialization."""
        exercise = Exercise.from_dict({"name": "Plank", "muscle_group": "abs"}, id=7)

        assert exercise.id == 7
        assert exercise.muscle_group == MuscleGroup.ABS
        assert exercise.equipment is None
        assert exercise.aliases == []

    def test_sample_workouts_use_library_exercises(self):
        """Test every sample workout exercise exists in the library."""
        names = {e.name for e in COMMON_EXERCISES}
        for prescriptions in SAMPLE_WORKOUTS.values():
            for exercise_name, sets, reps, rest in prescriptions:
                assert exercise_name in names
                assert sets >= 1 and reps >= 1 and rest >= 0


class TestWorkoutDefinition:
    """Tests for WorkoutExercise and WorkoutDefinition."""

    def test_totals(self, two_by_two_workout):
        """Test exercise and set totals."""
        assert two_by_two_workout.total_exercises == 2
        assert two_by_two_workout.total_sets == 4

    def test_zero_sets_rejected(self):
        """Test an exercise needs at least one set."""
        with pytest.raises(ValueError):
            WorkoutExercise(id=1, name="Squat", muscle_group="quads", sets=0, target_reps=5, rest_time=60)

    def test_negative_rest_rejected(self):
        """Test rest time cannot be negative."""
        with pytest.raises(ValueError):
            WorkoutExercise(id=1, name="Squat", muscle_group="quads", sets=3, target_reps=5, rest_time=-1)

    def test_dict_round_trip(self, bench_pr_workout):
        """Test a definition survives to_dict/from_dict."""
        assert WorkoutDefinition.from_dict(bench_pr_workout.to_dict()) == bench_pr_workout


class TestSetInput:
    """Tests for SetInput validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"weight": -1, "reps": 5},
            {"weight": 50, "reps": -1},
            {"weight": 50, "reps": 5, "rpe": 0},
            {"weight": 50, "reps": 5, "rpe": 11},
        ],
    )
    def test_invalid_input(self, kwargs):
        """Test out-of-range values are rejected."""
        with pytest.raises(ValueError):
            SetInput(**kwargs)

    def test_bodyweight_set(self):
        """Test zero weight is a valid set."""
        assert SetInput(weight=0, reps=12).weight == 0


class TestSetLog:
    """Tests for SetLog."""

    def test_volume(self):
        """Test volume is weight times reps."""
        assert SetLog(exercise_id=1, set_number=1, weight=82.5, reps=4).volume == 330

    def test_to_dict(self):
        """Test serialization keeps the timestamp."""
        completed = datetime(2024, 5, 1, 18, 30)
        data = SetLog(
            exercise_id=1, set_number=2, weight=100, reps=5, rpe=8.5, completed_at=completed
        ).to_dict()

        assert data["completed_at"] == "2024-05-01T18:30:00"
        assert data["rpe"] == 8.5
        assert SetLog.from_dict(data).completed_at == completed


class TestRecords:
    """Tests for XP, PRs and summaries."""

    def test_calculate_xp(self):
        """Test XP is base plus PR and set rewards."""
        assert calculate_xp(0, 0) == 100
        assert calculate_xp(2, 12) == 100 + 100 + 60

    def test_pr_improvement(self):
        """Test improvement over the previous record."""
        pr = NewPR(exercise_id=1, exercise_name="Squat", new_record=142.5, previous_record=140)

        assert pr.improvement == 2.5
        assert pr.xp_earned == 50
        assert pr.to_dict()["improvement"] == 2.5

    def test_summary_from_session(self):
        """Test summary aggregates over the logged sets."""
        sets = [
            SetLog(exercise_id=1, set_number=1, weight=100, reps=5),
            SetLog(exercise_id=1, set_number=2, weight=100, reps=5),
            SetLog(exercise_id=2, set_number=1, weight=60, reps=10),
        ]
        pr = NewPR(exercise_id=2, exercise_name="Row", new_record=60, previous_record=55)
        summary = WorkoutSummary.from_session(
            workout_id=3,
            workout_name="Pull",
            duration=1800,
            total_exercises=3,
            total_sets=9,
            sets=sets,
            prs=[pr],
        )

        assert summary.sets_completed == 3
        assert summary.exercises_completed == 2
        assert summary.total_volume == 1600
        assert summary.total_reps == 20
        assert summary.prs_achieved == (pr,)
        assert summary.xp_earned == 100 + 50 + 15

    def test_workout_log_from_summary(self):
        """Test the stored log mirrors the summary."""
        sets = [SetLog(exercise_id=1, set_number=1, weight=100, reps=5)]
        summary = WorkoutSummary.from_session(
            workout_id=3, workout_name="Pull", duration=60,
            total_exercises=1, total_sets=3, sets=sets, prs=[],
        )
        log = WorkoutLog.from_summary(summary, sets)

        assert log.workout_id == 3
        assert log.total_volume == 500
        assert log.xp_earned == 105
        assert log.performed_on == summary.completed_at.date()
        assert log.sets == sets


class TestSessionSettings:
    """Tests for SessionSettings and SessionStatus."""

    def test_defaults(self):
        """Test the default settings."""
        settings = SessionSettings()

        assert settings.default_rest_time == 60
        assert settings.auto_start_timer
        assert settings.timer_warning_at == 5
        assert settings.volume == 0.7
        assert not settings.voice_enabled
        assert settings.keep_screen_on

    def test_merged(self):
        """Test merging returns an updated copy."""
        settings = SessionSettings()
        merged = settings.merged(volume=0.2, voice_enabled=True)

        assert merged.volume == 0.2
        assert merged.voice_enabled
        assert settings.volume == 0.7

    @pytest.mark.parametrize("changes", [{"volume": 1.5}, {"default_rest_time": -5}])
    def test_merged_validates(self, changes):
        """Test merged settings are validated."""
        with pytest.raises(ValueError):
            SessionSettings().merged(**changes)

    def test_running_statuses(self):
        """Test which statuses accumulate session time."""
        running = {s for s in SessionStatus if s.is_running}

        assert running == {SessionStatus.ACTIVE, SessionStatus.REST, SessionStatus.PR}
        assert SessionStatus.PR.get_display() == "New Record!"
