"""Tests for health-based exercise exclusion."""
import pytest

from fitplan.ml.scoring.constraint_filter import (
    INJURY_EXCLUSIONS,
    InjuryArea,
    contraindication_tags,
    derive_exclusions,
    is_excluded,
)
from fitplan.models.enums import MovementPattern
from tests.conftest import make_exercise, make_health


class TestDeriveExclusions:

    def test_no_health_record_excludes_nothing(self):
        assert derive_exclusions(None) == frozenset()

    def test_knee_injury_expands_to_tokens(self):
        exclusions = derive_exclusions(make_health(injuries=["knee"]))
        assert exclusions == {"squat", "lunge", "leg_press", "leg_extension", "jump"}

    def test_injury_tokens_are_case_insensitive(self):
        assert derive_exclusions(make_health(injuries=["Knee "])) == INJURY_EXCLUSIONS[InjuryArea.KNEE]

    def test_unknown_injury_is_ignored(self):
        assert derive_exclusions(make_health(injuries=["pinky_toe"])) == frozenset()

    def test_rules_are_additive(self):
        health = make_health(
            injuries=["wrist"],
            contraindicated_movements=["Overhead"],
            contraindicated_exercises=["burpee"],
            is_pregnant=True,
            recent_surgery=True,
        )
        exclusions = derive_exclusions(health)

        assert INJURY_EXCLUSIONS[InjuryArea.WRIST] <= exclusions
        assert {"overhead", "burpee", "lying_on_back", "high_impact", "twisting", "heavy_compound"} <= exclusions

    def test_contraindication_tags_follow_injuries(self):
        tags = contraindication_tags(make_health(injuries=["knee", "shoulder", "unknown"]))
        assert tags == {"knee_injury", "shoulder_injury"}


class TestIsExcluded:

    @pytest.mark.parametrize("name,pattern", [
        ("Barbell Squat", MovementPattern.HORIZONTAL_PUSH),
        ("Walking Lunges", MovementPattern.LOCOMOTION),
        ("Box Jump", MovementPattern.LOCOMOTION),
        ("Goblet Hold", MovementPattern.SQUAT),
    ])
    def test_knee_tokens_match_name_or_pattern(self, name, pattern):
        exercise = make_exercise(1, name, movement_pattern=pattern)
        assert is_excluded(exercise, derive_exclusions(make_health(injuries=["knee"])))

    def test_slug_is_matched(self):
        exercise = make_exercise(1, "Seated Quad Machine", slug="leg_extension_machine")
        assert is_excluded(exercise, frozenset({"leg_extension"}))

    def test_substring_over_matches(self):
        # "jump" also hits jumping jacks
        exercise = make_exercise(1, "Jumping Jacks", movement_pattern=MovementPattern.LOCOMOTION)
        assert is_excluded(exercise, frozenset({"jump"}))

    def test_safe_exercise_is_kept(self):
        exercise = make_exercise(1, "Push-Up", slug="push_up")
        assert not is_excluded(exercise, derive_exclusions(make_health(injuries=["knee"])))

    def test_empty_exclusions_never_exclude(self):
        assert not is_excluded(make_exercise(1, "Jump Squat"), frozenset())
