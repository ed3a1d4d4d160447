"""Tests for the scoring engine."""

import pytest

from marking import build, score
from marking.models import MarkingPoint, Requirement, RequirementKind
from marking.scoring import (
    NO_ALTERNATIVES,
    NO_MATCH,
    ScoringEngine,
    alternative_satisfied,
    mark_band,
)
from marking.normalizer import normalize


def point(pid, *alternatives, marks=1, kind=RequirementKind.ONE_OF_GROUP):
    return MarkingPoint(
        id=pid,
        accepted_alternatives=alternatives,
        mark_value=marks,
        requirement=Requirement.of(kind),
    )


class TestAlternativeSatisfied:
    """Token-subset matching."""

    def test_subset_matches(self):
        assert alternative_satisfied("kill bacteria", normalize("they kill the bacteria"))

    def test_missing_token(self):
        assert not alternative_satisfied("kill bacteria", normalize("kill germs"))

    def test_not_substring_matching(self):
        assert not alternative_satisfied("kill", normalize("killing"))

    def test_empty_alternative_never_matches(self):
        assert not alternative_satisfied("...", normalize("anything"))
        assert not alternative_satisfied("", frozenset())


class TestScore:
    """Whole-submission scoring."""

    def test_order_and_case_insensitive(self):
        points = [point("P1", "kill bacteria")]
        first = score(points, "Kill Bacteria")
        second = score(points, "bacteria kill")
        assert first.satisfied_point_ids == second.satisfied_point_ids == ["P1"]

    @pytest.mark.parametrize("alternative, submitted", [("CO2", "CO₂"), ("CO₂", "CO2")])
    def test_subscript_equivalence(self, alternative, submitted):
        result = score([point("P1", alternative)], submitted)
        assert result.awarded_marks == 1

    @pytest.mark.parametrize(
        "alternative, submitted",
        [("2 electrons", "two electrons"), ("0.5 mol", "½ mol"), ("37 °C", "37 degC"), ("osmosis", "'osmosis'")],
    )
    def test_written_forms_match(self, alternative, submitted):
        assert score([point("P1", alternative)], submitted).awarded_marks == 1

    def test_empty_points(self):
        result = score([], "anything")
        assert result.awarded_marks == 0
        assert result.max_marks == 0
        assert result.satisfied_point_ids == []
        assert result.unsatisfied_required_point_ids == []

    def test_empty_submission(self):
        result = score([point("P1", "kill bacteria")], "")
        assert result.awarded_marks == 0
        assert result.max_marks == 1
        assert result.unsatisfied_required_point_ids == ["P1"]

    def test_none_submission(self):
        assert score([point("P1", "x")], None).awarded_marks == 0

    def test_any_alternative_satisfies(self):
        points = [point("alt_1", "kill bacteria", "destroy bacteria")]
        result = score(points, "destroy bacteria")
        assert result.awarded_marks == 1
        assert result.outcomes[0].matched_alternative == "destroy bacteria"

    def test_all_of_group_satisfied_by_one_alternative(self):
        points = [point("alt_1", "heart", "lungs", marks=2, kind=RequirementKind.ALL_OF_GROUP)]
        result = score(points, "the heart")
        assert result.awarded_marks == 2
        assert result.satisfied_point_ids == ["alt_1"]

    def test_standalone_not_listed_as_required(self):
        points = [point("P1", "a", kind=RequirementKind.STANDALONE), point("alt_2", "b")]
        result = score(points, "nothing")
        assert result.unsatisfied_required_point_ids == ["alt_2"]

    def test_satisfied_ids_in_point_order(self):
        points = [point("P1", "a"), point("P2", "b"), point("P3", "c")]
        result = score(points, "c a")
        assert result.satisfied_point_ids == ["P1", "P3"]
        assert result.unsatisfied_required_point_ids == ["P2"]

    def test_outcomes_explain_misses(self):
        points = [point("P1", "kill bacteria", "destroy bacteria"), point("P2", "...")]
        result = score(points, "nothing")
        assert result.outcomes[0].reason == NO_MATCH
        assert result.outcomes[0].expected == "kill bacteria / destroy bacteria"
        assert result.outcomes[1].reason == NO_ALTERNATIVES

    def test_percentage(self):
        points = [point("P1", "a"), point("P2", "b"), point("P3", "c")]
        assert score(points, "a").percentage == 33
        assert score(points, "a b c").percentage == 100


class TestScenarios:
    """End to end: build then score."""

    def test_eleven_points(self, eleven_records):
        result = score(build(eleven_records), "")
        assert result.max_marks == 11

    def test_action_only(self, bacteria_records):
        result = score(build(bacteria_records), "destroy bacteria")
        assert (result.awarded_marks, result.max_marks) == (1, 2)
        assert result.satisfied_point_ids == ["alt_1"]
        assert result.unsatisfied_required_point_ids == ["alt_6"]

    def test_action_and_reason(self, bacteria_records):
        result = score(build(bacteria_records), "kill bacteria because bacteria cause illness")
        assert (result.awarded_marks, result.max_marks) == (2, 2)
        assert result.is_full_marks

    def test_empty_key(self):
        result = score(build([]), "anything")
        assert (result.awarded_marks, result.max_marks) == (0, 0)

    def test_inferred_pair_worth_one(self, record):
        points = build([record("kill bacteria", alt=1), record("destroy bacteria", alt=1)])
        result = score(points, "kill bacteria and destroy bacteria")
        assert result.awarded_marks == 1
        assert result.max_marks == 1


class TestScoringEngine:
    def test_reusable_across_submissions(self, bacteria_records):
        engine = ScoringEngine(build(bacteria_records))
        assert engine.max_marks == 2
        assert engine.score("kill germs").awarded_marks == 1
        assert engine.score("prevent infection kill germs").awarded_marks == 2

    def test_annotations_in_outcomes(self, record):
        engine = ScoringEngine(build([record("rate increases owtte")]))
        outcome = engine.score("rate increases").outcomes[0]
        assert outcome.satisfied
        assert outcome.annotations == ["owtte: equivalent wording accepted"]


class TestMarkBand:
    def test_short_questions_unbanded(self):
        assert mark_band(2, 3) is None
        assert mark_band(0, 0) is None

    @pytest.mark.parametrize("awarded, band", [(10, "excellent"), (6, "good"), (3, "adequate"), (2, "limited")])
    def test_bands(self, awarded, band):
        assert mark_band(awarded, 10) == band

    def test_band_on_result(self):
        points = [point(f"P{n}", f"w{n}") for n in range(5)]
        assert score(points, "w0 w1 w2 w3 w4").band == "excellent"
        assert score(points, "").band == "limited"
