"""Tests for overall score aggregation and summaries."""

from conftest import make_result
from hazard_scorer.aggregator import aggregate
from hazard_scorer.schema import RiskLevel
from hazard_scorer.summary import NO_HAZARDS_SUMMARY, summarize


class TestAggregate:
    """Weighted mean over enabled categories."""

    def test_weighted_mean(self):
        overall = aggregate([
            make_result("A", 80, user_weight=1.0),
            make_result("B", 20, user_weight=2.0),
        ])
        # (80 + 40) / 3 = 40
        assert overall.score == 40
        assert overall.level == RiskLevel.MEDIUM

    def test_weighted_mean_with_heavy_weight(self):
        heavy = make_result("B", 20).model_copy(update={"user_weight": 3.0})
        overall = aggregate([make_result("A", 80), heavy])

        # (80 * 1 + 20 * 3) / 4 = 35
        assert overall.score == 35
        assert overall.level == RiskLevel.MEDIUM

    def test_empty_set(self):
        overall = aggregate([])
        assert overall.score == 0
        assert overall.level == RiskLevel.LOW

    def test_all_disabled(self):
        overall = aggregate([make_result("A", 90, is_enabled=False)])
        assert overall.score == 0
        assert overall.level == RiskLevel.LOW

    def test_disabled_categories_excluded(self):
        overall = aggregate([
            make_result("A", 80),
            make_result("B", 20, is_enabled=False),
        ])
        assert overall.score == 80
        assert overall.level == RiskLevel.CRITICAL

    def test_zero_score_categories_count_when_enabled(self):
        overall = aggregate([make_result("A", 60), make_result("B", 0, is_manually_added=True)])
        assert overall.score == 30

    def test_half_rounds_up(self):
        overall = aggregate([make_result("A", 50), make_result("B", 51)])
        assert overall.score == 51
        assert overall.level == RiskLevel.HIGH

    def test_order_independent(self):
        results = [make_result("A", 70, user_weight=0.5), make_result("B", 10), make_result("C", 45, user_weight=2.0)]
        assert aggregate(results) == aggregate(list(reversed(results)))

    def test_input_not_mutated(self):
        results = [make_result("A", 70), make_result("B", 10, is_enabled=False)]
        snapshot = [r.model_dump() for r in results]

        aggregate(results)
        aggregate(results)

        assert [r.model_dump() for r in results] == snapshot


class TestSummarize:
    """Tests for the grouped narrative summary."""

    def test_no_hazards(self):
        assert summarize([]) == NO_HAZARDS_SUMMARY
        assert summarize([make_result("A", 0)]) == NO_HAZARDS_SUMMARY

    def test_disabled_categories_skipped(self):
        assert summarize([make_result("A", 40, is_enabled=False)]) == NO_HAZARDS_SUMMARY

    def test_groups_sorted_with_top_three(self):
        results = [
            make_result("TURB", 40, "Weather/Environment", "Turbulence Encounter"),
            make_result("WSTRW", 60, "Weather/Environment", "Wind Shear / Wind Gust"),
            make_result("ICE", 30, "Weather/Environment", "Icing / Frost"),
            make_result("F-NI", 50, "Fire/Smoke", "Fire / Smoke - Non-Impact"),
            make_result("A", 10, "Other", "A"),
            make_result("B", 20, "Other", "B"),
            make_result("C", 30, "Other", "C"),
            make_result("D", 40, "Other", "D"),
        ]

        assert summarize(results) == (
            "Fire/Smoke hazards identified (Fire / Smoke - Non-Impact): 50/100 risk score; "
            "Other hazards identified (D, C, B): 30/100 risk score; "
            "Weather/Environment hazards identified "
            "(Wind Shear / Wind Gust, Turbulence Encounter, Icing / Frost): 43/100 risk score."
        )

    def test_ties_keep_input_order(self):
        results = [
            make_result("X", 30, "G", "First"),
            make_result("Y", 30, "G", "Second"),
            make_result("Z", 30, "G", "Third"),
            make_result("W", 30, "G", "Fourth"),
        ]
        assert summarize(results) == "G hazards identified (First, Second, Third): 30/100 risk score."

    def test_average_rounds_half_up(self):
        results = [make_result("X", 30, "G", "X"), make_result("Y", 31, "G", "Y")]
        assert summarize(results).endswith(": 31/100 risk score.")

    def test_top_n_override(self):
        results = [make_result("X", 30, "G", "X"), make_result("Y", 60, "G", "Y")]
        assert summarize(results, top_n=1) == "G hazards identified (Y): 60/100 risk score."
