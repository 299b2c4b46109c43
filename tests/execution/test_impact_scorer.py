"""Tests for cascading impact scoring."""

from execution.dependency_resolver import build_dependency_map
from execution.feature_catalog import FeatureCatalog
from execution.impact_scorer import EMPTY_IMPACT, ImpactScore, compute_impact_scores


class TestComputeImpactScores:
    def test_two_feature_chain(self):
        catalog = FeatureCatalog.from_dict({
            "mod": [
                {"name": "X", "category": "x", "description": "", "depends_on": ["Y"]},
                {"name": "Y", "category": "x", "description": ""},
            ],
        })
        scores = compute_impact_scores(catalog, set())
        assert scores["mod::Y"].direct_unblocks == 1
        assert scores["mod::Y"].transitive_unblocks >= 1
        assert scores["mod::Y"].direct_dependents == ("mod::X",)
        assert scores["mod::X"] == ImpactScore()

    def test_cascade_from_root(self, sample_catalog):
        score = compute_impact_scores(sample_catalog, set())["core::Base"]
        # Mover unlocks first, which in turn completes Sprint's requirements
        assert score.direct_unblocks == 2
        assert score.transitive_unblocks == 4
        assert score.score == 8

    def test_partial_requirements_do_not_unblock(self, sample_catalog):
        # Sprint also needs Base, so implementing Mover alone unlocks only Hitbox
        score = compute_impact_scores(sample_catalog, set())["core::Mover"]
        assert score.direct_dependents == ("combat::Hitbox",)
        assert score.score == 3

    def test_respects_implemented_set(self, sample_catalog):
        scores = compute_impact_scores(sample_catalog, {"core::Base"})
        assert "core::Base" not in scores
        assert scores["core::Mover"].direct_unblocks == 2
        assert scores["core::Mover"].transitive_unblocks == 3
        assert scores["core::Mover"].score == 7
        assert scores["combat::Hitbox"].score == 3

    def test_score_formula(self, sample_catalog):
        for score in compute_impact_scores(sample_catalog, set()).values():
            assert score.score == 2 * score.direct_unblocks + score.transitive_unblocks
            assert score.direct_unblocks <= score.transitive_unblocks

    def test_accepts_precomputed_map(self, sample_catalog):
        dep_map = build_dependency_map(sample_catalog)
        assert (compute_impact_scores(sample_catalog, set(), dep_map)
                == compute_impact_scores(sample_catalog, set()))

    def test_cycle_terminates(self, cyclic_catalog):
        scores = compute_impact_scores(cyclic_catalog, set())
        assert scores["mod::A"].direct_dependents == ("mod::B",)
        assert scores["mod::C"] == EMPTY_IMPACT
