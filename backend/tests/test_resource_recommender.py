"""
ArtCritic Backend — Resource Recommender Unit Tests
====================================================

What:  Seed selection, general padding, keyword rules, dedup and the cap.
"""

import re
from dataclasses import FrozenInstanceError

import pytest

from artcritic.schemas.analysis import AnalysisCategory, LearningResource, ResourceKind
from artcritic.services.resource_catalog import (
    ANATOMY_RESOURCE,
    LIGHTING_RESOURCE,
    PERSPECTIVE_RESOURCE,
    KeywordRule,
    ResourceCatalog,
    default_catalog,
)
from artcritic.services.resource_recommender import ResourceRecommender

COLOR_SEED_TITLE = "Color Theory for Artists"
GENERAL_TITLES = [r.title for r in default_catalog.seeds_for(AnalysisCategory.GENERAL)]


@pytest.fixture
def recommender():
    return ResourceRecommender()


def titles(resources):
    return [r.title for r in resources]


class TestSeeds:

    def test_general_has_only_its_own_seeds(self, recommender):
        assert titles(recommender.recommend(AnalysisCategory.GENERAL, "")) == GENERAL_TITLES

    def test_short_seed_lists_padded_with_general(self, recommender):
        result = titles(recommender.recommend(AnalysisCategory.TECHNIQUE, ""))
        assert result == ["Digital Art Brush Techniques"] + GENERAL_TITLES

    def test_style_has_no_seeds_and_gets_general(self, recommender):
        assert titles(recommender.recommend(AnalysisCategory.STYLE, "")) == GENERAL_TITLES

    @pytest.mark.parametrize(
        "text",
        ["", "Nice work.", "shadow perspective anatomy depth light figure proportion"],
    )
    def test_color_always_includes_color_seed(self, recommender, text):
        assert COLOR_SEED_TITLE in titles(recommender.recommend(AnalysisCategory.COLOR, text))


class TestKeywordRules:

    @pytest.mark.parametrize("category", list(AnalysisCategory))
    def test_shadow_adds_lighting_resource(self, category):
        # Style has no seeds, so the lighting resource still fits under the cap
        recommender = ResourceRecommender()
        result = recommender.recommend(category, "The cast SHADOW is too soft.")
        if category in (AnalysisCategory.GENERAL, AnalysisCategory.STYLE):
            assert LIGHTING_RESOURCE in result
        else:
            # seed + two general seeds + lighting
            assert result[-1] == LIGHTING_RESOURCE

    def test_rules_fire_independently_in_fixed_order(self, recommender):
        result = recommender.recommend(AnalysisCategory.STYLE, "figure, then depth, then light")
        # two general seeds, then lighting before perspective (anatomy cut by the cap)
        assert result[2:] == [LIGHTING_RESOURCE, PERSPECTIVE_RESOURCE]

    def test_capped_at_four(self, recommender):
        result = recommender.recommend(
            AnalysisCategory.GENERAL, "shading, perspective and anatomy all need work"
        )
        assert len(result) == 4
        assert ANATOMY_RESOURCE not in result

    def test_deterministic(self, recommender):
        text = "Work on the perspective and the light."
        assert recommender.recommend(AnalysisCategory.COMPOSITION, text) == recommender.recommend(
            AnalysisCategory.COMPOSITION, text
        )


class TestCatalog:

    def test_duplicate_titles_removed(self):
        seed = LearningResource(kind=ResourceKind.BOOK, title="Shared", description="seed")
        catalog = ResourceCatalog(
            seeds={AnalysisCategory.GENERAL: (seed,)},
            keyword_rules=(
                KeywordRule("dup", re.compile("light"), LearningResource(
                    kind=ResourceKind.VIDEO, title="Shared", description="keyword copy",
                )),
            ),
        )
        result = ResourceRecommender(catalog).recommend(AnalysisCategory.GENERAL, "light")
        assert result == [seed]

    def test_default_catalog_is_immutable(self):
        with pytest.raises(FrozenInstanceError):
            default_catalog.max_resources = 10
        with pytest.raises(TypeError):
            default_catalog.seeds[AnalysisCategory.STYLE] = ()
