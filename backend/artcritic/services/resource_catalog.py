"""
ArtCritic Backend — Learning Resource Catalog
==============================================

What:  The static set of learning resources the recommender draws from:
       per-category seed lists plus keyword-triggered extras.
How:   Built once by build_default_catalog() into a frozen ResourceCatalog and
       injected into the ResourceRecommender. Seeds are exposed through a
       read-only mapping of tuples, so nothing can mutate the catalog at
       runtime.

Seed and keyword resources are disjoint by construction.
"""

import re
from dataclasses import dataclass
from re import Pattern
from types import MappingProxyType
from typing import Mapping, Tuple

from artcritic.schemas.analysis import (
    AnalysisCategory,
    DifficultyLevel,
    LearningResource,
    ResourceKind,
)


@dataclass(frozen=True)
class KeywordRule:
    """Appends `resource` when `pattern` matches anywhere in the critique."""

    name: str
    pattern: Pattern
    resource: LearningResource

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))


@dataclass(frozen=True)
class ResourceCatalog:
    """
    Immutable catalog of learning resources.

    Attributes:
        seeds:          category → ordered seed resources (may be missing)
        fallback:       category whose seeds pad out short seed lists
        keyword_rules:  evaluated in order; every matching rule contributes
        min_seeded:     seed lists shorter than this are padded with `fallback`
        max_resources:  hard cap on the recommended list
    """

    seeds: Mapping[AnalysisCategory, Tuple[LearningResource, ...]]
    keyword_rules: Tuple[KeywordRule, ...]
    fallback: AnalysisCategory = AnalysisCategory.GENERAL
    min_seeded: int = 3
    max_resources: int = 4

    def seeds_for(self, category: AnalysisCategory) -> Tuple[LearningResource, ...]:
        return self.seeds.get(category, ())


# ══════════════════════════════════════════════════════════════════════════
# Default Catalog
# ══════════════════════════════════════════════════════════════════════════

_GENERAL_SEEDS = (
    LearningResource(
        kind=ResourceKind.VIDEO,
        title="Fundamental Art Skills Every Artist Should Know",
        url="https://www.youtube.com/results?search_query=fundamental+art+skills+beginner",
        description="Learn basic drawing, composition, and color theory fundamentals",
        difficulty_level=DifficultyLevel.BEGINNER,
    ),
    LearningResource(
        kind=ResourceKind.BOOK,
        title="Drawing on the Right Side of the Brain by Betty Edwards",
        description="Classic guide to developing drawing skills and artistic perception",
        difficulty_level=DifficultyLevel.BEGINNER,
    ),
)

_TECHNIQUE_SEEDS = (
    LearningResource(
        kind=ResourceKind.VIDEO,
        title="Digital Art Brush Techniques",
        url="https://www.youtube.com/results?search_query=digital+art+brush+techniques",
        description="Master different brush strokes and digital painting techniques",
        difficulty_level=DifficultyLevel.INTERMEDIATE,
    ),
)

_COMPOSITION_SEEDS = (
    LearningResource(
        kind=ResourceKind.VIDEO,
        title="Art Composition Rules and Guidelines",
        url="https://www.youtube.com/results?search_query=art+composition+rule+of+thirds",
        description="Understanding visual balance, focal points, and composition principles",
        difficulty_level=DifficultyLevel.INTERMEDIATE,
    ),
)

_COLOR_SEEDS = (
    LearningResource(
        kind=ResourceKind.VIDEO,
        title="Color Theory for Artists",
        url="https://www.youtube.com/results?search_query=color+theory+artists+tutorial",
        description="Learn color harmony, temperature, and mixing techniques",
        difficulty_level=DifficultyLevel.BEGINNER,
    ),
)

LIGHTING_RESOURCE = LearningResource(
    kind=ResourceKind.VIDEO,
    title="Light and Shadow in Art",
    url="https://www.youtube.com/results?search_query=art+light+shadow+tutorial",
    description="Master lighting techniques and shadow rendering",
    difficulty_level=DifficultyLevel.INTERMEDIATE,
)

PERSPECTIVE_RESOURCE = LearningResource(
    kind=ResourceKind.TUTORIAL,
    title="Perspective Drawing Tutorial",
    url="https://www.drawabox.com/",
    description="Learn one-point, two-point, and three-point perspective",
    difficulty_level=DifficultyLevel.INTERMEDIATE,
)

ANATOMY_RESOURCE = LearningResource(
    kind=ResourceKind.VIDEO,
    title="Figure Drawing and Anatomy",
    url="https://www.youtube.com/results?search_query=figure+drawing+anatomy+tutorial",
    description="Study human anatomy and proportional drawing",
    difficulty_level=DifficultyLevel.ADVANCED,
)


def build_default_catalog() -> ResourceCatalog:
    """Assemble the process-wide catalog. "style" deliberately has no seeds."""
    return ResourceCatalog(
        seeds=MappingProxyType({
            AnalysisCategory.GENERAL: _GENERAL_SEEDS,
            AnalysisCategory.TECHNIQUE: _TECHNIQUE_SEEDS,
            AnalysisCategory.COMPOSITION: _COMPOSITION_SEEDS,
            AnalysisCategory.COLOR: _COLOR_SEEDS,
        }),
        keyword_rules=(
            KeywordRule("lighting", re.compile(r"shading|shadow|light", re.I), LIGHTING_RESOURCE),
            KeywordRule("perspective", re.compile(r"perspective|depth|dimension", re.I), PERSPECTIVE_RESOURCE),
            KeywordRule("anatomy", re.compile(r"proportion|anatomy|figure", re.I), ANATOMY_RESOURCE),
        ),
    )


default_catalog = build_default_catalog()
