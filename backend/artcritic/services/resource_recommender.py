"""
ArtCritic Backend — Resource Recommender
=========================================

What:  Picks up to four learning resources for a critique.
How:   Content-based and rule-driven, never learned:
       1. Seed list for the analysis category
       2. Padded with the general seeds when shorter than three (non-general only)
       3. One extra resource per keyword rule that fires on the critique text
       4. Deduplicated by title, truncated to the catalog cap
Why:   Same text + same category always yields the same list, which keeps the
       output auditable and trivially testable.
"""

import logging
from typing import List, Optional

from artcritic.schemas.analysis import AnalysisCategory, LearningResource
from artcritic.services.resource_catalog import ResourceCatalog, default_catalog

logger = logging.getLogger(__name__)


class ResourceRecommender:
    """Stateless apart from the injected, immutable catalog."""

    def __init__(self, catalog: Optional[ResourceCatalog] = None):
        self.catalog = catalog or default_catalog

    def recommend(self, category: AnalysisCategory, feedback_text: str) -> List[LearningResource]:
        catalog = self.catalog
        resources: List[LearningResource] = list(catalog.seeds_for(category))

        if len(resources) < catalog.min_seeded and category != catalog.fallback:
            resources.extend(catalog.seeds_for(catalog.fallback))

        # Rules are independent; any subset may fire
        text = (feedback_text or "").lower()
        fired = []
        for rule in catalog.keyword_rules:
            if rule.matches(text):
                resources.append(rule.resource)
                fired.append(rule.name)

        unique: List[LearningResource] = []
        seen_titles = set()
        for resource in resources:
            if resource.title in seen_titles:
                continue
            seen_titles.add(resource.title)
            unique.append(resource)

        logger.debug(
            "Recommended %d resources for category=%s (keyword rules fired: %s)",
            min(len(unique), catalog.max_resources),
            category.value,
            ", ".join(fired) or "none",
        )
        return unique[: catalog.max_resources]


resource_recommender = ResourceRecommender()
