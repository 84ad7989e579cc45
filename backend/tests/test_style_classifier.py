"""
ArtCritic Backend — Style Classifier Unit Tests
================================================

What:  classify_style() priority order and extract_style_from_narrative()
       pattern table / keyword fallback.
How:   Pure functions, no fixtures needed.
"""

import re

import pytest

from artcritic.services.style_classifier import (
    FALLBACK_STYLE,
    STYLE_TAXONOMY,
    StyleClassifier,
    classify_style,
    extract_style_from_narrative,
)


class TestClassifyStyle:
    """Exact → substring → token → fallback."""

    @pytest.mark.parametrize("style", STYLE_TAXONOMY)
    def test_taxonomy_entries_map_to_themselves(self, style):
        assert classify_style(style) == style

    def test_case_and_whitespace_insensitive(self):
        assert classify_style("  Oil Painting ") == "oil painting"
        assert classify_style("Oil Painting") == classify_style("oil painting")

    def test_substring_match(self):
        assert classify_style("a loose watercolor study") == "watercolor"

    def test_substring_uses_taxonomy_order(self):
        # "ink" (traditional media) is enumerated before "drawing" (techniques)
        assert classify_style("ink drawing") == "ink"
        assert classify_style("oil painting with ink accents") == "oil painting"

    def test_unknown_style_falls_back(self):
        assert classify_style("blurry photograph") == FALLBACK_STYLE

    def test_empty_and_none_fall_back(self):
        assert classify_style("") == FALLBACK_STYLE
        assert classify_style("   ") == FALLBACK_STYLE
        assert classify_style(None) == FALLBACK_STYLE

    def test_result_is_always_in_taxonomy(self):
        for candidate in ["", "cubist collage", "Digital Painting of a dragon", "???"]:
            assert classify_style(candidate) in STYLE_TAXONOMY

    def test_injected_taxonomy_order_decides(self):
        classifier = StyleClassifier(taxonomy=("ink", "gouache"), patterns=())
        assert classifier.classify("quick gouache and ink notes") == "ink"
        assert classifier.classify("pastel") == "mixed media"


class TestExtractStyleFromNarrative:

    def test_this_is_a_pattern(self):
        text = "This is a watercolor piece with loose brushwork"
        assert extract_style_from_narrative(text) == "watercolor"

    def test_artwork_employs_pattern(self):
        assert extract_style_from_narrative("The artwork employs charcoal, with smudged tones.") == "charcoal"

    def test_follows_style_pattern(self):
        assert extract_style_from_narrative("This work follows the impressionism style") == "impressionism"

    def test_first_pattern_in_table_wins(self):
        # Both "style is" (first entry) and "this is a" (second entry) match
        text = "This is a portrait. Its style is surrealism."
        assert extract_style_from_narrative(text) == "surrealism"

    def test_keyword_fallback(self):
        assert extract_style_from_narrative("Lots of loose sketch marks throughout") == "sketch"

    def test_no_match_returns_fallback(self):
        assert extract_style_from_narrative("Bold and energetic.") == FALLBACK_STYLE
        assert extract_style_from_narrative("") == FALLBACK_STYLE
        assert extract_style_from_narrative(None) == FALLBACK_STYLE

    def test_custom_pattern_table(self):
        classifier = StyleClassifier(
            patterns=((re.compile(r"rendered as (\w+ \w+)", re.I), lambda m: m.group(1)),),
        )
        assert classifier.extract_from_narrative("Rendered as pixel art, very crisp") == "pixel art"
