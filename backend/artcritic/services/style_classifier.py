"""
ArtCritic Backend — Style Classifier
=====================================

What:  Normalizes free-text style descriptions onto a fixed taxonomy of art
       styles, media and techniques.
Why:   The model describes style in prose ("a loose watercolor study with ink
       accents"); storage, filtering and resource selection need one canonical
       label instead.
How:   Two entry points:
       - classify_style(): exact → substring → token → "mixed media"
       - extract_style_from_narrative(): ordered narrative pattern table,
         then a keyword scan, each result passed through classify_style()
Who:   Called by the analysis service on the "Style & Context" section.

The classifier is total: any input yields a taxonomy member.
"""

import re
from re import Match, Pattern
from typing import Callable, Optional, Sequence, Tuple

# ══════════════════════════════════════════════════════════════════════════
# Style Taxonomy
# ══════════════════════════════════════════════════════════════════════════
# Enumeration order is part of the contract: substring and token matching
# return the FIRST entry in this order.

TRADITIONAL_MEDIA: Tuple[str, ...] = (
    "oil painting", "watercolor", "acrylic", "pastel", "charcoal", "pencil", "ink",
)
DIGITAL_MEDIA: Tuple[str, ...] = (
    "digital art", "digital painting", "concept art", "illustration", "pixel art",
)
ART_MOVEMENTS: Tuple[str, ...] = (
    "impressionism", "expressionism", "realism", "surrealism", "abstract", "minimalism",
    "pop art", "contemporary", "modern",
)
TECHNIQUES: Tuple[str, ...] = (
    "sketch", "drawing", "portrait", "landscape", "still life", "figure drawing",
)
CATCH_ALL: Tuple[str, ...] = (
    "mixed media", "experimental", "traditional", "stylized",
)

STYLE_TAXONOMY: Tuple[str, ...] = (
    TRADITIONAL_MEDIA + DIGITAL_MEDIA + ART_MOVEMENTS + TECHNIQUES + CATCH_ALL
)

FALLBACK_STYLE = "mixed media"


# ══════════════════════════════════════════════════════════════════════════
# Narrative Pattern Table
# ══════════════════════════════════════════════════════════════════════════

StyleHandler = Callable[[Match], str]


def _last_group(match: Match) -> str:
    """The style phrase is always the last capture group of a narrative pattern."""
    return match.group(match.lastindex or 0).strip()


# (pattern, handler) pairs, evaluated in order; the first pattern that
# matches anywhere in the text wins.
NARRATIVE_PATTERNS: Tuple[Tuple[Pattern, StyleHandler], ...] = (
    # Direct identification
    (re.compile(r"(appears to be|identified as|style is|primarily|mainly) ([^,.]+)", re.I), _last_group),
    (re.compile(r"this (is|looks like|seems to be) (?:a|an) ([^,.]+)", re.I), _last_group),
    (re.compile(r"the (artwork|piece|work) (?:is|uses|employs) ([^,.]+)", re.I), _last_group),
    # Medium-focused
    (re.compile(r"(?:created|executed|done) (?:in|with|using) ([^,.]+)", re.I), _last_group),
    (re.compile(r"(?:a|an) ([^,.]+) (?:piece|artwork|drawing|painting)", re.I), _last_group),
    # Style-specific
    (re.compile(r"(?:follows|exemplifies|represents) the ([^,.]+) style", re.I), _last_group),
    (re.compile(r"characteristics of ([^,.]+) art", re.I), _last_group),
    # Technical approach
    (re.compile(r"techniques? (?:typical of|associated with) ([^,.]+)", re.I), _last_group),
    (re.compile(r"approach(?:es)? commonly found in ([^,.]+)", re.I), _last_group),
)

# Leftmost occurrence in the text wins, not position in this list
FALLBACK_KEYWORDS = re.compile(
    r"digital|traditional|painting|drawing|sketch|art|illustration|concept|realistic|abstract"
)


class StyleClassifier:
    """
    Maps style descriptions onto a fixed taxonomy.

    The taxonomy and pattern table are injected so tests (or a future
    locale-specific deployment) can supply their own; the defaults are the
    module-level constants above. Instances hold no mutable state.
    """

    def __init__(
        self,
        taxonomy: Sequence[str] = STYLE_TAXONOMY,
        patterns: Sequence[Tuple[Pattern, StyleHandler]] = NARRATIVE_PATTERNS,
        fallback: str = FALLBACK_STYLE,
    ):
        self.taxonomy: Tuple[str, ...] = tuple(taxonomy)
        self.patterns: Tuple[Tuple[Pattern, StyleHandler], ...] = tuple(patterns)
        self.fallback = fallback

    def classify(self, candidate: Optional[str]) -> str:
        """
        Normalize a style description to a canonical taxonomy entry.

        Priority (most specific first):
            1. Exact match after lower-casing and trimming
            2. First taxonomy entry contained in the candidate
            3. First whitespace token equal to a taxonomy entry
            4. The fallback ("mixed media")

        Examples:
            "Oil Painting"             → "oil painting"
            "loose watercolor study"   → "watercolor"
            "photograph"               → "mixed media"
        """
        normalized = (candidate or "").lower().strip()
        if not normalized:
            return self.fallback

        if normalized in self.taxonomy:
            return normalized

        for style in self.taxonomy:
            if style in normalized:
                return style

        # Single-word entries only can match here; multi-word entries were
        # already caught by the substring pass.
        for token in normalized.split():
            for style in self.taxonomy:
                if token == style:
                    return style

        return self.fallback

    def extract_from_narrative(self, text: Optional[str]) -> str:
        """
        Find the style named in a prose paragraph.

        Tries each narrative pattern in table order; the first one that
        matches anywhere decides. Falls back to the leftmost style keyword in
        the text, then to "mixed media".

        Example:
            "This is a watercolor piece with loose brushwork" → "watercolor"
        """
        if not text:
            return self.fallback

        for pattern, handler in self.patterns:
            match = pattern.search(text)
            if match:
                return self.classify(handler(match))

        keyword = FALLBACK_KEYWORDS.search(text.lower())
        if keyword:
            return self.classify(keyword.group(0))

        return self.fallback


# ── Default Instance ──────────────────────────────────────────────────────
style_classifier = StyleClassifier()


def classify_style(candidate: Optional[str]) -> str:
    return style_classifier.classify(candidate)


def extract_style_from_narrative(text: Optional[str]) -> str:
    return style_classifier.extract_from_narrative(text)
