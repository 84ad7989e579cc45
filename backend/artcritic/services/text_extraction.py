"""
ArtCritic Backend — Text Extraction Engine
===========================================

What:  Turns the model's free-text critique into structured pieces:
       - parse_sections():             the six labelled critique sections
       - split_improvements():         the numbered improvement list
       - extract_suggestions():        up to 5 actionable sentences
       - extract_learning_resources(): up to 4 catalog resources
Why:   The vision model is asked for a structure but guarantees none; every
       function here is total and falls back to an empty value instead of
       raising.
How:   Ordered regex tables, evaluated first-match-wins.

Section grammar:
    A header is tried in its strict form first: at the start of a line,
    optionally numbered ("2."), bulleted, or "#"-prefixed, optionally bold,
    and followed by ":", "**" or the end of the line. Only if no strict header
    exists is the in-line form ("... **Color Theory**: ...") accepted.
    A section body ends at the next bold heading, "#" heading, known section
    header, or the end of the text. Prose that merely mentions a section name
    ("the color theory is weak") is never treated as a header.
"""

import logging
import re
from re import Pattern
from typing import List, Optional, Tuple, Union

from artcritic.schemas.analysis import AnalysisCategory, LearningResource, ParsedSections
from artcritic.services.resource_recommender import ResourceRecommender, resource_recommender

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
MAX_LEARNING_RESOURCES = 4


# ══════════════════════════════════════════════════════════════════════════
# Suggestions
# ══════════════════════════════════════════════════════════════════════════

# Tiers are tried in order; a later tier only runs if the earlier found nothing
SUGGESTION_TIERS: Tuple[Pattern, ...] = (
    re.compile(r"suggest|recommend|try|consider|improve|practice", re.I),
    re.compile(r"improvement|better|enhance", re.I),
)

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_LEADING_BULLET = re.compile(r"^[-*•](?!\*)")
# A bold label with nothing after it, e.g. "**Specific Improvements**: 1."
_BOLD_LABEL_ONLY = re.compile(r"^(?:\d+[.)]\s*)?\*\*[^*]+\*\*\s*:?\s*(?:\d+[.)])?$")


def _is_heading(segment: str) -> bool:
    return segment.startswith("#") or bool(_BOLD_LABEL_ONLY.match(segment))


def _candidate_segments(feedback_text: str) -> List[str]:
    """Lines of the critique, each further split into sentences."""
    segments: List[str] = []
    for line in feedback_text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        for sentence in _SENTENCE_BREAK.split(line):
            sentence = sentence.strip()
            if sentence and not _is_heading(sentence):
                segments.append(sentence)
    return segments


def extract_suggestions(feedback_text: Optional[str]) -> List[str]:
    """
    Pull actionable suggestions out of a critique.

    Keeps every sentence containing an indicator word (suggest, recommend,
    try, consider, improve, practice), with one leading bullet stripped. If
    none are found, retries with the broader tier (improvement, better,
    enhance). Returns at most 5, in text order.

    Example:
        "The color theory is weak. I suggest using a warmer palette.
         Consider studying complementary colors."
        → ["I suggest using a warmer palette.",
           "Consider studying complementary colors."]
    """
    if not feedback_text:
        return []

    segments = _candidate_segments(feedback_text)
    for tier, indicator in enumerate(SUGGESTION_TIERS):
        found = [
            _LEADING_BULLET.sub("", segment, count=1).strip()
            for segment in segments
            if indicator.search(segment)
        ]
        found = [item for item in found if item]
        if found:
            if tier:
                logger.debug("No direct suggestions found; used fallback tier %d", tier)
            return found[:MAX_SUGGESTIONS]

    return []


# ══════════════════════════════════════════════════════════════════════════
# Learning Resources
# ══════════════════════════════════════════════════════════════════════════


def extract_learning_resources(
    feedback_text: Optional[str],
    category: Union[AnalysisCategory, str],
    recommender: Optional[ResourceRecommender] = None,
) -> List[LearningResource]:
    """Seeded-by-category, keyword-augmented resource list, at most 4 entries."""
    recommender = recommender or resource_recommender
    resources = recommender.recommend(AnalysisCategory(category), feedback_text or "")
    return resources[:MAX_LEARNING_RESOURCES]


# ══════════════════════════════════════════════════════════════════════════
# Sections
# ══════════════════════════════════════════════════════════════════════════

# (field, header title regex) in the order the system prompt asks for them
SECTION_TITLES: Tuple[Tuple[str, str], ...] = (
    ("technical", r"Technical\s+Assessment"),
    ("composition", r"Compositional\s+Analysis"),
    ("color", r"Colou?r\s+Theory"),
    ("style", r"Style\s*(?:&|and)\s*Context"),
    ("improvements", r"Specific\s+Improvements"),
    ("learning_resources", r"Learning\s+Resources"),
)


def _strict_header(title: str) -> Pattern:
    return re.compile(
        r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\d+[.)][ \t]*)?(?:[-*•][ \t]+)?\**[ \t]*"
        r"(?:" + title + r")"
        r"(?:[ \t]*\*\*[ \t]*:?|[ \t]*:[ \t]*\*\*|[ \t]*:|[ \t]*$)",
        re.I | re.M,
    )


def _inline_header(title: str) -> Pattern:
    return re.compile(
        r"(?:" + title + r")(?:\*\*[ \t]*:?|[ \t]*:[ \t]*(?:\*\*)?)",
        re.I,
    )


SECTION_HEADERS: Tuple[Tuple[str, Pattern, Pattern], ...] = tuple(
    (field, _strict_header(title), _inline_header(title)) for field, title in SECTION_TITLES
)

SECTION_END = re.compile(
    # Bold heading starting a line, possibly numbered or bulleted
    r"^[ \t]*(?:\d+[.)][ \t]*)?(?:[-*•][ \t]+)?\*\*[^*\n]+(?:\*\*[ \t]*:|:[ \t]*\*\*|\*\*[ \t]*$)"
    # Bold heading in the middle of a line
    r"|\*\*[^*\n]+(?:\*\*[ \t]*:|:[ \t]*\*\*)"
    # Markdown heading
    r"|^[ \t]*#{1,6}[ \t]",
    re.M,
)
_ANY_SECTION_HEADER = _strict_header("|".join(title for _, title in SECTION_TITLES))
_DANGLING_NUMBER = re.compile(r"\s*\d+[.)]\s*$")


def _section_body(text: str, start: int) -> str:
    end = len(text)
    for terminator in (SECTION_END, _ANY_SECTION_HEADER):
        match = terminator.search(text, start)
        if match and match.start() < end:
            end = match.start()
    body = text[start:end].strip()
    if end < len(text) and text[end - 1] != "\n":
        # "...text 2." left behind when the next heading is numbered on the same line
        body = _DANGLING_NUMBER.sub("", body).strip()
    return body


def parse_sections(feedback_text: Optional[str]) -> ParsedSections:
    """
    Split a critique into its six labelled sections.

    A section that cannot be found is returned as "" rather than raising.
    """
    if not feedback_text:
        return ParsedSections()

    parsed = {}
    for field, strict, inline in SECTION_HEADERS:
        header = strict.search(feedback_text) or inline.search(feedback_text)
        parsed[field] = _section_body(feedback_text, header.end()) if header else ""

    missing = [field for field, body in parsed.items() if not body]
    if missing:
        logger.debug("Critique is missing sections: %s", ", ".join(missing))
    return ParsedSections(**parsed)


_LIST_NUMBER = re.compile(r"\d+\.")


def split_improvements(section_text: Optional[str]) -> List[str]:
    """Split a numbered improvements section into its items, dropping empty fragments."""
    if not section_text:
        return []
    return [item.strip() for item in _LIST_NUMBER.split(section_text) if item.strip()]
