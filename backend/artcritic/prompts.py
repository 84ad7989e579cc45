"""
ArtCritic Backend — Prompt Templates
=====================================

What:  The fixed persona (system instruction) and the per-category user
       instructions sent to the vision model.
Why:   The section names in SYSTEM_INSTRUCTION are exactly the headers that
       text_extraction.parse_sections() looks for; change them together.
"""

from typing import Dict, Optional

from artcritic.schemas.analysis import AnalysisCategory

SYSTEM_INSTRUCTION = """You are an expert art instructor and critic specializing in digital art, sketches, paintings, and realism.

Analyze the artwork and provide comprehensive feedback including:

1. **Technical Assessment**: Evaluate brushwork, line quality, rendering, shading, and technical execution
2. **Compositional Analysis**: Assess balance, focal points, visual flow, rule of thirds, and overall arrangement
3. **Color Theory**: Evaluate color harmony, contrast, saturation, temperature, and mood
4. **Style & Context**: Identify artistic style, influences, and historical context
5. **Specific Improvements**: Provide 3-5 actionable suggestions for improvement
6. **Learning Resources**: Mention specific techniques, exercises, or study areas

Be constructive, encouraging, and specific. Focus on helping the artist grow while acknowledging their strengths.
For digital art: Consider brush choices, layer usage, digital techniques
For sketches: Focus on line confidence, proportion, shading techniques
For paintings: Evaluate color mixing, brush techniques, medium usage
For realism: Assess accuracy, detail work, light and shadow"""

CATEGORY_PROMPTS: Dict[AnalysisCategory, str] = {
    AnalysisCategory.GENERAL: (
        "Provide a comprehensive analysis of this artwork. Cover technical execution, "
        "composition, color usage, style, and give specific suggestions for improvement. "
        "Be encouraging but constructive."
    ),
    AnalysisCategory.TECHNIQUE: (
        "Focus specifically on the technical execution of this artwork. Analyze brushwork, "
        "line quality, rendering techniques, and provide specific technical suggestions for improvement."
    ),
    AnalysisCategory.COMPOSITION: (
        "Analyze the composition of this artwork. Evaluate balance, focal points, visual flow, "
        "use of space, and suggest specific compositional improvements."
    ),
    AnalysisCategory.COLOR: (
        "Focus on the color usage in this artwork. Evaluate color harmony, contrast, temperature, "
        "mood, and suggest specific improvements in color theory application."
    ),
    AnalysisCategory.STYLE: (
        "Analyze the artistic style and provide guidance on developing and refining this "
        "particular style. Suggest artists to study and techniques to practice."
    ),
}


def build_user_instruction(
    category: AnalysisCategory,
    free_text_prompt: Optional[str] = None,
    language: str = "en",
    has_image: bool = True,
) -> str:
    """
    Category template plus the caller's own words and the reply language.

    Without an image the model critiques the described artwork instead.
    """
    parts = [CATEGORY_PROMPTS[category]]
    if not has_image:
        parts.append(
            "No image is attached; base the analysis on the artwork described by the user."
        )
    if free_text_prompt and free_text_prompt.strip():
        parts.append(
            f'User says: "{free_text_prompt.strip()}". Use this as context for your analysis.'
        )
    if language.lower() != "en":
        parts.append(
            f"Reply in language: {language.lower()} (ISO 639-1), keeping the section headings in English."
        )
    return "\n\n".join(parts)
