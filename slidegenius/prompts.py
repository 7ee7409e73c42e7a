"""Prompt builders for outline synthesis and slide rendering."""

from __future__ import annotations

from typing import Union

from .models import GenerationParameters, SlideOutlineEntry, VisualStyle

STYLE_INSTRUCTIONS = {
    VisualStyle.MODERN_MINIMAL: (
        "Style: Minimalist, plenty of white space, sans-serif typography, "
        "soft pastel accents. Professional and airy."
    ),
    VisualStyle.BUSINESS_TECH: (
        "Style: Fortune 500 business style. Navy blues, greys, structured layouts, "
        "official look, subtle grid lines."
    ),
    VisualStyle.CREATIVE_ART: (
        "Style: Bold colors, artistic shapes, dynamic composition. High energy."
    ),
    VisualStyle.DARK_MODE: (
        "Style: Dark background (slate/black), bright neon or white text, sleek and modern."
    ),
    VisualStyle.NATURAL_FRESH: (
        "Style: Organic shapes, green and earth tones, soft lighting."
    ),
}
DEFAULT_STYLE_INSTRUCTION = "Style: High-quality professional presentation."


def style_instruction(style: Union[VisualStyle, str, None]) -> str:
    """Map a style tag to its rendering directive; unknown tags get the default."""

    try:
        key = VisualStyle(style)
    except ValueError:
        return DEFAULT_STYLE_INSTRUCTION
    return STYLE_INSTRUCTIONS.get(key, DEFAULT_STYLE_INSTRUCTION)


def build_outline_prompt(
    parameters: GenerationParameters,
    *,
    text: str,
    article_mode: bool,
    max_article_chars: int,
) -> str:
    count = parameters.slide_count
    language = parameters.language.value
    sections = [
        "You are an expert presentation designer.",
        f"Role: Create a structured outline for a {count}-slide presentation.",
        "",
        f"Audience Level: {parameters.level.value}",
        f"Language: {language} (CRITICAL: The JSON content, title, and body MUST be in {language})",
        "",
        "Output Rules:",
        f"1. Create exactly {count} slides.",
        "2. Slide 1 must be a Title Slide.",
        "3. The final slide must be a Conclusion/Summary.",
        "4. Return the output strictly as a JSON array of objects.",
        "",
        "JSON Format:",
        "[",
        "  {",
        f'    "title": "Slide Title (In {language})",',
        f'    "content": "Key bullet points for the slide text (max 30 words, In {language})",',
        '    "visualDescription": "Detailed prompt for an AI image generator to create this '
        "slide background and layout. Include placement of text placeholders. "
        f'{style_instruction(parameters.style)}"',
        "  }",
        "]",
        "",
    ]

    if article_mode:
        sections.append(
            "Analyze the provided content (text and/or attached document) to create the deck."
        )
        if text:
            sections.extend(["", "CONTENT TO ANALYZE:", f'"{text[:max_article_chars]}"'])
    else:
        sections.extend(
            [
                f'Task: Research the topic: "{text}" and create the deck.',
                "**Use Google Search to find accurate facts.**",
            ]
        )

    return "\n".join(sections)


def build_slide_prompt(entry: SlideOutlineEntry) -> str:
    sections = [
        "Create a high-quality 16:9 presentation slide image.",
        "",
        "TEXT ON SLIDE (Render this text clearly):",
        f"HEADLINE: {entry.title}",
        f"BODY COPY: {entry.content}",
        "",
        "DESIGN INSTRUCTIONS:",
        entry.visual_description,
        "",
        "CRITICAL:",
        "- The image MUST contain the text provided above.",
        "- The text must be legible, large, and professional.",
        "- Use a 16:9 aspect ratio layout.",
        "- Do not include messy or gibberish text.",
    ]
    return "\n".join(sections)
