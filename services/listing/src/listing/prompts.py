"""Prompt templates for listing description generation."""

from __future__ import annotations

import re
from typing import List, Tuple

from .models import CategorizedFeatures, CustomizationOptions, OutputFormat

COPYWRITER_SYSTEM_PROMPT = (
    "You are a professional real estate copywriter who creates compelling property descriptions."
)

FEATURE_ANALYST_SYSTEM_PROMPT = (
    "You are a real estate analyst who turns raw image labels into a clean list of "
    "permanent property features."
)

FURNITURE_POLICY = """- NEVER describe specific furniture visible in staged photos (sofas, chairs, tables, decorations, etc.) - staging furniture is not included
- MAY mention furniture possibilities or how spaces could be used (e.g., "perfect for a dining table", "ideal for your favorite reading chair")
- Focus on permanent fixtures, finishes, architectural features, and built-in elements"""

HTML_FORMAT_REQUIREMENTS = """FORMAT REQUIREMENTS:
- Return the description formatted as HTML
- Use proper HTML structure with headings, paragraphs, and lists
- Structure should include:
  * An engaging opening paragraph with key highlights
  * Organized sections with <h3> headings for different areas (e.g., "Interior Features", "Outdoor Spaces", "Location Benefits")
  * Use <ul> and <li> tags for listing specific features within each section
  * Include a compelling closing paragraph with call to action
- Keep total content equivalent to 200-300 words when rendered
- Use semantic HTML tags only; no <html>, <body> or inline styles

Example structure:
<p>[Engaging opening paragraph with key highlights]</p>
<h3>Interior Features</h3>
<ul>
<li>[Feature with descriptive detail]</li>
<li>[Feature with lifestyle benefit]</li>
</ul>
<h3>Outdoor Spaces</h3>
<ul>
<li>[Outdoor feature description]</li>
</ul>
<h3>Location Benefits</h3>
<ul>
<li>[Location advantage]</li>
</ul>
<p>[Compelling closing with call to action]</p>"""

TEXT_FORMAT_REQUIREMENTS = """FORMAT REQUIREMENTS:
- Return plain text paragraphs only, with no markup, headings or bullet points
- Write 2-3 paragraphs, 150-250 words in total
- End with a call to action"""

_SECTION_TITLES = {
    "structural": "Layout and rooms",
    "interior": "Interior features",
    "exterior": "Exterior features",
    "materials": "Materials and finishes",
    "architectural": "Architectural details",
    "location": "Location and setting",
}


def _format_requirements(output_format: OutputFormat) -> str:
    if output_format is OutputFormat.HTML:
        return HTML_FORMAT_REQUIREMENTS
    return TEXT_FORMAT_REQUIREMENTS


def format_customization(options: CustomizationOptions) -> str:
    """Render the non-empty customization fields, one per line."""

    lines = []
    if options.property_type:
        lines.append(f"Property Type: {options.property_type}")
    if options.target_audience:
        lines.append(f"Target Audience: {options.target_audience}")
    if options.price_range:
        lines.append(f"Price Range: {options.price_range}")
    if options.marketing_style:
        lines.append(f"Marketing Style: {options.marketing_style}")
    return "\n".join(lines) if lines else "None specified"


def format_categorized(categorized: CategorizedFeatures) -> str:
    sections = []
    for bucket, items in categorized.buckets().items():
        if items:
            sections.append(f"{_SECTION_TITLES[bucket]}: {', '.join(items)}")
    return "\n".join(sections) if sections else "No categorized features"


def build_cloud_feature_prompt(
    categorized: CategorizedFeatures,
    raw_features: List[str],
    detected_text: str,
    options: CustomizationOptions,
) -> str:
    """Phase one for the cloud backend: curate vision labels into a feature list."""

    property_line = f"Property Type: {options.property_type}\n" if options.property_type else ""
    return f"""The following labels were detected by an image recognition service across a set of property photos.

CATEGORIZED LABELS:
{format_categorized(categorized)}

ALL LABELS:
{', '.join(raw_features) if raw_features else 'None'}

TEXT FOUND IN IMAGES:
{detected_text or 'None'}

{property_line}Produce a list of the property's permanent features suitable for a real estate listing:
- Merge duplicates and drop generic labels such as "property" or "real estate"
- Prefer specific phrasing (e.g. "hardwood flooring" instead of "wood")
- IMPORTANT: DO NOT include furniture or decorations from staged photos; list only permanent fixtures and architectural features

Respond with a single comma-separated list of features and nothing else."""


def build_local_feature_prompt(options: CustomizationOptions) -> str:
    """Phase one for the local vision model: list features seen in the images."""

    property_line = f"\nProperty Type: {options.property_type}\n" if options.property_type else ""
    return f"""Analyze these property images and list all visible features you can identify. Focus on:
- Architectural elements (windows, doors, columns, etc.)
- Materials (hardwood, brick, stone, tile, etc.)
- Room types and layouts
- Exterior features (roof, siding, landscaping, etc.)
- Interior finishes and fixtures
- Built-in elements and permanent installations
- Unique selling points

IMPORTANT: DO NOT include specific furniture visible in staged photos (sofas, chairs, tables, decorations, etc.) in your analysis. Focus only on permanent fixtures and architectural features.
{property_line}
Provide a comprehensive comma-separated list of features."""


def build_description_prompt(
    features: str,
    options: CustomizationOptions,
    detected_text: str = "",
    with_images: bool = False,
) -> str:
    """Phase two for either backend: write the listing from feature text."""

    source = "the following property features and the images provided" if with_images else "the following property features"
    text_section = f"\nTEXT FOUND IN IMAGES:\n{detected_text}\n" if detected_text else ""
    return f"""You are an expert real estate agent. Using {source}, create a compelling listing description.

PROPERTY FEATURES:
{features}
{text_section}
CUSTOMIZATION:
{format_customization(options)}

Create a compelling listing description that:
- Uses a warm, {options.marketing_style or 'professional'} real estate tone aimed at {options.target_audience or 'general buyers'}
- Weaves features naturally into descriptive sentences
- Highlights architectural details, interior and exterior highlights, and location advantages where evident
- Creates emotional appeal and lifestyle benefits
- Includes a call to action
- Sounds engaging, not robotic
{FURNITURE_POLICY}

{_format_requirements(options.output_format)}

Focus on making buyers excited about the property."""


_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*\n?|\n?```\s*$")
_LABEL_PATTERN = re.compile(r"^\s*(?:DESCRIPTION|FEATURES)\s*:\s*", re.IGNORECASE)
_BULLET_PATTERN = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s*")
_COMBINED_PATTERN = re.compile(
    r"^\s*FEATURES\s*:\s*(?P<features>.*?)\s*^\s*DESCRIPTION\s*:\s*(?P<description>.*)$",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
# Thousands separators such as "2,000 sq ft" stay intact.
_FEATURE_SEPARATOR = re.compile(r"(?<!\d),|,(?!\d)|\n")


def clean_generated_text(text: str) -> str:
    """Strip code fences and leading labels models like to add."""

    cleaned = (text or "").strip()
    cleaned = _FENCE_PATTERN.sub("", cleaned).strip()
    cleaned = _LABEL_PATTERN.sub("", cleaned, count=1)
    return cleaned.strip()


def split_combined_response(text: str) -> Tuple[str, str]:
    """Split a ``FEATURES: ... DESCRIPTION: ...`` reply into its two parts.

    Replies without both labels come back as ``("", text)``.
    """

    stripped = (text or "").strip()
    match = _COMBINED_PATTERN.search(stripped)
    if match is None:
        return "", stripped
    return match.group("features").strip(), match.group("description").strip()


def parse_feature_text(text: str) -> List[str]:
    """Split a comma or newline separated feature list into unique entries."""

    features: List[str] = []
    seen = set()
    for chunk in _FEATURE_SEPARATOR.split(clean_generated_text(text)):
        item = _BULLET_PATTERN.sub("", chunk).strip().strip(".").strip()
        key = item.lower()
        if item and key not in seen:
            seen.add(key)
            features.append(item)
    return features


__all__ = [
    "COPYWRITER_SYSTEM_PROMPT",
    "FEATURE_ANALYST_SYSTEM_PROMPT",
    "FURNITURE_POLICY",
    "build_cloud_feature_prompt",
    "build_description_prompt",
    "build_local_feature_prompt",
    "clean_generated_text",
    "format_categorized",
    "format_customization",
    "parse_feature_text",
    "split_combined_response",
]
