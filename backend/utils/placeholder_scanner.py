"""
Placeholder Scanner

Detects bracketed placeholder tokens such as [HERO_TITLE] in template text,
classifies them (text / image URL / image alt), substitutes resolved values
and reports templates that still carry unresolved tokens.
"""
import re
from typing import Dict, List, Optional, Tuple


PLACEHOLDER_PATTERN = re.compile(r"\[([A-Z0-9_]+)\]")

# Image categories sent to the image model, matched by exact name
IMAGE_URL_PLACEHOLDERS = (
    'HERO_IMAGE_URL',
    'MENU_IMAGE_URL',
    'MENU_IMAGE_URL_1',
    'MENU_IMAGE_URL_2',
    'MENU_IMAGE_URL_3',
    'COFFEE_IMAGE_URL',
    'PRODUCT_IMAGE_URL',
    'SERVICE_IMAGE_URL',
    'TEAM_IMAGE_URL',
    'GALLERY_IMAGE_URL',
)

IMAGE_ALT_PATTERN = re.compile(r"^([A-Z0-9_]+?)_IMAGE_ALT(?:_(\d+))?$")


def scan_placeholders(template: str) -> List[str]:
    """Return distinct placeholder names (no brackets) in order of first appearance."""
    if not template:
        return []
    seen: Dict[str, None] = {}
    for name in PLACEHOLDER_PATTERN.findall(template):
        seen.setdefault(name, None)
    return list(seen)


def is_image_url_placeholder(name: str) -> bool:
    return name in IMAGE_URL_PLACEHOLDERS


def is_image_alt_placeholder(name: str) -> bool:
    return IMAGE_ALT_PATTERN.match(name) is not None


def image_alt_parts(name: str) -> Tuple[str, Optional[int]]:
    """Split HERO_IMAGE_ALT -> ('HERO', None) and MENU_IMAGE_ALT_2 -> ('MENU', 2)."""
    match = IMAGE_ALT_PATTERN.match(name)
    if not match:
        raise ValueError(f"Not an image alt placeholder: {name}")
    index = match.group(2)
    return match.group(1), int(index) if index else None


def split_placeholders(names: List[str]) -> Tuple[List[str], List[str], List[str]]:
    """Partition placeholder names into (text, image_url, image_alt)."""
    text, image_urls, image_alts = [], [], []
    for name in names:
        if is_image_url_placeholder(name):
            image_urls.append(name)
        elif is_image_alt_placeholder(name):
            image_alts.append(name)
        else:
            text.append(name)
    return text, image_urls, image_alts


def replace_placeholders(template: str, values: Dict[str, str]) -> str:
    """Replace every occurrence of each [NAME] found in values.

    Tokens without a value are kept as literal text. Substitution is a single
    pass, so brackets inside inserted values are never re-resolved.
    """
    if not template or not values:
        return template

    def _substitute(match: re.Match) -> str:
        value = values.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def validate_template(template: str) -> Dict[str, object]:
    """Check a (resolved) template for leftovers that would break the generated file."""
    errors: List[str] = []
    warnings: List[str] = []

    unreplaced = PLACEHOLDER_PATTERN.findall(template or '')
    if unreplaced:
        warnings.append("Unreplaced placeholders: " + ", ".join(f"[{name}]" for name in unreplaced))

    if '${undefined}' in (template or ''):
        errors.append('Template contains undefined variables')

    if '.tsx' in (template or ''):
        if 'import React' not in template:
            warnings.append('TSX file missing React import')
        if 'export default' not in template:
            errors.append('TSX file missing export default')

    return {
        'is_valid': not errors,
        'errors': errors,
        'warnings': warnings,
    }
