"""
Placeholder tokens of the form {{Field Name}}.

Only a non-empty name without braces counts as a field; any other
double-brace text is left alone as prose.
"""
from __future__ import annotations

import logging
import re


logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


def placeholder_token(field_name: str) -> str:
    return "{{" + field_name + "}}"


def not_provided_marker(field_name: str) -> str:
    return f"[{field_name} - Not Provided]"


def extract_fields_needing_input(content: str) -> list[str]:
    """Distinct field names in order of first appearance."""
    seen: set[str] = set()
    fields: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(content or ""):
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)
        fields.append(name)
    return fields


def replace_placeholder(content: str, field_name: str, value: str) -> tuple[str, bool]:
    """Replace every literal {{field_name}} with ``value``; report whether anything changed."""
    token = placeholder_token(field_name)
    if token not in content:
        logger.warning("No replacement occurred for field: %s (pattern %s)", field_name, token)
        return content, False
    return content.replace(token, value), True
