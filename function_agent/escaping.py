"""
function_agent/escaping.py

Escape codec for values baked into f-string prompt templates.

Braces are the only reserved characters of the template layer. A value is
encoded before it is written into template text and the prompt formatter
collapses the doubled braces again, so the model sees the original value.
"""

import re

_ESCAPED = re.compile(r"\{\{|\}\}")


def encode(value: str) -> str:
    """Double every brace so the formatter treats it as a literal."""
    return value.replace("{", "{{").replace("}", "}}")


def decode(value: str) -> str:
    """Inverse of `encode`: collapse doubled braces into single ones."""
    # One left-to-right pass, so '{{{{' becomes '{{' and not '{'.
    return _ESCAPED.sub(lambda m: m.group(0)[0], value)
