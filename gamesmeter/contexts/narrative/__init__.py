"""
Narrative Context

Responsibilities:
- Holds the per-language phrasebooks and Jinja2 templates
- Writes the gamer profile text from structured ProfileFacts
- Words the trend summary from its narrative key

Owns: All user-facing wording and number formatting
Never: Computes statistics or changes classification outcomes
"""

from gamesmeter.contexts.narrative.exceptions import UnsupportedLanguageError
from gamesmeter.contexts.narrative.renderer import (
    SUPPORTED_LANGUAGES,
    NarrativeRenderer,
    get_renderer,
)

__all__ = [
    "NarrativeRenderer",
    "get_renderer",
    "SUPPORTED_LANGUAGES",
    "UnsupportedLanguageError",
]
