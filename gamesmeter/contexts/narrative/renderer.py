"""
Narrative rendering.

Turns structured insight results into localized text. Each language has a
labels.yaml phrasebook (loaded with OmegaConf) and a set of Jinja2 templates
under templates/<lang>/. The insights themselves never carry wording; this
module is the only place where text is produced.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound
from omegaconf import OmegaConf

from gamesmeter.contexts.narrative.exceptions import UnsupportedLanguageError

load_dotenv()
TEMPLATES_PATH = Path(__file__).parent / "templates"
SUPPORTED_LANGUAGES = ("en", "nl")
DEFAULT_LANGUAGE = os.getenv("GAMESMETER_LANG", "en")
FALLBACK_LANGUAGE = "en"

PROFILE_PARTS = ("title", "subtitle", "lead", "description")


def _load_labels(lang: str, templates_path: Path) -> Dict[str, Any]:
    return OmegaConf.to_container(OmegaConf.load(templates_path / lang / "labels.yaml"), resolve=True)


class NarrativeRenderer:
    """
    Loads and caches the templates and phrasebook of one language.

    Templates are stored in templates/<lang>/<name>.txt.jinja and rendered with
    StrictUndefined so a missing variable fails loudly instead of printing blank.
    """

    def __init__(self, lang: str = DEFAULT_LANGUAGE, templates_path: Path = None):
        """
        Args:
            lang: Language code ("en" or "nl")
            templates_path: Base path for language directories (defaults to the bundled templates)

        Raises:
            UnsupportedLanguageError: If lang has no templates
        """
        if lang not in SUPPORTED_LANGUAGES:
            raise UnsupportedLanguageError(lang, SUPPORTED_LANGUAGES)

        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.lang = lang
        self.templates_path = templates_path
        self.labels = _load_labels(lang, templates_path)
        self._fallback_labels = (
            self.labels if lang == FALLBACK_LANGUAGE else _load_labels(FALLBACK_LANGUAGE, templates_path)
        )
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(templates_path / lang)),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["rating"] = self.format_rating

    # =========================================================================
    # LABELS AND FORMATTING
    # =========================================================================

    def label(self, key: str) -> str:
        """
        Look up a dotted phrasebook key (e.g., "trend.up", "label.platform_unknown").

        Falls back to English, then to the key itself.
        """
        for labels in (self.labels, self._fallback_labels):
            value: Any = labels
            for part in key.split("."):
                if not isinstance(value, dict) or part not in value:
                    value = None
                    break
                value = value[part]
            if isinstance(value, str):
                return value
        return key

    def format_rating(self, value: float) -> str:
        """Two decimals with the language's decimal separator."""
        separator = self.label("format.decimal_separator")
        return f"{value:.2f}".replace(".", separator)

    @property
    def unknown_platform_label(self) -> str:
        return self.label("label.platform_unknown")

    # =========================================================================
    # TEMPLATES
    # =========================================================================

    def get_template(self, name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Raises:
            TemplateNotFound: If template file doesn't exist
        """
        if name in self._cache:
            return self._cache[name]

        template_file = f"{name}.txt.jinja"
        try:
            template = self.env.get_template(template_file)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template '{name}' not found at {self.templates_path / self.lang / template_file}"
            ) from e

        self._cache[name] = template
        return template

    def render_line(self, name: str, **context) -> str:
        """Render a template and collapse its whitespace into one line."""
        return " ".join(self.get_template(name).render(**context).split())

    def render_lines(self, name: str, **context) -> List[str]:
        """Render a template and return its non-blank lines."""
        rendered = self.get_template(name).render(**context)
        return [line.strip() for line in rendered.splitlines() if line.strip()]

    def clear_cache(self):
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache

    # =========================================================================
    # INSIGHT WORDING
    # =========================================================================

    def render_trend_summary(self, trend) -> str:
        """Sentence for a TrendInsight (looked up from its summary key)."""
        return self.label(trend.summary)

    def write_gamer_profile(self, facts) -> Dict[str, Any]:
        """
        Write the profile text for ProfileFacts.

        Args:
            facts: ProfileFacts from classify_profile()

        Returns:
            Dict with title, subtitle, lead, description (str) and traits (list of str)
        """
        direction = getattr(facts.trend_direction, "value", facts.trend_direction)
        na = self.label("label.na")
        context = {
            "facts": facts,
            "labels": self.labels,
            "trend_note": self.label(f"trend_note.{direction}"),
            "top_platforms": ", ".join(facts.top_platforms),
            "top_platform_short": (
                facts.top_platforms[0] if facts.top_platforms else self.label("label.varied_systems")
            ),
            "first_year": facts.first_year if facts.first_year is not None else na,
            "last_year": facts.last_year if facts.last_year is not None else na,
        }

        text: Dict[str, Any] = {
            part: self.render_line(f"profile_{part}", **context) for part in PROFILE_PARTS
        }
        text["traits"] = self.render_lines("profile_traits", **context)
        return text


@lru_cache(maxsize=None)
def get_renderer(lang: Optional[str] = None) -> NarrativeRenderer:
    """Shared renderer per language (templates are read once per process)."""
    return NarrativeRenderer(lang or DEFAULT_LANGUAGE)
