"""Custom exceptions for the narrative context."""

from typing import Sequence


class UnsupportedLanguageError(ValueError):
    """
    Raised when narrative text is requested in a language without templates.

    Attributes:
        lang: The requested language code
        supported: Language codes that do have templates
    """

    def __init__(self, lang: str, supported: Sequence[str]):
        self.lang = lang
        self.supported = tuple(supported)
        super().__init__(f"Unsupported language '{lang}'. Available languages: {list(self.supported)}")
