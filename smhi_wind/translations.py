"""
Translation catalogues (en/sv) loaded from the bundled YAML files
"""

import logging
from pathlib import Path
from typing import Dict

import yaml

TRANSLATIONS_DIR = Path(__file__).parent / "locales"
FALLBACK_LANGUAGE = "en"


def load_catalogue(language: str) -> Dict[str, str]:
    path = TRANSLATIONS_DIR / f"{language}.yaml"
    if not path.exists():
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


class Translator:
    """Looks keys up in the chosen language, then English, then returns the key"""

    def __init__(self, language: str = FALLBACK_LANGUAGE):
        self.language = language
        self.fallback = load_catalogue(FALLBACK_LANGUAGE)
        if language == FALLBACK_LANGUAGE:
            self.catalogue = self.fallback
        else:
            self.catalogue = load_catalogue(language)
            if not self.catalogue:
                logging.warning(f"No translations for language '{language}', using English")

    def translate(self, key: str) -> str:
        return self.catalogue.get(key) or self.fallback.get(key) or key

    __call__ = translate
