"""
YAML i18n Service

Resolves dotted message keys (``errors.user.not_found``) against nested
locale files in ``locales/<lang>.yaml``. Unknown keys resolve to the key itself.
"""

import os
from typing import Any, Dict, Optional

import yaml

from src.app.services.i18n_service import II18nService

LOCALES_PATH = os.path.join(os.path.dirname(__file__), "locales")


class YamlI18nService(II18nService):
    def __init__(self, default_language: str = "en", locales_path: str = LOCALES_PATH):
        self.default_language = default_language
        self.translations: Dict[str, Dict[str, Any]] = {}

        for file_name in sorted(os.listdir(locales_path)):
            language, extension = os.path.splitext(file_name)
            if extension not in (".yaml", ".yml"):
                continue
            with open(os.path.join(locales_path, file_name), "r", encoding="utf-8") as r_file:
                self.translations[language] = yaml.safe_load(r_file) or {}

    def translate(self, key: str, lang: Optional[str] = None, **params: Any) -> str:
        template = self._lookup(key, lang or self.default_language)
        if template is None and lang and lang != self.default_language:
            template = self._lookup(key, self.default_language)
        if template is None:
            return key
        try:
            return template.format(**params)
        except (KeyError, IndexError):
            return template

    def exists(self, key: str, lang: Optional[str] = None) -> bool:
        return self._lookup(key, lang or self.default_language) is not None

    def _lookup(self, key: str, lang: str) -> Optional[str]:
        node: Any = self.translations.get(lang)
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None
