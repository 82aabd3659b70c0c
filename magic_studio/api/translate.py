"""
Translation Client
==================

Translates user prompts into the generation language before they are
composed into directives.
"""

import logging
from typing import Optional

from ..core.config import ApiConfig
from ..core.exceptions import ProviderError
from .base import ApiSession
from .gateway import ApiGateway

logger = logging.getLogger(__name__)


LANGUAGE_NAMES = {
    "en": "English",
    "vi": "Vietnamese",
}


class Translator:
    """Text translation through a low-temperature generateContent call."""

    def __init__(
        self,
        session: ApiSession,
        gateway: Optional[ApiGateway] = None,
        api_config: Optional[ApiConfig] = None,
        temperature: float = 0.1,
    ):
        self.session = session
        self.gateway = gateway or ApiGateway()
        self.api_config = api_config or ApiConfig(api_key=session.api_key)
        self.temperature = temperature

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate ``text`` between two languages.

        Args:
            text: Text to translate
            source_lang: Source language name (e.g. "Vietnamese")
            target_lang: Target language name (e.g. "English")

        Returns:
            The translated text, stripped
        """
        return await self.gateway.invoke(
            lambda: self._translate(text, source_lang, target_lang)
        )

    async def _translate(self, text: str, source_lang: str, target_lang: str) -> str:
        model = self.api_config.translation_model
        system_instruction = (
            f"You are an expert translator. You will be given text in {source_lang}. "
            f"Your task is to translate it to {target_lang}. Respond with only the "
            "translated text, without any additional explanations, introductions, "
            "or conversational phrases."
        )
        payload = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {"temperature": self.temperature},
        }

        logger.debug(f"Translating {len(text)} chars {source_lang} -> {target_lang}")
        data = await self.session.post_json(f"models/{model}:generateContent", payload)

        candidates = data.get("candidates") or []
        parts = ((candidates[0].get("content") or {}).get("parts") or []) if candidates else []
        translated = "".join(part.get("text", "") for part in parts).strip()
        if not translated:
            raise ProviderError("Translation returned no text")
        return translated

    async def translate_if_needed(
        self,
        text: str,
        locale: str,
        target_locale: str = "en",
    ) -> str:
        """
        Translate from ``locale`` to ``target_locale`` when they differ.

        Blank text and same-language input come back unchanged without a
        network call.
        """
        if locale == target_locale or not text.strip():
            return text
        return await self.translate(
            text,
            LANGUAGE_NAMES.get(locale, locale),
            LANGUAGE_NAMES.get(target_locale, target_locale),
        )
