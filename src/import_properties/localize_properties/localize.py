"""Language detection and per-locale translation of property texts."""

from __future__ import annotations

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from openai import OpenAI

from import_properties.config import TranslationConfig
from import_properties.localize_properties.instructions import (
    DETECT_LANGUAGE_INSTRUCTIONS,
    DETECT_LANGUAGE_PROMPT,
    LOCALE_ALIASES,
    LOCALE_NAMES,
    RECOGNIZED_LOCALES,
    TRANSLATE_INSTRUCTIONS,
    TRANSLATE_PROMPT,
)
from import_properties.localize_properties.rate_limiter import RateLimiter
from import_properties.models import (
    TRANSLATION_FALLBACK,
    TRANSLATION_SOURCE,
    TRANSLATION_TRANSLATED,
    LocaleVariant,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
LOCALE_CODE_RE = re.compile(r"\b([a-z]{2})\b")


def build_openai_client(config: TranslationConfig) -> OpenAI:
    """Create the OpenAI client used for detection and translation."""
    return OpenAI(
        api_key=os.environ.get("OPENAI_API_KEY"),
        timeout=config.timeout,
        max_retries=config.max_retries,
    )


class Localizer:
    """
    Produces a title/description pair for every target locale.

    The detected source locale keeps the original text verbatim. Every other
    locale gets two independent translation calls (title, description). Any
    failed call falls back to the original text and marks the variant
    ``fallback``; localization never fails a record.
    """

    def __init__(
        self,
        client: Any,
        config: TranslationConfig,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        unknown = [locale for locale in config.target_locales if locale not in LOCALE_NAMES]
        if unknown:
            raise ValueError(f"Unsupported target locales: {', '.join(unknown)}")

        self._client = client
        self._config = config
        self._rate_limiter = rate_limiter or RateLimiter(
            requests_per_second=config.requests_per_second,
            max_concurrent=config.max_concurrent_requests,
        )

    @property
    def target_locales(self) -> list[str]:
        return list(self._config.target_locales)

    def detect_locale(self, text: str | None) -> str:
        """Detect the ISO 639-1 code of ``text``. Defaults to "en" on any failure."""
        if not text or not text.strip():
            return DEFAULT_LOCALE

        sample = text[: self._config.detect_char_limit]
        try:
            answer = self._complete(
                DETECT_LANGUAGE_INSTRUCTIONS,
                DETECT_LANGUAGE_PROMPT.format(text=sample),
                max_tokens=10,
                temperature=0,
            )
        except Exception as e:
            logger.warning("Language detection failed, defaulting to %s: %s", DEFAULT_LOCALE, e)
            return DEFAULT_LOCALE

        locale = _parse_locale(answer)
        if locale is None:
            logger.warning("Unrecognized language code %r, defaulting to %s", answer, DEFAULT_LOCALE)
            return DEFAULT_LOCALE
        return locale

    def translate(self, text: str, target_locale: str, source_locale: str | None = None) -> str:
        """Translate ``text``; returns it unchanged when nothing to do or on failure."""
        translated, _ = self._translate(text, target_locale, source_locale)
        return translated

    def localize(self, title: str, description: str) -> tuple[str | None, dict[str, LocaleVariant]]:
        """
        Build all locale variants for one property.

        Returns:
            Tuple of (detected source locale, {locale: LocaleVariant}). The
            source locale is None when translation is disabled.
        """
        if not self._config.enabled:
            return None, {
                locale: LocaleVariant(locale, title, description, TRANSLATION_FALLBACK)
                for locale in self._config.target_locales
            }

        source_locale = self.detect_locale(description)
        logger.info("Detected source language: %s", source_locale)

        variants: dict[str, LocaleVariant] = {}
        jobs: list[tuple[str, str, str]] = []
        for locale in self._config.target_locales:
            if locale == source_locale:
                variants[locale] = LocaleVariant(locale, title, description, TRANSLATION_SOURCE)
            else:
                jobs.append((locale, "title", title))
                jobs.append((locale, "description", description))

        if not jobs:
            return source_locale, variants

        workers = max(1, min(self._config.max_workers, len(jobs)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(lambda job: self._translate(job[2], job[0], source_locale), jobs)
            )

        translated: dict[str, dict[str, tuple[str, bool]]] = {}
        for (locale, field_name, _), result in zip(jobs, results):
            translated.setdefault(locale, {})[field_name] = result

        for locale, fields in translated.items():
            new_title, title_ok = fields["title"]
            new_description, description_ok = fields["description"]
            status = TRANSLATION_TRANSLATED if title_ok and description_ok else TRANSLATION_FALLBACK
            variants[locale] = LocaleVariant(locale, new_title, new_description, status)

        # Keep configured locale order
        return source_locale, {locale: variants[locale] for locale in self._config.target_locales}

    def _translate(self, text: str, target_locale: str, source_locale: str | None) -> tuple[str, bool]:
        """Translate and report whether the result is a real translation."""
        if not text or not text.strip() or target_locale == source_locale:
            return text, True

        language = LOCALE_NAMES.get(target_locale, LOCALE_NAMES[DEFAULT_LOCALE])
        try:
            answer = self._complete(
                TRANSLATE_INSTRUCTIONS.format(language=language),
                TRANSLATE_PROMPT.format(language=language, text=text),
                max_tokens=self._config.max_tokens,
                temperature=0.3,
            )
        except Exception as e:
            logger.warning("Translation to %s failed, keeping source text: %s", target_locale, e)
            return text, False

        translated = _strip_wrapping_quotes(answer)
        if not translated:
            logger.warning("Empty translation to %s, keeping source text", target_locale)
            return text, False
        return translated, True

    def _complete(self, instructions: str, prompt: str, max_tokens: int, temperature: float) -> str:
        with self._rate_limiter.limit():
            response = self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": instructions},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        return (response.choices[0].message.content or "").strip()


def _parse_locale(answer: str) -> str | None:
    """Read a locale code from a detection answer.

    A bare code ("es", "\"ES\".") is taken as is. Otherwise the answer is a
    sentence and its last recognized two-letter word wins, so "The language
    is es" gives es rather than is.
    """
    code = _recognized_locale(answer.strip().strip("\"'.` ").lower())
    if code:
        return code
    for token in reversed(LOCALE_CODE_RE.findall(answer.lower())):
        code = _recognized_locale(token)
        if code:
            return code
    return None


def _recognized_locale(code: str) -> str | None:
    code = LOCALE_ALIASES.get(code, code)
    return code if code in RECOGNIZED_LOCALES else None


def _strip_wrapping_quotes(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1].strip()
    return text
