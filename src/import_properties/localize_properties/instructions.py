LOCALE_NAMES = {
    "en": "English",
    "sv": "Swedish",
    "nb": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
}

# ISO 639-1 codes accepted from language detection.
RECOGNIZED_LOCALES = frozenset({
    "ar", "ca", "cs", "da", "de", "el", "en", "es", "et", "eu", "fi", "fr",
    "gl", "hr", "hu", "is", "it", "ja", "lt", "lv", "nb", "nl", "pl", "pt",
    "ro", "ru", "sk", "sl", "sv", "tr", "uk", "zh",
})

# Detection answers mapped onto the codes used by the property store.
LOCALE_ALIASES = {
    "no": "nb",
    "nn": "nb",
}

DETECT_LANGUAGE_INSTRUCTIONS = (
    "You are a language detection expert. "
    "Respond with only the ISO 639-1 language code (e.g., \"en\", \"es\", \"fr\", \"de\", \"sv\")."
)

DETECT_LANGUAGE_PROMPT = 'Detect the language of this text: "{text}"'

TRANSLATE_INSTRUCTIONS = (
    "You are a professional translator. Translate the given text to {language}. "
    "Maintain a natural, professional tone suitable for real estate descriptions. "
    "Keep the translation concise but complete. "
    "Respond with the translation only."
)

TRANSLATE_PROMPT = 'Translate this text to {language}: "{text}"'
