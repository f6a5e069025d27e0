from __future__ import annotations

from typing import Final

__all__: list[str] = ["LANGUAGE_NAMES", "RTL_LANGUAGES", "SHORT_CODE_TO_LOCALE", "LangUtils"]

# Locale codes mapped to the human-readable names used in backend prompts.
LANGUAGE_NAMES: Final[dict[str, str]] = {
    # Tier 1
    "en_US": "English (United States)",
    "en_GB": "English (United Kingdom)",
    "de_DE": "German (Germany)",
    "es_ES": "Spanish (Spain)",
    "es_MX": "Spanish (Mexico)",
    "fr_FR": "French (France)",
    "it_IT": "Italian (Italy)",
    "ja_JP": "Japanese (Japan)",
    "pt_BR": "Portuguese (Brazil)",
    "pt_PT": "Portuguese (Portugal)",
    "zh_CN": "Chinese (Simplified)",
    "zh_TW": "Chinese (Traditional)",
    # Tier 2
    "ar_SA": "Arabic (Saudi Arabia)",
    "bn_BD": "Bengali (Bangladesh)",
    "cs_CZ": "Czech (Czech Republic)",
    "da_DK": "Danish (Denmark)",
    "el_GR": "Greek (Greece)",
    "fi_FI": "Finnish (Finland)",
    "he_IL": "Hebrew (Israel)",
    "hi_IN": "Hindi (India)",
    "hu_HU": "Hungarian (Hungary)",
    "id_ID": "Indonesian (Indonesia)",
    "ko_KR": "Korean (South Korea)",
    "nl_NL": "Dutch (Netherlands)",
    "nb_NO": "Norwegian Bokmål (Norway)",
    "pl_PL": "Polish (Poland)",
    "ro_RO": "Romanian (Romania)",
    "ru_RU": "Russian (Russia)",
    "sv_SE": "Swedish (Sweden)",
    "th_TH": "Thai (Thailand)",
    "tr_TR": "Turkish (Turkey)",
    "uk_UA": "Ukrainian (Ukraine)",
    "vi_VN": "Vietnamese (Vietnam)",
    # Tier 3
    "bg_BG": "Bulgarian (Bulgaria)",
    "ca_ES": "Catalan (Spain)",
    "fa_IR": "Persian (Iran)",
    "hr_HR": "Croatian (Croatia)",
    "lt_LT": "Lithuanian (Lithuania)",
    "lv_LV": "Latvian (Latvia)",
    "ms_MY": "Malay (Malaysia)",
    "sk_SK": "Slovak (Slovakia)",
    "sl_SI": "Slovenian (Slovenia)",
    "sr_RS": "Serbian (Serbia)",
    "sw_KE": "Swahili (Kenya)",
    "tl_PH": "Tagalog (Philippines)",
    "ur_PK": "Urdu (Pakistan)",
}

SHORT_CODE_TO_LOCALE: Final[dict[str, str]] = {
    "en": "en_US",
    "de": "de_DE",
    "es": "es_ES",
    "fr": "fr_FR",
    "it": "it_IT",
    "ja": "ja_JP",
    "pt": "pt_BR",
    "zh": "zh_CN",
    "ko": "ko_KR",
    "ru": "ru_RU",
    "ar": "ar_SA",
    "he": "he_IL",
    "hi": "hi_IN",
    "nl": "nl_NL",
    "pl": "pl_PL",
    "tr": "tr_TR",
    "vi": "vi_VN",
}

RTL_LANGUAGES: Final[frozenset[str]] = frozenset({"ar", "he", "fa", "ur", "ps", "sd", "ug"})

# Extra guidance for locales that are easily confused with a sibling variant.
LOCALE_CLARIFICATIONS: Final[dict[str, str]] = {
    "es_ES": "Use Castilian Spanish (vosotros forms, Spain vocabulary such as 'ordenador').",
    "es_MX": "Use Mexican Spanish (ustedes forms, Latin American vocabulary such as 'computadora').",
    "pt_BR": "Use Brazilian Portuguese spelling and vocabulary, not European Portuguese.",
    "pt_PT": "Use European Portuguese spelling and vocabulary, not Brazilian Portuguese.",
    "zh_CN": "Use Simplified Chinese characters as written in mainland China.",
    "zh_TW": "Use Traditional Chinese characters and Taiwan vocabulary.",
    "en_GB": "Use British spelling (colour, organise) and vocabulary.",
    "en_US": "Use American spelling (color, organize) and vocabulary.",
}


class LangUtils:
    """Static helpers for locale codes, display names and text direction."""

    @staticmethod
    def normalize_locale(lang_code: str) -> str:
        """Convert a hyphenated locale to the underscore form (e.g., 'es-ES' -> 'es_ES')."""
        return lang_code.replace("-", "_")

    @staticmethod
    def to_html_lang(lang_code: str) -> str:
        """Convert a locale to the HTML ``lang`` attribute form (e.g., 'es_ES' -> 'es-ES')."""
        return lang_code.replace("_", "-")

    @staticmethod
    def base_language(lang_code: str) -> str:
        """Return the lowercase base language without region (e.g., 'en_US' -> 'en')."""
        return LangUtils.normalize_locale(lang_code).split("_")[0].strip().lower()

    @staticmethod
    def same_base_language(lang_a: str, lang_b: str) -> bool:
        """Check whether two language tags share a base language, ignoring case and region.

        Args:
            lang_a (str): First language code.
            lang_b (str): Second language code.

        Returns:
            bool: True if both codes name the same base language.
        """
        return LangUtils.base_language(lang_a) == LangUtils.base_language(lang_b)

    @staticmethod
    def language_name(lang_code: str) -> str:
        """Return a human-readable language name, falling back to the code itself.

        Short codes such as 'ja' are expanded through their default locale.
        """
        locale: str = LangUtils.normalize_locale(lang_code)
        if locale in LANGUAGE_NAMES:
            return LANGUAGE_NAMES[locale]
        expanded: str | None = SHORT_CODE_TO_LOCALE.get(locale.lower())
        if expanded is not None:
            return LANGUAGE_NAMES.get(expanded, lang_code)
        return lang_code

    @staticmethod
    def locale_clarification(lang_code: str) -> str:
        """Return locale-specific guidance for the backend prompt, or an empty string."""
        return LOCALE_CLARIFICATIONS.get(LangUtils.normalize_locale(lang_code), "")

    @staticmethod
    def direction(lang_code: str) -> str:
        """Return 'rtl' for right-to-left languages and 'ltr' otherwise."""
        return "rtl" if LangUtils.base_language(lang_code) in RTL_LANGUAGES else "ltr"

    @staticmethod
    def is_rtl(lang_code: str) -> bool:
        return LangUtils.direction(lang_code) == "rtl"
