"""Content fingerprints and composite cache keys.

A fingerprint identifies a piece of text independently of the whitespace around it, so two
text units with the same trimmed content share one cache entry and one backend request.
"""

from __future__ import annotations

import hashlib

__all__: list[str] = ["HashUtils"]


class HashUtils:
    """Static helpers for text fingerprinting and cache key derivation."""

    @staticmethod
    def fingerprint(text: str) -> str:
        """Return the SHA-256 hex digest of the whitespace-trimmed text.

        Args:
            text (str): Source text.

        Returns:
            str: 64-character lowercase hexadecimal digest.
        """
        return hashlib.sha256(text.strip().encode("utf-8")).hexdigest()

    @staticmethod
    def cache_key(fingerprint: str, target_lang: str) -> str:
        """Build the cache key for one fingerprint translated into one language.

        Args:
            fingerprint (str): Text fingerprint.
            target_lang (str): Target language code.

        Returns:
            str: ``"<fingerprint>:<target_lang>"``.
        """
        return f"{fingerprint}:{target_lang}"

    @staticmethod
    def cache_key_extended(fingerprint: str, source_lang: str, target_lang: str, model: str) -> str:
        """Build a cache key that also separates translations by source language and model.

        Args:
            fingerprint (str): Text fingerprint.
            source_lang (str): Source language code.
            target_lang (str): Target language code.
            model (str): Backend model identifier.

        Returns:
            str: ``"<fingerprint>:<source_lang>:<target_lang>:<model>"``.
        """
        return f"{fingerprint}:{source_lang}:{target_lang}:{model}"
