import hashlib
import json
import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


def _canonical(value: Any) -> Any:
    """Reduce a value to a JSON-stable form (sets sorted, enums unwrapped)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(_canonical(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if hasattr(value, "model_dump"):
        return _canonical(value.model_dump())
    return value


class Fingerprinter:
    """
    Pure logic for creating deterministic cache keys.
    """

    @staticmethod
    def content_hash(text: str) -> str:
        """SHA256 of the exact text that gets embedded."""
        return hashlib.sha256(text.encode('utf-8')).hexdigest()

    @staticmethod
    def canonical(fields: dict) -> str:
        """
        Serialize fields deterministically.

        Keys are sorted and separators fixed, so logically identical field
        sets always produce the same string regardless of construction order.
        """
        return json.dumps(_canonical(fields), sort_keys=True, separators=(",", ":"))

    @classmethod
    def calculate(cls, fields: dict) -> str:
        """SHA256 of the canonical serialization of fields."""
        return hashlib.sha256(cls.canonical(fields).encode('utf-8')).hexdigest()
