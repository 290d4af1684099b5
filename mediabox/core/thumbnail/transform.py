"""Module: transform.py.

Author: Michael Economou
Date: 2026-10-19

Canonical thumbnail parameters.

A request query such as {"height": "100", "width": 100, "instant": "true"}
becomes TransformSignature(width=100, height=100). The canonical string
("100x100", "100x100-caret", "100x100-caret-autoorient") does not depend on
mapping order, on int vs numeric string, or on whether default-valued
options were spelled out, so equivalent requests share one cache key.

`instant` is an admission hint, not part of the signature.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mediabox.config import (
    MODIFIER_CARET,
    MODIFIER_FIT,
    SUPPORTED_MODIFIERS,
    THUMBNAIL_MAX_DIMENSION,
    THUMBNAIL_MIN_DIMENSION,
)
from mediabox.core.errors import InvalidTransformError

_DIGITS = re.compile(r"^[0-9]+$")


def _is_true(value: Any) -> bool:
    return value is True or value == "true"


def _parse_dimension(query: Mapping[str, Any], field: str) -> int:
    value = query.get(field)
    if value is None:
        raise InvalidTransformError(f"{field} is required")

    if isinstance(value, bool):
        raise InvalidTransformError(f"{field} must be an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _DIGITS.match(value.strip()):
        number = int(value.strip())
    else:
        raise InvalidTransformError(f"{field} must be an integer, got {value!r}")

    if not THUMBNAIL_MIN_DIMENSION <= number <= THUMBNAIL_MAX_DIMENSION:
        raise InvalidTransformError(
            f"{field} must be between {THUMBNAIL_MIN_DIMENSION} and {THUMBNAIL_MAX_DIMENSION}"
        )
    return number


@dataclass(frozen=True)
class TransformSignature:
    """Thumbnail transform parameters.

    Attributes:
        width: Target box width in pixels
        height: Target box height in pixels
        modifier: "fit" (within bounds) or "caret" (crop to fill)
        auto_orient: Apply EXIF orientation before scaling

    """

    width: int
    height: int
    modifier: str = MODIFIER_FIT
    auto_orient: bool = False

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> TransformSignature:
        """Build a signature from request query options.

        Raises:
            InvalidTransformError: If width/height are missing or out of range,
                or modifier is unknown.

        """
        width = _parse_dimension(query, "width")
        height = _parse_dimension(query, "height")

        modifier = query.get("modifier")
        if modifier is None or modifier == "":
            modifier = MODIFIER_FIT
        elif not isinstance(modifier, str) or modifier not in SUPPORTED_MODIFIERS:
            raise InvalidTransformError(f"Unsupported modifier: {modifier!r}")

        return cls(
            width=width,
            height=height,
            modifier=modifier,
            auto_orient=_is_true(query.get("autoOrient")),
        )

    @property
    def is_caret(self) -> bool:
        return self.modifier == MODIFIER_CARET

    def canonical(self) -> str:
        """Deterministic string form used in cache keys."""
        parts = [f"{self.width}x{self.height}"]
        if self.modifier != MODIFIER_FIT:
            parts.append(self.modifier)
        if self.auto_orient:
            parts.append("autoorient")
        return "-".join(parts)

    def __str__(self) -> str:
        return self.canonical()


def admission_is_instant(query: Mapping[str, Any]) -> bool:
    """Only the literal "true" (or True) selects instant admission."""
    return _is_true(query.get("instant"))


def cache_key(content_hash: str, signature: TransformSignature) -> str:
    """Derive the artifact key for content_hash rendered with signature.

    Returns:
        SHA256 hex digest of "<content_hash>|<canonical signature>"

    """
    identity = f"{content_hash.lower()}|{signature.canonical()}"
    return hashlib.sha256(identity.encode()).hexdigest()
