# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret bundle shape validation and flattening utilities.

Bundles come from two places: the Vault KV v2 ``data.data`` payload and the
mock backend's JSON file. Both are checked here so the service only ever
sees ``{str: str | bool | int | float}``.

Binding Rules:
    ``unflatten_bundle`` turns dotted keys into nested mappings before a bundle
    is validated against a pydantic model, so ``{"db.host": "x"}`` binds to a
    nested ``db`` model with a ``host`` field. Keys without the delimiter pass
    through unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from omnibase_vault.types import SECRET_VALUE_TYPES, SecretBundle, SecretValue

DEFAULT_KEY_DELIMITER: str = "."


class BundleShapeError(ValueError):
    """Raised by validate_secret_bundle when a payload is not a bundle.

    Callers translate this into the error matching their context
    (SecretResolutionError for backend payloads, ProtocolConfigurationError
    for mock files).
    """


def validate_secret_bundle(payload: object) -> dict[str, SecretValue]:
    """Check that ``payload`` is a mapping of string keys to scalar values.

    Args:
        payload: Raw payload decoded from the backend or a JSON file

    Returns:
        A new plain dict holding the same entries

    Raises:
        BundleShapeError: If the payload is not a mapping, a key is not a
            string, or a value is not a string, boolean or number.
    """
    if not isinstance(payload, Mapping):
        raise BundleShapeError(
            f"expected a mapping of secrets, got {type(payload).__name__}"
        )

    bundle: dict[str, SecretValue] = {}
    for key, value in payload.items():
        if not isinstance(key, str):
            raise BundleShapeError(f"secret key must be a string, got {type(key).__name__}")
        if not isinstance(value, SECRET_VALUE_TYPES):
            # Never echo the value itself
            raise BundleShapeError(
                f"secret '{key}' has unsupported type {type(value).__name__}"
            )
        bundle[key] = value
    return bundle


def freeze_bundle(bundle: Mapping[str, SecretValue]) -> SecretBundle:
    """Return a read-only view over a private copy of ``bundle``."""
    return MappingProxyType(dict(bundle))


def unflatten_bundle(
    bundle: Mapping[str, SecretValue],
    delimiter: str = DEFAULT_KEY_DELIMITER,
) -> dict[str, object]:
    """Expand delimited keys into nested dicts.

    Example:
        >>> unflatten_bundle({"db.host": "h", "db.port": "5432", "ENV": "x"})
        {'db': {'host': 'h', 'port': '5432'}, 'ENV': 'x'}

    A scalar and a nested group sharing a prefix (``"db"`` and ``"db.host"``)
    cannot both be represented; the nested group wins.
    """
    result: dict[str, object] = {}
    for key, value in bundle.items():
        if delimiter not in key:
            if not isinstance(result.get(key), dict):
                result[key] = value
            continue

        parts = key.split(delimiter)
        node = result
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
    return result


__all__: list[str] = [
    "DEFAULT_KEY_DELIMITER",
    "BundleShapeError",
    "freeze_bundle",
    "unflatten_bundle",
    "validate_secret_bundle",
]
