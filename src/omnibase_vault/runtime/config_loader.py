# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault configuration loader.

Builds a validated ModelVaultHandlerConfig from an optional YAML or JSON file
and environment variable overrides.

File Format:
    The file holds a top-level ``vault`` section whose keys are the
    ModelVaultHandlerConfig fields::

        vault:
          url: https://vault.example.com:8200
          mount_path: tenants
          cert_path: /etc/vault/ca.pem
          mock:
            enabled: false

    ``.json`` files are read with the same layout. YAML is parsed with
    ``yaml.safe_load``.

Environment Overrides (default prefix ``APP_``):
    {prefix}VAULT_ROLE_ID, {prefix}VAULT_SECRET_ID, {prefix}VAULT_URL,
    {prefix}VAULT_MOUNT_PATH, {prefix}VAULT_CERT, {prefix}VAULT_NAMESPACE,
    {prefix}VAULT_MOCK_ENABLED, {prefix}VAULT_MOCK_JSON_FILE

    An override replaces the file value. Empty variables are ignored.

Error Handling:
    Every read, parse or validation failure raises ProtocolConfigurationError.
    Credentials are never echoed in the error message.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from omnibase_vault.enums import EnumInfraTransportType
from omnibase_vault.errors import ModelInfraErrorContext, ProtocolConfigurationError
from omnibase_vault.handlers.model_vault_handler_config import ModelVaultHandlerConfig

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX: str = "APP_"

# Configuration files above this size are rejected before parsing
MAX_CONFIG_SIZE_BYTES: int = 1024 * 1024

# Environment suffix -> (section, field). Section None means top level.
_ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "VAULT_ROLE_ID": (None, "role_id"),
    "VAULT_SECRET_ID": (None, "secret_id"),
    "VAULT_URL": (None, "url"),
    "VAULT_MOUNT_PATH": (None, "mount_path"),
    "VAULT_CERT": (None, "cert_path"),
    "VAULT_NAMESPACE": (None, "namespace"),
    "VAULT_MOCK_ENABLED": ("mock", "enabled"),
    "VAULT_MOCK_JSON_FILE": ("mock", "json_file"),
}


def _config_error(message: str) -> ProtocolConfigurationError:
    return ProtocolConfigurationError(
        message,
        context=ModelInfraErrorContext.with_correlation(
            transport_type=EnumInfraTransportType.RUNTIME,
            operation="load_vault_config",
            target_name="config_loader",
        ),
    )


def _read_config_file(path: Path) -> dict[str, object]:
    """Parse ``path`` and return its ``vault`` section (empty when absent)."""
    if not path.is_file():
        raise _config_error(f"Configuration file not found: {path}")

    file_size = path.stat().st_size
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise _config_error(
            f"Configuration file too large: {file_size} bytes "
            f"(max {MAX_CONFIG_SIZE_BYTES})"
        )

    try:
        with path.open(encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                document = json.load(f)
            else:
                document = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise _config_error(
            f"Unable to read configuration file {path}: {type(e).__name__}"
        ) from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise _config_error(f"Invalid configuration file {path}: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise _config_error(
            f"Configuration file must hold a mapping, got {type(document).__name__}"
        )

    section = document.get("vault", {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise _config_error(
            f"'vault' section must be a mapping, got {type(section).__name__}"
        )
    return dict(section)


def _apply_env_overrides(
    values: dict[str, object],
    environ: Mapping[str, str],
    env_prefix: str,
) -> list[str]:
    """Overlay environment variables onto ``values``; returns applied names."""
    applied: list[str] = []
    for suffix, (section, field) in _ENV_OVERRIDES.items():
        name = f"{env_prefix}{suffix}"
        raw = environ.get(name)
        if raw is None or raw == "":
            continue

        target = values
        if section is not None:
            nested = values.get(section)
            if not isinstance(nested, dict):
                nested = {}
            else:
                nested = dict(nested)
            values[section] = nested
            target = nested
        target[field] = raw
        applied.append(name)
    return applied


def load_vault_config(
    path: str | Path | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> ModelVaultHandlerConfig:
    """Load and validate the Vault configuration.

    Args:
        path: Optional YAML or JSON file with a ``vault`` section
        env_prefix: Prefix of the override environment variables
        environ: Environment to read (defaults to ``os.environ``)

    Returns:
        Validated ModelVaultHandlerConfig

    Raises:
        ProtocolConfigurationError: If the file cannot be read or parsed, or
            the merged settings fail validation
    """
    values: dict[str, object] = {}
    if path is not None:
        values = _read_config_file(Path(path))

    applied = _apply_env_overrides(
        values, os.environ if environ is None else environ, env_prefix
    )

    try:
        config = ModelVaultHandlerConfig.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'vault'}: {err['msg']}"
            for err in e.errors(include_url=False, include_input=False)
        )
        raise _config_error(f"Invalid vault configuration: {problems}") from None

    logger.info(
        "Loaded vault configuration",
        extra={
            "config_path": str(path) if path is not None else None,
            "env_overrides": applied,
            "mock_enabled": config.mock.enabled,
        },
    )
    return config


__all__: list[str] = ["DEFAULT_ENV_PREFIX", "load_vault_config"]
