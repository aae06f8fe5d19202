# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Tenant-scoped secret access with read-through caching.

SecretService is the public entry point for application code. It combines a
per-tenant bundle cache with typed accessors over any ProtocolSecretRepository
(the live VaultSecretRepository or the MockVaultSecretRepository).

Resolution Order:
    1. Look the tenant up in the cache; a hit returns the cached bundle
    2. On a miss, call ``repository.fetch_bundle(tenant)``
    3. Only a successful fetch is stored; failures propagate and leave no entry

Absent Keys:
    A key missing from an otherwise valid bundle is never an error.
    ``get_secret`` returns None, ``get_secret_as_string`` returns ``""`` and
    ``get_secrets`` omits the key.

Example:
    >>> service = SecretService(MockVaultSecretRepository({"client1": {"ENV_1": "v"}}))
    >>> service.get_secret("client1", "ENV_1")
    'v'
    >>> service.get_secrets("client1", ["ENV_1", "MISSING"])
    {'ENV_1': 'v'}

Security Considerations:
    - Cached bundles are read-only views and are never logged
    - Log records and error messages carry tenant and key names only
    - Binding errors drop pydantic's ``input`` field before being raised
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
import types
import typing
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager

from pydantic import BaseModel, ValidationError

from omnibase_vault.enums import EnumInfraTransportType, EnumVaultSecretKey
from omnibase_vault.errors import (
    ModelInfraErrorContext,
    SecretBindingError,
    SecretTypeError,
)
from omnibase_vault.models import ModelDbInstanceConfig, ModelSecretCacheStats
from omnibase_vault.protocols import ProtocolSecretRepository
from omnibase_vault.types import SecretBundle, SecretValue
from omnibase_vault.utils import (
    DEFAULT_KEY_DELIMITER,
    TypedCache,
    freeze_bundle,
    unflatten_bundle,
)

logger = logging.getLogger(__name__)

# Field types for which an empty string binds as the type's zero value
_ZERO_VALUE_TYPES: tuple[type, ...] = (bool, int, float)


class _TenantLock:
    """Per-tenant fetch lock with a count of callers holding or awaiting it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class SecretService:
    """Cache-or-fetch secret access for many tenants.

    Thread Safety:
        The bundle cache is a TypedCache and is safe without external locks.
        With ``coalesce_fetches`` enabled (default), concurrent first accesses
        for one tenant are serialized on a per-tenant ``threading.Lock`` and
        the cache is re-checked after the lock is acquired, so only one of
        them reaches the repository. Different tenants are fetched in
        parallel. A tenant's lock entry is dropped once no caller holds or
        waits on it, so unknown tenant names do not accumulate. With
        coalescing disabled, racing callers may each fetch and the last
        write wins.
    """

    def __init__(
        self,
        repository: ProtocolSecretRepository,
        coalesce_fetches: bool = True,
        key_delimiter: str = DEFAULT_KEY_DELIMITER,
    ) -> None:
        """Initialize SecretService.

        Args:
            repository: Backend serving tenant bundles
            coalesce_fetches: Deduplicate concurrent first fetches per tenant
            key_delimiter: Separator used by read_secrets to nest keys
        """
        self._repository = repository
        self._coalesce_fetches = coalesce_fetches
        self._key_delimiter = key_delimiter
        self._cache: TypedCache[str, Mapping] = TypedCache(Mapping)

        # Guards the counters and the per-tenant lock table. A tenant entry
        # lives only while some caller holds or waits on its lock.
        self._lock = threading.Lock()
        self._tenant_locks: dict[str, _TenantLock] = {}
        self._hits = 0
        self._misses = 0
        self._fetches = 0
        self._fetch_failures = 0
        self._invalidations = 0

    @property
    def repository(self) -> ProtocolSecretRepository:
        return self._repository

    # === Primary API (Sync) ===

    def get_secret(self, tenant: str, key: str) -> SecretValue | None:
        """Return the raw value of ``key`` for ``tenant``.

        Args:
            tenant: Tenant identifier
            key: Secret key within the tenant's bundle

        Returns:
            The stored value, or None when the bundle has no such key

        Raises:
            SecretResolutionError: If the tenant bundle cannot be fetched
            InfraConnectionError: If the backend cannot be reached
        """
        return self._get_bundle(tenant).get(key)

    def get_secret_as_string(self, tenant: str, key: str) -> str:
        """Return ``key`` as a string, or ``""`` when absent.

        Raises:
            SecretTypeError: If the value is present but not a string
            SecretResolutionError: If the tenant bundle cannot be fetched
        """
        value = self.get_secret(tenant, key)
        if value is None:
            return ""
        if not isinstance(value, str):
            context = ModelInfraErrorContext.with_correlation(
                transport_type=EnumInfraTransportType.RUNTIME,
                operation="get_secret_as_string",
                target_name="secret_service",
            )
            raise SecretTypeError(
                f"secret '{key}' for tenant {tenant} is a "
                f"{type(value).__name__}, not a string",
                context=context,
                tenant=tenant,
                key=key,
                actual_type=type(value).__name__,
            )
        return value

    def get_secrets(self, tenant: str, keys: Iterable[str]) -> dict[str, SecretValue]:
        """Return the subset of ``keys`` present in the tenant's bundle.

        Keys missing from the bundle are omitted, never reported.
        """
        bundle = self._get_bundle(tenant)
        return {key: bundle[key] for key in keys if key in bundle}

    def read_secrets[M: BaseModel](self, tenant: str, model_type: type[M]) -> M:
        """Bind the tenant's whole bundle onto a pydantic model.

        Binding rules:
            - dotted keys are nested (``"db.host"`` fills ``db.host``)
            - pydantic lax mode coerces ``"true"`` to True and ``"5"`` to 5
            - ``""`` bound to a bool, int or float field becomes False, 0 or 0.0
            - numbers and booleans bound to a str field become their text
              (``5432`` -> ``"5432"``, ``True`` -> ``"1"``, ``False`` -> ``"0"``)
            - fields absent from the bundle keep their model defaults

        Args:
            tenant: Tenant identifier
            model_type: Pydantic model class describing the expected secrets

        Returns:
            A validated ``model_type`` instance

        Raises:
            SecretBindingError: If validation fails (e.g. a required field is
                missing); ``errors`` holds the pydantic errors without inputs
            SecretResolutionError: If the tenant bundle cannot be fetched
        """
        bundle = self._get_bundle(tenant)
        data = unflatten_bundle(bundle, self._key_delimiter)
        _coerce_bundle_values(model_type, data)

        try:
            return model_type.model_validate(data)
        except ValidationError as e:
            errors = e.errors(include_url=False, include_context=False, include_input=False)
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) for err in errors
            )
            context = ModelInfraErrorContext.with_correlation(
                transport_type=EnumInfraTransportType.RUNTIME,
                operation="read_secrets",
                target_name="secret_service",
            )
            # Suppress the ValidationError: its str() echoes input values
            raise SecretBindingError(
                f"secrets for tenant {tenant} do not satisfy "
                f"{model_type.__name__}: invalid fields: {fields}",
                context=context,
                errors=[dict(err) for err in errors],
                tenant=tenant,
                model=model_type.__name__,
            ) from None

    def get_db_instance_config(self, tenant: str) -> ModelDbInstanceConfig:
        """Return the tenant's database settings from the DATABASE_* keys."""
        return ModelDbInstanceConfig(
            host=self.get_secret_as_string(tenant, EnumVaultSecretKey.DATABASE_HOST.value),
            name=self.get_secret_as_string(tenant, EnumVaultSecretKey.DATABASE_NAME.value),
            password=self.get_secret_as_string(
                tenant, EnumVaultSecretKey.DATABASE_PASS.value
            ),
            user=self.get_secret_as_string(tenant, EnumVaultSecretKey.DATABASE_USER.value),
        )

    # === Primary API (Async) ===

    async def get_secret_async(self, tenant: str, key: str) -> SecretValue | None:
        """Async wrapper for get_secret; the fetch runs in a worker thread."""
        return await asyncio.to_thread(self.get_secret, tenant, key)

    async def get_secrets_async(
        self, tenant: str, keys: Iterable[str]
    ) -> dict[str, SecretValue]:
        """Async wrapper for get_secrets."""
        return await asyncio.to_thread(self.get_secrets, tenant, list(keys))

    async def get_secret_as_string_async(self, tenant: str, key: str) -> str:
        """Async wrapper for get_secret_as_string."""
        return await asyncio.to_thread(self.get_secret_as_string, tenant, key)

    async def read_secrets_async[M: BaseModel](
        self, tenant: str, model_type: type[M]
    ) -> M:
        """Async wrapper for read_secrets."""
        return await asyncio.to_thread(self.read_secrets, tenant, model_type)

    async def list_async(self) -> list[str]:
        """Async wrapper for list."""
        return await asyncio.to_thread(self.list)

    # === Cache Management ===

    def invalidate(self, tenant: str) -> bool:
        """Drop the cached bundle for ``tenant``.

        The next access fetches the bundle again. Returns True if an entry
        was removed.
        """
        removed = self._cache.delete(tenant)
        if removed:
            with self._lock:
                self._invalidations += 1
            logger.info("Invalidated cached secrets", extra={"tenant": tenant})
        return removed

    def invalidate_all(self) -> int:
        """Drop every cached bundle and return how many were removed."""
        count = self._cache.clear()
        with self._lock:
            self._invalidations += count
        logger.info("Invalidated all cached secrets", extra={"entries": count})
        return count

    def get_cache_stats(self) -> ModelSecretCacheStats:
        """Return cache statistics.

        Returns:
            ModelSecretCacheStats with entry, hit, miss and fetch counts
        """
        with self._lock:
            return ModelSecretCacheStats(
                total_entries=len(self._cache),
                hits=self._hits,
                misses=self._misses,
                fetches=self._fetches,
                fetch_failures=self._fetch_failures,
                invalidations=self._invalidations,
            )

    # === Internal Methods ===

    def _get_bundle(self, tenant: str) -> SecretBundle:
        """Cache-or-fetch path."""
        cached = self._load_cached(tenant)
        if cached is not None:
            return cached

        if not self._coalesce_fetches:
            return self._fetch_and_store(tenant)

        with self._tenant_lock(tenant):
            # Another caller may have populated the entry while we waited
            cached = self._load_cached(tenant, count_miss=False)
            if cached is not None:
                return cached
            return self._fetch_and_store(tenant)

    def _load_cached(self, tenant: str, count_miss: bool = True) -> SecretBundle | None:
        bundle, found = self._cache.load(tenant)
        with self._lock:
            if found:
                self._hits += 1
            elif count_miss:
                self._misses += 1
        if found:
            logger.debug("Secret cache hit", extra={"tenant": tenant})
            return bundle
        return None

    @contextmanager
    def _tenant_lock(self, tenant: str) -> Iterator[None]:
        """Hold the tenant's fetch lock; the entry is dropped by its last user."""
        with self._lock:
            entry = self._tenant_locks.get(tenant)
            if entry is None:
                entry = self._tenant_locks[tenant] = _TenantLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._tenant_locks[tenant]

    def _fetch_and_store(self, tenant: str) -> SecretBundle:
        logger.debug("Fetching secrets from repository", extra={"tenant": tenant})
        try:
            fetched = self._repository.fetch_bundle(tenant)
        except Exception as e:
            with self._lock:
                self._fetch_failures += 1
            logger.warning(
                "Failed to fetch secrets for tenant",
                extra={"tenant": tenant, "error_type": type(e).__name__},
            )
            raise

        bundle = freeze_bundle(fetched)
        self._cache.store(tenant, bundle)
        with self._lock:
            self._fetches += 1
        return bundle

    def list(self) -> list[str]:
        """Return every tenant known to the repository (never cached).

        Raises:
            SecretResolutionError: If the backend returns no listing
        """
        return self._repository.list_tenants()


def _scalar_to_str(value: bool | int | float) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _coerce_bundle_values(model_type: type[BaseModel], data: dict[str, object]) -> None:
    """Apply the weak typing pydantic lax mode does not cover.

    ``""`` becomes the zero value for bool, int and float fields, and numbers
    or booleans bound to str fields become their text. Nested model fields
    are handled recursively. ``data`` is modified in place.
    """
    for name, field in model_type.model_fields.items():
        for key in _field_keys(name, field.alias, field.validation_alias):
            if key not in data:
                continue
            field_type = _unwrap_optional(field.annotation)
            value = data[key]
            if value == "" and field_type in _ZERO_VALUE_TYPES:
                data[key] = field_type()
            elif field_type is str and isinstance(value, (bool, int, float)):
                data[key] = _scalar_to_str(value)
            elif (
                isinstance(value, dict)
                and isinstance(field_type, type)
                and issubclass(field_type, BaseModel)
            ):
                _coerce_bundle_values(field_type, value)


def _field_keys(name: str, alias: str | None, validation_alias: object) -> list[str]:
    keys = [name]
    for candidate in (alias, validation_alias):
        if isinstance(candidate, str) and candidate not in keys:
            keys.append(candidate)
    return keys


def _unwrap_optional(annotation: object) -> object:
    """Return ``X`` for ``X | None``; other annotations are returned as is."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


__all__: list[str] = ["SecretService"]
