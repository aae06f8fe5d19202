# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Error Code Enumeration.

Error codes classify every RuntimeHostError so callers can branch on the
failure category without matching message text.
"""

from enum import Enum


class EnumInfraErrorCode(str, Enum):
    """Error classification codes for omnibase_vault errors."""

    OPERATION_FAILED = "operation_failed"
    INVALID_CONFIGURATION = "invalid_configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONNECTION_ERROR = "connection_error"
    AUTHENTICATION_ERROR = "authentication_error"
    TYPE_MISMATCH = "type_mismatch"
    VALIDATION_ERROR = "validation_error"


__all__ = ["EnumInfraErrorCode"]
