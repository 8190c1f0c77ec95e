# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap

"""
Error handling for datatap.
"""

from __future__ import annotations

from datatap.errors.base import (
    INTERNAL,
    INTERNAL_ERROR,
    DataTapError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
)
from datatap.errors.component_errors import (
    COMPOSITION,
    CONFIGURATION,
    CONTRACT_UNSUPPORTED,
    DEPENDENCY_INVALID,
    DEPENDENCY_REQUIRED,
    ConfigurationError,
    InvalidDependencyError,
    MissingDependencyError,
    UnsupportedContractError,
    require,
)
from datatap.errors.registry import registry

__all__ = [
    # Categories and codes
    "ErrorCode",
    "ErrorCategory",
    "ErrorSeverity",
    "INTERNAL",
    "INTERNAL_ERROR",
    "CONFIGURATION",
    "COMPOSITION",
    "DEPENDENCY_REQUIRED",
    "DEPENDENCY_INVALID",
    "CONTRACT_UNSUPPORTED",
    "registry",
    # Errors
    "DataTapError",
    "ConfigurationError",
    "MissingDependencyError",
    "InvalidDependencyError",
    "UnsupportedContractError",
    # Helpers
    "require",
]
