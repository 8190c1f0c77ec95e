# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Errors raised by datatap components.

Only construction and composition problems are reported through these types.
Failures coming out of wrapped backends are propagated, recovered or isolated
as they are, never translated.
"""

from __future__ import annotations

from typing import Any, Final

from datatap.errors.base import DataTapError, ErrorCategory, ErrorCode, ErrorSeverity

CONFIGURATION: Final = ErrorCategory.get_or_create("CONFIGURATION")
COMPOSITION: Final = ErrorCategory.get_or_create("COMPOSITION")

DEPENDENCY_REQUIRED: Final = ErrorCode.get_or_create(
    "DEPENDENCY_REQUIRED", CONFIGURATION
)
DEPENDENCY_INVALID: Final = ErrorCode.get_or_create("DEPENDENCY_INVALID", CONFIGURATION)
CONTRACT_UNSUPPORTED: Final = ErrorCode.get_or_create(
    "CONTRACT_UNSUPPORTED", COMPOSITION
)


class ConfigurationError(DataTapError):
    """Base class for errors detected while constructing a component."""


class MissingDependencyError(ConfigurationError):
    """Raised when a required constructor dependency is ``None``."""

    def __init__(self, dependency: str, component: str, **context: Any) -> None:
        super().__init__(
            f"{component} requires '{dependency}'",
            code=DEPENDENCY_REQUIRED,
            context={"dependency": dependency, "component": component},
            **context,
        )
        self.dependency = dependency
        self.component = component


class InvalidDependencyError(ConfigurationError):
    """Raised when a constructor dependency has an unusable type or value."""

    def __init__(
        self, dependency: str, component: str, reason: str, **context: Any
    ) -> None:
        super().__init__(
            f"{component} received an invalid '{dependency}': {reason}",
            code=DEPENDENCY_INVALID,
            context={"dependency": dependency, "component": component},
            **context,
        )
        self.dependency = dependency
        self.component = component


class UnsupportedContractError(DataTapError):
    """Raised when an object does not implement any known data contract."""

    def __init__(self, obj: Any, operation: str) -> None:
        super().__init__(
            f"{type(obj).__name__} does not implement a query, command, "
            f"repository or unit of work contract",
            code=CONTRACT_UNSUPPORTED,
            severity=ErrorSeverity.ERROR,
            context={"type": type(obj).__qualname__, "operation": operation},
        )


def require(value: Any, dependency: str, component: object) -> Any:
    """Return ``value`` or raise MissingDependencyError if it is ``None``.

    Args:
        value: The dependency passed to the constructor
        dependency: Parameter name, used in the error message
        component: The component being constructed

    Returns:
        The value unchanged
    """
    if value is None:
        raise MissingDependencyError(dependency, type(component).__name__)
    return value
