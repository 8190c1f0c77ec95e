# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap

"""Process-wide registry for datatap error codes and categories."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datatap.errors.base import ErrorCategory, ErrorCode


class ErrorRegistry:
    """Singleton registry for all error codes and categories."""

    _instance: ErrorRegistry | None = None
    _lock = threading.RLock()

    _categories: dict[str, ErrorCategory]
    _codes: dict[str, ErrorCode]

    def __new__(cls) -> ErrorRegistry:
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._categories = {}
                instance._codes = {}
                cls._instance = instance
            return cls._instance

    def get_category(
        self, name: str, parent: ErrorCategory | None = None
    ) -> ErrorCategory:
        """Get or create a category.

        Args:
            name: The category name
            parent: Optional parent category, only used on creation

        Returns:
            The registered ErrorCategory
        """
        with self._lock:
            if name not in self._categories:
                from datatap.errors.base import ErrorCategory

                self._categories[name] = ErrorCategory(name, parent)
            return self._categories[name]

    def get_code(self, code: str, category_name: str = "INTERNAL") -> ErrorCode:
        """Get or create an error code within a category.

        Args:
            code: The error code
            category_name: The category name (defaults to INTERNAL)

        Returns:
            The registered ErrorCode
        """
        with self._lock:
            key = f"{category_name}.{code}"
            if key not in self._codes:
                from datatap.errors.base import ErrorCode

                self._codes[key] = ErrorCode(code, self.get_category(category_name))
            return self._codes[key]

    def lookup_code(self, code: str) -> ErrorCode | None:
        """Look up an error code by bare code or ``CATEGORY.CODE`` key."""
        with self._lock:
            if code in self._codes:
                return self._codes[code]
            for error_code in self._codes.values():
                if error_code.code == code:
                    return error_code
            return None

    def get_all_categories(self) -> list[ErrorCategory]:
        with self._lock:
            return list(self._categories.values())

    def get_all_codes(self) -> list[ErrorCode]:
        with self._lock:
            return list(self._codes.values())


registry = ErrorRegistry()
