# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""HeaderGuard exception hierarchy.

All errors raised by the package derive from :class:`HeaderGuardException`,
so a single ``except HeaderGuardException`` catches every failure that
originates here.  Downstream handler errors are never wrapped.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class HeaderGuardException(Exception):
    """Base exception for all HeaderGuard errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "HEADER_VALIDATION").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Policy Exceptions
# =============================================================================


class ValidationException(HeaderGuardException):
    """A header option value cannot be serialized (bad max-age, empty policy list)."""

    def __init__(self, message: str, header: str | None = None, context: dict | None = None) -> None:
        ctx = dict(context or {})
        if header is not None:
            ctx.setdefault("header", header)
        super().__init__(message, code="HEADER_VALIDATION", context=ctx)
        self.header = header


class ConfigurationException(HeaderGuardException):
    """Overrides or configuration sources are malformed (unknown keys, unreadable files)."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="HEADER_CONFIGURATION", context=context)
