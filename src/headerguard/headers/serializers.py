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
"""Per-header serializers.

Each serializer is a pure function of one option value.  It returns either
the header value to set or a :class:`HeaderAction` telling the caller to
leave the header alone or remove it.
"""

from __future__ import annotations

import enum
import math
import numbers
from collections.abc import Callable, Iterable
from typing import Any

from headerguard.headers.options import ExpectCt, ReferrerPolicy, StrictTransportSecurity
from headerguard.kernel.exceptions import ValidationException


class HeaderAction(enum.Enum):
    """Non-value outcomes of a serializer."""

    SKIP = "skip"
    DELETE = "delete"


HeaderResult = str | HeaderAction
Serializer = Callable[[Any], HeaderResult]

_REFERRER_POLICIES = frozenset(p.value for p in ReferrerPolicy)


def validate_max_age(max_age: Any, header: str | None = None) -> int | float:
    """Return *max_age* if it is a finite, non-negative real number.

    Booleans, ``None``, NaN and infinities are rejected; there is no fallback
    to ``DEFAULT_MAX_AGE``.
    """
    if (
        isinstance(max_age, bool)
        or not isinstance(max_age, numbers.Real)
        or not math.isfinite(max_age)
        or max_age < 0
    ):
        raise ValidationException(
            f"max-age must be a non-negative number, got {max_age!r}",
            header=header,
            context={"max_age": max_age},
        )
    if isinstance(max_age, float) and max_age.is_integer():
        return int(max_age)
    return max_age


def strict_transport_security(options: Any) -> HeaderResult:
    if options is None or options is False:
        return HeaderAction.SKIP
    if not isinstance(options, StrictTransportSecurity):
        raise ValidationException(
            f"Strict-Transport-Security expects StrictTransportSecurity options, got {type(options).__name__}",
            header="Strict-Transport-Security",
        )

    parts = [f"max-age={validate_max_age(options.max_age, 'Strict-Transport-Security')}"]
    if options.include_subdomains:
        parts.append("includeSubDomains")
    if options.preload:
        parts.append("preload")
    return "; ".join(parts)


def referrer_policy(options: Any) -> HeaderResult:
    """Join one or more policies with ``", "``; an empty list is an error."""
    if options is None or options is False:
        return HeaderAction.SKIP
    if isinstance(options, str):
        if options == "":
            return HeaderAction.SKIP
        policies = [options]
    elif isinstance(options, Iterable):
        policies = list(options)
    else:
        raise ValidationException(
            f"Referrer-Policy expects a policy or a list of policies, got {type(options).__name__}",
            header="Referrer-Policy",
        )

    if not policies:
        raise ValidationException("Referrer-Policy is enabled but empty", header="Referrer-Policy")

    for policy in policies:
        if policy not in _REFERRER_POLICIES:
            raise ValidationException(
                f"Unknown Referrer-Policy value {policy!r}",
                header="Referrer-Policy",
                context={"value": policy},
            )
    return ", ".join(str(p) for p in policies)


def expect_ct(options: Any) -> HeaderResult:
    """Build ``Expect-CT``.

    ``report-uri`` is emitted whenever ``enforce`` is set, whether or not a
    URI was configured.
    """
    if options is None or options is False:
        return HeaderAction.SKIP
    if not isinstance(options, ExpectCt):
        raise ValidationException(
            f"Expect-CT expects ExpectCt options, got {type(options).__name__}",
            header="Expect-CT",
        )

    parts = [f"max-age={validate_max_age(options.max_age, 'Expect-CT')}"]
    if options.enforce:
        parts.append("enforce")
        parts.append(f'report-uri="{options.report_uri or ""}"')
    return ", ".join(parts)


def x_frame_options(value: Any) -> HeaderResult:
    if isinstance(value, str):
        return value
    if value is True:
        return "SAMEORIGIN"
    return HeaderAction.SKIP


def x_content_type_options(value: Any) -> HeaderResult:
    return "nosniff" if value else HeaderAction.SKIP


def x_xss_protection(value: Any) -> HeaderResult:
    return "1; mode=block" if value else HeaderAction.SKIP


def x_permitted_cross_domain_policies(value: Any) -> HeaderResult:
    if isinstance(value, str):
        return value
    if value is True:
        return "none"
    return HeaderAction.SKIP


def x_powered_by(value: Any) -> HeaderResult:
    # True leaves whatever the downstream handler set
    if isinstance(value, str):
        return value
    if value is False:
        return HeaderAction.DELETE
    return HeaderAction.SKIP


SERIALIZERS: dict[str, Serializer] = {
    "Strict-Transport-Security": strict_transport_security,
    "Referrer-Policy": referrer_policy,
    "Expect-CT": expect_ct,
    "X-Frame-Options": x_frame_options,
    "X-Content-Type-Options": x_content_type_options,
    "X-XSS-Protection": x_xss_protection,
    "X-Permitted-Cross-Domain-Policies": x_permitted_cross_domain_policies,
    "X-Powered-By": x_powered_by,
}
