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
"""Header policy options, built-in defaults, and override merging.

Each of the eight managed headers maps to one field of
:class:`HeaderPolicyConfig`.  Overrides are accepted keyed either by the
header name (``"X-Frame-Options"``) or by the field name
(``"x_frame_options"``), which lets the same code path serve programmatic
callers and YAML/TOML configuration sections.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from headerguard.kernel.exceptions import ConfigurationException

if TYPE_CHECKING:
    from headerguard.core.config import Config

DEFAULT_MAX_AGE = 365 * 86400


class ReferrerPolicy(StrEnum):
    """The values accepted by the ``Referrer-Policy`` header."""

    EMPTY = ""
    NO_REFERRER = "no-referrer"
    NO_REFERRER_WHEN_DOWNGRADE = "no-referrer-when-downgrade"
    UNSAFE_URL = "unsafe-url"
    SAME_ORIGIN = "same-origin"
    STRICT_ORIGIN = "strict-origin"
    STRICT_ORIGIN_WHEN_CROSS_ORIGIN = "strict-origin-when-cross-origin"
    ORIGIN = "origin"
    ORIGIN_WHEN_CROSS_ORIGIN = "origin-when-cross-origin"


@dataclass(frozen=True)
class StrictTransportSecurity:
    """Options for ``Strict-Transport-Security`` (enforces SSL connections)."""

    max_age: int
    include_subdomains: bool = False
    preload: bool = False


@dataclass(frozen=True)
class ExpectCt:
    """Options for ``Expect-CT`` (rejects misissued certificates)."""

    max_age: int
    enforce: bool = False
    report_uri: str | None = None


# Header name -> HeaderPolicyConfig field, in application order.
HEADER_FIELDS: dict[str, str] = {
    "Strict-Transport-Security": "strict_transport_security",
    "Referrer-Policy": "referrer_policy",
    "Expect-CT": "expect_ct",
    "X-Frame-Options": "x_frame_options",
    "X-Content-Type-Options": "x_content_type_options",
    "X-XSS-Protection": "x_xss_protection",
    "X-Permitted-Cross-Domain-Policies": "x_permitted_cross_domain_policies",
    "X-Powered-By": "x_powered_by",
}

_KEY_TO_FIELD: dict[str, str] = {
    **{header.lower(): field for header, field in HEADER_FIELDS.items()},
    **{field: field for field in HEADER_FIELDS.values()},
}

_RECORD_DIRECTIVES: dict[str, tuple[type, dict[str, str]]] = {
    "strict_transport_security": (
        StrictTransportSecurity,
        {
            "max-age": "max_age",
            "max_age": "max_age",
            "includesubdomains": "include_subdomains",
            "include_subdomains": "include_subdomains",
            "preload": "preload",
        },
    ),
    "expect_ct": (
        ExpectCt,
        {
            "max-age": "max_age",
            "max_age": "max_age",
            "enforce": "enforce",
            "report-uri": "report_uri",
            "report_uri": "report_uri",
        },
    ),
}


@dataclass(frozen=True)
class HeaderPolicyConfig:
    """The effective header policy: one optional value per managed header.

    A bare ``HeaderPolicyConfig()`` manages nothing; :data:`DEFAULTS` holds
    the built-in policy that overrides are merged over.  Instances are
    immutable and safe to share across concurrent requests.
    """

    strict_transport_security: StrictTransportSecurity | None = None
    referrer_policy: ReferrerPolicy | str | tuple[ReferrerPolicy | str, ...] | None = None
    expect_ct: ExpectCt | None = None
    x_frame_options: bool | str = False
    x_content_type_options: bool = False
    x_xss_protection: bool = False
    x_permitted_cross_domain_policies: bool | str = False
    x_powered_by: bool | str | None = None

    def __getitem__(self, key: str) -> Any:
        try:
            field = _field_name(key)
        except ConfigurationException as exc:
            raise KeyError(key) from exc
        return getattr(self, field)

    def __iter__(self) -> Iterator[str]:
        return iter(HEADER_FIELDS)

    @classmethod
    def from_config(
        cls,
        config: Config,
        prefix: str = "headerguard.headers",
        defaults: HeaderPolicyConfig | None = None,
    ) -> HeaderPolicyConfig:
        """Merge the ``prefix`` section of *config* over *defaults* (or :data:`DEFAULTS`).

        Values go through env var overrides and ``${...}`` placeholder
        resolution, so ``HEADERGUARD_HEADERS_X_POWERED_BY=false`` disables
        ``X-Powered-By`` even when the file does not mention it.
        """
        base = DEFAULTS if defaults is None else defaults
        return merge(base, config.get_resolved_section(prefix, keys=HEADER_FIELDS))


DEFAULTS = HeaderPolicyConfig(
    strict_transport_security=StrictTransportSecurity(
        max_age=DEFAULT_MAX_AGE,
        include_subdomains=True,
        preload=True,
    ),
    referrer_policy=(
        ReferrerPolicy.NO_REFERRER,
        ReferrerPolicy.STRICT_ORIGIN_WHEN_CROSS_ORIGIN,
    ),
    expect_ct=ExpectCt(
        max_age=DEFAULT_MAX_AGE,
        enforce=True,
        report_uri="https://localhost:8000/report/",
    ),
    x_frame_options=True,
    x_content_type_options=True,
    x_xss_protection=True,
    x_permitted_cross_domain_policies=True,
    x_powered_by="Fake Server",
)


def merge(defaults: HeaderPolicyConfig, overrides: Mapping[str, Any] | None = None) -> HeaderPolicyConfig:
    """Shallow field-wise merge of *overrides* over *defaults*.

    Every key present in *overrides* replaces the default wholesale,
    including ``False`` and ``None``; nested records are not deep-merged.
    Values are not validated here, only reshaped.

    Raises:
        ConfigurationException: If a key names no managed header, or a nested
            record mapping carries an unknown directive.
    """
    if not overrides:
        return defaults

    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        field = _field_name(key)
        changes[field] = _coerce(field, value)
    return dataclasses.replace(defaults, **changes)


def _field_name(key: str) -> str:
    field = _KEY_TO_FIELD.get(str(key).lower())
    if field is None:
        raise ConfigurationException(
            f"Unknown security header option '{key}'",
            context={"key": key, "known": list(HEADER_FIELDS)},
        )
    return field


def _coerce(field: str, value: Any) -> Any:
    if field in _RECORD_DIRECTIVES and isinstance(value, Mapping):
        record_cls, directives = _RECORD_DIRECTIVES[field]
        kwargs: dict[str, Any] = {"max_age": None}
        for directive, item in value.items():
            attr = directives.get(str(directive).lower())
            if attr is None:
                raise ConfigurationException(
                    f"Unknown {record_cls.__name__} directive '{directive}'",
                    context={"field": field, "directive": directive},
                )
            kwargs[attr] = item
        return record_cls(**kwargs)

    if field == "referrer_policy" and isinstance(value, list | tuple):
        return tuple(value)

    return value
