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
"""HeaderPolicy — applies an effective configuration to a header collection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from headerguard.headers.options import DEFAULTS, HEADER_FIELDS, HeaderPolicyConfig, merge
from headerguard.headers.serializers import SERIALIZERS, HeaderAction, HeaderResult

if TYPE_CHECKING:
    from headerguard.web.ports.headers import HeaderCollection


class HeaderPolicy:
    """Framework-agnostic owner of the effective header configuration.

    The configuration is resolved once, at construction, by merging
    *overrides* over *defaults*.  A full :class:`HeaderPolicyConfig` passed as
    *overrides* is used as-is.

    Args:
        overrides: Partial overrides keyed by header or field name, or a
            complete configuration.
        defaults: Base configuration the overrides are merged over.
    """

    def __init__(
        self,
        overrides: HeaderPolicyConfig | Mapping[str, Any] | None = None,
        *,
        defaults: HeaderPolicyConfig = DEFAULTS,
    ) -> None:
        if isinstance(overrides, HeaderPolicyConfig):
            self._config = overrides
        else:
            self._config = merge(defaults, overrides)

    @property
    def config(self) -> HeaderPolicyConfig:
        return self._config

    def render(self) -> dict[str, HeaderResult]:
        """Serialize every managed header without touching any response.

        Raises:
            ValidationException: If an option cannot be serialized.
        """
        return {
            header: SERIALIZERS[header](getattr(self._config, field))
            for header, field in HEADER_FIELDS.items()
        }

    def apply(self, headers: HeaderCollection) -> None:
        """Set, overwrite or delete the managed headers on *headers* in place.

        Rules run in :data:`HEADER_FIELDS` order.  When a serializer raises,
        headers already written stay on the collection and the remaining
        rules are not applied.
        """
        for header, field in HEADER_FIELDS.items():
            result = SERIALIZERS[header](getattr(self._config, field))
            if result is HeaderAction.SKIP:
                continue
            if result is HeaderAction.DELETE:
                if header in headers:
                    del headers[header]
                continue
            headers[header] = result
