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
"""HeaderPolicyFilter — applies the security header policy to every response."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from headerguard.container.ordering import HIGHEST_PRECEDENCE, order
from headerguard.core.config import Config
from headerguard.headers.options import HeaderPolicyConfig
from headerguard.headers.policy import HeaderPolicy
from headerguard.kernel.exceptions import ValidationException
from headerguard.logging.port import LoggingPort
from headerguard.logging.structlog_adapter import StructlogAdapter
from headerguard.web.filters import OncePerRequestFilter
from headerguard.web.ports.filter import CallNext

LOGGER_NAME = "headerguard.web"


@order(HIGHEST_PRECEDENCE + 300)
class HeaderPolicyFilter(OncePerRequestFilter):
    """Sets, overwrites or deletes the managed security headers on each response.

    The effective configuration is resolved once, here, and shared read-only
    by every request.  A :class:`ValidationException` from a serializer is
    logged and re-raised; headers applied before the failing one stay on the
    response.

    Args:
        overrides: Partial overrides merged over the built-in defaults, or a
            complete :class:`HeaderPolicyConfig`.
        policy: A prebuilt policy; takes precedence over *overrides*.
        url_patterns: Only filter paths matching one of these globs.
        exclude_patterns: Never filter paths matching one of these globs.
        logging_port: Supplies the ``headerguard.web`` logger.  Without one
            the filter logs through ``structlog.get_logger``.
    """

    def __init__(
        self,
        overrides: HeaderPolicyConfig | Mapping[str, Any] | None = None,
        *,
        policy: HeaderPolicy | None = None,
        url_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
        logging_port: LoggingPort | None = None,
    ) -> None:
        self._policy = policy or HeaderPolicy(overrides)
        self.url_patterns = list(url_patterns)
        self.exclude_patterns = list(exclude_patterns)
        self._logger = logging_port.get_logger(LOGGER_NAME) if logging_port else structlog.get_logger(LOGGER_NAME)
        self._logger.debug("header_policy_configured", component="filter", config=self._policy.config)

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        logging_port: LoggingPort | None = None,
        url_patterns: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ) -> HeaderPolicyFilter:
        """Build the filter from ``headerguard.headers`` and ``headerguard.logging``.

        The logging port (a :class:`StructlogAdapter` when none is given) is
        configured from *config* before the filter takes its logger.
        """
        port = logging_port or StructlogAdapter()
        port.configure(config)
        return cls(
            HeaderPolicyConfig.from_config(config),
            url_patterns=url_patterns,
            exclude_patterns=exclude_patterns,
            logging_port=port,
        )

    @property
    def policy(self) -> HeaderPolicy:
        return self._policy

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        response = cast(Response, await call_next(request))

        try:
            self._policy.apply(response.headers)
        except ValidationException as exc:
            self._logger.error(
                "header_policy_failed",
                path=request.url.path,
                header=exc.header,
                error=str(exc),
            )
            raise

        return response
