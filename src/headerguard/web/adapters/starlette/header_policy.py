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
"""Header policy middleware for Starlette — pure ASGI."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from headerguard.core.config import Config
from headerguard.headers.options import HeaderPolicyConfig
from headerguard.headers.policy import HeaderPolicy
from headerguard.kernel.exceptions import ValidationException
from headerguard.logging.port import LoggingPort
from headerguard.logging.structlog_adapter import StructlogAdapter
from headerguard.web.adapters.starlette.filters.header_policy_filter import LOGGER_NAME


class HeaderPolicyMiddleware:
    """Applies the security header policy to every HTTP response.

    Rewrites the ``http.response.start`` message on its way out, so the
    response body is streamed through untouched.  Non-HTTP scopes pass
    straight through.

    Passing *config* builds the policy from ``headerguard.headers`` (unless
    *overrides* or *policy* is given) and configures *logging_port*, or a
    fresh :class:`StructlogAdapter`, from ``headerguard.logging``.  This is
    the form ``app.add_middleware(HeaderPolicyMiddleware, config=config)``
    uses.
    """

    def __init__(
        self,
        app: ASGIApp,
        overrides: HeaderPolicyConfig | Mapping[str, Any] | None = None,
        policy: HeaderPolicy | None = None,
        *,
        config: Config | None = None,
        logging_port: LoggingPort | None = None,
    ) -> None:
        if config is not None:
            logging_port = logging_port or StructlogAdapter()
            logging_port.configure(config)
            if overrides is None and policy is None:
                overrides = HeaderPolicyConfig.from_config(config)

        self.app = app
        self._policy = policy or HeaderPolicy(overrides)
        self._logger = logging_port.get_logger(LOGGER_NAME) if logging_port else structlog.get_logger(LOGGER_NAME)
        self._logger.debug("header_policy_configured", component="asgi", config=self._policy.config)

    @property
    def policy(self) -> HeaderPolicy:
        return self._policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        policy = self._policy
        logger = self._logger

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                try:
                    policy.apply(headers)
                except ValidationException as exc:
                    logger.error(
                        "header_policy_failed",
                        path=scope.get("path"),
                        header=exc.header,
                        error=str(exc),
                    )
                    raise
            await send(message)

        await self.app(scope, receive, send_with_headers)
