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
"""Tests for HeaderPolicyMiddleware — pure ASGI variant."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import structlog
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from headerguard.core.config import Config
from headerguard.headers.options import HeaderPolicyConfig
from headerguard.headers.policy import HeaderPolicy
from headerguard.kernel.exceptions import ValidationException
from headerguard.web.adapters.starlette.header_policy import HeaderPolicyMiddleware


async def _hello(request: Request) -> PlainTextResponse:
    return PlainTextResponse("hello", headers={"X-Powered-By": "starlette"})


def _make_client(**kwargs) -> TestClient:
    app = Starlette(
        routes=[Route("/hello", _hello)],
        middleware=[Middleware(HeaderPolicyMiddleware, **kwargs)],
    )
    return TestClient(app)


class TestHeaderPolicyMiddleware:
    def test_default_headers_applied(self):
        resp = _make_client().get("/hello")

        assert resp.status_code == 200
        assert resp.text == "hello"
        assert resp.headers["Strict-Transport-Security"] == "max-age=31536000; includeSubDomains; preload"
        assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert resp.headers["X-Powered-By"] == "Fake Server"

    def test_overrides(self):
        resp = _make_client(overrides={"X-Powered-By": False, "X-Frame-Options": "DENY"}).get("/hello")

        assert "X-Powered-By" not in resp.headers
        assert resp.headers["X-Frame-Options"] == "DENY"

    def test_policy_from_config(self):
        config = Config({"headerguard": {"headers": {"Referrer-Policy": ["origin", "same-origin"]}}})
        policy = HeaderPolicy(HeaderPolicyConfig.from_config(config))
        resp = _make_client(policy=policy).get("/hello")

        assert resp.headers["Referrer-Policy"] == "origin, same-origin"

    def test_empty_config_leaves_response_alone(self):
        resp = _make_client(overrides=HeaderPolicyConfig()).get("/hello")

        assert resp.headers["X-Powered-By"] == "starlette"
        assert "X-Frame-Options" not in resp.headers

    def test_validation_failure_raises(self):
        client = _make_client(overrides={"Expect-CT": {"max-age": -5}})
        with pytest.raises(ValidationException):
            client.get("/hello")

    @pytest.mark.asyncio
    async def test_non_http_scope_passes_through(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(scope["type"])

        middleware = HeaderPolicyMiddleware(app)
        await middleware({"type": "lifespan"}, None, None)  # type: ignore[arg-type]

        assert seen == ["lifespan"]

    @pytest.mark.asyncio
    async def test_start_message_without_headers(self):
        sent = []

        async def app(scope, receive, send):
            await send({"type": "http.response.start", "status": 204})

        async def send(message):
            sent.append(message)

        middleware = HeaderPolicyMiddleware(app, overrides={"X-Powered-By": True}, policy=None)
        await middleware({"type": "http", "path": "/"}, None, send)  # type: ignore[arg-type]

        names = {name for name, _ in sent[0]["headers"]}
        assert b"x-frame-options" in names
        assert b"x-powered-by" not in names


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestHeaderPolicyMiddlewareConfig:
    def test_config_builds_policy_and_configures_port(self):
        port = MagicMock()
        config = Config({"headerguard": {"headers": {"X-Powered-By": False, "X-Frame-Options": "DENY"}}})

        resp = _make_client(config=config, logging_port=port).get("/hello")

        port.configure.assert_called_once_with(config)
        port.get_logger.assert_called_once_with("headerguard.web")
        assert "X-Powered-By" not in resp.headers
        assert resp.headers["X-Frame-Options"] == "DENY"

    def test_explicit_overrides_win_over_config(self):
        port = MagicMock()
        config = Config({"headerguard": {"headers": {"X-Frame-Options": "DENY"}}})

        resp = _make_client(overrides={"X-Frame-Options": "SAMEORIGIN"}, config=config, logging_port=port).get("/hello")

        assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"

    def test_config_uses_structlog_adapter_by_default(self, restore_logging, monkeypatch):
        monkeypatch.setenv("HEADERGUARD_HEADERS_X_POWERED_BY", "edge-01")
        config = Config({"headerguard": {"logging": {"format": "json"}}})

        resp = _make_client(config=config).get("/hello")

        assert resp.headers["X-Powered-By"] == "edge-01"

    def test_failure_logged_through_injected_port(self):
        port = MagicMock()
        client = _make_client(overrides={"Strict-Transport-Security": {"max-age": -1}}, logging_port=port)

        with pytest.raises(ValidationException):
            client.get("/hello")

        args, kwargs = port.get_logger.return_value.error.call_args
        assert args == ("header_policy_failed",)
        assert kwargs["path"] == "/hello"
        assert kwargs["header"] == "Strict-Transport-Security"
