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
"""StructlogAdapter — default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any

import structlog

from headerguard.core.config import Config

_FORMATS = ("console", "json")


@dataclass(frozen=True)
class LoggingSettings:
    """Resolved ``headerguard.logging`` section.

    ``headerguard.logging.level.root`` sets the root level; any other key
    under ``headerguard.logging.level`` names a stdlib logger, for example
    ``headerguard.web: WARNING``.
    """

    root_level: str = "INFO"
    format: str = "console"
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> LoggingSettings:
        levels = config.get_resolved_section("headerguard.logging.level")
        root = levels.pop("root", None) or config.get("headerguard.logging.level.root", "INFO")
        fmt = str(config.get("headerguard.logging.format", "console")).lower()
        if fmt not in _FORMATS:
            fmt = "console"
        return cls(
            root_level=str(root).upper(),
            format=fmt,
            module_levels={name: str(level).upper() for name, level in levels.items()},
        )


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


class StructlogAdapter:
    """Logging adapter backed by structlog, writing through stdlib ``logging``."""

    def __init__(self, settings: LoggingSettings | None = None) -> None:
        self._settings = settings or LoggingSettings()

    @property
    def settings(self) -> LoggingSettings:
        return self._settings

    def configure(self, config: Config) -> None:
        self._settings = LoggingSettings.from_config(config)
        self.apply()

    def apply(self) -> None:
        """Install the current settings into structlog and the stdlib root logger."""
        settings = self._settings
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                _renderer(settings.format),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=_level(settings.root_level),
            force=True,
        )
        for name, level in settings.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level(level))


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
