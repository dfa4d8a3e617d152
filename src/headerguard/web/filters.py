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
"""OncePerRequestFilter — path-scoped base for header filters."""

from __future__ import annotations

import abc
from collections.abc import Iterable
from fnmatch import fnmatch
from typing import Any

from headerguard.web.ports.filter import CallNext


def _matches(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch(path, pattern) for pattern in patterns)


class OncePerRequestFilter(abc.ABC):
    """Base for filters that only run on some request paths.

    ``url_patterns`` limits the filter to matching paths (all paths when
    empty); ``exclude_patterns`` then removes paths such as health checks.
    Only ``request.url.path`` is read, so any request object with that
    attribute works.
    """

    url_patterns: Iterable[str] = ()
    exclude_patterns: Iterable[str] = ()

    def applies_to(self, path: str) -> bool:
        if self.url_patterns and not _matches(path, self.url_patterns):
            return False
        return not _matches(path, self.exclude_patterns)

    def should_not_filter(self, request: Any) -> bool:
        return not self.applies_to(request.url.path)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...
