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
"""HeaderGuard Web — filters and middleware applying the header policy.

Framework-agnostic types are exported directly.
Default adapter (Starlette) exports are re-exported for convenience.
"""

from headerguard.web.adapters.starlette import (
    HeaderPolicyFilter,
    HeaderPolicyMiddleware,
    WebFilterChainMiddleware,
)
from headerguard.web.filters import OncePerRequestFilter
from headerguard.web.ports.filter import CallNext, WebFilter
from headerguard.web.ports.headers import HeaderCollection

__all__ = [
    # Framework-agnostic
    "CallNext",
    "HeaderCollection",
    "OncePerRequestFilter",
    "WebFilter",
    # Default adapter (Starlette)
    "HeaderPolicyFilter",
    "HeaderPolicyMiddleware",
    "WebFilterChainMiddleware",
]
