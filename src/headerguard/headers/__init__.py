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
"""Security response header policy — options, serializers, and application."""

from headerguard.headers.options import (
    DEFAULT_MAX_AGE,
    DEFAULTS,
    HEADER_FIELDS,
    ExpectCt,
    HeaderPolicyConfig,
    ReferrerPolicy,
    StrictTransportSecurity,
    merge,
)
from headerguard.headers.policy import HeaderPolicy
from headerguard.headers.serializers import SERIALIZERS, HeaderAction, validate_max_age

__all__ = [
    "DEFAULTS",
    "DEFAULT_MAX_AGE",
    "ExpectCt",
    "HEADER_FIELDS",
    "HeaderAction",
    "HeaderPolicy",
    "HeaderPolicyConfig",
    "ReferrerPolicy",
    "SERIALIZERS",
    "StrictTransportSecurity",
    "merge",
    "validate_max_age",
]
