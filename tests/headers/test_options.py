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
"""Tests for header policy options, defaults, and override merging."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from headerguard.core.config import Config
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
from headerguard.kernel.exceptions import ConfigurationException

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_default_max_age_is_one_year(self):
        assert DEFAULT_MAX_AGE == 31_536_000

    def test_strict_transport_security(self):
        assert DEFAULTS.strict_transport_security == StrictTransportSecurity(
            max_age=DEFAULT_MAX_AGE, include_subdomains=True, preload=True
        )

    def test_expect_ct(self):
        assert DEFAULTS.expect_ct == ExpectCt(
            max_age=DEFAULT_MAX_AGE, enforce=True, report_uri="https://localhost:8000/report/"
        )

    def test_flags_and_literals(self):
        assert DEFAULTS.referrer_policy == ("no-referrer", "strict-origin-when-cross-origin")
        assert DEFAULTS.x_frame_options is True
        assert DEFAULTS.x_content_type_options is True
        assert DEFAULTS.x_xss_protection is True
        assert DEFAULTS.x_permitted_cross_domain_policies is True
        assert DEFAULTS.x_powered_by == "Fake Server"

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULTS.x_frame_options = "DENY"  # type: ignore[misc]

    def test_empty_config_manages_nothing(self):
        cfg = HeaderPolicyConfig()
        assert cfg.strict_transport_security is None
        assert cfg.x_frame_options is False
        assert cfg.x_powered_by is None


class TestHeaderNameAccess:
    def test_getitem_by_header_name(self):
        assert DEFAULTS["X-Powered-By"] == "Fake Server"

    def test_getitem_is_case_insensitive(self):
        assert DEFAULTS["x-frame-options"] is True

    def test_getitem_by_field_name(self):
        assert DEFAULTS["x_xss_protection"] is True

    def test_unknown_key_raises_key_error(self):
        with pytest.raises(KeyError):
            DEFAULTS["Content-Security-Policy"]

    def test_iterates_header_names(self):
        assert list(DEFAULTS) == list(HEADER_FIELDS)


class TestReferrerPolicy:
    def test_has_nine_values_including_empty(self):
        values = {p.value for p in ReferrerPolicy}
        assert len(values) == 9
        assert "" in values

    def test_members_compare_as_strings(self):
        assert ReferrerPolicy.SAME_ORIGIN == "same-origin"


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


class TestMerge:
    def test_no_overrides_returns_defaults(self):
        assert merge(DEFAULTS) is DEFAULTS
        assert merge(DEFAULTS, {}) is DEFAULTS

    @pytest.mark.parametrize("header", list(HEADER_FIELDS))
    def test_false_override_takes_precedence(self, header):
        merged = merge(DEFAULTS, {header: False})
        assert merged[header] is False

    @pytest.mark.parametrize("header", list(HEADER_FIELDS))
    def test_omitted_keys_keep_defaults(self, header):
        merged = merge(DEFAULTS, {"X-Powered-By": "MyServer"})
        if header != "X-Powered-By":
            assert merged[header] == DEFAULTS[header]

    def test_none_override_replaces_default(self):
        merged = merge(DEFAULTS, {"Expect-CT": None})
        assert merged.expect_ct is None

    def test_field_name_keys(self):
        merged = merge(DEFAULTS, {"x_frame_options": "DENY"})
        assert merged.x_frame_options == "DENY"

    def test_header_keys_are_case_insensitive(self):
        merged = merge(DEFAULTS, {"x-powered-by": False})
        assert merged.x_powered_by is False

    def test_nested_record_is_replaced_not_deep_merged(self):
        merged = merge(DEFAULTS, {"Strict-Transport-Security": {"max-age": 600}})
        assert merged.strict_transport_security == StrictTransportSecurity(max_age=600)

    def test_record_mapping_with_directive_names(self):
        merged = merge(
            DEFAULTS,
            {"Expect-CT": {"max-age": 86400, "enforce": True, "report-uri": "https://r.example/ct"}},
        )
        assert merged.expect_ct == ExpectCt(max_age=86400, enforce=True, report_uri="https://r.example/ct")

    def test_record_mapping_with_field_names(self):
        merged = merge(DEFAULTS, {"strict_transport_security": {"max_age": 10, "include_subdomains": True}})
        assert merged.strict_transport_security == StrictTransportSecurity(max_age=10, include_subdomains=True)

    def test_record_mapping_directives_case_insensitive(self):
        merged = merge(DEFAULTS, {"Strict-Transport-Security": {"max-age": 10, "includeSubDomains": True}})
        assert merged.strict_transport_security.include_subdomains is True

    def test_record_mapping_without_max_age_is_not_validated(self):
        merged = merge(DEFAULTS, {"Strict-Transport-Security": {"preload": True}})
        assert merged.strict_transport_security.max_age is None

    def test_record_instance_used_as_is(self):
        sts = StrictTransportSecurity(max_age=5, preload=True)
        assert merge(DEFAULTS, {"Strict-Transport-Security": sts}).strict_transport_security is sts

    def test_referrer_policy_list_becomes_tuple(self):
        merged = merge(DEFAULTS, {"Referrer-Policy": ["same-origin"]})
        assert merged.referrer_policy == ("same-origin",)

    def test_invalid_values_are_accepted_at_merge_time(self):
        merged = merge(DEFAULTS, {"Strict-Transport-Security": {"max-age": -1}, "Referrer-Policy": []})
        assert merged.strict_transport_security.max_age == -1
        assert merged.referrer_policy == ()

    def test_defaults_unchanged_after_merge(self):
        merge(DEFAULTS, {"X-Frame-Options": False})
        assert DEFAULTS.x_frame_options is True

    def test_unknown_header_raises(self):
        with pytest.raises(ConfigurationException) as exc_info:
            merge(DEFAULTS, {"Content-Security-Policy": "default-src 'self'"})
        assert exc_info.value.context["key"] == "Content-Security-Policy"

    def test_unknown_directive_raises(self):
        with pytest.raises(ConfigurationException):
            merge(DEFAULTS, {"Expect-CT": {"max-age": 1, "report-to": "x"}})


class TestFromConfig:
    def test_section_merged_over_defaults(self):
        config = Config(
            {
                "headerguard": {
                    "headers": {
                        "X-Powered-By": False,
                        "Strict-Transport-Security": {"max-age": 600, "includeSubDomains": True},
                    }
                }
            }
        )
        cfg = HeaderPolicyConfig.from_config(config)
        assert cfg.x_powered_by is False
        assert cfg.strict_transport_security == StrictTransportSecurity(max_age=600, include_subdomains=True)
        assert cfg.x_frame_options is True

    def test_empty_section_yields_defaults(self):
        assert HeaderPolicyConfig.from_config(Config({})) == DEFAULTS

    def test_custom_prefix_and_defaults(self):
        config = Config({"edge": {"security": {"X-Frame-Options": "DENY"}}})
        cfg = HeaderPolicyConfig.from_config(config, prefix="edge.security", defaults=HeaderPolicyConfig())
        assert cfg == HeaderPolicyConfig(x_frame_options="DENY")

    def test_placeholder_inside_header_section(self, monkeypatch):
        monkeypatch.setenv("SERVER_NAME", "edge-01")
        config = Config({"headerguard": {"headers": {"X-Powered-By": "${SERVER_NAME}"}}})
        assert HeaderPolicyConfig.from_config(config).x_powered_by == "edge-01"

    def test_env_var_overrides_file_value(self, monkeypatch):
        monkeypatch.setenv("HEADERGUARD_HEADERS_X_POWERED_BY", "false")
        config = Config({"headerguard": {"headers": {"X-Powered-By": "Fake Server"}}})
        assert HeaderPolicyConfig.from_config(config).x_powered_by is False

    def test_env_var_sets_header_missing_from_file(self, monkeypatch):
        monkeypatch.setenv("HEADERGUARD_HEADERS_X_FRAME_OPTIONS", "DENY")
        cfg = HeaderPolicyConfig.from_config(Config({}))
        assert cfg.x_frame_options == "DENY"
        assert cfg.strict_transport_security == DEFAULTS.strict_transport_security
