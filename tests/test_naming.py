"""Tests for envbind.naming: key derivation."""

import pytest

from envbind.naming import derive_key, join_key, smushed_key, split_words


@pytest.mark.parametrize(
    "name, words",
    [
        ("MultiWordVar", ["Multi", "Word", "Var"]),
        ("MultiWordVarWithAutoSplit", ["Multi", "Word", "Var", "With", "Auto", "Split"]),
        ("HTTPServer", ["HTTP", "Server"]),
        ("AWSRegion", ["AWS", "Region"]),
        ("ID", ["ID"]),
        ("multi_word_var", ["multi_word_var"]),
    ],
)
def test_split_words(name, words):
    assert split_words(name) == words


def test_join_key_upper_cases():
    assert join_key("env_config", "port") == "ENV_CONFIG_PORT"
    assert join_key("", "port") == "PORT"


class TestDeriveKey:
    def test_plain_name(self):
        assert derive_key("env_config", "port") == ("ENV_CONFIG_PORT", "")

    def test_no_prefix(self):
        assert derive_key("", "port") == ("PORT", "")

    def test_split_words(self):
        assert derive_key("env_config", "MultiWordVar", split=True) == ("ENV_CONFIG_MULTI_WORD_VAR", "")

    def test_without_split_words(self):
        assert derive_key("env_config", "MultiWordVar") == ("ENV_CONFIG_MULTIWORDVAR", "")

    def test_alias_replaces_name_and_is_returned_bare(self):
        assert derive_key("app", "port", alias="service_port") == ("APP_SERVICE_PORT", "SERVICE_PORT")

    def test_alias_wins_over_split_words(self):
        assert derive_key("app", "MultiWordVar", split=True, alias="mwv") == ("APP_MWV", "MWV")

    def test_alias_ignored_inside_record_list(self):
        key, alt = derive_key("APP_SERVERS_0", "host", alias="server_host", in_sequence=True)
        assert key == "APP_SERVERS_0_HOST"
        assert alt == ""

    def test_split_words_inside_record_list(self):
        key, _ = derive_key("APP_SERVERS_1", "HostName", split=True, in_sequence=True)
        assert key == "APP_SERVERS_1_HOST_NAME"


def test_smushed_key():
    key = "ENV_CONFIG_ACCEPT_SMUSHY_NAME"
    assert smushed_key("env_config", "AcceptSmushyName", key) == "ENV_CONFIG_ACCEPTSMUSHYNAME"
    assert smushed_key("env_config", "this_one", "ENV_CONFIG_THIS_ONE") == ""
