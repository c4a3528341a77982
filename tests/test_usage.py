"""Tests for envbind.usage: usage tables, lists and custom formats."""

import datetime
import io
from dataclasses import dataclass, field
from typing import Annotated, Optional

import pytest

from envbind import (
    DEFAULT_LIST_FORMAT,
    Default,
    Desc,
    Required,
    Sep,
    UInt16,
    describe,
    usage,
    usagef,
)
from envbind.usage import align_columns, render, type_description


@dataclass
class Backend:
    url: str = ""


@dataclass
class UsageSpec:
    port: int = 0
    admin_users: list[str] = field(default_factory=list)
    host: Annotated[str, Default("localhost"), Desc("bind address")] = ""
    token: Annotated[str, Required()] = ""


@dataclass
class WideSpec:
    backends: list[Backend] = field(default_factory=list)
    weights: Annotated[dict[str, float], Sep(";")] = field(default_factory=dict)


class TestTypeDescription:
    @pytest.mark.parametrize(
        "hint, text",
        [
            (str, "String"),
            (bool, "True or False"),
            (int, "Integer"),
            (UInt16, "Unsigned Integer"),
            (float, "Float"),
            (datetime.timedelta, "Duration"),
            (Optional[bool], "True or False"),
            (list[int], "Comma-separated list of Integer"),
            (dict[str, int], "Comma-separated list of String:Integer pairs"),
            (Backend, "Backend"),
        ],
    )
    def test_descriptions(self, hint, text):
        assert type_description(describe(hint)) == text

    def test_separator_name(self):
        assert type_description(describe(list[str]), ";") == "Semicolon-separated list of String"
        assert type_description(describe(list[str]), "|") == "Bar-separated list of String"


def test_align_columns():
    assert align_columns("a\tbb\tc\nccc\td\te") == "a      bb    c\nccc    d     e"


def test_align_columns_leaves_plain_lines():
    assert align_columns("intro\n\nk\tv\n") == "intro\n\nk    v\n"


def test_usage_table():
    out = io.StringIO()
    usage("app", UsageSpec(), out, env={})
    widths = (19, 34, 13, 12)

    def row(*cells):
        return "".join(c.ljust(w) for c, w in zip(cells, widths)) + cells[-1]

    expected = "\n".join(
        [
            "This application is configured via the environment. The following environment",
            "variables can be used:",
            "",
            row("KEY", "TYPE", "DEFAULT", "REQUIRED", "DESCRIPTION"),
            row("APP_PORT", "Integer", "", "", ""),
            row("APP_ADMIN_USERS", "Comma-separated list of String", "", "", ""),
            row("APP_HOST", "String", "localhost", "", "bind address"),
            row("APP_TOKEN", "String", "", "true", ""),
            "",
        ]
    )
    assert out.getvalue() == expected


def test_usage_defaults_to_stdout(capsys: pytest.CaptureFixture[str]):
    usage("app", UsageSpec(), env={})
    assert "APP_TOKEN" in capsys.readouterr().out


def test_usage_list_format():
    text = render("app", UsageSpec(), DEFAULT_LIST_FORMAT, env={})
    assert text.startswith("This application is configured via the environment.")
    assert (
        "\nAPP_HOST\n"
        "  [description] bind address\n"
        "  [type]        String\n"
        "  [default]     localhost\n"
        "  [required]    \n"
    ) in text
    assert text.endswith("  [required]    true\n")


def test_usagef_custom_format():
    out = io.StringIO()
    usagef("app", UsageSpec(), out, "{key}={description}\n", env={})
    assert out.getvalue() == "APP_PORT=\nAPP_ADMIN_USERS=\nAPP_HOST=bind address\nAPP_TOKEN=\n"


def test_usagef_unknown_field():
    with pytest.raises(KeyError):
        usagef("app", UsageSpec(), io.StringIO(), "{unknown}\n", env={})


def test_record_lists_and_separators():
    text = render("app", WideSpec(), "{key}|{type}\n", env={"APP_BACKENDS_0_URL": "http://a"})
    assert text.splitlines() == [
        "APP_BACKENDS|Indexed list of Backend",
        "APP_BACKENDS_0_URL|String",
        "APP_WEIGHTS|Semicolon-separated list of String:Float pairs",
    ]
