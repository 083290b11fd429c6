"""Tests for plan file rendering and validation."""

import pytest
import yaml

from git_rescribe.core.plan_file import format_plan, load_plan, parse_plan, write_plan
from git_rescribe.exceptions import PlanValidationError

from helpers import descriptor

VALID_COMMIT = """\
  - author:
      date: "2025-01-01T00:00:00Z"
      identity: "A <a@x.com>"
    committer:
      date: "2025-01-01T00:00:00Z"
      identity: "A <a@x.com>"
    content: "commit:abc1234"
    message: |-
      Subject
    parents: []
"""


def test_format_plan_layout():
    text = format_plan(
        [
            descriptor("commit:abc1234", [], message="Subject\n\nBody line"),
            descriptor("tree:aaaa111", ["previous", "rewritten:abc1234", "def5678"], message="Two"),
        ]
    )
    assert text == (
        "commits:\n"
        "  - author:\n"
        '      date: "2025-01-01T00:00:00Z"\n'
        '      identity: "A <a@x.com>"\n'
        "    committer:\n"
        '      date: "2025-01-01T00:00:00Z"\n'
        '      identity: "A <a@x.com>"\n'
        '    content: "commit:abc1234"\n'
        "    message: |-\n"
        "      Subject\n"
        "\n"
        "      Body line\n"
        "    parents: []\n"
        "\n"
        "  - author:\n"
        '      date: "2025-01-01T00:00:00Z"\n'
        '      identity: "A <a@x.com>"\n'
        "    committer:\n"
        '      date: "2025-01-01T00:00:00Z"\n'
        '      identity: "A <a@x.com>"\n'
        '    content: "tree:aaaa111"\n'
        "    message: |-\n"
        "      Two\n"
        '    parents: ["previous", "rewritten:abc1234", "def5678"]\n'
    )


def test_format_empty_plan():
    assert parse_plan(format_plan([])) == []


def test_formatted_plan_parses_back_unchanged():
    commits = [
        descriptor("commit:abc1234", [], message="Subject: with colon\n\n- bullet\n  indented"),
        descriptor("commit:def5678", ["previous"], message="  leading spaces"),
        descriptor("commit:0123456", ["previous"], message=""),
        descriptor("commit:789abcd", ["previous"], message="bell \x07 and \"quotes\""),
        descriptor("commit:fedcba9", ["previous"], identity="Zoë Ünïcode <z@x.com>"),
    ]
    assert parse_plan(format_plan(commits)) == commits


def test_unquoted_dates_are_accepted():
    text = VALID_COMMIT.replace('"2025-01-01T00:00:00Z"', "2025-01-01T00:00:00+00:00")
    commits = parse_plan("commits:\n" + text)
    assert commits[0].author.date == "2025-01-01T00:00:00+00:00"


def test_invalid_identity_reports_location():
    text = "commits:\n" + VALID_COMMIT.replace('identity: "A <a@x.com>"', 'identity: "nobody"', 1)
    with pytest.raises(PlanValidationError) as excinfo:
        parse_plan(text)
    assert len(excinfo.value.errors) == 1
    assert excinfo.value.errors[0].startswith("commit #1 author.identity:")


def test_all_errors_are_collected():
    bad = VALID_COMMIT.replace('"commit:abc1234"', '"blob:abc1234"').replace(
        "parents: []", 'parents: ["prev"]'
    )
    with pytest.raises(PlanValidationError) as excinfo:
        parse_plan("commits:\n" + VALID_COMMIT + "\n" + bad)

    errors = excinfo.value.errors
    assert any(e.startswith("commit #2 content:") for e in errors)
    assert any(e.startswith("commit #2 parents[0]:") for e in errors)
    assert not any(e.startswith("commit #1") for e in errors)


def test_missing_field_is_an_error():
    text = "commits:\n" + VALID_COMMIT.replace("    parents: []\n", "")
    with pytest.raises(PlanValidationError, match="parents"):
        parse_plan(text)


@pytest.mark.parametrize("text", ["commits: [", "- just\n- a list\n", "", "commits: 3"])
def test_malformed_documents(text):
    with pytest.raises(PlanValidationError):
        parse_plan(text)


def test_write_and_load(tmp_path):
    path = tmp_path / "RESCRIBE_TODO.yml"
    commits = [descriptor("commit:abc1234", [], message="Subject")]
    write_plan(path, commits)

    assert load_plan(path) == commits
    assert yaml.safe_load(path.read_text())["commits"][0]["parents"] == []


@pytest.mark.parametrize(
    "message",
    [
        "Fix thing\u2028pasted",
        "paragraph\u2029break",
        "a\x85b",
        "x\x80y",
        "delete \x7f char",
        "noncharacter \ufffe here",
    ],
)
def test_characters_yaml_cannot_print_are_escaped(message):
    commits = [descriptor("commit:abc1234", [], message=message)]

    text = format_plan(commits)

    assert not any(c in text for c in "\x85\u2028\u2029\x80\x7f\ufffe")
    assert parse_plan(text) == commits


def test_unprintable_identity_is_escaped():
    commits = [descriptor("commit:abc1234", [], identity="Line\u2028Sep <l@x.com>")]
    assert parse_plan(format_plan(commits)) == commits
