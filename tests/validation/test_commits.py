from __future__ import annotations

import pytest

from jiralint.matcher import KeyGrammar
from jiralint.validation import (
    Commit,
    CommitConvention,
    CommitMessageValidator,
    CommitVerdict,
    is_doc_commit,
    is_merge_commit,
    is_revert_commit,
    validate_commits,
)


def _commits(*messages: str) -> list[Commit]:
    return [Commit(sha=f"sha{index}", message=message) for index, message in enumerate(messages)]


def test_precedence_over_mixed_commits() -> None:
    commits = _commits(
        "ENG-117 great commit",
        "Merge branch 'release/v1.8.0' into x",
        "bad commit message",
        "Merge pull request #827 from acme/ENG-117-thing",
        "eng-117 bad commit",
        "ENG-117 - ok",
        "ENG-117bad no space",
    )

    summary = validate_commits(commits, "ENG-117")

    assert [result.valid for result in summary.results] == [
        True,
        True,
        False,
        True,
        False,
        True,
        False,
    ]
    assert summary.valid is False
    assert [result.verdict for result in summary.results] == [
        CommitVerdict.MATCHED,
        CommitVerdict.MERGE,
        CommitVerdict.INVALID,
        CommitVerdict.MERGE,
        CommitVerdict.INVALID,
        CommitVerdict.MATCHED,
        CommitVerdict.INVALID,
    ]


def test_wrong_and_missing_key_views() -> None:
    summary = validate_commits(
        _commits("OPS-4 unrelated", "no key at all", "ENG-117 fine", "ENG-117bad glued"),
        "ENG-117",
    )

    assert [result.message for result in summary.wrong_key] == ["OPS-4 unrelated"]
    assert [result.message for result in summary.missing_key] == [
        "no key at all",
        "ENG-117bad glued",
    ]
    assert len(summary.invalid) == 3


def test_empty_commit_list_is_valid() -> None:
    summary = validate_commits([], "ENG-117")

    assert summary.valid is True
    assert summary.results == ()


@pytest.mark.parametrize(
    "message, verdict",
    [
        ("docs: update README", CommitVerdict.DOCS),
        ('Revert "ENG-1 something"', CommitVerdict.REVERT),
        ('revert "lowercase marker"', CommitVerdict.REVERT),
        ("merge branch 'main'", CommitVerdict.MERGE),
    ],
)
def test_exempt_commits_are_valid_without_key(message: str, verdict: CommitVerdict) -> None:
    result = CommitMessageValidator().classify(Commit("abc", message), "ENG-117")

    assert result.valid
    assert result.verdict is verdict


def test_docs_prefix_is_case_sensitive() -> None:
    assert is_doc_commit("docs: fix typo")
    assert not is_doc_commit("Docs: fix typo")
    assert not is_doc_commit(" docs: fix typo")


def test_merge_and_revert_markers_must_open_the_message() -> None:
    assert is_merge_commit("Merge pull request #1 from acme/x")
    assert not is_merge_commit("ENG-1 Merge branch main")
    assert is_revert_commit('Revert "ENG-1 add thing"')
    assert not is_revert_commit("Revert ENG-1 add thing")


def test_trailer_convention() -> None:
    validator = CommitMessageValidator(convention=CommitConvention.TRAILER)
    good = Commit("a", "feat: build new CMS\njira: DDTS-112")
    glued = Commit("b", "feat: build new CMS\njira: DDTS-1123")
    prefixed = Commit("c", "DDTS-112 build new CMS")

    assert validator.classify(good, "DDTS-112").valid
    assert not validator.classify(glued, "DDTS-112").valid
    assert not validator.classify(prefixed, "DDTS-112").valid
    assert validator.classify(prefixed, "DDTS-112").has_issue_key


def test_anywhere_convention_accepts_any_position_and_case() -> None:
    summary = validate_commits(
        _commits("fix retry loop (eng-117)", "refs OPS-2"),
        "ENG-117",
        convention="anywhere",
    )

    assert [result.valid for result in summary.results] == [True, False]


def test_has_issue_key_ignores_branch_grammar_anchor() -> None:
    validator = CommitMessageValidator(grammar=KeyGrammar.leading())
    result = validator.classify(Commit("a", "fix the thing for ops-3"), "ENG-117")

    assert not result.valid
    assert result.has_issue_key


def test_empty_expected_key_never_matches() -> None:
    result = CommitMessageValidator().classify(Commit("a", " something"), "")

    assert not result.valid


def test_commit_from_github_payload(commits_payload) -> None:
    commit = Commit.from_github(commits_payload[0])

    assert commit.sha == "1f0c2a9d4b7e8c6a5d3b2e1f0a9c8b7d6e5f4a3b"
    assert commit.message.startswith("ENG-117 add retry budget")
    assert Commit.from_github({}) == Commit(sha="", message="")


@pytest.mark.parametrize("convention", list(CommitConvention))
@pytest.mark.parametrize(
    "message", ["WES-430 fix", "fix WES-430", "x\njira: WES-430", "ES-430 fix"]
)
def test_longer_key_containing_expected_key_is_not_a_match(
    convention: CommitConvention, message: str
) -> None:
    summary = validate_commits(_commits(message), "ES-43", convention=convention)

    assert not summary.valid
    assert summary.results[0].verdict is CommitVerdict.INVALID
    assert summary.wrong_key == summary.results
