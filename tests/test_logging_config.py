from __future__ import annotations

import importlib
import json
from types import ModuleType

import pytest

from jiralint.utils.logging import is_secret_field, redact, redact_items


def _reload_logging(monkeypatch: pytest.MonkeyPatch, **env: str) -> ModuleType:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    module = importlib.import_module("jiralint.logging_config")
    return importlib.reload(module)


def test_text_logging_includes_correlation_id(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("JIRALINT_LOG_JSON", raising=False)
    logging_module = _reload_logging(monkeypatch, JIRALINT_CORR_ID="test-corr-id")
    logging_module.configure_logging("INFO")
    logger = logging_module.get_logger("test.logger")

    logger.info("hello world", extra={"issue_key": "ENG-117"})

    output = capsys.readouterr().out.strip()
    assert "hello world" in output
    assert "[test-corr-id]" in output
    assert '{"issue_key": "ENG-117"}' in output
    assert output.startswith("20")


def test_correlation_id_falls_back_to_run_id(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JIRALINT_CORR_ID", raising=False)
    logging_module = _reload_logging(monkeypatch, GITHUB_RUN_ID="987654")

    assert logging_module.get_correlation_id() == "987654"


def test_json_logging_mode(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    logging_module = _reload_logging(monkeypatch, JIRALINT_LOG_JSON="true")
    logging_module.configure_logging("INFO")
    logger = logging_module.get_logger("json.logger")

    logger.info("structured message", extra={"number": 42})

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["message"] == "structured message"
    assert payload["level"] == "INFO"
    assert payload["number"] == 42
    assert payload["correlation_id"] == logging_module.get_correlation_id()
    assert payload["run_id"] == logging_module.get_correlation_id()
    assert payload["timestamp"].endswith("Z")


def test_secret_redaction(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("JIRALINT_LOG_JSON", raising=False)
    logging_module = _reload_logging(monkeypatch)
    logging_module.configure_logging("DEBUG")
    logger = logging_module.get_logger("redact.logger")

    logger.debug("token value", extra={"jira_token": "abc123", "nested": {"secret": "shhh"}})

    output = capsys.readouterr().out
    assert "***REDACTED***" in output
    assert "abc123" not in output
    assert "shhh" not in output


def test_configure_logging_rejects_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    logging_module = _reload_logging(monkeypatch)

    with pytest.raises(ValueError, match="Unknown log level"):
        logging_module.configure_logging("LOUD")


def test_configure_logging_replaces_previous_handler(monkeypatch: pytest.MonkeyPatch) -> None:
    import logging

    logging_module = _reload_logging(monkeypatch)
    logging_module.configure_logging("INFO")
    logging_module.configure_logging("WARNING")

    flagged = [h for h in logging.getLogger().handlers if getattr(h, "_jiralint_handler", False)]
    assert len(flagged) == 1
    assert logging.getLogger().level == logging.WARNING


def test_redact_helpers() -> None:
    headers = {"Authorization": "Bearer abc", "Accept": "application/json"}

    assert redact("headers", headers) == {"Authorization": "***", "Accept": "application/json"}
    assert redact("github_token", "") == ""
    assert redact("items", [{"jira-token": "k"}, "plain"]) == [{"jira-token": "***"}, "plain"]
    assert redact_items({"password": "p", "user": "bot"}) == {"password": "***", "user": "bot"}


@pytest.mark.parametrize(
    "name",
    ["jira_token", "GITHUB_TOKEN", "jira-token", "INPUT_JIRA-TOKEN", "Authorization", "client_secret"],
)
def test_credential_field_names(name: str) -> None:
    assert is_secret_field(name)
    assert redact(name, "value") == "***"


@pytest.mark.parametrize("name", ["jira_user", "key_grammar", "skip_branches", "issue_key"])
def test_ordinary_field_names_are_kept(name: str) -> None:
    assert not is_secret_field(name)
    assert redact(name, "value") == "value"


def test_authorization_values_are_hidden_under_any_key() -> None:
    assert redact("header", "Basic dXNlcjp0b2tlbg==") == "***"
    assert redact("args", ("GET", "bearer ghp_abc")) == ("GET", "***")
    assert redact("status", "In Progress") == "In Progress"
