"""Runtime settings for jiralint.

Values are merged from four layers, highest precedence first:

1. explicit overrides (CLI options);
2. the environment: GitHub Action inputs (``INPUT_JIRA-TOKEN``) and then the
   plain variables ``JIRA_BASE_URL``, ``JIRA_TOKEN``, ``JIRA_USER``,
   ``GITHUB_TOKEN`` and ``GITHUB_API_URL``;
3. an optional YAML file;
4. the defaults declared on :class:`LintSettings`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import os
from pathlib import Path
import re
from typing import Any, Dict, Mapping, Optional, Pattern

import yaml

from ..errors import ConfigurationError
from ..logging_config import get_logger
from ..matcher.grammar import KeyGrammar
from ..policy.rules import DEFAULT_PR_ADDITIONS_THRESHOLD, parse_allowed_statuses
from ..utils.logging import redact_items
from ..validation.commits import CommitConvention

LOGGER = get_logger(__name__)

DEFAULT_JIRA_TIMEOUT = 2.0
DEFAULT_GITHUB_API_URL = "https://api.github.com"
_TRUTHY = {"1", "true", "yes", "on"}

# Action input name for each settings field.
INPUT_NAMES: Dict[str, str] = {
    "jira_base_url": "jira-base-url",
    "jira_token": "jira-token",
    "jira_user": "jira-user",
    "github_token": "github-token",
    "skip_branches": "skip-branches",
    "skip_comments": "skip-comments",
    "skip_gifs": "skip-gifs",
    "pr_threshold": "pr-threshold",
    "validate_issue_status": "validate_issue_status",
    "allowed_issue_statuses": "allowed_issue_statuses",
    "key_grammar": "key-grammar",
    "commit_convention": "commit-convention",
    "fail_on_humongous_pr": "fail-on-humongous-pr",
    "jira_timeout": "jira-timeout",
    "github_api_url": "github-api-url",
}

PLAIN_ENV_NAMES: Dict[str, str] = {
    "jira_base_url": "JIRA_BASE_URL",
    "jira_token": "JIRA_TOKEN",
    "jira_user": "JIRA_USER",
    "github_token": "GITHUB_TOKEN",
    "github_api_url": "GITHUB_API_URL",
}


@dataclass(frozen=True)
class LintSettings:
    jira_base_url: str = ""
    jira_token: str = ""
    jira_user: str = ""
    github_token: str = ""
    skip_branches: str = ""
    skip_comments: bool = False
    skip_gifs: bool = False
    pr_threshold: int = DEFAULT_PR_ADDITIONS_THRESHOLD
    validate_issue_status: bool = False
    allowed_issue_statuses: tuple[str, ...] = ()
    key_grammar: str = "trailing"
    commit_convention: CommitConvention = CommitConvention.PREFIX
    fail_on_humongous_pr: bool = False
    jira_timeout: float = DEFAULT_JIRA_TIMEOUT
    github_api_url: str = DEFAULT_GITHUB_API_URL

    @property
    def grammar(self) -> KeyGrammar:
        return KeyGrammar.from_name(self.key_grammar)

    @property
    def ignore_pattern(self) -> Optional[Pattern[str]]:
        return re.compile(self.skip_branches) if self.skip_branches else None

    def require(self, *names: str) -> None:
        """Raise :class:`ConfigurationError` when any of *names* is blank."""

        missing = [INPUT_NAMES.get(name, name) for name in names if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                "Missing required inputs: " + ", ".join(missing),
                context={"missing": missing},
            )

    def safe_dict(self) -> Dict[str, Any]:
        """Return the settings with credentials redacted, for logging."""

        payload = asdict(self)
        payload["commit_convention"] = self.commit_convention.value
        payload["allowed_issue_statuses"] = list(self.allowed_issue_statuses)
        return redact_items(payload)


def _env_value(env: Mapping[str, str], field_name: str) -> Optional[str]:
    input_name = INPUT_NAMES[field_name]
    value = env.get(f"INPUT_{input_name.replace(' ', '_').upper()}")
    if value:
        return value
    plain = PLAIN_ENV_NAMES.get(field_name)
    if plain and env.get(plain):
        return env[plain]
    return None


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(
            "Configuration file not found", context={"path": str(config_path)}
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Configuration file is not valid YAML: {exc}",
            context={"path": str(config_path)},
        ) from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError(
            "Configuration file must contain a mapping", context={"path": str(config_path)}
        )
    return {str(key).replace("-", "_"): value for key, value in payload.items()}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _as_threshold(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        LOGGER.warning(
            "Invalid pr-threshold; using default",
            extra={"value": value, "default": DEFAULT_PR_ADDITIONS_THRESHOLD},
        )
        return DEFAULT_PR_ADDITIONS_THRESHOLD


def _as_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        timeout = 0.0
    if timeout <= 0:
        LOGGER.warning(
            "Invalid jira-timeout; using default",
            extra={"value": value, "default": DEFAULT_JIRA_TIMEOUT},
        )
        return DEFAULT_JIRA_TIMEOUT
    return timeout


def _coerce(raw: Mapping[str, Any]) -> LintSettings:
    values: Dict[str, Any] = {}
    for name in ("jira_base_url", "jira_token", "jira_user", "github_token", "skip_branches"):
        if name in raw:
            values[name] = str(raw[name] or "").strip()
    for name in ("skip_comments", "skip_gifs", "validate_issue_status", "fail_on_humongous_pr"):
        if name in raw:
            values[name] = _as_bool(raw[name])

    if "jira_base_url" in values:
        values["jira_base_url"] = values["jira_base_url"].rstrip("/")
    if "github_api_url" in raw:
        values["github_api_url"] = str(raw["github_api_url"] or DEFAULT_GITHUB_API_URL).rstrip("/")
    if "pr_threshold" in raw:
        values["pr_threshold"] = _as_threshold(raw["pr_threshold"])
    if "jira_timeout" in raw:
        values["jira_timeout"] = _as_timeout(raw["jira_timeout"])
    if "allowed_issue_statuses" in raw:
        values["allowed_issue_statuses"] = parse_allowed_statuses(raw["allowed_issue_statuses"])

    if "key_grammar" in raw:
        name = str(raw["key_grammar"] or "").strip().lower()
        try:
            KeyGrammar.from_name(name)
        except ValueError as exc:
            raise ConfigurationError(str(exc), context={"key-grammar": name}) from exc
        values["key_grammar"] = name or "trailing"

    if "commit_convention" in raw:
        convention = str(raw["commit_convention"] or "").strip().lower() or "prefix"
        try:
            values["commit_convention"] = CommitConvention(convention)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown commit convention: {convention}",
                context={"commit-convention": convention},
            ) from exc

    skip_branches = values.get("skip_branches")
    if skip_branches:
        try:
            re.compile(skip_branches)
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid skip-branches pattern: {exc}",
                context={"skip-branches": skip_branches},
            ) from exc

    return LintSettings(**values)


def load_settings(
    *,
    env: Optional[Mapping[str, str]] = None,
    config_path: Optional[Path | str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> LintSettings:
    """Merge every configuration layer into a :class:`LintSettings`."""

    env = os.environ if env is None else env
    known = {item.name for item in fields(LintSettings)}

    raw: Dict[str, Any] = {}
    if config_path is not None:
        raw.update(
            (key, value) for key, value in _read_yaml(Path(config_path)).items() if key in known
        )

    for name in INPUT_NAMES:
        value = _env_value(env, name)
        if value is not None:
            raw[name] = value

    for key, value in (overrides or {}).items():
        if value is not None and key in known:
            raw[key] = value

    settings = _coerce(raw)
    LOGGER.debug("Settings loaded", extra={"settings": settings.safe_dict()})
    return settings


__all__ = ["INPUT_NAMES", "LintSettings", "load_settings"]
