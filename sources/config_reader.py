"""
Reads the Secret Santa config file: bot token, participant Slack IDs, message options.
Accepts YAML or the plain JSON layout ({"token": ..., "users": [...]}).

A users entry is either a member ID or a mapping with an optional hint
for whoever draws them:

    users:
      - U012AB3CD
      - id: U045EF6GH
        hint: Loves tea, hates socks
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

# Relative to the working directory, like ./config.secret.json in the old bot.
DEFAULT_CONFIG_PATH = Path("config.secret.yaml")
DEFAULT_MESSAGE = "You are giving to {receiver}"
TOKEN_ENV_VAR = "SLACK_BOT_TOKEN"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class SantaConfig:
    token: str
    users: list[str]
    message: str = DEFAULT_MESSAGE
    test_run: bool = False
    seed: Optional[int] = None
    log_file: Optional[str] = None
    hints: dict[str, str] = field(default_factory=dict)


def _read(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(raw).__name__}")
    return raw


def _resolve_token(raw: dict) -> str:
    """File token wins; otherwise fall back to SLACK_BOT_TOKEN from env/.env."""
    token = raw.get("token")
    if token is None:
        load_dotenv()
        token = os.environ.get(TOKEN_ENV_VAR)
    if not isinstance(token, str) or not token.strip():
        raise ConfigError(f"Missing bot token: set 'token' in the config or {TOKEN_ENV_VAR}")
    return token.strip()


def _parse_entry(entry) -> tuple[str, Optional[str]]:
    if isinstance(entry, str) and entry.strip():
        return entry.strip(), None
    if isinstance(entry, dict):
        user_id = entry.get("id")
        hint = entry.get("hint")
        if isinstance(user_id, str) and user_id.strip() and (hint is None or isinstance(hint, str)):
            return user_id.strip(), (hint or "").strip() or None
    raise ConfigError(
        f"'users' entries must be non-empty strings or {{id, hint}} mappings, got {entry!r}"
    )


def _parse_users(raw: dict) -> tuple[list[str], dict[str, str]]:
    users = raw.get("users")
    if not isinstance(users, list):
        raise ConfigError("'users' must be a list of Slack member IDs")
    ids = []
    hints = {}
    for entry in users:
        user_id, hint = _parse_entry(entry)
        ids.append(user_id)
        if hint:
            hints[user_id] = hint
    return ids, hints


def _parse_message(raw: dict) -> str:
    message = raw.get("message", DEFAULT_MESSAGE)
    if not isinstance(message, str) or "{receiver}" not in message:
        raise ConfigError("'message' must be a string containing the {receiver} placeholder")
    # Render once now so a stray brace fails here, not mid-run.
    try:
        message.format(receiver="<@U0>")
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise ConfigError(
            f"'message' has a placeholder other than {{receiver}} ({e!r}); write literal braces as {{{{ }}}}"
        ) from e
    return message


def load_config(path: Optional[Path] = None) -> SantaConfig:
    """Load and validate the config file, raising ConfigError on any problem."""
    path = Path(path or DEFAULT_CONFIG_PATH).expanduser()
    raw = _read(path)

    seed = raw.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigError("'seed' must be an integer")

    test_run = raw.get("test_run", False)
    if not isinstance(test_run, bool):
        raise ConfigError("'test_run' must be true or false")

    log_file = raw.get("log_file")
    if log_file is not None and not isinstance(log_file, str):
        raise ConfigError("'log_file' must be a path string")

    users, hints = _parse_users(raw)
    return SantaConfig(
        token=_resolve_token(raw),
        users=users,
        message=_parse_message(raw),
        test_run=test_run,
        seed=seed,
        log_file=log_file,
        hints=hints,
    )
