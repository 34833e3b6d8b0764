"""Environment-backed configuration for the bundled ingestion client and CLI.

Purpose
-------
Keep every read of ``os.environ`` in one module. The ingestion core never
touches the environment; only :func:`create_ingester_client` and the CLI call
into here.

Contents
--------
* :func:`enable_dotenv` / :func:`should_use_dotenv` – optional ``.env``
  loading via :mod:`dotenv`.
* :class:`IngestEndpointSettings` – endpoint, credentials, and timeout for
  :class:`lib_log_ingest.adapters.ingester.HttpLogIngester`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "LOG_INGEST_USE_DOTENV"
ACCOUNT_ENV_VAR = "LM_ACCOUNT"
BEARER_TOKEN_ENV_VAR = "LM_BEARER_TOKEN"
URL_ENV_VAR = "LM_INGEST_URL"
TIMEOUT_ENV_VAR = "LM_INGEST_TIMEOUT"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_PATH: Path | None = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is requested.

    An explicit CLI choice wins over the environment toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding variables already set.

    Returns the resolved path of the loaded file, or ``None`` when no file was
    found. Repeated calls reuse the first result.
    """

    global _DOTENV_PATH
    if _DOTENV_PATH is not None:
        return _DOTENV_PATH
    if search_from is not None:
        candidate = _find_upwards(search_from)
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    _DOTENV_PATH = candidate.resolve()
    return _DOTENV_PATH


def _find_upwards(start: Path) -> Path | None:
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_PATH
    _DOTENV_PATH = None


@dataclass(slots=True, frozen=True)
class IngestEndpointSettings:
    """Where and how the HTTP client delivers log entries."""

    url: str
    bearer_token: str | None = None
    timeout: float = 10.0

    @classmethod
    def for_account(cls, account: str, **kwargs: object) -> "IngestEndpointSettings":
        """Return settings targeting ``https://<account>.logicmonitor.com``.

        Examples
        --------
        >>> IngestEndpointSettings.for_account("acme").url
        'https://acme.logicmonitor.com/rest/log/ingest'
        """
        account = account.strip()
        if not account:
            raise ValueError("account must not be empty")
        return cls(url=f"https://{account}.logicmonitor.com/rest/log/ingest", **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "IngestEndpointSettings":
        """Resolve settings from ``LM_*`` environment variables.

        ``LM_INGEST_URL`` wins over ``LM_ACCOUNT``; one of them is required.
        """

        env = os.environ if environ is None else environ
        token = (env.get(BEARER_TOKEN_ENV_VAR) or "").strip() or None
        timeout = _parse_timeout(env.get(TIMEOUT_ENV_VAR))
        url = (env.get(URL_ENV_VAR) or "").strip()
        if url:
            return cls(url=url, bearer_token=token, timeout=timeout)
        account = (env.get(ACCOUNT_ENV_VAR) or "").strip()
        if not account:
            raise ValueError(f"{ACCOUNT_ENV_VAR} or {URL_ENV_VAR} must be set to create the log ingest client")
        return cls.for_account(account, bearer_token=token, timeout=timeout)


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return 10.0
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{TIMEOUT_ENV_VAR} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{TIMEOUT_ENV_VAR} must be positive")
    return value


def env_flag(name: str, default: bool) -> bool:
    """Return the boolean value of environment variable ``name``.

    Unknown spellings fall back to ``default``.

    Examples
    --------
    >>> env_flag("LOG_INGEST_EXAMPLE_FLAG", default=True)
    True
    """
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    return default


__all__ = [
    "ACCOUNT_ENV_VAR",
    "BEARER_TOKEN_ENV_VAR",
    "DOTENV_ENV_VAR",
    "IngestEndpointSettings",
    "TIMEOUT_ENV_VAR",
    "URL_ENV_VAR",
    "enable_dotenv",
    "env_flag",
    "should_use_dotenv",
]
