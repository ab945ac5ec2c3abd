"""Configuration loading: YAML file, environment overrides and validation."""

from __future__ import annotations

import copy
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from hookgate.config.models import HookGateConfig
from hookgate.receivers.secret_store import parse_secret_setting

ENV_PREFIX = "HOOKGATE_"
CONFIG_PATH_ENV = "HOOKGATE_CONFIG"
SECRET_ENV_PREFIX = "HOOKGATE_RECEIVER_SECRET_"


class ConfigLoadError(ValueError):
    """Raised when configuration cannot be parsed or fails validation."""


class YAMLConfigLoader:
    """Locate and read ``hookgate.yaml``.

    The file path comes from ``HOOKGATE_CONFIG`` when set, then from the
    ``--config`` option, then from the working directory.
    """

    DEFAULT_FILENAME = "hookgate.yaml"

    @classmethod
    def resolve_path(cls, cli_path: str | None = None) -> Path:
        for candidate in (os.environ.get(CONFIG_PATH_ENV), cli_path):
            if candidate and candidate.strip():
                return Path(candidate.strip())
        return Path.cwd() / cls.DEFAULT_FILENAME

    @classmethod
    def load_dict(cls, path: str | Path | None = None) -> dict[str, Any]:
        """Return the parsed mapping, or ``{}`` when the file is absent or blank."""
        source = cls.resolve_path() if path is None else Path(path)
        if not source.is_file():
            return {}
        try:
            with source.open(encoding="utf-8") as stream:
                document = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            where = str(source)
            mark = getattr(exc, "problem_mark", None)
            if mark is not None:
                where = f"{where}:{mark.line + 1}:{mark.column + 1}"
            raise ConfigLoadError(f"Invalid YAML at {where}") from exc
        if document is None:
            return {}
        if not isinstance(document, dict):
            raise ConfigLoadError(f"Top level of {source} must be a mapping, got {type(document).__name__}")
        return document


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> HookGateConfig:
    """Build the process-wide configuration snapshot.

    Values come from the YAML file, then ``HOOKGATE_SECTION__KEY`` overrides,
    then ``HOOKGATE_RECEIVER_SECRET_<NAME>`` secret settings, which accept
    either a bare secret for the default route or ``id1=secret1, id2=secret2``.
    """
    env = os.environ if environ is None else environ
    data = YAMLConfigLoader.load_dict(path)
    data = _deep_merge(data, _collect_env_overrides(env))
    secrets = _collect_secret_settings(env)
    if secrets:
        receivers = data.get("receivers")
        if receivers is None:
            receivers = {}
        if not isinstance(receivers, dict):
            raise ConfigLoadError("receivers must be a mapping")
        data["receivers"] = _deep_merge(receivers, secrets)
    try:
        return HookGateConfig.model_validate(data)
    except ValidationError as exc:
        # input values are left out so secrets never reach logs or tracebacks
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors(include_input=False, include_url=False)
        )
        raise ConfigLoadError(f"Invalid configuration: {details}") from None


def _deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(base)
    for key, incoming in updates.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(incoming, dict):
            incoming = _deep_merge(current, incoming)
        result[key] = incoming
    return result


def _coerce_env_value(raw: str) -> Any:
    text = raw.strip()
    if text.lower() in ("true", "false"):
        return text.lower() == "true"
    if text.lstrip("-").isdigit():
        return int(text)
    return text


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Turn ``HOOKGATE_HTTP__PORT=9443`` style variables into a nested mapping."""
    overrides: dict[str, Any] = {}
    for name, raw_value in environ.items():
        if not name.startswith(ENV_PREFIX) or name == CONFIG_PATH_ENV or name.startswith(SECRET_ENV_PREFIX):
            continue
        *parents, leaf = [segment.lower() for segment in name[len(ENV_PREFIX) :].split("__")]
        if not leaf or not all(parents):
            continue
        section = overrides
        for parent in parents:
            if not isinstance(section.get(parent), dict):
                section[parent] = {}
            section = section[parent]
        # secrets stay strings even when they look numeric
        section[leaf] = raw_value.strip() if "secrets" in parents else _coerce_env_value(raw_value)
    return overrides


def _collect_secret_settings(environ: Mapping[str, str]) -> dict[str, Any]:
    receivers: dict[str, Any] = {}
    for key, raw_value in environ.items():
        if not key.startswith(SECRET_ENV_PREFIX):
            continue
        name = key[len(SECRET_ENV_PREFIX) :].strip().lower()
        if not name:
            continue
        receivers[name] = {"secrets": parse_secret_setting(raw_value)}
    return receivers
