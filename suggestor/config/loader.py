"""Service configuration loader: YAML file, JSON env blobs, env overrides.

# --- CONFIGURATION HIERARCHY -------------------------------------------
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml      -- Static defaults checked into the repo
#   2. SUGGESTOR_JSON_* vars   -- Whole JSON documents set at deploy time,
#                                 merged in sorted variable-name order
#                                 (SUGGESTOR_JSON_01_SERVICE before
#                                 SUGGESTOR_JSON_02_SOLR, and so on)
#   3. Settings overrides      -- Single-value env vars such as
#                                 SUGGESTOR_SOLR_HOST or SUGGESTOR_AI_MODEL
#
# The _deep_merge helper does recursive dict merging:
#   base = {"solr": {"core": "suggestions"}}
#   overrides = {"solr": {"host": "http://solr:8080/solr"}}
#   result = {"solr": {"core": "suggestions", "host": "http://solr:8080/solr"}}
#
# The merged document is validated once into the frozen ServiceConfig model
# and handed to component constructors; nothing reads it globally.
# -----------------------------------------------------------------------
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from suggestor.config.schema import ServiceConfig
from suggestor.config.settings import ENV_PREFIX, Settings
from suggestor.utils.errors import ConfigurationError
from suggestor.utils.logging import get_logger

JSON_ENV_PREFIX = f"{ENV_PREFIX}JSON_"

logger = get_logger(__name__)


def load_config(
    path: str | None = None,
    environ: Mapping[str, str] | None = None,
    settings: Settings | None = None,
) -> ServiceConfig:
    """Build the immutable service configuration.

    Args:
        path: YAML file to start from.  Defaults to ``settings.config_path``.
            A missing file is not an error; the model defaults apply.
        environ: Environment mapping to scan for ``SUGGESTOR_JSON_*``
            documents.  Defaults to ``os.environ``.
        settings: Process settings supplying the single-value overrides.

    Returns:
        The validated :class:`ServiceConfig`.

    Raises:
        ConfigurationError: If the YAML or any JSON document cannot be
            decoded, or the merged document fails validation.
    """
    settings = settings or Settings()
    environ = os.environ if environ is None else environ
    config_path = Path(path or settings.config_path)

    document = _read_yaml(config_path)

    for name in sorted(k for k in environ if k.startswith(JSON_ENV_PREFIX)):
        logger.info("config_json_env_loaded", variable=name)
        _deep_merge(document, _read_json_env(name, environ[name]))

    _deep_merge(document, _settings_overrides(settings))

    try:
        config = ServiceConfig.model_validate(document)
    except ValidationError as exc:
        raise ConfigurationError(
            message=f"invalid service configuration: {exc}",
        ) from exc

    logger.info("config_loaded", source=str(config_path), config=config.redacted())
    return config


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        logger.warning("config_file_missing", path=str(config_path))
        return {}
    try:
        with open(config_path) as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            message=f"cannot parse {config_path}: {exc}",
        ) from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(message=f"{config_path} must contain a mapping")
    return loaded


def _read_json_env(name: str, raw: str) -> dict[str, Any]:
    try:
        loaded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(message=f"cannot decode {name}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(message=f"{name} must be a JSON object")
    return loaded


def _settings_overrides(settings: Settings) -> dict[str, Any]:
    # Empty string means "not set"; only non-empty values override.
    overrides: dict[str, Any] = {}
    if settings.solr_host:
        overrides["solr"] = {"host": settings.solr_host}
    ai = {
        "provider": settings.ai_provider,
        "model": settings.ai_model,
        "region": settings.aws_region,
    }
    ai = {k: v for k, v in ai.items() if v}
    if ai:
        overrides["ai"] = ai
    return overrides


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
