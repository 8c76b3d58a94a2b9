"""Process settings loaded from environment variables via pydantic-settings.

# --- HOW SETTINGS WORK -------------------------------------------------
#
# pydantic-settings reads configuration from TWO sources (priority order):
#
#   1. **Environment variables** -- e.g. SUGGESTOR_SOLR_HOST=http://solr:8080/solr
#   2. **.env file** -- key=value lines in the working directory's .env
#
# Field ``solr_host`` maps to env var ``SUGGESTOR_SOLR_HOST`` (prefix +
# upper-cased field name).  Defaults apply when neither source sets a value.
#
# These are the *process-level* knobs (where to listen, how to log, which
# file to load).  The structured service configuration -- Solr clients,
# suggestion parameters, AI block -- lives in ServiceConfig and is built by
# loader.load_config(), which applies the overrides below on top of it.
# -----------------------------------------------------------------------
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "SUGGESTOR_"


class Settings(BaseSettings):
    """Author suggestor process settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8080
    app_env: str = "development"
    log_level: str = "INFO"
    git_commit: str = "unknown"

    # === Service configuration file ===
    config_path: str = "config/config.yaml"

    # === Convenience overrides applied on top of the loaded ServiceConfig ===
    # Empty string = "not set" -> the value from YAML / JSON env blobs stands.
    solr_host: str = ""
    ai_provider: str = ""
    ai_model: str = ""
    aws_region: str = ""

    # === AI provider credentials ===
    # Bedrock uses the standard AWS credential chain instead (env vars,
    # shared config files, instance roles).
    openai_api_key: str = ""
    anthropic_api_key: str = ""
