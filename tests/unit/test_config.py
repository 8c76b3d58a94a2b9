"""Unit tests for configuration loading, layering and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from suggestor.config.loader import load_config
from suggestor.config.schema import MIN_TIMEOUT_SECONDS, ServiceConfig, SolrClientConfig
from suggestor.config.settings import Settings
from suggestor.utils.errors import ConfigurationError

PROJECT_CONFIG = Path(__file__).parent.parent.parent / "config" / "config.yaml"


def _settings(**overrides) -> Settings:
    defaults = {"solr_host": "", "ai_provider": "", "ai_model": "", "aws_region": ""}
    defaults.update(overrides)
    return Settings(**defaults)


@pytest.fixture
def yaml_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "solr:\n"
        "  host: http://yaml-solr:8983/solr\n"
        "  core: authors\n"
        "suggestions:\n"
        "  author:\n"
        "    limit: 3\n"
        "    params:\n"
        "      deftype: edismax\n"
        "      fq: ['type:author']\n"
        "ai:\n"
        "  provider: bedrock\n"
        "  model: google.gemma-3-4b-it\n"
    )
    return path


class TestLoadConfig:
    def test_yaml_only(self, yaml_file: Path) -> None:
        config = load_config(path=str(yaml_file), environ={}, settings=_settings())
        assert config.solr.host == "http://yaml-solr:8983/solr"
        assert config.solr.core == "authors"
        assert config.suggestions.author.limit == 3
        assert config.suggestions.author.rows == 100
        assert config.ai.provider == "bedrock"

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(path=str(tmp_path / "absent.yaml"), environ={}, settings=_settings())
        assert config == ServiceConfig()

    def test_json_env_documents_merge_in_name_order(self, yaml_file: Path) -> None:
        environ = {
            "SUGGESTOR_JSON_02_AI": json.dumps({"ai": {"model": "second"}}),
            "SUGGESTOR_JSON_01_SERVICE": json.dumps(
                {"service": {"port": "9090", "jwt_key": "k"}, "ai": {"model": "first"}}
            ),
            "UNRELATED": "{not json",
        }
        config = load_config(path=str(yaml_file), environ=environ, settings=_settings())
        assert config.service.port == "9090"
        assert config.service.jwt_key == "k"
        assert config.ai.model == "second"
        assert config.ai.provider == "bedrock"
        assert config.solr.core == "authors"

    def test_settings_override_last(self, yaml_file: Path) -> None:
        environ = {"SUGGESTOR_JSON_01": json.dumps({"solr": {"host": "http://json:1/solr"}})}
        config = load_config(
            path=str(yaml_file),
            environ=environ,
            settings=_settings(solr_host="http://env:2/solr", ai_provider="openai"),
        )
        assert config.solr.host == "http://env:2/solr"
        assert config.ai.provider == "openai"
        assert config.ai.model == "google.gemma-3-4b-it"

    def test_bad_json_env(self, yaml_file: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(
                path=str(yaml_file),
                environ={"SUGGESTOR_JSON_01": "{oops"},
                settings=_settings(),
            )

    def test_json_env_must_be_object(self, yaml_file: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(path=str(yaml_file), environ={"SUGGESTOR_JSON_01": "[1]"}, settings=_settings())

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("solr:\n  hots: typo\n")
        with pytest.raises(ConfigurationError):
            load_config(path=str(path), environ={}, settings=_settings())

    def test_bad_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("solr: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path=str(path), environ={}, settings=_settings())

    def test_project_defaults_load(self) -> None:
        config = load_config(path=str(PROJECT_CONFIG), environ={}, settings=_settings())
        params = config.suggestions.author.params
        assert params.deftype == "edismax"
        assert params.fq == ["type:author"]
        assert config.ai.provider == ""
        assert config.solr.clients.healthcheck.endpoint == "admin/ping"


class TestSchema:
    @pytest.mark.parametrize("value", [0, -3, "abc", None])
    def test_timeouts_floored(self, value: object) -> None:
        client = SolrClientConfig(conn_timeout=value, read_timeout=value)
        assert client.conn_timeout == MIN_TIMEOUT_SECONDS
        assert client.read_timeout == MIN_TIMEOUT_SECONDS

    def test_url_for(self) -> None:
        config = ServiceConfig.model_validate({"solr": {"host": "http://s:1/solr/", "core": "c"}})
        assert config.solr.url_for(config.solr.clients.service) == "http://s:1/solr/c/select"
        assert config.solr.url_for(config.solr.clients.healthcheck) == "http://s:1/solr/c/admin/ping"

    def test_redacted_masks_secrets(self) -> None:
        config = ServiceConfig.model_validate(
            {"service": {"jwt_key": "secret"}, "ai": {"key": "sk-1"}}
        )
        redacted = config.redacted()
        assert redacted["service"]["jwt_key"] == "***"
        assert redacted["ai"]["key"] == "***"
        assert config.service.jwt_key == "secret"

    def test_frozen(self) -> None:
        config = ServiceConfig()
        with pytest.raises(Exception):
            config.solr.host = "x"  # type: ignore[misc]
