"""Configuration: process Settings, the ServiceConfig schema, and its loader."""

from suggestor.config.loader import load_config
from suggestor.config.schema import (
    AISection,
    ServiceConfig,
    ServiceSection,
    SolrClientConfig,
    SolrParamsConfig,
    SolrSection,
    SuggestionConfig,
)
from suggestor.config.settings import Settings

__all__ = [
    "AISection",
    "ServiceConfig",
    "ServiceSection",
    "Settings",
    "SolrClientConfig",
    "SolrParamsConfig",
    "SolrSection",
    "SuggestionConfig",
    "load_config",
]
