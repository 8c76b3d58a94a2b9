"""Public interface definitions for the external services the suggestor uses.

The search backend and the AI provider are accessed exclusively through
the abstract base classes defined here.  Concrete adapters live in
``suggestor/providers/`` and are wired together in ``suggestor/main.py``,
so unit tests can inject mocks without any network calls.

CONCRETE PROVIDER MAP:
    Interface        ->  Concrete implementations (in suggestor/providers/)
    -----------------------------------------------------------------
    ISearchBackend   ->  SolrSearchProvider
    IAIProvider      ->  BedrockAIProvider, OpenAIAIProvider,
                         AnthropicAIProvider
"""

from suggestor.interfaces.ai_provider import IAIProvider
from suggestor.interfaces.search_backend import ISearchBackend

__all__ = [
    "IAIProvider",
    "ISearchBackend",
]
