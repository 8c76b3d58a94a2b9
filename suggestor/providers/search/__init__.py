"""Search backend provider implementations.

Currently only Solr.  The pipeline reaches it exclusively through
ISearchBackend (suggestor/interfaces/search_backend.py).
"""

from suggestor.providers.search.solr_provider import SolrSearchProvider

__all__ = ["SolrSearchProvider"]
