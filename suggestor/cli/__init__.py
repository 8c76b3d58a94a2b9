# =============================================================================
# suggestor/cli/__init__.py -- CLI Module Overview
# =============================================================================
#
# Standalone command-line tools, each run via `python -m suggestor.cli.<module>`:
#
#   1. SUGGEST   (suggest.py)
#      Runs one query through the suggestion pipeline against the configured
#      Solr backend and AI provider, and prints the suggestions.
#
#   2. SETUP ENV (setup_env.py)
#      Turns a deployment's service.json into a setup_env.sh that exports
#      the SUGGESTOR_* variables needed to run the service locally.
#
# Both use argparse; heavy imports are deferred inside functions.
# =============================================================================

"""CLI tools for the author suggestor.

- ``python -m suggestor.cli.suggest`` -- run one suggestion request
- ``python -m suggestor.cli.setup_env`` -- generate setup_env.sh
"""
