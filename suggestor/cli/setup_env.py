"""Generate a ``setup_env.sh`` for running the service locally against a deployment's config.

Usage::

    python -m suggestor.cli.setup_env --dir ~/terraform-infrastructure
    python -m suggestor.cli.setup_env --dir ~/infra --env production --provider bedrock \\
        --model anthropic.claude-3-sonnet-20240229-v1:0 --port 8085

Reads ``DIR/<env>/suggestor-ws/config/service.json`` (the JSON document a
deployment feeds the service), overrides the listen port and the AI
provider/model, and writes an executable script exporting it as
``SUGGESTOR_JSON_01_SERVICE`` together with ``SUGGESTOR_SOLR_HOST``.
Source the script, then start the service.
"""

from __future__ import annotations

import argparse
import json
import shlex
import sys
from pathlib import Path
from typing import Any

SERVICE_JSON_VAR = "SUGGESTOR_JSON_01_SERVICE"
SOLR_HOST_VAR = "SUGGESTOR_SOLR_HOST"
DEFAULT_MODEL = "google.gemma-3-4b-it"
ENVIRONMENTS = ("staging", "production")


def service_config_path(base_dir: Path, env: str) -> Path:
    return base_dir / env / "suggestor-ws" / "config" / "service.json"


def apply_overrides(
    document: dict[str, Any],
    port: str,
    provider: str = "",
    model: str = "",
) -> dict[str, Any]:
    """Return a copy of ``document`` with the port and AI selection overridden.

    Empty ``provider``/``model`` leave the document's values alone.
    """
    updated = json.loads(json.dumps(document))
    updated.setdefault("service", {})["port"] = port
    ai = updated.setdefault("ai", {})
    if provider:
        ai["provider"] = provider
    if model:
        ai["model"] = model
    return updated


def render_script(document: dict[str, Any], solr_host: str) -> str:
    """Render the shell script exporting the flattened document and Solr host."""
    flat = json.dumps(document, separators=(",", ":"))
    lines = ["#!/bin/bash", ""]
    if solr_host:
        lines.append(f"export {SOLR_HOST_VAR}={shlex.quote(solr_host)}")
    lines.append(f"export {SERVICE_JSON_VAR}={shlex.quote(flat)}")
    return "\n".join(lines) + "\n"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m suggestor.cli.setup_env",
        description="Generate setup_env.sh from a deployment's service.json.",
    )
    parser.add_argument("--dir", required=True, help="Local checkout of the deployment config tree.")
    parser.add_argument("--env", default="staging", choices=ENVIRONMENTS, help="Target environment.")
    parser.add_argument("--provider", default="", help="AI provider name override.")
    parser.add_argument("--model", default=DEFAULT_MODEL, help="AI model override.")
    parser.add_argument("--port", default="8080", help="Port for the service to listen on.")
    parser.add_argument(
        "--solr-host",
        default="",
        help="Solr base URL to export (default: solr.host from service.json).",
    )
    parser.add_argument("--output", default="setup_env.sh", help="Script to write.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    source = service_config_path(Path(args.dir).expanduser(), args.env)
    print(f"Generate suggestor config for {args.env} from {source.parent}", file=sys.stderr)

    try:
        document = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: cannot read {source}: {exc}", file=sys.stderr)
        return 1
    if not isinstance(document, dict):
        print(f"Error: {source} must contain a JSON object", file=sys.stderr)
        return 1

    document = apply_overrides(document, args.port, args.provider, args.model)
    solr_host = args.solr_host or document.get("solr", {}).get("host", "")

    output = Path(args.output)
    output.write_text(render_script(document, solr_host), encoding="utf-8")
    output.chmod(0o755)
    print(f"Wrote {output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
