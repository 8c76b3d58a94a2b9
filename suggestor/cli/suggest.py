"""Standalone CLI for running one suggestion request.

Usage::

    python -m suggestor.cli.suggest "twain"
    python -m suggestor.cli.suggest "mark twain" --author-only --verbose
    python -m suggestor.cli.suggest "civil war" --json --config config/config.yaml

Builds the same components as the web service (Solr backend, optional AI
provider, orchestrator) from configuration, runs the query once, and
prints the suggestions.  Useful for tuning the confidence multiplier or a
prompt template against a live backend.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time


def _format_text_output(state) -> str:  # noqa: ANN001
    """Format the final pipeline state as a short human-readable report."""
    lines: list[str] = [f"Query: {state.query}"]
    if state.term:
        lines.append(f"Term:  {state.term}")

    stats = state.baseline.statistics
    if stats is not None:
        lines.append(
            f"Candidates: {stats.count}  |  mean {stats.mean:.2f}  |  "
            f"stddev {stats.stddev:.2f}  |  cutoff {stats.cutoff:.2f}"
        )
    if state.proposal is not None:
        lines.append(f"AI proposed: {len(state.proposal.suggestions)}")
        if state.proposal.did_you_mean:
            lines.append(f"Did you mean: {state.proposal.did_you_mean}")

    lines.append("")
    if state.suggestions:
        lines.append("SUGGESTIONS")
        lines.append("-" * 40)
        for suggestion in state.suggestions:
            lines.append(f"  [{suggestion.type.value}] {suggestion.value}")
    else:
        lines.append("No suggestions.")

    for error in state.errors:
        lines.append(f"  ! {error.stage.value}: {error.error_type}: {error.message}")

    return "\n".join(lines)


def _format_json_output(state) -> str:  # noqa: ANN001
    """Serialize the suggestions (and any recovered errors) to JSON."""
    output: dict = {
        "suggestions": [s.model_dump(mode="json") for s in state.suggestions],
    }
    if state.proposal is not None and state.proposal.did_you_mean:
        output["didYouMean"] = state.proposal.did_you_mean
    if state.errors:
        output["errors"] = [e.model_dump(mode="json") for e in state.errors]
    return json.dumps(output, indent=2)


def _suppress_logs() -> None:
    """Send structlog and stdlib logging to stderr at WARNING+ level."""
    import logging

    import structlog

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def _run(
    query: str,
    author_only: bool,
    verbose: bool,
    json_output: bool,
    config_path: str | None,
) -> int:
    """Build components, run the query once, and print the result."""
    # Deferred: suggestor.main configures logging on import.
    from suggestor.config.loader import load_config
    from suggestor.main import build_components, close_components, settings

    if json_output:
        _suppress_logs()

    config = load_config(path=config_path, settings=settings)
    components = build_components(settings, config=config)
    orchestrator = components["orchestrator"]

    start = time.monotonic()
    try:
        if author_only:
            response = await orchestrator.author_suggestions(query, verbose=verbose)
            state = None
        else:
            state = await orchestrator.run(query, verbose=verbose)
    finally:
        await close_components(components)
    elapsed = time.monotonic() - start
    print(f"Done in {elapsed:.2f}s", file=sys.stderr)

    if state is None:
        if json_output:
            print(json.dumps(response.model_dump(mode="json"), indent=2))
        else:
            for suggestion in response.suggestions:
                print(f"[{suggestion.type.value}] {suggestion.value}")
            if not response.suggestions:
                print("No suggestions.")
        return 0

    print(_format_json_output(state) if json_output else _format_text_output(state))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m suggestor.cli.suggest",
        description="Run one author-suggestion request against the configured backend.",
    )
    parser.add_argument("query", type=str, help="The raw keyword query.")
    parser.add_argument(
        "--author-only",
        action="store_true",
        help="Skip the AI step; return the backend's confident authors only.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-candidate scores and the cutoff statistics.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print JSON instead of text (implies quiet logging).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration file (default: SUGGESTOR_CONFIG_PATH or config/config.yaml).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the suggest tool."""
    args = _build_parser().parse_args(argv)
    exit_code = asyncio.run(
        _run(args.query, args.author_only, args.verbose, args.json_output, args.config)
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
