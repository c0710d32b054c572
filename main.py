#!/usr/bin/env python
"""CLI for gathering evidence on a news claim."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from verify_evidence.config import create_from_config, get_default_config_path, load_config
from verify_evidence.data import Claim, PipelineStatus

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    claim: str
    config: Path
    log: bool = False
    log_dir: str = "logs"

    @field_validator("claim")
    @classmethod
    def claim_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Claim must not be empty")
        return v

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


def _report_status(status: PipelineStatus) -> None:
    logger.info(f"[{status}]")


async def run(args: CLIArgs) -> None:
    """Execute the pipeline with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Gathering evidence for: {args.claim}")
    logger.info(f"Config: {args.config}")

    results, usage = await pipeline.run(Claim(text=args.claim), on_status=_report_status)

    if results and results[0].is_degraded:
        print("\nNo sources found. Search the web instead:\n")
    else:
        print(f"\nFound {len(results)} ranked sources:\n")
    for i, scored in enumerate(results, 1):
        article = scored.article
        logger.info(f"{i}. [{scored.score}] {article.title}")
        if article.url:
            logger.info(f"   URL: {article.url}")
        if article.published_at:
            logger.info(f"   Published: {article.published_at}")
        if article.snippet:
            logger.info(f"   {article.snippet[:200]}")
        logger.info("")

    logger.info("\n--- Usage Summary ---")
    logger.info(f"Search responses: {usage.search_requests}")
    logger.info(f"Cache hits: {usage.cache_hits}")
    logger.info(f"API calls: {len(usage.api_calls)}")
    logger.info(f"Input tokens: {usage.input_tokens:,}")
    logger.info(f"Output tokens: {usage.output_tokens:,}")

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Gather ranked evidence for a news claim.")
    parser.add_argument(
        "claim",
        help="Claim or news text to verify",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable intermediate pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            claim=ns.claim,
            config=config_path,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
