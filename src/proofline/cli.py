# src/proofline/cli.py

"""Console entry point: run the language server on stdio."""

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

from proofline._version import __version__
from proofline.cache import CacheStorageError, CheckStore, FingerprintCache, SQLiteCheckStore
from proofline.config import ServerConfig, load_config
from proofline.llms import create_llm_client
from proofline.lsp import LanguageServer
from proofline.observability import configure_logging
from proofline.observability.base import LoggingMetricsHook, MetricsHook, NoOpMetricsHook
from proofline.oracle import GrammarOracle
from proofline.oracle.grammar import PROMPT_NAME
from proofline.pipeline import DiagnosticPipeline
from proofline.prompts import BUILTIN_DIRECTORY, PromptsLibrary
from proofline.ratelimit import RateGate

logger = logging.getLogger(__name__)


def build_pipeline(
    config: ServerConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> tuple[DiagnosticPipeline, SQLiteCheckStore]:
    """Wire cache, rate gate and oracle from config."""
    directories: list[str | Path] = [BUILTIN_DIRECTORY]
    if config.prompt_dir:
        directories.append(config.prompt_dir)
    prompt = PromptsLibrary(*directories).get(PROMPT_NAME, config.prompt_version)

    store = SQLiteCheckStore(db_path=config.database, metrics_hook=metrics_hook)
    llm_client = create_llm_client(config.llm, metrics_hook=metrics_hook)
    pipeline = DiagnosticPipeline(
        cache=FingerprintCache(store, metrics_hook=metrics_hook),
        gate=RateGate.from_config(config.rate, metrics_hook=metrics_hook),
        oracle=GrammarOracle(llm_client, prompt=prompt, metrics_hook=metrics_hook),
        metrics_hook=metrics_hook,
    )
    return pipeline, store


async def report_cache(store: CheckStore) -> None:
    """Log how many verdicts are cached. A broken cache is reported, not fatal."""
    try:
        cached = await store.count()
    except CacheStorageError as exc:
        logger.warning("Check cache unavailable, every sentence will be checked: %s", exc)
        return
    logger.info("Check cache holds %d verdicts", cached)


async def run_stdio(
    config: ServerConfig, metrics_hook: MetricsHook = NoOpMetricsHook()
) -> None:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(reader), sys.stdin
    )

    pipeline, store = build_pipeline(config, metrics_hook)
    await report_cache(store)
    server = LanguageServer(pipeline, output=sys.stdout.buffer)
    try:
        await server.serve(reader)
    finally:
        await store.close()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="proofline",
        description="Grammar-checking language server for prose and markdown.",
    )
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--log-file", help="Log file (truncated on start)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("--database", help="SQLite file for cached verdicts")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> ServerConfig:
    """Load the config file and apply command-line overrides."""
    config = load_config(args.config)
    overrides = {
        name: value
        for name, value in (
            ("log_file", args.log_file),
            ("log_level", args.log_level),
            ("database", args.database),
        )
        if value is not None
    }
    return dataclasses.replace(config, **overrides)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = resolve_config(args)
    configure_logging(config.log_file, config.log_level)
    logger.info("Starting proofline %s", __version__)
    metrics_hook: MetricsHook = (
        LoggingMetricsHook() if config.log_level == "DEBUG" else NoOpMetricsHook()
    )

    try:
        asyncio.run(run_stdio(config, metrics_hook))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0
