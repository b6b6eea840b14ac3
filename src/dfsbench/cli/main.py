"""
dfsbench command line interface.

Usage:
    dfsbench --help
    dfsbench run --workers 4 --ops-per-worker 1000 --backend memory
    dfsbench run --config bench.yaml
    dfsbench generate --workers 2 --output-dir plans
    dfsbench show dfsbench-results

Environment Variables:
    DFSBENCH_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

import logging
import os
from pathlib import Path
from typing import Annotated, Any, Dict, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from dfsbench import __version__
from dfsbench.config import load_config
from dfsbench.constants import PROG_NAME
from dfsbench.exceptions import ConfigurationError
from dfsbench.operations import MissingFilePolicy
from dfsbench.orchestrator import LocalOrchestrator
from dfsbench.plan import write_plans
from dfsbench.report import read_report, render_table
from dfsbench.storage import BackendType

console = Console()

logging.basicConfig(
    level=os.environ.get("DFSBENCH_LOG_LEVEL", "INFO").upper(),
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name=PROG_NAME,
    help="Concurrent storage operation benchmark",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="YAML or JSON configuration file.")]
WorkersOption = Annotated[Optional[int], typer.Option("--workers", "-w", help="Number of independent workers.")]
OperationsOption = Annotated[
    Optional[str], typer.Option("--operations", "-o", help="Comma separated operations, run round-robin.")
]
OpsPerWorkerOption = Annotated[Optional[int], typer.Option("--ops-per-worker", "-n", help="Operations per worker.")]
OutputDirOption = Annotated[Optional[str], typer.Option("--output-dir", help="Directory receiving the results.")]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose output.")] = False,
) -> None:
    """
    dfsbench: drive storage operations from many workers and report latencies.
    """
    if verbose:
        logging.getLogger(PROG_NAME).setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")


def _load(config_path: Optional[Path], overrides: Dict[str, Any]):
    try:
        return load_config(config_path, overrides)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        raise typer.Exit(code=1)


@app.command()
def run(
    config_path: ConfigOption = None,
    workers: WorkersOption = None,
    reducers: Annotated[Optional[int], typer.Option("--reducers", "-r", help="Number of reducer partitions.")] = None,
    base_dir: Annotated[Optional[str], typer.Option("--base-dir", "-b", help="Root path for benchmark files.")] = None,
    output_dir: OutputDirOption = None,
    operations: OperationsOption = None,
    lenient_operations: Annotated[
        bool, typer.Option("--lenient-operations", help="Schedule unknown operation names as error records.")
    ] = False,
    ops_per_worker: OpsPerWorkerOption = None,
    file_size_mb: Annotated[Optional[int], typer.Option("--file-size", "-s", help="Write size in MiB.")] = None,
    pool_size: Annotated[Optional[int], typer.Option("--pool-size", "-p", help="Threads per worker.")] = None,
    sync: Annotated[bool, typer.Option("--sync", help="Run operations inline instead of on the worker pool.")] = False,
    missing_file_policy: Annotated[
        Optional[MissingFilePolicy],
        typer.Option("--missing-file-policy", help="How reads of never-written files are recorded."),
    ] = None,
    heartbeat_interval: Annotated[
        Optional[float], typer.Option("--heartbeat-interval", help="Seconds between heartbeats, 0 disables.")
    ] = None,
    backend: Annotated[Optional[BackendType], typer.Option("--backend", help="Storage backend.")] = None,
    seed: Annotated[Optional[int], typer.Option("--seed", help="Seed for generated payloads.")] = None,
) -> None:
    """
    Run the benchmark and print the per-operation results.
    """
    config = _load(
        config_path,
        {
            "workers": workers,
            "reducers": reducers,
            "base_dir": base_dir,
            "output_dir": output_dir,
            "operations": operations,
            "strict_operations": False if lenient_operations else None,
            "ops_per_worker": ops_per_worker,
            "file_size_mb": file_size_mb,
            "pool_size": pool_size,
            "async_mode": False if sync else None,
            "missing_file_policy": missing_file_policy,
            "heartbeat_interval": heartbeat_interval,
            "backend": backend,
            "seed": seed,
        },
    )

    result = LocalOrchestrator(config).run()
    console.print(render_table(result.summaries))
    console.print(
        f"{result.total_operations} operations, {result.failed_operations} failed, "
        f"{result.elapsed_seconds:.2f}s. Report: [bold]{result.report_path}[/bold]"
    )


@app.command()
def generate(
    config_path: ConfigOption = None,
    workers: WorkersOption = None,
    operations: OperationsOption = None,
    ops_per_worker: OpsPerWorkerOption = None,
    output_dir: OutputDirOption = None,
) -> None:
    """
    Write plan-<worker>.txt files listing the operations each worker would run.
    """
    config = _load(
        config_path,
        {
            "workers": workers,
            "operations": operations,
            "ops_per_worker": ops_per_worker,
            "output_dir": output_dir,
        },
    )
    paths = write_plans(config.operations, config.workers, config.ops_per_worker, config.output_dir)
    console.print(f"Wrote {len(paths)} plan files to [bold]{config.output_dir}[/bold]")


@app.command()
def show(
    path: Annotated[Path, typer.Argument(help="Report file or the directory holding part-00000.")],
) -> None:
    """
    Display an existing report as a table.
    """
    try:
        summaries = read_report(path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Cannot read report: %s", e)
        raise typer.Exit(code=1)
    console.print(render_table(summaries, title=f"Benchmark Results ({path})"))


@app.command()
def version() -> None:
    """
    Print the dfsbench version.
    """
    console.print(f"{PROG_NAME} {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
