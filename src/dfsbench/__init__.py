"""dfsbench: concurrent load harness for hierarchical storage services.

Subpackages/modules:
- metrics: typed metric records and their merge algebra
- storage: POSIX-like storage backends (local filesystem, in-memory)
- operations: operation catalog, handlers and the timed executor
- worker.py: round-robin worker loop
- progress.py: status reporting and heartbeat thread
- transport.py: record sinks, partitioner and in-process shuffle
- aggregation: per-operation reducer producing summary rows
- report.py: result artifact writer/reader and table rendering
- config.py: validated run configuration (YAML/JSON + overrides)
- orchestrator.py: local multi-worker run driver
- plan.py: operation plan files for dry scheduling
- cli: command line entrypoint
"""

__version__ = "0.3.0"

__all__ = [
    "__version__",
]
