"""Shared names and defaults for the benchmark harness."""

from __future__ import annotations

PROG_NAME = "dfsbench"

# Measurement tags carried by metric records.
DURATION = "duration"
ERROR = "error"
SKIPPED = "skipped"

# Value recorded when the operation type itself is not recognised.
UNKNOWN_OPERATION_SENTINEL = -1

BUFFER_SIZE = 8192
MEGABYTE = 1024 * 1024
APPEND_DATA_SIZE = 1024
APPEND_TRUNCATE_DATA_SIZE = 512
APPEND_TRUNCATE_ITERATIONS = 10
APPEND_TRUNCATE_TRUNCATE_SIZE = 500
FILE_PERMISSION = 0o644

DEFAULT_POOL_SIZE = 10
PROGRESS_EVERY = 100

DEFAULT_WORKERS = 10
DEFAULT_REDUCERS = 1
DEFAULT_BASE_DIR = "/tmp/dfsbench"
DEFAULT_OUTPUT_DIR = "dfsbench-results"
DEFAULT_OPERATIONS = ("mkdir", "write", "read", "delete_dir", "delete_file", "ls")
DEFAULT_FILE_SIZE_MB = 10
DEFAULT_OPS_PER_WORKER = 10000
DEFAULT_HEARTBEAT_INTERVAL = 30.0

REPORT_FILE_NAME = "part-00000"
SUMMARY_JSON_NAME = "summary.json"
