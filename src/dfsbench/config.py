"""
Run configuration for dfsbench.

``BenchmarkConfig`` is validated once, before any worker starts. Values come
from an optional YAML or JSON file and are overridden by explicitly supplied
options (the CLI passes every flag it received). Any problem surfaces as
:class:`~dfsbench.exceptions.ConfigurationError`.

Example ``dfsbench.yaml``::

    workers: 4
    ops_per_worker: 1000
    operations: mkdir,write,read,ls
    backend: memory
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from dfsbench.constants import (
    DEFAULT_BASE_DIR,
    DEFAULT_FILE_SIZE_MB,
    DEFAULT_HEARTBEAT_INTERVAL,
    DEFAULT_OPERATIONS,
    DEFAULT_OPS_PER_WORKER,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_POOL_SIZE,
    DEFAULT_REDUCERS,
    DEFAULT_WORKERS,
)
from dfsbench.exceptions import ConfigurationError
from dfsbench.operations import MissingFilePolicy, OperationType
from dfsbench.storage import BackendType
from dfsbench.worker import WorkerSettings

__all__ = ["BenchmarkConfig", "load_config"]

logger = logging.getLogger(__name__)


class BenchmarkConfig(BaseModel):
    """Validated settings of one benchmark run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    workers: int = Field(default=DEFAULT_WORKERS, ge=1)
    reducers: int = Field(default=DEFAULT_REDUCERS, ge=1)
    base_dir: str = Field(default=DEFAULT_BASE_DIR, min_length=1)
    output_dir: str = Field(default=DEFAULT_OUTPUT_DIR, min_length=1)
    operations: List[str] = Field(default_factory=lambda: list(DEFAULT_OPERATIONS))
    strict_operations: bool = True
    ops_per_worker: int = Field(default=DEFAULT_OPS_PER_WORKER, ge=1)
    file_size_mb: int = Field(default=DEFAULT_FILE_SIZE_MB, ge=0)
    pool_size: int = Field(default=DEFAULT_POOL_SIZE, ge=1)
    async_mode: bool = True
    missing_file_policy: MissingFilePolicy = MissingFilePolicy.ERROR
    heartbeat_interval: float = Field(default=DEFAULT_HEARTBEAT_INTERVAL, ge=0.0)
    backend: BackendType = BackendType.LOCAL
    seed: Optional[int] = None

    @field_validator("operations", mode="before")
    @classmethod
    def split_operations(cls, v):
        """Accept ``"mkdir,write"`` as well as a list of names."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            v = [str(item).strip() for item in v if str(item).strip()]
            if not v:
                raise ValueError("at least one operation is required")
        return v

    @model_validator(mode="after")
    def check_operations_known(self) -> "BenchmarkConfig":
        if self.strict_operations:
            unknown = [op for op in self.operations if OperationType.lookup(op) is None]
            if unknown:
                raise ValueError(f"unknown operations: {', '.join(unknown)}")
        return self

    def worker_settings(self, worker_id: int) -> WorkerSettings:
        """Derive the settings for worker ``worker_id``."""
        if not 0 <= worker_id < self.workers:
            raise ValueError(f"worker_id {worker_id} outside 0..{self.workers - 1}")
        return WorkerSettings(
            worker_id=worker_id,
            operations=tuple(self.operations),
            ops_per_worker=self.ops_per_worker,
            base_dir=self.base_dir,
            file_size_mb=self.file_size_mb,
            pool_size=self.pool_size,
            async_mode=self.async_mode,
            missing_file_policy=self.missing_file_policy,
            seed=self.seed,
            heartbeat_interval=self.heartbeat_interval,
        )


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}", context={"path": str(path)})

    suffix = path.suffix.lower()
    try:
        with open(path, encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to parse configuration file: {e}", context={"path": str(path)}) from e
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}", context={"path": str(path)}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {path}")
    logger.debug("Loaded configuration from %s", path)
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> BenchmarkConfig:
    """
    Build a validated configuration.

    Args:
        path: Optional YAML (``.yaml``/``.yml``) or JSON file
        overrides: Values taking precedence over the file; ``None`` entries are ignored

    Returns:
        The validated :class:`BenchmarkConfig`

    Raises:
        ConfigurationError: If the file cannot be read or a value is invalid
    """
    data: Dict[str, Any] = _read_file(Path(path)) if path else {}
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return BenchmarkConfig(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}", context={"errors": e.error_count()}) from e
