"""
Record transport between workers and reducers.

Workers emit records to a :class:`RecordSink` keyed by operation type. The
in-process :class:`ShuffleTransport` stands in for a distributed group-by: it
routes each key to one partition with a stable :class:`Partitioner` and hands
every reducer the complete group of its keys. Each emitted record is delivered
exactly once; nothing is deduplicated.
"""

from __future__ import annotations

import logging
import threading
import zlib
from collections import defaultdict
from typing import Dict, Iterator, List, Protocol, Tuple, runtime_checkable

from dfsbench.metrics import MetricRecord

__all__ = ["ListSink", "Partitioner", "RecordSink", "ShuffleTransport"]

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordSink(Protocol):
    """Destination for records emitted by a worker."""

    def emit(self, key: str, record: MetricRecord) -> None: ...


class ListSink:
    """Sink collecting ``(key, record)`` pairs in emission order."""

    def __init__(self) -> None:
        self.items: List[Tuple[str, MetricRecord]] = []
        self._lock = threading.Lock()

    def emit(self, key: str, record: MetricRecord) -> None:
        with self._lock:
            self.items.append((key, record))

    @property
    def keys(self) -> List[str]:
        return [key for key, _ in self.items]

    @property
    def records(self) -> List[MetricRecord]:
        return [record for _, record in self.items]

    def __len__(self) -> int:
        return len(self.items)


class Partitioner:
    """Assign keys to partitions with a hash that is stable across processes."""

    def __init__(self, num_partitions: int) -> None:
        if num_partitions < 1:
            raise ValueError("num_partitions must be a positive integer")
        self.num_partitions = num_partitions

    def partition(self, key: str) -> int:
        return zlib.crc32(key.encode("utf-8")) % self.num_partitions


class ShuffleTransport:
    """Thread-safe sink grouping records by key into partitions."""

    def __init__(self, num_partitions: int = 1) -> None:
        self.partitioner = Partitioner(num_partitions)
        self._partitions: List[Dict[str, List[MetricRecord]]] = [
            defaultdict(list) for _ in range(num_partitions)
        ]
        self._lock = threading.Lock()
        self._emitted = 0

    @property
    def num_partitions(self) -> int:
        return self.partitioner.num_partitions

    @property
    def emitted(self) -> int:
        return self._emitted

    def emit(self, key: str, record: MetricRecord) -> None:
        partition = self.partitioner.partition(key)
        with self._lock:
            self._partitions[partition][key].append(record)
            self._emitted += 1

    def groups(self, partition: int) -> Iterator[Tuple[str, List[MetricRecord]]]:
        """Yield ``(key, records)`` for every key routed to ``partition``, sorted by key."""
        if not 0 <= partition < self.num_partitions:
            raise IndexError(f"Partition {partition} out of range")
        with self._lock:
            snapshot = {key: list(records) for key, records in self._partitions[partition].items()}
        for key in sorted(snapshot):
            yield key, snapshot[key]

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(key for part in self._partitions for key in part)
