"""
Built-in operation handlers.

Each handler performs one storage action for ``index`` inside the path
namespace of its operation and task, and returns an :class:`Outcome`. Backend
exceptions are not caught here; the executor converts them into error records
in one place.

Path layout (``<base>`` is the context base directory, ``<t>`` the task id):

- ``<base>/mkdir/<t>/dir_<i>``: mkdir, delete_dir
- ``<base>/write/<t>/file_<i>``: write and every operation on its file
- ``<base>/link_<t>/link_<i>``: create_symlink
- ``<base>/append_truncate/<t>/file_<i>``: append_truncate
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from dfsbench.constants import (
    APPEND_DATA_SIZE,
    APPEND_TRUNCATE_DATA_SIZE,
    APPEND_TRUNCATE_ITERATIONS,
    APPEND_TRUNCATE_TRUNCATE_SIZE,
    BUFFER_SIZE,
    FILE_PERMISSION,
    MEGABYTE,
)

from .context import MissingFilePolicy, OperationContext
from .outcome import Outcome

logger = logging.getLogger(__name__)

Handler = Callable[[OperationContext, int], Outcome]


def _skip_if_missing(ctx: OperationContext, path: str) -> Optional[Outcome]:
    """Return a skipped outcome when the policy says so and ``path`` is absent."""
    if ctx.missing_file_policy is MissingFilePolicy.SKIP and not ctx.backend.exists(path):
        return Outcome.skipped(f"{path} was never written")
    return None


def mkdir(ctx: OperationContext, index: int) -> Outcome:
    ctx.backend.mkdirs(ctx.build_path("mkdir", f"dir_{index}"))
    return Outcome.succeeded()


def write(ctx: OperationContext, index: int) -> Outcome:
    path = ctx.data_file(index)
    written = 0
    with ctx.backend.create(path, overwrite=True) as out:
        for chunk in ctx.payloads.chunks(ctx.file_size_mb * MEGABYTE):
            out.write(chunk)
            written += len(chunk)
    return Outcome.succeeded(f"wrote {written} bytes")


def read(ctx: OperationContext, index: int) -> Outcome:
    path = ctx.data_file(index)
    skipped = _skip_if_missing(ctx, path)
    if skipped:
        return skipped

    total = 0
    with ctx.backend.open(path) as stream:
        while True:
            chunk = stream.read(BUFFER_SIZE)
            if not chunk:
                break
            total += len(chunk)
    logger.debug("Read %s bytes from file %s", total, path)
    return Outcome.succeeded(f"read {total} bytes")


def delete_dir(ctx: OperationContext, index: int) -> Outcome:
    existed = ctx.backend.delete(ctx.build_path("mkdir", f"dir_{index}"), recursive=True)
    return Outcome.succeeded(None if existed else "directory did not exist")


def delete_file(ctx: OperationContext, index: int) -> Outcome:
    existed = ctx.backend.delete(ctx.data_file(index), recursive=False)
    return Outcome.succeeded(None if existed else "file did not exist")


def list_dir(ctx: OperationContext, index: int) -> Outcome:
    entries = ctx.backend.list_status(ctx.namespace_dir("write"))
    return Outcome.succeeded(f"{len(entries)} entries")


def rename(ctx: OperationContext, index: int) -> Outcome:
    source = ctx.data_file(index)
    skipped = _skip_if_missing(ctx, source)
    if skipped:
        return skipped
    ctx.backend.rename(source, ctx.build_path("write", f"file_renamed_{index}"))
    return Outcome.succeeded()


def get_file_status(ctx: OperationContext, index: int) -> Outcome:
    path = ctx.data_file(index)
    skipped = _skip_if_missing(ctx, path)
    if skipped:
        return skipped
    status = ctx.backend.get_status(path)
    return Outcome.succeeded(f"length={status.length}")


def exists(ctx: OperationContext, index: int) -> Outcome:
    found = ctx.backend.exists(ctx.data_file(index))
    return Outcome.succeeded(f"exists={found}")


def set_permission(ctx: OperationContext, index: int) -> Outcome:
    path = ctx.data_file(index)
    skipped = _skip_if_missing(ctx, path)
    if skipped:
        return skipped
    ctx.backend.set_permission(path, FILE_PERMISSION)
    return Outcome.succeeded()


def append(ctx: OperationContext, index: int) -> Outcome:
    path = ctx.data_file(index)
    skipped = _skip_if_missing(ctx, path)
    if skipped:
        return skipped
    with ctx.backend.append(path) as out:
        out.write(ctx.payloads.generate(APPEND_DATA_SIZE))
    return Outcome.succeeded()


def create_symlink(ctx: OperationContext, index: int) -> Outcome:
    link_dir = ctx.link_dir()
    if not ctx.backend.exists(link_dir):
        ctx.backend.mkdirs(link_dir)
    ctx.backend.create_symlink(ctx.data_file(index), f"{link_dir}/link_{index}")
    return Outcome.succeeded()


def append_truncate(ctx: OperationContext, index: int) -> Outcome:
    """Cycle append and truncate on one file.

    The first iteration writes to the stream opened by create (or append when
    the file already exists); later iterations reopen the file for append.
    An exception in any iteration aborts the remaining ones.
    """
    path = ctx.build_path("append_truncate", f"file_{index}")
    parent = ctx.namespace_dir("append_truncate")
    if not ctx.backend.exists(parent):
        ctx.backend.mkdirs(parent)

    if not ctx.backend.exists(path):
        out = ctx.backend.create(path, overwrite=True)
        try:
            out.write(ctx.payloads.generate(APPEND_DATA_SIZE))
        except Exception:
            out.close()
            raise
    else:
        out = ctx.backend.append(path)

    for iteration in range(APPEND_TRUNCATE_ITERATIONS):
        if iteration > 0:
            out = ctx.backend.append(path)
        with out:
            out.write(ctx.payloads.generate(APPEND_TRUNCATE_DATA_SIZE))
            out.flush()
        ctx.backend.truncate(path, APPEND_TRUNCATE_TRUNCATE_SIZE)

    return Outcome.succeeded(f"{APPEND_TRUNCATE_ITERATIONS} iterations")
