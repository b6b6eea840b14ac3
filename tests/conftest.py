"""Global pytest configuration for dfsbench.

Ensures the ``src`` tree is importable without installing the package and
provides storage backend fixtures shared across the unit tests.
"""

import sys
from pathlib import Path

import pytest

# Add the src directory to the Python path so ``import dfsbench`` works from a checkout
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"

if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from dfsbench.storage import InMemoryStorageBackend, LocalStorageBackend  # noqa: E402


@pytest.fixture
def memory_backend() -> InMemoryStorageBackend:
    return InMemoryStorageBackend()


@pytest.fixture
def local_backend(tmp_path: Path) -> LocalStorageBackend:
    """Local backend rooted in the test's temporary directory."""
    return LocalStorageBackend(root=str(tmp_path / "root"))
