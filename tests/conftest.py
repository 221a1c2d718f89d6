"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local largefile package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of largefile modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("largefile"):
        del sys.modules[module_name]


_LEGACY_ENV = (
    "CHUNK_SIZE",
    "OVERLAP_LINES",
    "MAX_FILE_SIZE",
    "CACHE_SIZE",
    "CACHE_TTL",
    "CACHE_ENABLED",
)


@pytest.fixture(autouse=True)
def _isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    """Keep the developer's config file and env vars out of every test."""
    import os

    from largefile.config import loader

    for name in list(os.environ):
        if name.startswith("LARGEFILE__") or name in _LEGACY_ENV:
            monkeypatch.delenv(name, raising=False)
    missing = tmp_path_factory.mktemp("home") / "config.yaml"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", missing)


@pytest.fixture
def ten_line_file(tmp_path: Path) -> Path:
    """A .txt file with exactly ten newline-terminated lines."""
    path = tmp_path / "ten.txt"
    path.write_text("".join(f"line {i}\n" for i in range(1, 11)))
    return path


@pytest.fixture
def error_log(tmp_path: Path) -> Path:
    """A .log file with ERROR on lines 3 and 7."""
    lines = [
        "startup complete",
        "listening on 8080",
        "ERROR disk full",
        "retrying write",
        "write ok",
        "heartbeat",
        "ERROR connection reset",
        "reconnected",
        "heartbeat",
        "shutdown",
    ]
    path = tmp_path / "app.log"
    path.write_text("\n".join(lines) + "\n")
    return path
