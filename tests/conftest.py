"""Shared fixtures for catlr tests."""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from catlr.cli import run_catlr

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX filesystem semantics")

# chmod does not restrict root, and is unreliable on Windows.
permission_checks = pytest.mark.skipif(
    os.name == "nt" or os.geteuid() == 0,
    reason="requires enforceable file permissions",
)


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Create the reference audit tree.

    Structure::

        project/
        ├── .git/
        │   └── config
        ├── build/
        │   ├── main.js
        │   └── out.o
        └── src/
            └── main.cpp
    """
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "config").write_text("[core]\n")
    (root / "build").mkdir()
    (root / "build" / "main.js").write_text("console.log(1);\n")
    (root / "build" / "out.o").write_bytes(b"\x7fELF\x00\x01")
    (root / "src").mkdir()
    (root / "src" / "main.cpp").write_text("int main() {}\n")
    return root.resolve()


def run_cli(argv: list[str], **kwargs) -> tuple[str, str]:
    """Run the CLI in-process and return decoded report and diagnostics."""
    out = io.BytesIO()
    err = io.StringIO()
    code = run_catlr(argv, out, err, **kwargs)
    assert code == 0
    return out.getvalue().decode("utf-8"), err.getvalue()
