"""
Go toolchain integration.

Builds a Go module to a WASI binary and formats generated bindings with
gofmt. Both run the external tools synchronously and surface any failure
as a single ToolchainError carrying a remediation hint.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from ...core.generator import GeneratorError
from ....logging_config import get_logger

logger = get_logger(__name__)

WASI_ENV = {"GOOS": "wasip1", "GOARCH": "wasm"}


class ToolchainError(GeneratorError):
    """Exception raised when an external tool is missing or fails."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        message = super().__str__()
        return f"{message} {self.hint}" if self.hint else message


def has_go() -> bool:
    return shutil.which("go") is not None


def has_gofmt() -> bool:
    return shutil.which("gofmt") is not None


def _run(cmd: List[str], cwd: Path, env: Optional[dict] = None) -> subprocess.CompletedProcess:
    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    return subprocess.run(cmd, cwd=str(cwd), env=env, capture_output=True, text=True)


def build_go(project_path: Path, debug: bool = False) -> Path:
    """
    Build a Go module to ``build/module.wasm`` for the WASI target.

    Args:
        project_path: Directory containing the module's ``package main``
        debug: Keep full source paths (release builds pass ``-trimpath``)

    Returns:
        Path to the built artifact

    Raises:
        ToolchainError: If Go is not installed or the build fails
    """
    if not has_go():
        raise ToolchainError(
            "Go compiler not found in PATH.", "Please install Go (1.21+ recommended)."
        )

    project_path = Path(project_path)
    output_dir = project_path / "build"
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ToolchainError(f"Failed to create Go build output directory: {e}")
    output = output_dir / "module.wasm"

    cmd = ["go", "build"]
    if not debug:
        cmd.append("-trimpath")
    cmd.extend(["-o", str(output), "."])

    env = {**os.environ, **WASI_ENV}
    result = _run(cmd, cwd=project_path, env=env)
    if result.returncode != 0:
        logger.error("go build failed: %s", result.stderr.strip())
        raise ToolchainError(
            f"Failed to build Go module for WASI: {result.stderr.strip()}",
            "Ensure your module is a valid Go WASM target and uses package main.",
        )

    logger.info("Built %s", output)
    return output


def gofmt(project_dir: Path, generated_files: Iterable[Path]) -> List[Path]:
    """
    Format generated Go files in place.

    Non-Go files are ignored. Relative paths are resolved against the
    current working directory.

    Args:
        project_dir: Directory gofmt runs in
        generated_files: Paths of generated files

    Returns:
        The Go files that were formatted (empty if there were none)

    Raises:
        ToolchainError: If gofmt is not installed or fails
    """
    if not has_gofmt():
        raise ToolchainError(
            "gofmt is not installed.", "Please install Go and ensure `gofmt` is in PATH."
        )

    cwd = Path.cwd()
    go_files = []
    for path in sorted(set(Path(f) for f in generated_files)):
        if path.suffix != ".go":
            continue
        if not path.is_absolute():
            path = cwd / path
        if path.exists():
            path = path.resolve()
        go_files.append(path)

    if not go_files:
        return []

    result = _run(["gofmt", "-w", *[str(f) for f in go_files]], cwd=Path(project_dir))
    if result.returncode != 0:
        logger.error("gofmt failed: %s", result.stderr.strip())
        raise ToolchainError(
            f"Failed to run gofmt on generated Go files: {result.stderr.strip()}"
        )

    logger.info("Formatted %d Go file(s)", len(go_files))
    return go_files
