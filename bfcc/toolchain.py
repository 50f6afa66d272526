from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Union

from .errors import ToolchainError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GoToolchain:
    """Builds a generated Go file into a stripped binary with ``go build``.

    The compiler's own stdout/stderr are inherited from the calling process.
    The call blocks until ``go`` exits; there is no timeout.
    """

    def __init__(self, executable: str = "go", ldflags: str = "-s -w") -> None:
        self.executable = executable
        self.ldflags = ldflags

    def available(self) -> bool:
        return shutil.which(self.executable) is not None

    def command(self, source_path: PathLike, output_path: PathLike) -> List[str]:
        return [
            self.executable,
            "build",
            "-o",
            str(output_path),
            "-ldflags",
            self.ldflags,
            str(source_path),
        ]

    def build(self, source_path: PathLike, output_path: PathLike) -> None:
        command = self.command(source_path, output_path)
        logger.debug("running %s", " ".join(command))
        try:
            result = subprocess.run(command, check=False)
        except OSError as exc:
            raise ToolchainError(
                command, message=f"failed to start '{self.executable}': {exc}"
            ) from exc
        if result.returncode != 0:
            raise ToolchainError(command, result.returncode)
        logger.debug("built %s", output_path)


__all__ = ["GoToolchain"]
