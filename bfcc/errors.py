from __future__ import annotations

from typing import Optional, Sequence


class GenerationError(Exception):
    """Base class for failures while turning tokens into target source."""


class UnhandledTokenError(GenerationError):
    def __init__(self, kind: object, index: int) -> None:
        self.kind = kind
        self.index = index
        super().__init__(f"unhandled token: {kind!s} at index {index}")


class UnbalancedLoopError(GenerationError):
    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"{reason} at index {index}")


class ToolchainError(RuntimeError):
    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        message: Optional[str] = None,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        if message is None:
            message = f"'{' '.join(self.command)}' exited with status {returncode}"
        super().__init__(message)


__all__ = [
    "GenerationError",
    "ToolchainError",
    "UnbalancedLoopError",
    "UnhandledTokenError",
]
