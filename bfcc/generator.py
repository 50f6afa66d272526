from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from .errors import UnbalancedLoopError, UnhandledTokenError
from .lexer import Token, TokenType, tokenize
from .toolchain import GoToolchain

logger = logging.getLogger(__name__)

DEFAULT_MEMSIZE = 30000

PathLike = Union[str, Path]


GO_HEADER = """\
// Code generated by bfcc. DO NOT EDIT.

package main

import (
\t"os"
)

var array [{memsize}]int
var idx int

func readByte() int {{
\tbuf := make([]byte, 1)
\tn, err := os.Stdin.Read(buf)
\tif err != nil {{
\t\tpanic(err)
\t}}
\tif n != 1 {{
\t\tpanic("byte not read")
\t}}
\treturn int(buf[0])
}}

func main() {{
"""

GO_FOOTER = "}\n"


@dataclass
class RenderState:
    tokens: Sequence[Token]
    output: List[str] = field(default_factory=list)
    # Token indices of the loops that are currently open, innermost last.
    loops: List[int] = field(default_factory=list)
    index: int = 0

    def emit(self, line: str) -> None:
        self.output.append("\t" * (len(self.loops) + 1) + line + "\n")


class Generator(ABC):
    """Turns a brainfuck program into an executable."""

    extension = ""

    @abstractmethod
    def generate(self, source: str, output_path: PathLike) -> Path:
        """Build ``source`` into a binary at ``output_path`` and return its path."""


class GoGenerator(Generator):
    extension = ".go"

    def __init__(
        self,
        memsize: int = DEFAULT_MEMSIZE,
        toolchain: Optional[GoToolchain] = None,
    ) -> None:
        if memsize <= 0:
            raise ValueError(f"memsize must be positive, got {memsize}")
        self.memsize = memsize
        self.toolchain = toolchain or GoToolchain()
        self._handlers: Dict[TokenType, Callable[[Token, RenderState], None]] = {
            TokenType.INC_PTR: self._emit_inc_ptr,
            TokenType.DEC_PTR: self._emit_dec_ptr,
            TokenType.INC_CELL: self._emit_inc_cell,
            TokenType.DEC_CELL: self._emit_dec_cell,
            TokenType.OUTPUT: self._emit_output,
            TokenType.INPUT: self._emit_input,
            TokenType.LOOP_OPEN: self._emit_loop_open,
            TokenType.LOOP_CLOSE: self._emit_loop_close,
        }

    def source_path(self, output_path: PathLike) -> Path:
        output = Path(output_path)
        return output.with_name(output.name + self.extension)

    def generate(self, source: str, output_path: PathLike) -> Path:
        """Compile ``source`` into a binary at ``output_path``.

        The Go source is written to ``<output_path>.go`` and left there.
        Nothing is written when rendering fails.
        """
        output = Path(output_path)
        code = self.generate_source(source)
        go_path = self.source_path(output)
        go_path.write_text(code, encoding="utf-8")
        logger.debug("wrote %s (%d bytes)", go_path, len(code))
        self.toolchain.build(go_path, output)
        return output

    def generate_source(self, source: str) -> str:
        tokens = tokenize(source)
        logger.debug("lexed %d tokens from %d characters", len(tokens), len(source))
        return self.render(tokens)

    def render(self, tokens: Sequence[Token]) -> str:
        state = RenderState(tokens=tokens)
        state.output.append(GO_HEADER.format(memsize=self.memsize))
        while state.index < len(tokens):
            token = tokens[state.index]
            handler = self._handlers.get(token.type)
            if handler is None:
                raise UnhandledTokenError(token.type, state.index)
            handler(token, state)
        if state.loops:
            raise UnbalancedLoopError(state.loops[-1], "unmatched '['")
        state.output.append(GO_FOOTER)
        return "".join(state.output)

    # --- Token handlers ---

    def _emit_inc_ptr(self, token: Token, state: RenderState) -> None:
        state.emit(f"idx += {token.repeat}")
        state.index += 1

    def _emit_dec_ptr(self, token: Token, state: RenderState) -> None:
        state.emit(f"idx -= {token.repeat}")
        state.index += 1

    def _emit_inc_cell(self, token: Token, state: RenderState) -> None:
        state.emit(f"array[idx] += {token.repeat}")
        state.index += 1

    def _emit_dec_cell(self, token: Token, state: RenderState) -> None:
        state.emit(f"array[idx] -= {token.repeat}")
        state.index += 1

    def _emit_output(self, token: Token, state: RenderState) -> None:
        state.emit("os.Stdout.Write([]byte{byte(array[idx])})")
        state.index += 1

    def _emit_input(self, token: Token, state: RenderState) -> None:
        state.emit("array[idx] = readByte()")
        state.index += 1

    def _emit_loop_open(self, token: Token, state: RenderState) -> None:
        if is_clear_loop(state.tokens, state.index):
            state.emit("array[idx] = 0")
            state.index += 3
            return
        state.emit("for array[idx] != 0 {")
        state.loops.append(state.index)
        state.index += 1

    def _emit_loop_close(self, token: Token, state: RenderState) -> None:
        if not state.loops:
            raise UnbalancedLoopError(state.index, "unmatched ']'")
        state.loops.pop()
        state.emit("}")
        state.index += 1


def is_clear_loop(tokens: Sequence[Token], index: int) -> bool:
    """Return True if ``tokens[index:index + 3]`` is the ``[-]`` idiom."""
    if index + 2 >= len(tokens):
        return False
    return (
        tokens[index].type is TokenType.LOOP_OPEN
        and tokens[index + 1].type is TokenType.DEC_CELL
        and tokens[index + 2].type is TokenType.LOOP_CLOSE
    )


__all__ = [
    "DEFAULT_MEMSIZE",
    "Generator",
    "GoGenerator",
    "is_clear_loop",
]
