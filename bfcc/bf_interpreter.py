from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from .errors import UnbalancedLoopError
from .generator import DEFAULT_MEMSIZE, is_clear_loop
from .lexer import Token, TokenType, tokenize


class StepLimitExceeded(RuntimeError):
    """Raised when execution exceeds the configured step budget."""


class InputExhausted(RuntimeError):
    """Raised when ',' runs with no input left; compiled programs panic here."""


@dataclass
class ExecutionState:
    step: int
    index: int
    token: Optional[Token]
    pointer: int
    output: bytes
    token_count: int


@dataclass
class BrainfuckInterpreter:
    """Executes lexed programs with the same runtime rules as generated Go code.

    Cells are unbounded integers and ``.`` writes the low eight bits. Moving
    the cursor off the tape is only an error once a cell is accessed there,
    matching Go's bounds check on ``array[idx]``.
    """

    memsize: int = DEFAULT_MEMSIZE

    tape: List[int] = field(init=False, repr=False)
    pointer: int = field(init=False, repr=False)
    output_buffer: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.memsize <= 0:
            raise ValueError(f"memsize must be positive, got {self.memsize}")
        self.reset()

    def reset(self) -> None:
        self.tape = [0] * self.memsize
        self.pointer = 0
        self.output_buffer = bytearray()

    def run(
        self,
        source: str,
        input_data: bytes = b"",
        max_steps: Optional[int] = None,
    ) -> bytes:
        for _ in self.step(source, input_data=input_data, max_steps=max_steps):
            pass
        return bytes(self.output_buffer)

    def step(
        self,
        source: str,
        input_data: bytes = b"",
        max_steps: Optional[int] = None,
    ) -> Iterator[ExecutionState]:
        return self.step_tokens(tokenize(source), input_data=input_data, max_steps=max_steps)

    def step_tokens(
        self,
        tokens: Sequence[Token],
        input_data: bytes = b"",
        max_steps: Optional[int] = None,
    ) -> Iterator[ExecutionState]:
        self.reset()
        jump_map = self._build_jump_map(tokens)
        input_iter = iter(bytes(input_data))
        index = 0
        steps = 0
        token_count = len(tokens)

        while index < token_count:
            if max_steps is not None and steps >= max_steps:
                raise StepLimitExceeded("Brainfuck program exceeded allowed step count")

            token = tokens[index]
            index = self._execute(tokens, index, jump_map, input_iter)
            steps += 1
            yield self._snapshot(index, token, steps, token_count)

        yield self._snapshot(index, None, steps, token_count)

    def _cell_index(self) -> int:
        if not 0 <= self.pointer < self.memsize:
            raise IndexError(
                f"cell index {self.pointer} out of range [0:{self.memsize}]"
            )
        return self.pointer

    def _execute(
        self,
        tokens: Sequence[Token],
        index: int,
        jump_map: Dict[int, int],
        input_iter: Iterator[int],
    ) -> int:
        token = tokens[index]
        kind = token.type
        if kind is TokenType.INC_PTR:
            self.pointer += token.repeat
        elif kind is TokenType.DEC_PTR:
            self.pointer -= token.repeat
        elif kind is TokenType.INC_CELL:
            self.tape[self._cell_index()] += token.repeat
        elif kind is TokenType.DEC_CELL:
            self.tape[self._cell_index()] -= token.repeat
        elif kind is TokenType.OUTPUT:
            self.output_buffer.append(self.tape[self._cell_index()] & 0xFF)
        elif kind is TokenType.INPUT:
            cell = self._cell_index()
            try:
                self.tape[cell] = next(input_iter)
            except StopIteration:
                raise InputExhausted("byte not read") from None
        elif kind is TokenType.LOOP_OPEN:
            if is_clear_loop(tokens, index):
                self.tape[self._cell_index()] = 0
                return index + 3
            if self.tape[self._cell_index()] == 0:
                return jump_map[index] + 1
        elif kind is TokenType.LOOP_CLOSE:
            if self.tape[self._cell_index()] != 0:
                return jump_map[index] + 1
        return index + 1

    def _snapshot(
        self,
        index: int,
        token: Optional[Token],
        step: int,
        token_count: int,
    ) -> ExecutionState:
        return ExecutionState(
            step=step,
            index=index,
            token=token,
            pointer=self.pointer,
            output=bytes(self.output_buffer),
            token_count=token_count,
        )

    def _build_jump_map(self, tokens: Sequence[Token]) -> Dict[int, int]:
        jump_map: Dict[int, int] = {}
        stack: List[int] = []
        for index, token in enumerate(tokens):
            if token.type is TokenType.LOOP_OPEN:
                stack.append(index)
            elif token.type is TokenType.LOOP_CLOSE:
                if not stack:
                    raise UnbalancedLoopError(index, "unmatched ']'")
                start = stack.pop()
                jump_map[start] = index
                jump_map[index] = start
        if stack:
            raise UnbalancedLoopError(stack.pop(), "unmatched '['")
        return jump_map


__all__ = [
    "BrainfuckInterpreter",
    "ExecutionState",
    "InputExhausted",
    "StepLimitExceeded",
]
