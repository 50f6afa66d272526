from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


class TokenType(str, Enum):
    INC_PTR = ">"
    DEC_PTR = "<"
    INC_CELL = "+"
    DEC_CELL = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_OPEN = "["
    LOOP_CLOSE = "]"


# Commands whose consecutive repeats collapse into a single token.
RUN_LENGTH_TYPES = frozenset(
    {TokenType.INC_PTR, TokenType.DEC_PTR, TokenType.INC_CELL, TokenType.DEC_CELL}
)

_COMMANDS = {member.value: member for member in TokenType}


@dataclass(frozen=True)
class Token:
    type: TokenType
    repeat: int = 1

    @property
    def char(self) -> str:
        return self.type.value


class Lexer:
    """Scans brainfuck source into a run-length encoded token list.

    Characters other than the eight commands are comments and are dropped.
    A comment character between two identical commands ends the run.
    """

    def __init__(self, source: str) -> None:
        self.source = source

    @staticmethod
    def is_command(char: str) -> bool:
        return char in _COMMANDS

    def tokens(self) -> List[Token]:
        source = self.source
        length = len(source)
        tokens: List[Token] = []
        index = 0
        while index < length:
            token_type = _COMMANDS.get(source[index])
            if token_type is None:
                index += 1
                continue
            if token_type in RUN_LENGTH_TYPES:
                end = index + 1
                while end < length and source[end] == source[index]:
                    end += 1
                tokens.append(Token(token_type, end - index))
                index = end
                continue
            tokens.append(Token(token_type))
            index += 1
        return tokens


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokens()


__all__ = [
    "Lexer",
    "RUN_LENGTH_TYPES",
    "Token",
    "TokenType",
    "tokenize",
]
