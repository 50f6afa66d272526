from .bf_interpreter import BrainfuckInterpreter, ExecutionState, InputExhausted, StepLimitExceeded
from .errors import GenerationError, ToolchainError, UnbalancedLoopError, UnhandledTokenError
from .generator import DEFAULT_MEMSIZE, Generator, GoGenerator
from .lexer import Lexer, Token, TokenType, tokenize
from .toolchain import GoToolchain

__all__ = [
    "BrainfuckInterpreter",
    "DEFAULT_MEMSIZE",
    "ExecutionState",
    "GenerationError",
    "Generator",
    "GoGenerator",
    "GoToolchain",
    "InputExhausted",
    "Lexer",
    "StepLimitExceeded",
    "Token",
    "TokenType",
    "ToolchainError",
    "UnbalancedLoopError",
    "UnhandledTokenError",
    "tokenize",
]
