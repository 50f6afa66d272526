from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .bf_interpreter import BrainfuckInterpreter, InputExhausted, StepLimitExceeded
from .errors import GenerationError, ToolchainError
from .generator import DEFAULT_MEMSIZE, GoGenerator
from .lexer import tokenize
from .toolchain import GoToolchain


def _read_source(path: str) -> str:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_text(encoding="utf-8", errors="replace")


def _default_output(path: str) -> str:
    source_path = Path(path)
    stem = source_path.with_suffix("")
    if stem == source_path:
        stem = source_path.with_name(source_path.name + ".out")
    return str(stem)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile brainfuck programs to native binaries via Go")
    parser.add_argument("source", help="Path to brainfuck source file")
    parser.add_argument(
        "-o",
        "--output",
        help="Path of the binary to build (default: source path without its suffix)",
    )
    parser.add_argument(
        "--memsize",
        type=_positive_int,
        default=DEFAULT_MEMSIZE,
        help=f"Number of cells in the program's tape (default: {DEFAULT_MEMSIZE})",
    )
    parser.add_argument("--go", default="go", help="Go executable used to build (default: go)")
    parser.add_argument(
        "--emit-only",
        action="store_true",
        help="Write the generated <output>.go file without building it",
    )
    parser.add_argument(
        "--run",
        action="store_true",
        help="Execute the program with the reference interpreter instead of compiling",
    )
    parser.add_argument(
        "--input",
        default="",
        help="Input string supplied to the program when using --run",
    )
    parser.add_argument("--tokens", action="store_true", help="Print the lexed token list and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        source_text = _read_source(args.source)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.tokens:
        for token in tokenize(source_text):
            sys.stdout.write(f"{token.char} x{token.repeat}\n")
        return 0

    if args.run:
        interpreter = BrainfuckInterpreter(memsize=args.memsize)
        try:
            output = interpreter.run(source_text, input_data=args.input.encode("utf-8"))
        except (GenerationError, InputExhausted, StepLimitExceeded, IndexError) as exc:
            print(f"Runtime error: {exc}", file=sys.stderr)
            return 1
        sys.stdout.buffer.write(output)
        sys.stdout.flush()
        return 0

    generator = GoGenerator(memsize=args.memsize, toolchain=GoToolchain(executable=args.go))
    output_path = args.output or _default_output(args.source)
    source_resolved = Path(args.source).resolve()
    for target in (Path(output_path), generator.source_path(output_path)):
        if target.resolve() == source_resolved:
            print(
                f"Compilation error: {target} would overwrite the source file; pass a different -o",
                file=sys.stderr,
            )
            return 1
    try:
        if args.emit_only:
            code = generator.generate_source(source_text)
            generator.source_path(output_path).write_text(code, encoding="utf-8")
        else:
            generator.generate(source_text, output_path)
    except (GenerationError, ToolchainError, OSError) as exc:
        print(f"Compilation error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
