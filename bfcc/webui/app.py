from __future__ import annotations

from typing import List

from fastapi import FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field

from bfcc.bf_interpreter import BrainfuckInterpreter, InputExhausted, StepLimitExceeded
from bfcc.errors import GenerationError
from bfcc.generator import DEFAULT_MEMSIZE, GoGenerator
from bfcc.lexer import Token, tokenize

# Largest tape a request may ask for; the interpreter allocates it eagerly.
MAX_MEMSIZE = 1_000_000


class GenerateRequest(BaseModel):
    code: str = ""
    memsize: int = Field(default=DEFAULT_MEMSIZE, ge=1, le=MAX_MEMSIZE)


class GenerateResponse(BaseModel):
    language: str
    source: str
    token_count: int
    memsize: int


class RunRequest(BaseModel):
    code: str = ""
    input: str = ""
    memsize: int = Field(default=DEFAULT_MEMSIZE, ge=1, le=MAX_MEMSIZE)
    max_steps: int = Field(default=100_000, ge=1)


class RunResponse(BaseModel):
    output: str
    output_bytes: List[int]
    steps: int


class TokenPayload(BaseModel):
    type: str
    char: str
    repeat: int


def _token_to_dict(token: Token) -> dict:
    return {
        "type": token.type.name,
        "char": token.char,
        "repeat": token.repeat,
    }


def create_app() -> FastAPI:
    app = FastAPI(title="bfcc API", version="0.1.0")

    @app.post("/api/generate", response_model=GenerateResponse)
    def generate(payload: GenerateRequest) -> GenerateResponse:
        tokens = tokenize(payload.code)
        generator = GoGenerator(memsize=payload.memsize)
        try:
            source = generator.render(tokens)
        except GenerationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        return GenerateResponse(
            language="go",
            source=source,
            token_count=len(tokens),
            memsize=payload.memsize,
        )

    @app.post("/api/run", response_model=RunResponse)
    def run(payload: RunRequest) -> RunResponse:
        interpreter = BrainfuckInterpreter(memsize=payload.memsize)
        steps = 0
        try:
            for state in interpreter.step(
                payload.code,
                input_data=payload.input.encode("utf-8"),
                max_steps=payload.max_steps,
            ):
                steps = state.step
        except StepLimitExceeded as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc),
            ) from exc
        except (GenerationError, InputExhausted, IndexError) as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        output = bytes(interpreter.output_buffer)
        return RunResponse(
            output=output.decode("latin-1"),
            output_bytes=list(output),
            steps=steps,
        )

    @app.get("/api/tokens", response_model=List[TokenPayload])
    def tokens(code: str = Query(default="")) -> List[TokenPayload]:
        return [TokenPayload(**_token_to_dict(token)) for token in tokenize(code)]

    return app


__all__ = ["create_app"]
