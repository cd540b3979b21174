"""A small Starlette application that answers errors with problem details."""

from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .problem import Problem
from .web import ApiError, api_error_handler, problem_handler

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


class ResourceNotFound(Exception):
    """A requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} does not exist")
        self.resource = resource

    def into_problem(self) -> Problem:
        """Describe the missing resource as a 404 problem."""
        return (
            Problem.not_found()
            .with_title("Resource not found")
            .with_detail(f"{self.resource} does not exist")
            .with_code("RESOURCE_NOT_FOUND")
            .with_trace_id("example-trace-id")
        )


class InternalFailure(Exception):
    """An internal failure whose message must never reach clients."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def into_problem(self) -> Problem:
        """Describe the failure as a generic 500, keeping the message as cause."""
        return Problem.internal_server_error().with_cause(self.message)


def _is_json_media_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or (
        media_type.startswith("application/") and media_type.endswith("+json")
    )


async def _read_json_object(request: Request) -> dict[str, Any]:
    if not _is_json_media_type(request.headers.get("content-type", "")):
        raise ApiError.from_problem(
            Problem.new(415).with_detail("Expected request with `Content-Type: application/json`")
        )
    raw = await request.body()
    try:
        body = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ApiError.from_problem(
            Problem.bad_request().with_detail(f"Failed to parse the request body as JSON: {exc}")
        ) from exc
    if not isinstance(body, dict):
        raise ApiError.from_problem(
            Problem.unprocessable_entity().with_detail("Request body must be a JSON object")
        )
    return body


def _optional_string(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    if value is not None and not isinstance(value, str):
        raise ApiError.from_problem(
            Problem.unprocessable_entity().with_detail(f"Field {key!r} must be a string")
        )
    return value


async def ok_handler(request: Request) -> JSONResponse:
    return JSONResponse({"message": "Hello, world!"})


async def not_found_handler(request: Request) -> JSONResponse:
    raise ApiError.from_domain(ResourceNotFound("User 42"))


async def validate_handler(request: Request) -> JSONResponse:
    body = await _read_json_object(request)
    email = _optional_string(body, "email")
    name = _optional_string(body, "name")

    problem = Problem.validation()
    has_errors = False
    if not email:
        problem = problem.push_error("email", "is required", "REQUIRED")
        has_errors = True
    if not name:
        problem = problem.push_error("name", "is required", "REQUIRED")
        has_errors = True

    if has_errors:
        raise ApiError.from_problem(problem.with_code("VALIDATION_ERROR"))
    return JSONResponse({"message": f"Created user {name}"})


async def internal_handler(request: Request) -> JSONResponse:
    raise ApiError.from_domain(
        InternalFailure("connection to db.internal:5432 refused -- password rejected")
    )


def create_app() -> Starlette:
    """Build the example application."""
    routes = [
        Route("/ok", ok_handler, methods=["GET"]),
        Route("/not-found", not_found_handler, methods=["GET"]),
        Route("/validate", validate_handler, methods=["POST"]),
        Route("/internal", internal_handler, methods=["GET"]),
    ]
    return Starlette(
        routes=routes,
        exception_handlers={
            ApiError: api_error_handler,
            Problem: problem_handler,
        },
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the example application."""
    parser = argparse.ArgumentParser(description="Serve the problem details example API.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to bind")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to bind")
    args = parser.parse_args(argv)
    print(f"Listening on {args.host}:{args.port}", flush=True)
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0