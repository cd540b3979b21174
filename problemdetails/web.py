"""Serving problem details from Starlette applications."""

from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from .problem import APPLICATION_PROBLEM_JSON, IntoProblem, Problem

_FALLBACK_BODY = '{"type":"about:blank","title":"Internal Server Error","status":500}'
_MIN_HTTP_STATUS = 100
_MAX_HTTP_STATUS = 999


def problem_response(problem: Problem) -> Response:
    """Render a problem as an ``application/problem+json`` response.

    A status outside the range HTTP allows becomes 500. If the problem
    cannot be serialized, a generic 500 body is sent instead.
    """
    status = problem.status_code
    if not _MIN_HTTP_STATUS <= status <= _MAX_HTTP_STATUS:
        status = 500
    try:
        body = problem.to_json()
    except (TypeError, ValueError):
        body = _FALLBACK_BODY
    return Response(content=body, status_code=status, media_type=APPLICATION_PROBLEM_JSON)


def attach_trace(problem: Problem, trace_id: str) -> Problem:
    """Return a copy of ``problem`` carrying the ``trace_id`` extension."""
    return problem.with_trace_id(trace_id)


class ApiError(Exception):
    """An error raised from a handler that becomes a problem response.

    It holds either an explicit :class:`Problem` or an opaque internal
    error. An internal error always renders as a generic 500 whose body
    never reveals the error; the error is kept as the problem's internal
    cause for server-side logging.
    """

    def __init__(
        self,
        problem: Problem | None = None,
        internal: BaseException | None = None,
    ) -> None:
        if (problem is None) == (internal is None):
            raise ValueError("ApiError needs exactly one of 'problem' or 'internal'")
        if problem is not None and not isinstance(problem, Problem):
            raise TypeError("problem must be a Problem")
        if internal is not None and not isinstance(internal, BaseException):
            raise TypeError("internal must be an exception")
        super().__init__()
        self.problem = problem
        self.internal_error = internal

    @classmethod
    def from_problem(cls, problem: Problem) -> ApiError:
        """Wrap an explicit problem."""
        return cls(problem=problem)

    @classmethod
    def internal(cls, err: BaseException) -> ApiError:
        """Wrap any error as a safe 500."""
        return cls(internal=err)

    @classmethod
    def from_domain(cls, err: Any) -> ApiError:
        """Wrap a domain error that knows how to become a problem."""
        if not isinstance(err, IntoProblem):
            raise TypeError("domain error must provide into_problem()")
        return cls(problem=err.into_problem())

    def to_problem(self) -> Problem:
        """Return the problem this error renders as."""
        if self.problem is not None:
            return self.problem
        return Problem.internal_server_error().with_cause(str(self.internal_error))

    def to_response(self) -> Response:
        """Render this error as a problem response."""
        return problem_response(self.to_problem())

    def __str__(self) -> str:
        if self.problem is not None:
            return str(self.problem)
        return f"Internal error: {self.internal_error}"

    def __repr__(self) -> str:
        if self.problem is not None:
            return f"ApiError(problem={self.problem!r})"
        return f"ApiError(internal={str(self.internal_error)!r})"


def api_error_handler(request: Request, exc: ApiError) -> Response:
    """Starlette exception handler for :class:`ApiError`."""
    return exc.to_response()


def problem_handler(request: Request, exc: Problem) -> Response:
    """Starlette exception handler for a raised :class:`Problem`."""
    return problem_response(exc)