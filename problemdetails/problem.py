"""RFC 7807 Problem Details objects for HTTP APIs."""

from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from .validation import ValidationItem

APPLICATION_PROBLEM_JSON = "application/problem+json"
"""The ``Content-Type`` value for problem responses."""

_STATUS_PHRASES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Content Too Large",
    414: "URI Too Long",
    415: "Unsupported Media Type",
    416: "Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a Teapot",
    421: "Misdirected Request",
    422: "Unprocessable Content",
    423: "Locked",
    424: "Failed Dependency",
    425: "Too Early",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
}

_STANDARD_STRING_KEYS = ("type", "title", "detail", "instance")
_MAX_STATUS = 0xFFFF


def status_phrase(status: int) -> str | None:
    """Return the standard HTTP reason phrase for a status, or ``None``."""
    return _STATUS_PHRASES.get(status)


def _check_status(status: Any) -> int | None:
    if status is None:
        return None
    if isinstance(status, bool) or not isinstance(status, int):
        raise TypeError(f"status must be an integer, not {status!r}")
    if not 0 <= status <= _MAX_STATUS:
        raise ValueError(f"status {status} is out of range")
    return status


class _CauseMessage(Exception):
    """An internal cause given as a plain message."""


@runtime_checkable
class IntoProblem(Protocol):
    """Anything that can turn itself into a :class:`Problem`."""

    def into_problem(self) -> Problem:
        """Return the problem describing this value."""


class Problem(Exception):
    """An RFC 7807 problem details object.

    Standard members are plain attributes and left out of the JSON form
    when ``None``; extension members live in ``extensions`` and are
    flattened into the top-level object. The ``with_*`` builders return a
    modified copy. An internal cause attached with :meth:`with_cause` is
    kept as ``__cause__`` and never serialized.
    """

    ABOUT_BLANK = "about:blank"

    def __init__(
        self,
        status: int | None = None,
        type_uri: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        instance: str | None = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.status = _check_status(status)
        self.type_uri = type_uri
        self.title = title
        self.detail = detail
        self.instance = instance
        self.extensions: dict[str, Any] = dict(extensions) if extensions else {}

    # -- constructors -----------------------------------------------------

    @classmethod
    def new(cls, status: int) -> Problem:
        """Create a problem for ``status`` titled with its reason phrase."""
        return cls(status=status, title=status_phrase(status))

    @classmethod
    def bad_request(cls) -> Problem:
        """400 Bad Request."""
        return cls.new(400)

    @classmethod
    def unauthorized(cls) -> Problem:
        """401 Unauthorized."""
        return cls.new(401)

    @classmethod
    def forbidden(cls) -> Problem:
        """403 Forbidden."""
        return cls.new(403)

    @classmethod
    def not_found(cls) -> Problem:
        """404 Not Found."""
        return cls.new(404)

    @classmethod
    def conflict(cls) -> Problem:
        """409 Conflict."""
        return cls.new(409)

    @classmethod
    def validation(cls) -> Problem:
        """422 with type ``validation_error`` and title ``Validation failed``."""
        return cls.new(422).with_type("validation_error").with_title("Validation failed")

    @classmethod
    def unprocessable_entity(cls) -> Problem:
        """422 without validation defaults."""
        return cls.new(422)

    @classmethod
    def too_many_requests(cls) -> Problem:
        """429 Too Many Requests."""
        return cls.new(429)

    @classmethod
    def internal_server_error(cls) -> Problem:
        """500 with a generic, safe public title and detail."""
        return (
            cls.new(500)
            .with_title("Internal Server Error")
            .with_detail("An unexpected error occurred.")
        )

    # -- builders ---------------------------------------------------------

    def _evolve(self, **changes: Any) -> Problem:
        fields: dict[str, Any] = {
            "status": self.status,
            "type_uri": self.type_uri,
            "title": self.title,
            "detail": self.detail,
            "instance": self.instance,
            "extensions": copy.deepcopy(self.extensions),
        }
        fields.update(changes)
        evolved = self.__class__(**fields)
        evolved.__cause__ = self.__cause__
        evolved.__suppress_context__ = self.__suppress_context__
        return evolved

    def with_type(self, type_uri: str) -> Problem:
        """Return a copy with the problem type URI set."""
        return self._evolve(type_uri=type_uri)

    def with_title(self, title: str) -> Problem:
        """Return a copy with the title set."""
        return self._evolve(title=title)

    def with_status(self, status: int) -> Problem:
        """Return a copy with the HTTP status overridden."""
        return self._evolve(status=status)

    def with_detail(self, detail: str) -> Problem:
        """Return a copy with the public detail message set."""
        return self._evolve(detail=detail)

    def with_instance(self, instance: str) -> Problem:
        """Return a copy with the instance URI set."""
        return self._evolve(instance=instance)

    def with_extension(self, key: str, value: Any) -> Problem:
        """Return a copy with an extension member set."""
        evolved = self._evolve()
        evolved.extensions[key] = copy.deepcopy(value)
        return evolved

    def with_code(self, code: str) -> Problem:
        """Return a copy with the ``code`` extension set."""
        return self.with_extension("code", code)

    def with_trace_id(self, trace_id: str) -> Problem:
        """Return a copy with the ``trace_id`` extension set."""
        return self.with_extension("trace_id", trace_id)

    def with_request_id(self, request_id: str) -> Problem:
        """Return a copy with the ``request_id`` extension set."""
        return self.with_extension("request_id", request_id)

    def push_error(self, field: str, message: str, code: str | None = None) -> Problem:
        """Return a copy with a validation error appended to ``errors``.

        A missing or non-list ``errors`` member is replaced by a new list.
        """
        item = ValidationItem(field, message, code).to_dict()
        evolved = self._evolve()
        errors = evolved.extensions.get("errors")
        if isinstance(errors, list):
            errors.append(item)
        else:
            evolved.extensions["errors"] = [item]
        return evolved

    def with_errors(self, items: Iterable[ValidationItem]) -> Problem:
        """Return a copy whose ``errors`` member is exactly ``items``."""
        evolved = self._evolve()
        evolved.extensions["errors"] = [item.to_dict() for item in items]
        return evolved

    def with_cause(self, cause: BaseException | str) -> Problem:
        """Return a copy carrying an internal cause that is never serialized."""
        if isinstance(cause, str):
            cause = _CauseMessage(cause)
        elif not isinstance(cause, BaseException):
            raise TypeError("cause must be an exception or a message string")
        evolved = self._evolve()
        evolved.__cause__ = cause
        evolved.__suppress_context__ = True
        return evolved

    # -- accessors --------------------------------------------------------

    @property
    def status_code(self) -> int:
        """The HTTP status, 500 when unset."""
        return 500 if self.status is None else self.status

    @property
    def is_server_error(self) -> bool:
        """Whether the status code is 5xx or above."""
        return self.status_code >= 500

    @property
    def code(self) -> str | None:
        """The ``code`` extension, when it is a string."""
        value = self.extensions.get("code")
        return value if isinstance(value, str) else None

    @property
    def trace_id(self) -> str | None:
        """The ``trace_id`` extension, when it is a string."""
        value = self.extensions.get("trace_id")
        return value if isinstance(value, str) else None

    @property
    def internal_cause(self) -> BaseException | None:
        """The internal cause, for server-side logging only."""
        return self.__cause__

    def into_problem(self) -> Problem:
        """A problem is already a problem."""
        return self

    # -- serialization ----------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form, extensions flattened at top level."""
        data: dict[str, Any] = {}
        standard = (
            ("type", self.type_uri),
            ("title", self.title),
            ("status", self.status),
            ("detail", self.detail),
            ("instance", self.instance),
        )
        for key, value in standard:
            if value is not None:
                data[key] = value
        for key, value in self.extensions.items():
            data.setdefault(key, copy.deepcopy(value))
        return data

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to JSON, compact unless ``indent`` is given."""
        if indent is None:
            return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_json_pretty(self) -> str:
        """Serialize to indented JSON."""
        return self.to_json(indent=2)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Problem:
        """Build a problem from its JSON object form.

        Members other than the standard ones become extensions. Raises
        ``ValueError`` when a standard member has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise TypeError("problem document must be a mapping")
        strings: dict[str, str | None] = {}
        for key in _STANDARD_STRING_KEYS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"problem member {key!r} must be a string")
            strings[key] = value
        status = data.get("status")
        if status is not None and (
            isinstance(status, bool)
            or not isinstance(status, int)
            or not 0 <= status <= _MAX_STATUS
        ):
            raise ValueError(f"problem member 'status' is invalid: {status!r}")
        extensions = {
            key: copy.deepcopy(value)
            for key, value in data.items()
            if key not in _STANDARD_STRING_KEYS and key != "status"
        }
        return cls(
            status=status,
            type_uri=strings["type"],
            title=strings["title"],
            detail=strings["detail"],
            instance=strings["instance"],
            extensions=extensions,
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> Problem:
        """Parse a problem from JSON text."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("problem document must be a JSON object")
        return cls.from_dict(data)

    # -- text forms -------------------------------------------------------

    def __str__(self) -> str:
        text = self.title if self.title is not None else "Problem"
        if self.status is not None:
            text += f" ({self.status})"
        if self.detail is not None:
            text += f": {self.detail}"
        return text

    def __repr__(self) -> str:
        parts = [
            f"status={self.status!r}",
            f"type_uri={self.type_uri!r}",
            f"title={self.title!r}",
            f"detail={self.detail!r}",
            f"instance={self.instance!r}",
            f"extensions={self.extensions!r}",
        ]
        if self.__cause__ is not None:
            parts.append(f"cause={str(self.__cause__)!r}")
        return f"{self.__class__.__name__}({', '.join(parts)})"

    # Defined last so the builtin name stays usable in the class body above.
    @property
    def type(self) -> str:
        """The effective problem type URI, ``about:blank`` when unset."""
        return self.type_uri if self.type_uri is not None else self.ABOUT_BLANK