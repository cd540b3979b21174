# problemdetails

This package provides Problem Details objects for HTTP APIs, as described in
RFC 7807, and serves them as `application/problem+json`. It includes builders
for field-level validation errors, stable error codes and trace ids. A problem
can carry an internal cause. The cause is available to your logs and is never
written into the response body.

## Installation

```
pip install problemdetails
```

To install the test dependencies (`pytest`, `httpx`):

```
pip install "problemdetails[test]"
```

## Building problems

```python
from problemdetails.problem import Problem

problem = (
    Problem.not_found()
    .with_type("https://api.example.com/problems/user-not-found")
    .with_title("User not found")
    .with_detail("No user with ID 42 exists")
    .with_instance("/users/42")
    .with_code("USER_NOT_FOUND")
    .with_trace_id("abc-123")
)

problem.to_dict()["status"]   # 404
problem.code                  # "USER_NOT_FOUND"
problem.trace_id              # "abc-123"
problem.type                  # the type URI, or "about:blank" when unset
```

Every `with_*` method returns a modified copy and leaves the original as it
was.

`Problem.new(status)` sets the title to the standard HTTP reason phrase, for
example `Problem.new(429).title == "Too Many Requests"`. A status without a
known phrase gets no title. You can look a phrase up yourself with
`problemdetails.problem.status_phrase(status)`.

Shortcut constructors are available: `bad_request`, `unauthorized`,
`forbidden`, `not_found`, `conflict`, `unprocessable_entity`,
`too_many_requests`, `validation` and `internal_server_error`.

Standard members that are `None` are left out of the JSON. Extension members
such as `code`, `trace_id`, `request_id` and anything passed to
`with_extension(key, value)` are written at the top level of the object.
`status_code` returns 500 when no status is set. `is_server_error` is true for
5xx statuses and higher.

## Serialization

```python
problem.to_dict()         # plain dict
problem.to_json()         # compact JSON
problem.to_json_pretty()  # JSON indented by two spaces
Problem.from_json(text)   # parse; unknown members become extensions
Problem.from_dict(data)
```

`from_dict` and `from_json` raise `ValueError` when a standard member has the
wrong type. `str(problem)` reads like `Not Found (404): User 42`.

`problemdetails.problem.APPLICATION_PROBLEM_JSON` holds the content type
`"application/problem+json"`.

## Validation errors

```python
problem = (
    Problem.validation()
    .push_error("email", "must be a valid email address", "INVALID_EMAIL")
    .push_error("name", "is required")
    .with_code("VALIDATION_ERROR")
)
```

The result has status 422, `type` set to `"validation_error"` and title
`"Validation failed"`. It also has an `errors` array of objects with `field`
and `message`, and with `code` when one was given.

`with_errors(items)` replaces the whole array. It takes
`problemdetails.validation.ValidationItem` values:

```python
from problemdetails.validation import ValidationItem

Problem.validation().with_errors([
    ValidationItem("a", "msg_a").with_code("CODE_A"),
    ValidationItem("b", "msg_b"),
])
```

## Internal causes stay private

```python
problem = Problem.internal_server_error().with_cause(OSError("db refused"))
problem.to_json()        # generic "An unexpected error occurred." only
problem.internal_cause   # the OSError, for logging
```

`with_cause` accepts an exception or a plain message string. The cause is
stored as the problem's `__cause__`, since `Problem` is itself an exception
and can be raised.

## Domain errors

`IntoProblem` is a protocol. Any object with an `into_problem()` method that
returns a `Problem` satisfies it, whether or not it subclasses `IntoProblem`.
A `Problem` returns itself from `into_problem()`.

## Starlette integration

`problemdetails.web` provides:

- `problem_response(problem)`: a Starlette `Response` with the problem's
  status and the problem content type. A status outside 100–999 is sent as
  500.
- `ApiError`: raise `ApiError.from_problem(problem)`,
  `ApiError.from_domain(err)` or `ApiError.internal(exc)`. An internal error
  always renders as the generic 500, and its message is kept only as the
  internal cause. `to_problem()` and `to_response()` return what it renders
  as.
- `api_error_handler` and `problem_handler`: exception handlers for `ApiError`
  and `Problem`, to be registered on a Starlette application.
- `attach_trace(problem, trace_id)`: a copy of the problem with `trace_id`
  set.

Trace ids are never picked up automatically. You have to attach them
yourself.

## Example server

`problemdetails.example_app` contains a small application built by
`create_app()`. It has these routes:

- `GET /ok`: `{"message": "Hello, world!"}`
- `GET /not-found`: a 404 problem with code `RESOURCE_NOT_FOUND`
- `POST /validate`: a JSON body with `email` and `name`. If either is missing
  or empty, the reply is a 422 validation problem. A body that is not JSON
  gives 415 or 400, and a body that is not an object gives 422.
- `GET /internal`: a generic 500 that does not reveal its cause

To run it with uvicorn:

```
problemdetails-example --host 127.0.0.1 --port 3000
```

Both options are optional. The defaults are `127.0.0.1` and `3000`.