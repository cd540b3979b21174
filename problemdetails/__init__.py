"""RFC 7807 Problem Details for HTTP APIs, with Starlette integration and an example app."""

__version__ = "0.2.0"
__all__ = ["problem", "validation", "web", "example_app"]