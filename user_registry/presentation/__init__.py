"""Presentation layer -- HTTP API, middleware, exception mapping."""
