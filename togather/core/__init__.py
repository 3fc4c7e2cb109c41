"""
Core utilities shared across the ToGather app.

This package hosts:
- configuration helpers (env vars, paths)
- cross-cutting concerns such as logging setup, CSRF protection,
  password hashing and rate limiting.

Services and routers depend on these primitives instead of reading the
environment or wiring logging themselves.
"""
