"""
Core utilities shared across the study tracker API.

This package hosts configuration, logging setup and cross-cutting helpers
(rate limiting). Routers and services depend on these primitives instead of
reading os.environ or configuring logging themselves.
"""
