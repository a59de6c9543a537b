"""
API package containing versioned routes.

A version subpackage exposes a top-level ``router`` which includes all
of its resource-specific endpoints.
"""
