"""
Service layer abstraction.

Each service validates payloads for one profile sub-resource,
delegates storage to a repository and shapes what is returned to
API handlers.  Repositories are awaited directly on the event loop
through motor.
"""
