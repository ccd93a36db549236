"""Service layer.

- ``shopauth.services._shared``: base service, error taxonomy and ports.
- ``shopauth.services.auth``: :class:`AuthService` and its DTOs.

Submodules are imported explicitly by callers; nothing is re-exported here so
that ``shopauth.core.errors`` can import the error taxonomy without pulling in
the service graph.
"""
