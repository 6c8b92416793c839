"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature leans on (DB pool and
snapshots, settings, logging, error rendering, pagination, outbound HTTP
clients). Feature SQL and business rules stay in their own package
(e.g. `places/`).
"""
