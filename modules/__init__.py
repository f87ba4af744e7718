"""
Application Modules.

- backend/: API, services, database, configuration
- client/: HTTP client, query cache and optimistic synchronizer
- cli/: Command-line client (Typer + Rich)
"""
