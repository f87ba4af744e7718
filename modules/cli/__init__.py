"""
CLI Client Module.

Command-line client built with Typer that talks to the backend over HTTP.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in the backend
- Reads and writes go through modules.client.NoteSynchronizer
- Sends X-Frontend-ID: cli header for log routing

Usage:
    python -m modules.cli --help
"""
