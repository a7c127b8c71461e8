"""Ingestion layer.

This package contains the helpers that turn payloads received from a status
source into typed snapshots.
"""

__all__: list[str] = []
