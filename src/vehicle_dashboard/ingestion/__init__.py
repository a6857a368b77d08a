"""Ingestion layer.

This package contains the per-topic pipeline: bus subscriptions are
pumped through the typed decoder into bounded channels that the state
layer drains.
"""

__all__: list[str] = []
