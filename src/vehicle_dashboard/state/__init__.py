"""State layer.

This package is the single place where decoded telemetry is merged into
the snapshot read by the refresh cycle.
"""
