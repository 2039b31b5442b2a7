"""Unified worker runner for the relief enrichment components.

Every worker service runs the same image with a different component name,
which selects the workflows/activities exposed on that worker.
"""
