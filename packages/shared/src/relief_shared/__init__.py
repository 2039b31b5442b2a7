"""Shared infrastructure for the Relief enrichment platform.

Provides the error taxonomy, environment-backed settings, task queue
constants, the Temporal client factory, and the Pydantic boundary models
used across all components.
"""
