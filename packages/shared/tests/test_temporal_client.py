"""Tests for Temporal connection mode selection."""

import pytest
from relief_shared.errors import ConfigurationError
from relief_shared.temporal_client import connect


async def test_cloud_key_without_endpoint_fails_fast(monkeypatch) -> None:
    monkeypatch.setenv("TEMPORAL_API_KEY", "cloud-key")
    monkeypatch.delenv("TEMPORAL_REGIONAL_ENDPOINT", raising=False)
    with pytest.raises(ConfigurationError, match="TEMPORAL_REGIONAL_ENDPOINT"):
        await connect()
