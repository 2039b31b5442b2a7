"""HTTP function boundary for the Relief enrichment platform."""
