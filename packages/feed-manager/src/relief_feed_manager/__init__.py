"""Feed Manager: merges reports, disasters and social posts into one feed,
and orchestrates the social ingest workflow.
"""
