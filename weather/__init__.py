"""Weather logger: fetch current conditions, write them to a text log, serve them as a dashboard."""
