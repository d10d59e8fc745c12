"""Infrastructure layer: memory and Postgres backends, cache, security, background services."""
