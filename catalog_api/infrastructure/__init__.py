"""Infrastructure layer - configuration, database, logging and media storage."""
