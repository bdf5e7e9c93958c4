"""Infrastructure: database engine, storage confinement, credential storage."""
