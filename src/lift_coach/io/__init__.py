"""Input documents and serialization."""
