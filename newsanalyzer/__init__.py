"""News article fact-check analysis service."""
