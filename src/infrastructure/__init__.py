"""Infrastructure layer - caching, resource modules, drafts, logging and error handling."""
