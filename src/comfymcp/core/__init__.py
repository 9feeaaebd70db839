"""Domain models, graph documents and errors."""
