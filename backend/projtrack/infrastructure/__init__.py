"""In-memory adapters for the repository ports and the event bus."""
