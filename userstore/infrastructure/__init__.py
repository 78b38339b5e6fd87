"""Infrastructure layer (configuration, persistence adapters)."""
