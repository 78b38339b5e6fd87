"""User core: entities, exceptions and ports."""
