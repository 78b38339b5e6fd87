"""userstore - MongoDB-backed persistence for the User domain entity."""

__version__ = "0.1.0"
