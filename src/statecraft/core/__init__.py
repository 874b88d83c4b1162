"""Core business logic for statecraft: the board pipeline, config and scaffolding."""
