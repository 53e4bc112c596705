"""Service integration modules for the videousers application."""
