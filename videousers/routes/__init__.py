"""Flask integration for the videousers API."""
