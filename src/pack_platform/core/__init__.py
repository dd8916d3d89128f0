"""Configuration, models and errors."""
