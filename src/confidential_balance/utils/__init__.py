"""Constants and parameter types."""
