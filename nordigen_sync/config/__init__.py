"""Configuration and logging for the Nordigen sync core."""
