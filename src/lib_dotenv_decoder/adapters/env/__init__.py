"""Process environment source."""
