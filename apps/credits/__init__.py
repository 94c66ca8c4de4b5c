"""Venue credit codes issued to both parties after a meeting."""
