"""Debounced re-detection for changing documents."""
