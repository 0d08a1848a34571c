"""Spaced repetition engine: retention model, statistics and study planning."""
