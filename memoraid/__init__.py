"""Memoraid: spaced repetition scheduling and exam study planning."""
