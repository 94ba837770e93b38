"""Recommendation and planning services."""
