"""Exercise scoring and constraint filtering."""

__all__ = ["scoring"]
