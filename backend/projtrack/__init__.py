"""Authorization and hierarchical progress engines for industrial project tracking."""

__version__ = "0.1.0"
