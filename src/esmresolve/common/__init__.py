"""Shared helpers (logging) used across the esmresolve package."""
