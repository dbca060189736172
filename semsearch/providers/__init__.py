"""Concrete backends for the semsearch interfaces."""
