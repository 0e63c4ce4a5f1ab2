"""Bundled policies, sample systems and the system document loader."""
