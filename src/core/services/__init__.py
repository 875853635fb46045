"""Use-case services built on the domain models."""
