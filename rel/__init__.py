"""Build a Cargo crate for its release targets, tag it and publish a GitHub release."""

__version__ = "0.1.0"
