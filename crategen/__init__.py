"""crategen: Rust client module generator for botocore service definitions."""

__version__ = "0.1.0"
