"""pg2rs - Generates Rust row types from a live PostgreSQL schema."""

__version__ = "0.4.0"
