"""Configuration: section models, pagesmith.toml discovery, unified settings."""
