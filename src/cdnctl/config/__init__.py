"""Configuration layer — settings, config discovery, manifest, logging."""
