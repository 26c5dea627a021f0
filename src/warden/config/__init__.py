"""Configuration layer: options, settings, Wardenfile discovery, logging."""
