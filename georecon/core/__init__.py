"""Core engine services: configuration, logging, geohash codec and distance."""
