"""Core infrastructure for Rankboard: config, logging, exceptions, Redis."""
