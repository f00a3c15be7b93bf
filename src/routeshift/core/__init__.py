"""Core result models shared by analyzers, transforms and the CLI."""
