"""Cross-cutting configuration, security and error primitives."""
