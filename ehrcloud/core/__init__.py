"""Cross-cutting infrastructure: configuration, security, errors, logging."""
