"""Cross-cutting infrastructure: config, logging, extensions, errors."""
