"""HTTP API of the tinyhatchet service: wire models and the blocking client."""
