"""Process-wide building blocks: config, logging, session, events, errors."""
