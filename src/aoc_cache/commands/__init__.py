"""Built-in CLI commands registered on :data:`aoc_cache.app.app`."""
