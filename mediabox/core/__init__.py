"""Core identity and thumbnail services."""
