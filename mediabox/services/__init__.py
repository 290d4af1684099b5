"""Service implementations and protocol definitions."""
