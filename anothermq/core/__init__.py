"""Process-level helpers shared by the broker configuration tools."""
