"""Client, transport, configuration and errors."""
