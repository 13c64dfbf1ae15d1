"""Built-in CLI command groups registered by :mod:`ccgrant.app`."""
