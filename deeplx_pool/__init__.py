"""Self-healing pool of DeepLX translation endpoints."""

__version__ = "1.0.0"
