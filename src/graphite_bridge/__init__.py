"""graphite-bridge: translate labeled metrics to graphite paths and back."""

__version__ = "0.1.0"
