"""Server restart watchdog and redstone automation helpers."""

__version__ = "0.1.0"
