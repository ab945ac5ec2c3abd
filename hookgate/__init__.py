"""hookgate: verified WebHook receivers with handler dispatch."""

__version__ = "0.1.0"
