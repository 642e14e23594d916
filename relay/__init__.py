"""HTTP-to-SQS request relay."""

__version__ = "0.1.0"
