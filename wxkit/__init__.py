"""WeChat Pay merchant API client and event message helpers."""

__version__ = "0.1.0"