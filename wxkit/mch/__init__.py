"""WeChat Pay merchant API: signing, transport, refunds and notification replies."""

__version__ = "0.1.0"