"""TaskHub - multi-tenant task and note service, authorization core."""

__version__ = "0.1.0"
