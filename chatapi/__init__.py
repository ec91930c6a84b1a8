"""HTTP JSON API for chats and messages stored in PostgreSQL."""

__version__ = "0.1.0"
__all__ = ["__version__"]