from .client import GenAIClient, init_ai, get_client

__all__ = ["GenAIClient", "init_ai", "get_client"]
