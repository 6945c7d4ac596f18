"""Tiger Brokers OpenAPI building blocks: signing, quote and trade call wrappers, push framing and dispatch."""

__version__ = "0.1.0"

__all__ = [
    "varint",
    "signer",
    "pb",
    "messages",
    "push_client",
    "quote",
    "trade",
]