from .codec import (
    ProtocolError,
    decode_message,
    encode_message,
    read_message,
)

__all__ = [
    "ProtocolError",
    "decode_message",
    "encode_message",
    "read_message",
]
