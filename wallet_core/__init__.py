from .codec import decode_key, encode_key, is_valid_address, parse_address

__all__ = [
    "decode_key",
    "encode_key",
    "is_valid_address",
    "parse_address",
]
