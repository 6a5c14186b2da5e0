"""Data transformation package."""

from src.transformers.payload_transformer import MalformedDateError, PayloadTransformer
from src.transformers.response_normalizer import ResponseNormalizer

__all__ = [
    "MalformedDateError",
    "PayloadTransformer",
    "ResponseNormalizer",
]
