from .config import Settings, get_settings
from .errors import (
    ConnectivityError,
    CreationError,
    FundingError,
    InsufficientFunds,
    InvalidAddress,
    InvalidKeyFormat,
    LedgerOperationError,
    MetadataUploadError,
    NoEndpointAvailable,
    StepFailed,
    ValidationError,
)
from .networks import Network, parse_network

__all__ = [
    "ConnectivityError",
    "CreationError",
    "FundingError",
    "InsufficientFunds",
    "InvalidAddress",
    "InvalidKeyFormat",
    "LedgerOperationError",
    "MetadataUploadError",
    "Network",
    "NoEndpointAvailable",
    "Settings",
    "StepFailed",
    "ValidationError",
    "get_settings",
    "parse_network",
]
