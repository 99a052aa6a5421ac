"""Session lifecycle and request signing."""

from .session import SessionManager
from .signer import ORDER_METHODS, PRIVATE_METHODS, PUBLIC_METHODS, RequestSigner, SignedRequest

__all__ = [
    "ORDER_METHODS",
    "PRIVATE_METHODS",
    "PUBLIC_METHODS",
    "RequestSigner",
    "SessionManager",
    "SignedRequest",
]
