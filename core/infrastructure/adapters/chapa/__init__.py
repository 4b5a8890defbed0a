"""Chapa payment gateway adapter."""

from .client import SIGNATURE_HEADER, ChapaClient, compute_signature

__all__ = ["SIGNATURE_HEADER", "ChapaClient", "compute_signature"]
