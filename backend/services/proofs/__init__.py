"""
Proof service - image evidence for pickup, delivery and reports.
"""

from .storage import (
    DELIVERY_FOLDER,
    PICKUP_FOLDER,
    REPORT_FOLDER,
    discard_proofs,
    proof_url,
    save_proof_image,
    save_proof_images,
    validate_proof_image,
)

__all__ = [
    "DELIVERY_FOLDER",
    "PICKUP_FOLDER",
    "REPORT_FOLDER",
    "discard_proofs",
    "proof_url",
    "save_proof_image",
    "save_proof_images",
    "validate_proof_image",
]
