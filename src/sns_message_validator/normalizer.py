"""
Envelope normalization

Absorbs producer inconsistencies before any validation runs. Lambda-style
deliveries spell some URL fields with a lowercase tail and send a null
Subject that is not part of the signed content.
"""

from .types import ALTERNATE_KEY_CASINGS, Envelope


def normalize_envelope(envelope: Envelope) -> Envelope:
    """
    Normalize field names and drop a null Subject, in place.

    Args:
        envelope: Message envelope to normalize

    Returns:
        Envelope: The same envelope object
    """
    for canonical, alternate in ALTERNATE_KEY_CASINGS.items():
        if alternate in envelope and canonical not in envelope:
            envelope[canonical] = envelope[alternate]

    if "Subject" in envelope and envelope["Subject"] is None:
        del envelope["Subject"]

    return envelope
