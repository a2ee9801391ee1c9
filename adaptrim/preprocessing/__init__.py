"""
Read preprocessing: quality trimming, acceptability and barcode removal.
"""

from .barcodes import trim_barcodes
from .trimming import is_acceptable_read, trim_by_quality

__all__ = [
    'trim_by_quality',
    'is_acceptable_read',
    'trim_barcodes',
]
