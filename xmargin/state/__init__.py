"""
Encoding helpers shared by the host layer
"""

from .canonical import (
    canonical_hex_fixed_allow_0x,
    canonical_json_bytes,
    domain_sep_bytes,
    sha256_hex,
)

__all__ = [
    "canonical_hex_fixed_allow_0x",
    "canonical_json_bytes",
    "domain_sep_bytes",
    "sha256_hex",
]
