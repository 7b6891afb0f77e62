"""
Descriptor handling: parsing, multipath explosion and script caches.
"""

from dinasty.wallet.descriptor import (
    AnyDescriptor,
    DescriptorConversionError,
    DescriptorError,
    DescriptorNotMultipathError,
    DescriptorParseError,
    ExplodedDescriptor,
    MultipathDescriptor,
    PublicDescriptorError,
    SecretDescriptorError,
    SinglePathDescriptor,
    explode,
    parse_descriptor,
    split_multipath,
    verify_checksum,
)
from dinasty.wallet.scripts import OwnershipIndex, ScriptCache

__all__ = [
    "AnyDescriptor",
    "DescriptorConversionError",
    "DescriptorError",
    "DescriptorNotMultipathError",
    "DescriptorParseError",
    "ExplodedDescriptor",
    "MultipathDescriptor",
    "OwnershipIndex",
    "PublicDescriptorError",
    "ScriptCache",
    "SecretDescriptorError",
    "SinglePathDescriptor",
    "explode",
    "parse_descriptor",
    "split_multipath",
    "verify_checksum",
]
