"""
Output descriptors: parsing, canonical form and multipath explosion.

A descriptor given by the user is either single-path, e.g.
`tr(tpub.../0/*)`, or multipath using the `<0;1>` notation, e.g.
`tr(tpub.../<0;1>/*)`, which stands for the external (receive) branch
`/0/*` plus the internal (change) branch `/1/*`. Multipath descriptors are
never derived directly, they are first exploded into their two branches.

Error messages never include the descriptor text since it may carry
private keys; the offending descriptor is available as an attribute.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from embit.descriptor import Descriptor
from embit.descriptor.checksum import add_checksum
from loguru import logger

from dinasty.constants import EXTERNAL_BRANCH, INTERNAL_BRANCH, MULTIPATH


class DescriptorError(Exception):
    """Base class for descriptor failures"""

    pass


class DescriptorParseError(DescriptorError):
    """Raised when a string is not a valid descriptor"""

    def __init__(self, descriptor: str, reason: str):
        self.descriptor = descriptor
        self.reason = reason
        super().__init__(f"Cannot parse descriptor: {reason}")


class DescriptorConversionError(DescriptorError):
    """Raised when a derivation index cannot be converted to a concrete script"""

    def __init__(self, descriptor: str, index: int, reason: str = ""):
        self.descriptor = descriptor
        self.index = index
        super().__init__(f"Cannot derive descriptor at index {index}: {reason}")


class DescriptorNotMultipathError(DescriptorError):
    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        super().__init__(f"Given descriptor isn't multipath, it doesn't contain {MULTIPATH}")


class PublicDescriptorError(DescriptorError):
    """Private keys were expected but the descriptor contains only public keys"""

    def __init__(self) -> None:
        super().__init__(
            "With private keys flag used but descriptor doesn't contain private keys"
        )


class SecretDescriptorError(DescriptorError):
    """Public keys were expected but the descriptor contains private keys"""

    def __init__(self) -> None:
        super().__init__("Without private keys flag used but descriptor contains private keys")


def strip_checksum(descriptor: str) -> str:
    """Remove the `#checksum` suffix, if any"""
    return descriptor.split("#", 1)[0].strip()


def verify_checksum(descriptor: str) -> None:
    """
    Check the `#checksum` suffix, if any, against the descriptor body.

    Raises:
        DescriptorParseError: The checksum doesn't match
    """
    if "#" not in descriptor:
        return
    body = strip_checksum(descriptor)
    checksum = descriptor.split("#", 1)[1].strip()
    if add_checksum(body) != f"{body}#{checksum}":
        raise DescriptorParseError(descriptor, "invalid checksum")


def _parse(descriptor: str) -> Descriptor:
    try:
        return Descriptor.from_string(descriptor.strip())
    except Exception as e:
        raise DescriptorParseError(descriptor, str(e)) from e


def _has_private_keys(parsed: Descriptor) -> bool:
    return any(key.is_private for key in parsed.keys)


@dataclass(frozen=True)
class SinglePathDescriptor:
    """
    Parsed descriptor with a single derivation branch.

    Equality and hashing use the canonical string only.
    """

    canonical: str
    has_private_keys: bool
    parsed: Descriptor = field(compare=False, repr=False)

    @classmethod
    def parse(cls, descriptor: str) -> SinglePathDescriptor:
        """
        Parse a single-path descriptor string.

        A checksum, if present, must match the descriptor body. The
        canonical form is the descriptor body with a freshly computed checksum.
        """
        if MULTIPATH in descriptor:
            raise DescriptorParseError(
                descriptor, f"multipath {MULTIPATH} descriptors must be exploded first"
            )

        verify_checksum(descriptor)
        parsed = _parse(descriptor)
        if parsed.num_branches > 1:
            raise DescriptorParseError(descriptor, "unsupported multipath notation")

        return cls(
            canonical=add_checksum(strip_checksum(descriptor)),
            has_private_keys=_has_private_keys(parsed),
            parsed=parsed,
        )

    @property
    def checksum(self) -> str:
        return self.canonical.rsplit("#", 1)[1]

    def script_pubkey_at(self, index: int) -> bytes:
        """Derive the scriptPubKey at a non-negative derivation index"""
        if index < 0:
            raise ValueError(f"Derivation index must be non-negative, got {index}")
        try:
            return self.parsed.derive(index).script_pubkey().data
        except Exception as e:
            raise DescriptorConversionError(self.canonical, index, str(e)) from e

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class ExplodedDescriptor:
    """The two single-path variants of a multipath descriptor"""

    external: str  # /0/ receive branch
    internal: str  # /1/ change branch

    def with_checksums(self) -> tuple[str, str]:
        return add_checksum(self.external), add_checksum(self.internal)


@dataclass(frozen=True)
class MultipathDescriptor:
    """Descriptor in `<0;1>` notation, only usable through explosion"""

    descriptor: str

    @classmethod
    def parse(cls, descriptor: str) -> MultipathDescriptor:
        verify_checksum(descriptor)
        descriptor = strip_checksum(descriptor)
        if MULTIPATH not in descriptor:
            raise DescriptorNotMultipathError(descriptor)
        return cls(descriptor)

    def split(self) -> ExplodedDescriptor:
        external, internal = split_multipath(self.descriptor)
        return ExplodedDescriptor(external=external, internal=internal)

    def into_single_descriptors(self) -> list[SinglePathDescriptor]:
        """External branch first, then internal"""
        branches = self.split()
        return [
            SinglePathDescriptor.parse(branches.external),
            SinglePathDescriptor.parse(branches.internal),
        ]


AnyDescriptor = SinglePathDescriptor | MultipathDescriptor


def parse_descriptor(descriptor: str) -> AnyDescriptor:
    """Parse a descriptor string into its single-path or multipath variant"""
    if MULTIPATH in descriptor:
        return MultipathDescriptor.parse(descriptor)
    return SinglePathDescriptor.parse(descriptor)


def split_multipath(descriptor: str) -> tuple[str, str]:
    """
    Replace every `<0;1>` marker with `0` (external) and with `1` (internal).

    A trailing checksum is dropped since it no longer matches either variant.
    """
    body = strip_checksum(descriptor)
    if MULTIPATH not in body:
        raise DescriptorNotMultipathError(descriptor)

    return body.replace(MULTIPATH, EXTERNAL_BRANCH), body.replace(MULTIPATH, INTERNAL_BRANCH)


def explode(descriptor: str, expect_private: bool) -> ExplodedDescriptor:
    """
    Split a multipath descriptor and check its key material.

    Args:
        descriptor: Descriptor containing the `<0;1>` marker
        expect_private: Whether the caller expects private keys in the descriptor

    Returns:
        The external and internal single-path descriptors (without checksum)

    Raises:
        DescriptorNotMultipathError: The marker is missing
        DescriptorParseError: Bad checksum, or the external variant isn't a valid descriptor
        PublicDescriptorError: Private keys expected, none found
        SecretDescriptorError: No private keys expected, some found
    """
    verify_checksum(descriptor)
    external, internal = split_multipath(descriptor)

    # key material is the same in both variants, only the branch index differs
    has_private = _has_private_keys(_parse(external))

    if expect_private and not has_private:
        raise PublicDescriptorError()
    if not expect_private and has_private:
        raise SecretDescriptorError()

    logger.debug(f"Exploded multipath descriptor (private keys: {has_private})")
    return ExplodedDescriptor(external=external, internal=internal)
