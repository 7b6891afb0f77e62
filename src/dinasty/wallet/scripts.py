"""
Script caches used to recognise our outputs.

Deriving a scriptPubKey is expensive, so every descriptor is derived once
over `[0, horizon)` and the resulting scripts are kept in a set. The index
is then reused read-only for every PSBT of a batch.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from dinasty.wallet.descriptor import (
    AnyDescriptor,
    MultipathDescriptor,
    SinglePathDescriptor,
    parse_descriptor,
)


@dataclass(frozen=True)
class ScriptCache:
    """scriptPubKeys of one single-path descriptor for indices [0, horizon)"""

    descriptor: str
    horizon: int
    scripts: frozenset[bytes]

    @classmethod
    def build(cls, descriptor: SinglePathDescriptor, horizon: int) -> ScriptCache:
        """
        Derive every script up to horizon.

        Raises:
            DescriptorConversionError: Any index failed to derive, no cache is returned
        """
        if horizon < 1:
            raise ValueError(f"Horizon must be positive, got {horizon}")

        scripts = frozenset(descriptor.script_pubkey_at(i) for i in range(horizon))

        logger.debug(
            f"Cached {len(scripts)} scripts for descriptor #{descriptor.checksum} "
            f"(horizon {horizon})"
        )
        return cls(descriptor=descriptor.canonical, horizon=horizon, scripts=scripts)

    def contains(self, script_pubkey: bytes) -> bool:
        return script_pubkey in self.scripts

    def __len__(self) -> int:
        return len(self.scripts)


class OwnershipIndex:
    """
    Membership test over the scripts of several descriptors.

    Multipath descriptors contribute one cache per branch, external first.
    """

    def __init__(self, horizon: int):
        if horizon < 1:
            raise ValueError(f"Horizon must be positive, got {horizon}")
        self.horizon = horizon
        self.caches: list[ScriptCache] = []

    @classmethod
    def from_descriptors(
        cls, descriptors: Iterable[AnyDescriptor | str], horizon: int
    ) -> OwnershipIndex:
        index = cls(horizon)
        for descriptor in descriptors:
            index.add(descriptor)
        logger.info(
            f"Ownership index ready: {len(index.caches)} descriptors, "
            f"{sum(len(c) for c in index.caches)} scripts"
        )
        return index

    def add(self, descriptor: AnyDescriptor | str) -> None:
        """Add a descriptor, parsing it first if given as string"""
        if isinstance(descriptor, str):
            descriptor = parse_descriptor(descriptor)

        if isinstance(descriptor, MultipathDescriptor):
            singles = descriptor.into_single_descriptors()
        else:
            singles = [descriptor]

        # a failing branch must leave self.caches unchanged
        caches = [ScriptCache.build(single, self.horizon) for single in singles]
        self.caches.extend(caches)

    def contains(self, script_pubkey: bytes) -> bool:
        return any(cache.contains(script_pubkey) for cache in self.caches)

    @property
    def descriptors(self) -> list[str]:
        return [cache.descriptor for cache in self.caches]
