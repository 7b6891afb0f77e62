"""
Accounting data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from embit.networks import NETWORKS


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    SIGNET = "signet"
    REGTEST = "regtest"


def get_network_params(network: NetworkType) -> dict[str, Any]:
    """Get embit network parameters (address prefixes, bech32 hrp) for network."""
    return {
        NetworkType.MAINNET: NETWORKS["main"],
        NetworkType.TESTNET: NETWORKS["test"],
        NetworkType.SIGNET: NETWORKS["signet"],
        NetworkType.REGTEST: NETWORKS["regtest"],
    }[NetworkType(network)]


@dataclass(frozen=True)
class InputLine:
    """A classified PSBT input"""

    index: int
    amount: int
    prevout: str  # txid:vout
    mine: bool
    signed: bool


@dataclass(frozen=True)
class OutputLine:
    """A classified transaction output"""

    index: int
    amount: int
    address: str
    mine: bool


@dataclass(frozen=True)
class TransactionDetail:
    """
    Accounting of a single PSBT against a set of descriptors.

    All amounts are in satoshis. `outgoing` is the value of our inputs,
    `incoming` the value of our outputs.
    """

    index: int
    txid: str
    lock_time: int
    descriptors: tuple[str, ...]
    outgoing: int
    incoming: int
    fee: int
    inputs: tuple[InputLine, ...] = ()
    outputs: tuple[OutputLine, ...] = ()

    @property
    def net_balance(self) -> int:
        return self.incoming - self.outgoing


@dataclass
class GroupReport:
    """Aggregate of transaction details, in the order they were merged"""

    details: list[TransactionDetail] = field(default_factory=list)
    outgoing: int = 0
    incoming: int = 0
    fee: int = 0

    def merge(self, detail: TransactionDetail) -> None:
        """
        Append a detail and add its amounts to the running totals.

        Every PSBT is accounted independently: merging the same transaction
        twice counts it twice. Deduplication is up to the caller.
        """
        self.outgoing += detail.outgoing
        self.incoming += detail.incoming
        self.fee += detail.fee
        self.details.append(detail)

    @property
    def net_balance(self) -> int:
        """Signed balance change in satoshis (incoming - outgoing)"""
        return self.incoming - self.outgoing

    @property
    def tx_count(self) -> int:
        return len(self.details)
