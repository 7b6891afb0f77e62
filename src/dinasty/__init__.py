"""
dinasty - Descriptor-scoped accounting of PSBT batches for inheritance wallets

Provides descriptor explosion, ownership detection, per-transaction and
aggregate balance reports, and the binary container used to pass PSBTs
between commands.
"""

__version__ = "0.1.0"

from dinasty.constants import CONTAINER_MAGIC, CONTAINER_SEPARATOR, DEFAULT_HORIZON, MULTIPATH
from dinasty.models import (
    GroupReport,
    InputLine,
    NetworkType,
    OutputLine,
    TransactionDetail,
)

__all__ = [
    "CONTAINER_MAGIC",
    "CONTAINER_SEPARATOR",
    "DEFAULT_HORIZON",
    "GroupReport",
    "InputLine",
    "MULTIPATH",
    "NetworkType",
    "OutputLine",
    "TransactionDetail",
]
