"""
PSBT accounting, report rendering and the multi-PSBT container.
"""

from dinasty.psbt.container import (
    ConsensusDecodeError,
    ContainerDecodeError,
    PsbtDecodeError,
    WrongMagicError,
    WrongSeparatorError,
    decode,
    encode,
    psbts_from_base64,
    psbts_to_base64,
    read_psbts,
)
from dinasty.psbt.details import (
    ClassificationError,
    FeeUnderflowError,
    MissingWitnessUtxoError,
    classify,
    psbt_details,
)
from dinasty.psbt.report import format_btc, render_detail, render_report

__all__ = [
    "ClassificationError",
    "ConsensusDecodeError",
    "ContainerDecodeError",
    "FeeUnderflowError",
    "MissingWitnessUtxoError",
    "PsbtDecodeError",
    "WrongMagicError",
    "WrongSeparatorError",
    "classify",
    "decode",
    "encode",
    "format_btc",
    "psbt_details",
    "psbts_from_base64",
    "psbts_to_base64",
    "read_psbts",
    "render_detail",
    "render_report",
]
