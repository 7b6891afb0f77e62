"""
Fixed-width text rendering of transaction details and group reports.

Example:

    tx  0:               981e91290b2f05d8b5e16d93d7ffe180595c16e19acbcb6e721399d9ae56bb45
    lockt:               0
    in  0:  50.000000000 8820c0dc...411ae2bb:0 m
    out 0:   0.001000000 bcrt1qzuszgwlscs7awaj9rhlvm6kk4ajvxuf4qs9ue9
    out 1:  49.998985800 bcrt1p76yqr3phgr7ratf0tcjszltrztut28v9nd20krquf5y2qq342ylqfv0qfu m
    fee  :   0.000014200

    #txs :               1
    fees :   0.000014200
    net  :  -0.001014200

`m` marks scripts belonging to the descriptors, `s` marks signed inputs.
"""

from __future__ import annotations

from decimal import Decimal

from dinasty.constants import SATS_PER_BTC
from dinasty.models import GroupReport, InputLine, OutputLine, TransactionDetail

# Gap between a six character label such as "tx  0:" and its value
_LABEL_PAD = " " * 15


def format_btc(sats: int) -> str:
    """Satoshis as BTC, 9 decimals, right aligned on 13 columns (sign included)"""
    return f"{Decimal(sats) / SATS_PER_BTC:>13.9f}"


def render_input(line: InputLine) -> str:
    return (
        f"in{line.index:>3}: {format_btc(line.amount)} {line.prevout}"
        f"{' m' if line.mine else ''}{' s' if line.signed else ''}"
    )


def render_output(line: OutputLine) -> str:
    return (
        f"out{line.index:>2}: {format_btc(line.amount)} {line.address}"
        f"{' m' if line.mine else ''}"
    )


def render_detail(detail: TransactionDetail) -> str:
    lines = [
        f"tx{detail.index:>3}:{_LABEL_PAD}{detail.txid}",
        f"lockt:{_LABEL_PAD}{detail.lock_time}",
    ]
    lines.extend(render_input(line) for line in detail.inputs)
    lines.extend(render_output(line) for line in detail.outputs)
    lines.append(f"{'fee':<5}: {format_btc(detail.fee)}")
    return "\n".join(lines) + "\n"


def render_report(report: GroupReport) -> str:
    """Every detail followed by an empty line, then the totals"""
    parts = [render_detail(detail) + "\n" for detail in report.details]
    parts.append(f"#txs :{_LABEL_PAD}{report.tx_count}\n")
    parts.append(f"fees : {format_btc(report.fee)}\n")
    parts.append(f"net  : {format_btc(report.net_balance)}\n")
    return "".join(parts)
