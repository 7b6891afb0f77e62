"""
PSBT accounting against a set of descriptors.

For every PSBT:
1. Sum the value of all inputs, from their witness UTXO
2. Sum the value of all outputs
3. Inputs whose script is ours are outgoing, outputs whose script is ours are incoming
4. The fee is inputs minus outputs

Every input and every output is checked, a transaction may spend several of
our UTXOs and pay to several of our addresses (e.g. consolidation plus change).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from embit.psbt import PSBT, InputScope
from embit.script import Script
from loguru import logger

from dinasty.models import (
    GroupReport,
    InputLine,
    NetworkType,
    OutputLine,
    TransactionDetail,
    get_network_params,
)
from dinasty.wallet.descriptor import AnyDescriptor
from dinasty.wallet.scripts import OwnershipIndex

ADDRESS_SCRIPT_TYPES = frozenset({"p2pkh", "p2sh", "p2wpkh", "p2wsh", "p2tr"})

# embit keeps the taproot key-path signature among the unknown input fields
PSBT_IN_TAP_KEY_SIG = b"\x13"


class ClassificationError(Exception):
    """Raised when a PSBT cannot be accounted"""

    pass


class MissingWitnessUtxoError(ClassificationError):
    def __init__(self, input_index: int):
        self.input_index = input_index
        super().__init__(f"Missing witness UTXO in input {input_index}")


class FeeUnderflowError(ClassificationError):
    """Outputs are worth more than inputs"""

    def __init__(self, sum_inputs: int, sum_outputs: int):
        self.sum_inputs = sum_inputs
        self.sum_outputs = sum_outputs
        super().__init__(f"Outputs total {sum_outputs} sats exceeds inputs total {sum_inputs} sats")


def script_to_address(script: Script, network_params: dict[str, Any]) -> str:
    """
    Convert scriptPubKey to address.

    Returns:
        The address string, or the script hex if the script has no address form
    """
    if script.script_type() not in ADDRESS_SCRIPT_TYPES:
        return script.data.hex()
    return script.address(network_params)


def is_signed(psbt_input: InputScope) -> bool:
    """Whether the input carries at least one signature"""
    return (
        bool(psbt_input.partial_sigs)
        or any(key[:1] == PSBT_IN_TAP_KEY_SIG for key in psbt_input.unknown)
        or bool(psbt_input.taproot_sigs)
        or psbt_input.final_scriptwitness is not None
    )


def classify(
    index: int,
    psbt: PSBT,
    ownership: OwnershipIndex,
    network: NetworkType,
) -> TransactionDetail:
    """
    Account a single PSBT.

    Args:
        index: Position of the PSBT in its batch
        psbt: The PSBT, every input must have a witness UTXO
        ownership: Scripts of our descriptors
        network: Network used to render output addresses

    Returns:
        TransactionDetail with amounts in satoshis

    Raises:
        MissingWitnessUtxoError: An input has no witness UTXO
        FeeUnderflowError: Outputs are worth more than inputs
    """
    network_params = get_network_params(network)
    tx = psbt.tx

    sum_inputs = 0
    outgoing = 0
    inputs: list[InputLine] = []

    for i, psbt_input in enumerate(psbt.inputs):
        utxo = psbt_input.witness_utxo
        if utxo is None:
            raise MissingWitnessUtxoError(i)

        sum_inputs += utxo.value
        mine = ownership.contains(utxo.script_pubkey.data)
        if mine:
            outgoing += utxo.value

        vin = tx.vin[i]
        inputs.append(
            InputLine(
                index=i,
                amount=utxo.value,
                prevout=f"{vin.txid.hex()}:{vin.vout}",
                mine=mine,
                signed=is_signed(psbt_input),
            )
        )

    sum_outputs = 0
    incoming = 0
    outputs: list[OutputLine] = []

    for i, tx_out in enumerate(tx.vout):
        sum_outputs += tx_out.value
        mine = ownership.contains(tx_out.script_pubkey.data)
        if mine:
            incoming += tx_out.value

        outputs.append(
            OutputLine(
                index=i,
                amount=tx_out.value,
                address=script_to_address(tx_out.script_pubkey, network_params),
                mine=mine,
            )
        )

    if sum_outputs > sum_inputs:
        raise FeeUnderflowError(sum_inputs, sum_outputs)

    txid = tx.txid().hex()
    logger.debug(
        f"PSBT {index} ({txid}): outgoing={outgoing} incoming={incoming} "
        f"fee={sum_inputs - sum_outputs}"
    )

    return TransactionDetail(
        index=index,
        txid=txid,
        lock_time=tx.locktime,
        descriptors=tuple(ownership.descriptors),
        outgoing=outgoing,
        incoming=incoming,
        fee=sum_inputs - sum_outputs,
        inputs=tuple(inputs),
        outputs=tuple(outputs),
    )


def psbt_details(
    psbts: Sequence[PSBT],
    descriptors: Iterable[AnyDescriptor | str],
    network: NetworkType,
    horizon: int,
) -> GroupReport:
    """
    Account a batch of PSBTs against the given descriptors.

    The ownership index is built once and shared by every PSBT. Details keep
    the order of `psbts`.
    """
    ownership = OwnershipIndex.from_descriptors(descriptors, horizon)

    report = GroupReport()
    for i, psbt in enumerate(psbts):
        report.merge(classify(i, psbt, ownership, network))

    logger.info(
        f"Accounted {report.tx_count} PSBTs: net {report.net_balance} sats, fees {report.fee} sats"
    )
    return report
