"""
Shared fixtures: a regtest taproot wallet and a PSBT spending from it.
"""

from __future__ import annotations

import pytest
from embit.psbt import PSBT

from dinasty.models import NetworkType

TPUB = (
    "tpubD6NzVbkrYhZ4XUprtHTHAWupukJFpWBJBBU9pyp62LVMhxnpb1dqDouxv5m2MTTAuWzLvFQmtgWwzH"
    "CFTrVXi1HscGm1BZ2xuGDN5KL4zNF"
)

# Spends a 50 BTC coinbase of /0/* to 0.001 BTC external and 49.9989858 BTC change on /1/*
PSBT_BASE64 = (
    "cHNidP8BAH0CAAAAAbviGkHAroGDRJdSJP00ADQjpUVeAuccJEzYdTLcwCCIAAAAAAD9////AqCGAQAAAAAAFgA"
    "UFyAkO/DEPdd2RR3+zerWr2TDcTXUZQQqAQAAACJRIPaIAcQ3QPw+rS9eJQF9YxL4tR2Fm1T7DBxNCKACNVE+AA"
    "AAAAABASsA8gUqAQAAACJRIBEw73shsIFvsT73iQkCiZ/nCc2UwmnpwiKINaibjv6fIRZdw89r9r2z5GhjsuC2N"
    "xCQTpzxWEkpPeaP3hBES3QJEw0A1lI6KgAAAAAAAAAAARcgXcPPa/a9s+RoY7LgtjcQkE6c8VhJKT3mj94QREt0"
    "CRMAAAEFIM+8YdC2bFRzq/jzakcz/g+hqbs4xYR/8M9ntkrXOsK5IQfPvGHQtmxUc6v482pHM/4Poam7OMWEf/D"
    "PZ7ZK1zrCuQ0A1lI6KgEAAAAAAAAAAA=="
)

TXID = "981e91290b2f05d8b5e16d93d7ffe180595c16e19acbcb6e721399d9ae56bb45"
PREVOUT = "8820c0dc3275d84c241ce7025e45a523340034fd245297448381aec0411ae2bb:0"
EXTERNAL_ADDRESS = "bcrt1qzuszgwlscs7awaj9rhlvm6kk4ajvxuf4qs9ue9"
CHANGE_ADDRESS = "bcrt1p76yqr3phgr7ratf0tcjszltrztut28v9nd20krquf5y2qq342ylqfv0qfu"


@pytest.fixture
def network() -> NetworkType:
    return NetworkType.REGTEST


@pytest.fixture
def multipath_descriptor() -> str:
    return f"tr({TPUB}/<0;1>/*)"


@pytest.fixture
def external_descriptor() -> str:
    return f"tr({TPUB}/0/*)"


@pytest.fixture
def internal_descriptor() -> str:
    return f"tr({TPUB}/1/*)"


@pytest.fixture
def psbt_base64() -> str:
    return PSBT_BASE64


@pytest.fixture
def psbt(psbt_base64: str) -> PSBT:
    return PSBT.from_string(psbt_base64)
