"""
Descriptor and PSBT container constants.
"""

from __future__ import annotations

# Two-branch marker of a multipath descriptor: 0 is external (receive), 1 is internal (change)
MULTIPATH = "<0;1>"
EXTERNAL_BRANCH = "0"
INTERNAL_BRANCH = "1"

# Number of derivation indices cached per single-path descriptor.
# Comfortably above the usual 20 address gap limit of wallets.
DEFAULT_HORIZON = 1_000
MAX_HORIZON = 100_000

# Binary container carrying one or more PSBTs between commands
CONTAINER_MAGIC = b"psbts"
CONTAINER_SEPARATOR = 0xFF

SATS_PER_BTC = 100_000_000
