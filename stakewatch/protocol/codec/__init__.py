# MIT License
# Copyright (c) 2025 Hashborn

"""
Stake Record Codec

Fixed-layout readers/writers for stake accounts and the stake history sysvar.
"""

from .layout import (
    decode_stake_account,
    decode_stake_account_info,
    decode_stake_history,
    encode_stake_account,
    encode_stake_history,
)

__all__ = [
    "decode_stake_account",
    "decode_stake_account_info",
    "decode_stake_history",
    "encode_stake_account",
    "encode_stake_history",
]
