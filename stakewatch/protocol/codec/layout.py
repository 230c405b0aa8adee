# MIT License
# Copyright (c) 2025 Hashborn

"""
Stake Record Layouts

Fixed-offset little-endian readers/writers for the two records the
activation engine consumes:

- Stake account (StakeStateV2 prefix, 196 bytes)
- Stake history sysvar (u64 count + 32-byte entries)

Layouts are raw memory layouts, not a self-describing format. Trailing
bytes past the fixed layout are ignored on decode.
"""

import logging
import struct
from typing import List, Union

from ..config.params import STAKE_HISTORY_MAX_ENTRIES
from ..types.common import MalformedRecord, StakeStateKind
from ..types.stake import (
    Authorized,
    Delegation,
    Lockup,
    Meta,
    Stake,
    StakeAccount,
    StakeAccountInfo,
    StakeHistoryEntry,
)

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]

# discriminant | meta (reserve, staker, withdrawer, unix_ts, lockup epoch, custodian)
# | delegation (voter, stake, activation, deactivation, unused) | credits_observed
_STAKE_ACCOUNT_STRUCT = struct.Struct("<IQ32s32sQQ32s32sQQQQQ")
_HISTORY_LEN_STRUCT = struct.Struct("<Q")
_HISTORY_ENTRY_STRUCT = struct.Struct("<QQQQ")


def decode_stake_account(data: Buffer) -> StakeAccount:
    """
    Decode a stake account's data field.

    Args:
        data: Raw account data (at least 196 bytes)

    Returns:
        StakeAccount with meta and stake populated

    Raises:
        MalformedRecord: Buffer too short or unknown discriminant
    """
    if len(data) < _STAKE_ACCOUNT_STRUCT.size:
        raise MalformedRecord(
            f"Stake account too small: {len(data)} bytes (expected {_STAKE_ACCOUNT_STRUCT.size})"
        )

    (
        discriminant,
        rent_exempt_reserve,
        staker,
        withdrawer,
        unix_timestamp,
        lockup_epoch,
        custodian,
        voter_pubkey,
        stake,
        activation_epoch,
        deactivation_epoch,
        unused,
        credits_observed,
    ) = _STAKE_ACCOUNT_STRUCT.unpack_from(data)

    try:
        kind = StakeStateKind(discriminant)
    except ValueError:
        raise MalformedRecord(f"Unknown stake account discriminant: {discriminant}") from None

    return StakeAccount(
        discriminant=kind,
        meta=Meta(
            rent_exempt_reserve=rent_exempt_reserve,
            authorized=Authorized(staker=staker, withdrawer=withdrawer),
            lockup=Lockup(unix_timestamp=unix_timestamp, epoch=lockup_epoch, custodian=custodian),
        ),
        stake=Stake(
            delegation=Delegation(
                voter_pubkey=voter_pubkey,
                stake=stake,
                activation_epoch=activation_epoch,
                deactivation_epoch=deactivation_epoch,
                unused=unused,
            ),
            credits_observed=credits_observed,
        ),
    )


def encode_stake_account(account: StakeAccount) -> bytes:
    """Serialize a StakeAccount back into its 196-byte layout."""
    meta = account.meta
    delegation = account.stake.delegation
    return _STAKE_ACCOUNT_STRUCT.pack(
        int(account.discriminant),
        meta.rent_exempt_reserve,
        meta.authorized.staker,
        meta.authorized.withdrawer,
        meta.lockup.unix_timestamp,
        meta.lockup.epoch,
        meta.lockup.custodian,
        delegation.voter_pubkey,
        delegation.stake,
        delegation.activation_epoch,
        delegation.deactivation_epoch,
        delegation.unused,
        account.stake.credits_observed,
    )


def decode_stake_account_info(data: Buffer, lamports: int) -> StakeAccountInfo:
    """Decode account data and pair it with the account's lamport balance."""
    return StakeAccountInfo(lamports=lamports, data=decode_stake_account(data))


def decode_stake_history(data: Buffer) -> List[StakeHistoryEntry]:
    """
    Decode the stake history sysvar.

    Layout: u64 entry count followed by that many
    (epoch, effective, activating, deactivating) u64 quadruples.

    Raises:
        MalformedRecord: Count missing or entries truncated
    """
    if len(data) < _HISTORY_LEN_STRUCT.size:
        raise MalformedRecord(
            f"Stake history too small: {len(data)} bytes (expected at least {_HISTORY_LEN_STRUCT.size})"
        )

    (count,) = _HISTORY_LEN_STRUCT.unpack_from(data)
    required = _HISTORY_LEN_STRUCT.size + count * _HISTORY_ENTRY_STRUCT.size
    if len(data) < required:
        raise MalformedRecord(
            f"Stake history truncated: {count} entries need {required} bytes, got {len(data)}"
        )
    if count > STAKE_HISTORY_MAX_ENTRIES:
        logger.warning(f"Stake history has {count} entries (retention window is {STAKE_HISTORY_MAX_ENTRIES})")

    entries = []
    for epoch, effective, activating, deactivating in _HISTORY_ENTRY_STRUCT.iter_unpack(
        memoryview(data)[_HISTORY_LEN_STRUCT.size:required]
    ):
        entries.append(
            StakeHistoryEntry(
                epoch=epoch,
                effective=effective,
                activating=activating,
                deactivating=deactivating,
            )
        )
    return entries


def encode_stake_history(entries: List[StakeHistoryEntry]) -> bytes:
    """Serialize stake history entries with their u64 length prefix."""
    buffer = bytearray(_HISTORY_LEN_STRUCT.size + len(entries) * _HISTORY_ENTRY_STRUCT.size)
    _HISTORY_LEN_STRUCT.pack_into(buffer, 0, len(entries))
    offset = _HISTORY_LEN_STRUCT.size
    for entry in entries:
        _HISTORY_ENTRY_STRUCT.pack_into(
            buffer, offset, entry.epoch, entry.effective, entry.activating, entry.deactivating
        )
        offset += _HISTORY_ENTRY_STRUCT.size
    return bytes(buffer)
