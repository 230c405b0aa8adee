# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel, Field
from typing import List, Annotated
from .common import StakeStateKind, StakeStatus
from ..config.params import U64_MAX, PUBKEY_SIZE, DEACTIVATION_EPOCH_NEVER

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
Pubkey = Annotated[bytes, Field(min_length=PUBKEY_SIZE, max_length=PUBKEY_SIZE)]

ZERO_PUBKEY = b"\x00" * PUBKEY_SIZE

class Authorized(BaseModel):
    staker: Pubkey = ZERO_PUBKEY       # May split/delegate/deactivate
    withdrawer: Pubkey = ZERO_PUBKEY   # May withdraw and re-authorize

class Lockup(BaseModel):
    unix_timestamp: U64 = 0   # Locked until this unix time
    epoch: U64 = 0            # ...or until this epoch
    custodian: Pubkey = ZERO_PUBKEY

class Meta(BaseModel):
    rent_exempt_reserve: U64 = 0   # Lamports never stakeable
    authorized: Authorized = Field(default_factory=Authorized)
    lockup: Lockup = Field(default_factory=Lockup)

class Delegation(BaseModel):
    """A stake's commitment to a vote account."""
    voter_pubkey: Pubkey = ZERO_PUBKEY
    stake: U64                                   # Delegated lamports
    activation_epoch: U64                        # Epoch warmup began
    deactivation_epoch: U64 = DEACTIVATION_EPOCH_NEVER  # Epoch cooldown began
    unused: U64 = 0                              # Layout filler

class Stake(BaseModel):
    delegation: Delegation
    credits_observed: U64 = 0

class StakeAccount(BaseModel):
    discriminant: StakeStateKind
    meta: Meta = Field(default_factory=Meta)
    stake: Stake

class StakeAccountInfo(BaseModel):
    """Decoded stake account data plus the account's lamport balance."""
    lamports: U64
    data: StakeAccount

class StakeHistoryEntry(BaseModel):
    """Cluster-wide stake totals recorded for one epoch."""
    epoch: U64
    effective: U64 = 0
    activating: U64 = 0
    deactivating: U64 = 0

StakeHistory = List[StakeHistoryEntry]

class EffectiveAndActivating(BaseModel):
    effective: int = 0
    activating: int = 0

class StakeActivatingAndDeactivating(BaseModel):
    effective: int = 0
    activating: int = 0
    deactivating: int = 0

class StakeActivation(BaseModel):
    status: StakeStatus
    active: int     # Effective lamports
    inactive: int   # Lamports not earning, excluding rent reserve
