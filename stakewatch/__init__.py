# MIT License
# Copyright (c) 2025 Hashborn

"""
StakeWatch

Computes effective, activating and deactivating stake for a delegation at a
given epoch, following the cluster warmup/cooldown rule.

Layout:
- protocol/: constants, record types, binary codec
- blockchain/core/: stake history lookup, warmup/cooldown engine, status resolver
- cli/: command line inspector
"""

from .blockchain.core.activation import get_stake_activating_and_deactivating, get_stake_and_activating
from .blockchain.core.stake_history import get_stake_history_entry
from .blockchain.core.status import get_stake_activation, resolve_stake_activation
from .protocol.types.common import (
    ArithmeticGuardFailed,
    MalformedRecord,
    NotADelegatedStake,
    ProtocolError,
    StakeStateKind,
    StakeStatus,
)

__version__ = "0.1.0"

__all__ = [
    'get_stake_activating_and_deactivating',
    'get_stake_and_activating',
    'get_stake_history_entry',
    'get_stake_activation',
    'resolve_stake_activation',
    'ArithmeticGuardFailed',
    'MalformedRecord',
    'NotADelegatedStake',
    'ProtocolError',
    'StakeStateKind',
    'StakeStatus',
]
