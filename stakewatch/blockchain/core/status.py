# MIT License
# Copyright (c) 2025 Hashborn

import logging
from ...protocol.codec.layout import Buffer, decode_stake_account_info, decode_stake_history
from ...protocol.types.common import (
    ArithmeticGuardFailed,
    NotADelegatedStake,
    StakeStateKind,
    StakeStatus,
)
from ...protocol.types.stake import (
    StakeAccountInfo,
    StakeActivatingAndDeactivating,
    StakeActivation,
    StakeHistory,
)
from .activation import get_stake_activating_and_deactivating

logger = logging.getLogger(__name__)


def classify_stake(amounts: StakeActivatingAndDeactivating) -> StakeStatus:
    """Map engine output to a status, deactivating taking precedence."""
    if amounts.deactivating > 0:
        return StakeStatus.DEACTIVATING
    elif amounts.activating > 0:
        return StakeStatus.ACTIVATING
    elif amounts.effective > 0:
        return StakeStatus.ACTIVE
    return StakeStatus.INACTIVE


def _inactive_lamports(lamports: int, effective: int, rent_exempt_reserve: int) -> int:
    inactive = lamports - effective - rent_exempt_reserve
    if inactive < 0:
        raise ArithmeticGuardFailed(
            f"Balance {lamports} below effective stake {effective} plus rent reserve {rent_exempt_reserve}"
        )
    return inactive


def resolve_stake_activation(
    account_info: StakeAccountInfo,
    stake_history: StakeHistory,
    current_epoch: int,
) -> StakeActivation:
    """
    Resolve the activation status of an already decoded stake account.

    Args:
        account_info: Stake account data and lamport balance
        stake_history: Cluster stake history entries
        current_epoch: Epoch to evaluate at

    Returns:
        StakeActivation (status, active lamports, inactive lamports)

    Raises:
        NotADelegatedStake: Account is uninitialized or a rewards pool
        ArithmeticGuardFailed: Balances are inconsistent
    """
    account = account_info.data
    rent_exempt_reserve = account.meta.rent_exempt_reserve

    if account.discriminant in (StakeStateKind.UNINITIALIZED, StakeStateKind.REWARDS_POOL):
        raise NotADelegatedStake(f"Stake account is {account.discriminant.name}, no delegation")

    if account.discriminant == StakeStateKind.INITIALIZED:
        return StakeActivation(
            status=StakeStatus.INACTIVE,
            active=0,
            inactive=_inactive_lamports(account_info.lamports, 0, rent_exempt_reserve),
        )

    amounts = get_stake_activating_and_deactivating(
        account.stake.delegation,
        current_epoch,
        stake_history,
    )
    status = classify_stake(amounts)
    logger.debug(
        f"Epoch {current_epoch}: effective={amounts.effective} activating={amounts.activating} "
        f"deactivating={amounts.deactivating} -> {status.value}"
    )

    return StakeActivation(
        status=status,
        active=amounts.effective,
        inactive=_inactive_lamports(account_info.lamports, amounts.effective, rent_exempt_reserve),
    )


def get_stake_activation(
    account_data: Buffer,
    stake_history_data: Buffer,
    current_epoch: int,
    lamports: int,
) -> StakeActivation:
    """
    Decode a stake account and the stake history sysvar and resolve the
    stake's activation status at current_epoch.

    Raises:
        MalformedRecord: Either buffer fails to decode
        NotADelegatedStake: Account carries no delegation
        ArithmeticGuardFailed: Balances are inconsistent
    """
    account_info = decode_stake_account_info(account_data, lamports)
    stake_history = decode_stake_history(stake_history_data)
    return resolve_stake_activation(account_info, stake_history, current_epoch)
