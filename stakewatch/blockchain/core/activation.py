# MIT License
# Copyright (c) 2025 Hashborn

"""
Stake Warmup/Cooldown

Computes how much of a delegation is effective, activating or deactivating
at a target epoch by replaying the cluster's throttled warmup and cooldown
epoch by epoch.

Each epoch the whole cluster may move at most WARMUP_COOLDOWN_RATE of its
effective stake into (or out of) the effective pool. A single delegation
gets a share proportional to its weight in the cluster's activating (or
deactivating) stake recorded for the previous epoch:

    weight = my_remaining / cluster_activating
    delta  = max(1, round_half_up(weight * cluster_effective * RATE))

Ratios are computed in double precision and rounded half up before being
applied as integer lamports, matching the runtime bit for bit.
"""

import logging
import math
from ...protocol.config.params import WARMUP_COOLDOWN_RATE
from ...protocol.types.common import ArithmeticGuardFailed
from ...protocol.types.stake import (
    Delegation,
    EffectiveAndActivating,
    StakeActivatingAndDeactivating,
    StakeHistory,
)
from .stake_history import get_stake_history_entry

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    whole = math.floor(value)
    # value - whole is exact for doubles, so no x + 0.5 rounding error
    return whole + 1 if value - whole >= 0.5 else whole


def _entitled_change(weight: float, cluster_effective: int) -> int:
    """Lamports this delegation may move this epoch (at least 1)."""
    newly_changed_cluster_stake = float(cluster_effective) * WARMUP_COOLDOWN_RATE
    return max(1, _round_half_up(weight * newly_changed_cluster_stake))


def _checked_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticGuardFailed(f"Underflow: {a} - {b}")
    return a - b


def get_stake_and_activating(
    delegation: Delegation,
    target_epoch: int,
    stake_history: StakeHistory,
) -> EffectiveAndActivating:
    """
    Warmup phase: effective and activating stake at target_epoch,
    ignoring any deactivation.

    Args:
        delegation: Delegation to evaluate
        target_epoch: Epoch to evaluate at
        stake_history: Cluster stake history entries

    Returns:
        EffectiveAndActivating with effective + activating == stake
        (both zero when not begun or instantly reversed)
    """
    stake = delegation.stake

    if delegation.activation_epoch == delegation.deactivation_epoch:
        # Activated and deactivated in the same epoch, never effective
        return EffectiveAndActivating(effective=0, activating=0)
    elif target_epoch == delegation.activation_epoch:
        return EffectiveAndActivating(effective=0, activating=stake)
    elif target_epoch < delegation.activation_epoch:
        return EffectiveAndActivating(effective=0, activating=0)

    current_epoch = delegation.activation_epoch
    entry = get_stake_history_entry(current_epoch, stake_history)
    if entry is None:
        # Dropped out of history (or none yet), assume warmup long finished
        logger.debug(f"No stake history for activation epoch {current_epoch}, treating stake as fully effective")
        return EffectiveAndActivating(effective=stake, activating=0)

    # Each epoch's effective stake is derived from the previous epoch's cluster totals
    current_effective = 0
    while entry is not None:
        current_epoch += 1
        remaining = _checked_sub(stake, current_effective)

        if entry.activating == 0:
            raise ArithmeticGuardFailed(
                f"Cluster activating stake is zero at epoch {entry.epoch} while {remaining} lamports are still warming up"
            )
        weight = float(remaining) / float(entry.activating)
        current_effective += _entitled_change(weight, entry.effective)

        if current_effective >= stake:
            current_effective = stake
            break

        if current_epoch >= target_epoch or current_epoch >= delegation.deactivation_epoch:
            break

        entry = get_stake_history_entry(current_epoch, stake_history)
        if entry is None:
            logger.debug(f"Warmup stopped at epoch {current_epoch}: no stake history entry")

    return EffectiveAndActivating(
        effective=current_effective,
        activating=_checked_sub(stake, current_effective),
    )


def get_stake_activating_and_deactivating(
    delegation: Delegation,
    target_epoch: int,
    stake_history: StakeHistory,
) -> StakeActivatingAndDeactivating:
    """
    Effective, activating and deactivating stake of a delegation at target_epoch.

    Runs the warmup phase, then winds down whatever became effective once
    target_epoch passes the deactivation epoch.

    Returns:
        StakeActivatingAndDeactivating; activating and deactivating are
        never both nonzero

    Raises:
        ArithmeticGuardFailed: Cluster totals make the share undefined
    """
    warm = get_stake_and_activating(delegation, target_epoch, stake_history)
    effective, activating = warm.effective, warm.activating

    if target_epoch < delegation.deactivation_epoch:
        return StakeActivatingAndDeactivating(
            effective=effective,
            activating=activating,
            deactivating=0,
        )
    elif target_epoch == delegation.deactivation_epoch:
        # Can only deactivate what's activated
        return StakeActivatingAndDeactivating(
            effective=effective,
            activating=0,
            deactivating=effective,
        )

    current_epoch = delegation.deactivation_epoch
    entry = get_stake_history_entry(current_epoch, stake_history)
    if entry is None:
        # Cooldown finished before the retained history begins
        logger.debug(f"No stake history for deactivation epoch {current_epoch}, treating stake as fully inactive")
        return StakeActivatingAndDeactivating(effective=0, activating=0, deactivating=0)

    current_effective = effective
    while entry is not None:
        current_epoch += 1

        # No cluster deactivating stake at the previous epoch means cooldown already completed
        if entry.deactivating == 0:
            break

        weight = float(current_effective) / float(entry.deactivating)
        newly_not_effective = _entitled_change(weight, entry.effective)

        if newly_not_effective >= current_effective:
            current_effective = 0
            break
        current_effective -= newly_not_effective

        if current_epoch >= target_epoch:
            break

        entry = get_stake_history_entry(current_epoch, stake_history)
        if entry is None:
            logger.debug(f"Cooldown stopped at epoch {current_epoch}: no stake history entry")

    # Everything still effective is on its way out
    return StakeActivatingAndDeactivating(
        effective=current_effective,
        activating=0,
        deactivating=current_effective,
    )
