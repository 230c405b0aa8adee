# MIT License
# Copyright (c) 2025 Hashborn

from typing import Optional
from ...protocol.types.stake import StakeHistory, StakeHistoryEntry


def get_stake_history_entry(epoch: int, stake_history: StakeHistory) -> Optional[StakeHistoryEntry]:
    """
    Find the cluster stake totals recorded for an epoch.

    The table is bounded by the sysvar retention window, so a linear scan
    is fine. Returns None when the epoch has aged out of the window or has
    not been recorded yet.
    """
    for entry in stake_history:
        if entry.epoch == epoch:
            return entry
    return None
