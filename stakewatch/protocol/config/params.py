# MIT License
# Copyright (c) 2025 Hashborn

# Integer widths
U64_MAX = 2**64 - 1

# Global Constants
DENOM = "SOL"
LAMPORTS_PER_SOL = 1_000_000_000

# Delegation that was never deactivated carries the max epoch
DEACTIVATION_EPOCH_NEVER = U64_MAX

# Fraction of the cluster's effective stake that may warm up or cool down per epoch
WARMUP_COOLDOWN_RATE = 0.09

# Stake history sysvar retention window (entries)
STAKE_HISTORY_MAX_ENTRIES = 512

# Record sizes (bytes)
PUBKEY_SIZE = 32
STAKE_ACCOUNT_SIZE = 196      # Serialized prefix we decode; on-chain accounts are 200
STAKE_HISTORY_ENTRY_SIZE = 32  # epoch, effective, activating, deactivating
