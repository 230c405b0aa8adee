from enum import Enum, IntEnum

class StakeStateKind(IntEnum):
    UNINITIALIZED = 0   # Not a stake
    INITIALIZED = 1     # Stake account without a delegation
    STAKE = 2           # Delegated stake
    REWARDS_POOL = 3    # Legacy variant, never delegated

class StakeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ACTIVATING = "activating"
    DEACTIVATING = "deactivating"

class ProtocolError(Exception):
    pass

class MalformedRecord(ProtocolError):
    """Buffer too short for the layout or discriminant not recognized."""
    pass

class NotADelegatedStake(ProtocolError):
    """Record decoded fine but carries no delegation."""
    pass

class ArithmeticGuardFailed(ProtocolError):
    """Internal arithmetic invariant violated (e.g. a balance would go negative)."""
    pass
