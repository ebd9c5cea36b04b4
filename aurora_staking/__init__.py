"""Aurora staking reward economics and account snapshot tracker"""
from aurora_staking.errors import (
    ActionInProgress,
    ConfigurationError,
    DivisionByZero,
    InvalidSchedule,
    MissingPrice,
    ReadFailure,
    StakingError,
)
from aurora_staking.models import (
    AccountSnapshot,
    NetworkConfig,
    PendingWithdrawal,
    PriceQuote,
    ProtocolMetrics,
    Stream,
    StreamConfig,
)

__version__ = '0.1.0'

__all__ = [
    'ActionInProgress',
    'ConfigurationError',
    'DivisionByZero',
    'InvalidSchedule',
    'MissingPrice',
    'ReadFailure',
    'StakingError',
    'AccountSnapshot',
    'NetworkConfig',
    'PendingWithdrawal',
    'PriceQuote',
    'ProtocolMetrics',
    'Stream',
    'StreamConfig',
]
