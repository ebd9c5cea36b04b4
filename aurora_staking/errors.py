"""Error types raised by the staking economics and sync layers"""
from typing import Optional


class StakingError(Exception):
    """Base class for all staking tracker errors"""


class InvalidSchedule(StakingError, ValueError):
    """A reward schedule violates its length or monotonicity rules"""


class DivisionByZero(StakingError, ZeroDivisionError):
    """A schedule interval has zero duration (upstream data corruption)"""


class MissingPrice(StakingError):
    """The price oracle did not return a price that the APR computation needs"""

    def __init__(self, index: int, message: Optional[str] = None):
        self.index = index
        super().__init__(message or f'No stream price at position {index}')


class ReadFailure(StakingError):
    """An individual on-chain or oracle read was rejected"""

    def __init__(self, read: str, message: Optional[str] = None):
        self.read = read
        super().__init__(f'{read}: {message}' if message else read)


class ConfigurationError(StakingError):
    """Network configuration is missing or inconsistent"""


class ActionInProgress(StakingError):
    """Another state-changing action is still running for the same account"""
