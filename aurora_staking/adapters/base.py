"""Base abstract classes for on-chain and price data sources"""
from abc import ABC, abstractmethod
from typing import Sequence, Tuple

from aurora_staking.models import PriceQuote


class StakingReader(ABC):
    """
    Read-only view of the staking contract and its tokens.

    One method per on-chain accessor. Every call is independent and may be
    issued concurrently; implementations raise ReadFailure on rejection.
    """

    @abstractmethod
    def balance_of(self, token_address: str, account: str) -> int:
        """ERC-20 balance of ``account`` for the token at ``token_address``"""
        pass

    @abstractmethod
    def allowance(self, token_address: str, owner: str, spender: str) -> int:
        """ERC-20 allowance granted by ``owner`` to ``spender``"""
        pass

    @abstractmethod
    def total_deposit(self, account: str) -> int:
        """Total base token deposited by ``account``"""
        pass

    @abstractmethod
    def user_shares(self, account: str, stream_id: int) -> int:
        """Shares held by ``account`` in ``stream_id``"""
        pass

    @abstractmethod
    def total_shares(self) -> int:
        """Total base-stream shares"""
        pass

    @abstractmethod
    def total_staked(self) -> int:
        """Total base token staked, including compounded rewards"""
        pass

    @abstractmethod
    def is_paused(self) -> bool:
        pass

    @abstractmethod
    def pending_amount(self, stream_id: int, account: str) -> int:
        """Amount waiting in the pending-withdrawal queue of ``stream_id``"""
        pass

    @abstractmethod
    def release_time(self, stream_id: int, account: str) -> int:
        """
        Release time of the pending withdrawal.

        Returns:
            Unix time in seconds
        """
        pass

    @abstractmethod
    def streamed_amount(self, stream_id: int, account: str) -> int:
        """
        Claimable rewards accrued by ``account`` on ``stream_id``.

        The contract reverts when the account holds zero shares.
        """
        pass

    @abstractmethod
    def stream_schedule(self, stream_id: int) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        """
        Raw emission schedule of a stream.

        Returns:
            (schedule_times, schedule_rewards)
        """
        pass


class PriceOracle(ABC):
    """USD prices and market caps by price-oracle key"""

    @abstractmethod
    def get_prices(self, keys: Sequence[str]) -> PriceQuote:
        """
        Get prices for multiple tokens.

        Args:
            keys: Oracle keys, base token first

        Returns:
            PriceQuote index-aligned with ``keys``; unknown keys map to None
        """
        pass
