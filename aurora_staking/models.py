"""Data models for staking streams, account snapshots and protocol metrics"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from aurora_staking.errors import ConfigurationError

VOTE_SYMBOL = 'VOTE'
BASE_STREAM_ID = 0


@dataclass(frozen=True)
class StreamConfig:
    """Static identity of one reward stream, as configured per network"""
    id: int
    symbol: str
    name: str
    decimals: int
    address: str
    coingecko_key: str

    @property
    def is_vote(self) -> bool:
        return self.symbol == VOTE_SYMBOL


@dataclass(frozen=True)
class BaseTokenConfig:
    """The staked token itself (stream id 0)"""
    coingecko_key: str = 'aurora-near'
    decimals: int = 18
    symbol: str = 'AURORA'
    name: str = 'Aurora'


@dataclass(frozen=True)
class NetworkConfig:
    """Immutable per-deployment configuration passed into every component"""
    name: str
    token_contract_address: str
    staking_contract_address: str
    rpc_url: str
    chain_id: int
    streams: Tuple[StreamConfig, ...]
    base_token: BaseTokenConfig = field(default_factory=BaseTokenConfig)
    settle_delay_seconds: float = 2.0
    read_timeout_seconds: Optional[float] = None
    max_workers: int = 16

    @property
    def vote_index(self) -> int:
        """Position of the vote stream within ``streams``"""
        for i, stream in enumerate(self.streams):
            if stream.is_vote:
                return i
        raise ConfigurationError(f'No {VOTE_SYMBOL} stream configured for {self.name}')

    @property
    def vote_stream(self) -> StreamConfig:
        return self.streams[self.vote_index]

    @property
    def stream_ids(self) -> Tuple[int, ...]:
        """Stream ids including the base stream at position 0"""
        return (BASE_STREAM_ID,) + tuple(s.id for s in self.streams)

    @property
    def stream_decimals(self) -> Tuple[int, ...]:
        """Decimals aligned with ``stream_ids``"""
        return (self.base_token.decimals,) + tuple(s.decimals for s in self.streams)

    @property
    def price_keys(self) -> Tuple[str, ...]:
        """Price oracle keys aligned with ``stream_ids``"""
        return (self.base_token.coingecko_key,) + tuple(s.coingecko_key for s in self.streams)


@dataclass(frozen=True)
class PriceQuote:
    """Oracle answer, index-aligned with the requested keys"""
    prices: Tuple[Optional[float], ...]
    market_caps: Tuple[Optional[float], ...]

    def __post_init__(self):
        if len(self.prices) != len(self.market_caps):
            raise ValueError(
                f'Price quote misaligned: {len(self.prices)} prices, '
                f'{len(self.market_caps)} market caps'
            )


@dataclass(frozen=True)
class Stream:
    """
    A reward stream with the values derived during a metrics cycle.

    ``streamed_amount`` is account-scoped: None on protocol metrics, set
    from an AccountSnapshot by ``with_streamed_amounts``.
    """
    config: StreamConfig
    unit_price: Optional[float] = None
    apr: Optional[float] = None
    progress_pct: float = 10.0
    start_timestamp_ms: int = 0
    end_timestamp_ms: int = 0
    is_started: bool = False
    streamed_amount: Optional[int] = None

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def symbol(self) -> str:
        return self.config.symbol

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'id': self.config.id,
            'symbol': self.config.symbol,
            'name': self.config.name,
            'decimals': self.config.decimals,
            'address': self.config.address,
            'coingecko_key': self.config.coingecko_key,
            'unit_price': self.unit_price,
            'apr': self.apr,
            'progress_pct': self.progress_pct,
            'start_timestamp_ms': self.start_timestamp_ms,
            'end_timestamp_ms': self.end_timestamp_ms,
            'is_started': self.is_started,
            'streamed_amount': None if self.streamed_amount is None else str(self.streamed_amount),
        }


@dataclass(frozen=True)
class PendingWithdrawal:
    """Unstaked or claimed amount waiting for its release time"""
    stream_id: int
    amount: int
    decimals: int
    release_time_ms: int

    def to_dict(self) -> dict:
        return {
            'stream_id': self.stream_id,
            'amount': str(self.amount),
            'decimals': self.decimals,
            'release_time_ms': self.release_time_ms,
        }


@dataclass(frozen=True)
class AccountSnapshot:
    """
    Point-in-time view of one account, assembled from a single sync cycle.

    Amounts are raw on-chain integers. ``streamed_amounts`` and
    ``unit_prices`` are aligned with ``NetworkConfig.streams``; the base
    token price is kept separately in ``base_price``.
    """
    account: str
    base_balance: int
    vote_balance: int
    allowance: int
    deposit: int
    user_shares: int
    total_shares: int
    total_staked: int
    pending_withdrawals: Tuple[PendingWithdrawal, ...]
    streamed_amounts: Tuple[int, ...]
    is_paused: bool
    withdrawable_vote_balance: int = 0
    vote_total_balance: int = 0
    user_shares_value: int = 0
    base_price: Optional[float] = None
    unit_prices: Tuple[Optional[float], ...] = ()
    synced: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization (integers as strings)"""
        return {
            'account': self.account,
            'base_balance': str(self.base_balance),
            'vote_balance': str(self.vote_balance),
            'vote_total_balance': str(self.vote_total_balance),
            'withdrawable_vote_balance': str(self.withdrawable_vote_balance),
            'allowance': str(self.allowance),
            'deposit': str(self.deposit),
            'user_shares': str(self.user_shares),
            'user_shares_value': str(self.user_shares_value),
            'total_shares': str(self.total_shares),
            'total_staked': str(self.total_staked),
            'pending_withdrawals': [w.to_dict() for w in self.pending_withdrawals],
            'streamed_amounts': [str(a) for a in self.streamed_amounts],
            'base_price': self.base_price,
            'unit_prices': list(self.unit_prices),
            'is_paused': self.is_paused,
            'synced': self.synced,
        }


@dataclass(frozen=True)
class ProtocolMetrics:
    """Protocol-wide economics computed at ``reference_time_ms``"""
    base_apr: float
    total_apr: float
    per_stream_apr: Tuple[float, ...]
    vote_circulating_supply: int
    staked_pct_of_supply: Optional[float]
    total_staked: int = 0
    streams: Tuple[Stream, ...] = ()
    reference_time_ms: int = 0

    def to_dict(self) -> dict:
        return {
            'base_apr': self.base_apr,
            'total_apr': self.total_apr,
            'per_stream_apr': list(self.per_stream_apr),
            'vote_circulating_supply': str(self.vote_circulating_supply),
            'staked_pct_of_supply': self.staked_pct_of_supply,
            'total_staked': str(self.total_staked),
            'streams': [s.to_dict() for s in self.streams],
            'reference_time_ms': self.reference_time_ms,
        }
