"""Protocol-wide staking metrics: APRs, stream progress, vote supply, staked share"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from aurora_staking.adapters.base import PriceOracle, StakingReader
from aurora_staking.economics.apr import calculate_aprs
from aurora_staking.economics.progress import streams_progress
from aurora_staking.economics.schedule import Schedule
from aurora_staking.economics.supply import circulating_supply, staked_pct_of_supply
from aurora_staking.errors import ReadFailure
from aurora_staking.models import (
    AccountSnapshot,
    NetworkConfig,
    PriceQuote,
    ProtocolMetrics,
    Stream,
)
from aurora_staking.services.fanout import wait_all

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class ProtocolMetricsService:
    """Collects schedules, prices and total stake, then derives ProtocolMetrics"""

    def __init__(self, reader: StakingReader, oracle: PriceOracle, network: NetworkConfig,
                 executor: Optional[ThreadPoolExecutor] = None,
                 clock: Callable[[], int] = now_ms):
        self.reader = reader
        self.oracle = oracle
        self.network = network
        self.clock = clock
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=network.max_workers, thread_name_prefix='metrics'
        )
        self.latest: Optional[ProtocolMetrics] = None

    def collect(self, reference_time_ms: Optional[int] = None) -> ProtocolMetrics:
        """
        Read everything the metrics need and compute them.

        Args:
            reference_time_ms: Evaluation time, defaults to the clock

        Returns:
            ProtocolMetrics (also kept as ``latest``)

        Raises:
            ReadFailure, InvalidSchedule, MissingPrice: Propagated unchanged;
                wrong economics are never published
        """
        reference_time_ms = self.clock() if reference_time_ms is None else reference_time_ms
        submit = self._executor.submit

        total_staked_read = submit(self.reader.total_staked)
        schedule_reads = [submit(self.reader.stream_schedule, sid) for sid in self.network.stream_ids]
        prices_read = submit(self.oracle.get_prices, self.network.price_keys)

        wait_all(
            [total_staked_read, prices_read] + schedule_reads,
            self.network.read_timeout_seconds,
            "protocol metrics",
        )

        total_staked = total_staked_read.result()
        schedules = [Schedule.from_raw(read.result()) for read in schedule_reads]
        quote = prices_read.result()
        if len(quote.prices) != len(schedules):
            raise ReadFailure(
                'prices', f"expected {len(schedules)} prices, got {len(quote.prices)}"
            )

        metrics = compute_metrics(self.network, schedules, quote, total_staked, reference_time_ms)
        self.latest = metrics
        logger.info(
            f"{self.network.name} metrics: total APR {metrics.total_apr:.4f}%, "
            f"base APR {metrics.base_apr:.4f}%, vote supply {metrics.vote_circulating_supply}"
        )
        return metrics

    def close(self):
        if self._owns_executor:
            self._executor.shutdown(wait=False)


def compute_metrics(network: NetworkConfig, schedules: Sequence[Schedule], quote: PriceQuote,
                    total_staked: int, reference_time_ms: int) -> ProtocolMetrics:
    """
    Derive ProtocolMetrics from already-fetched data.

    ``schedules`` and ``quote`` are aligned with ``network.stream_ids``
    (base token first).
    """
    aprs = calculate_aprs(
        schedules, network.stream_decimals, quote.prices, total_staked, reference_time_ms
    )
    progress = streams_progress(schedules, reference_time_ms)

    vote_schedule = schedules[network.vote_index + 1]
    supply_time = min(max(reference_time_ms, vote_schedule.start_time()), vote_schedule.end_time())
    vote_supply = circulating_supply(vote_schedule, supply_time)

    staked_pct = staked_pct_of_supply(
        total_staked, quote.prices[0], quote.market_caps[0], network.base_token.decimals
    )

    streams: List[Stream] = []
    for i, config in enumerate(network.streams):
        schedule = schedules[i + 1]
        streams.append(Stream(
            config=config,
            unit_price=quote.prices[i + 1],
            apr=aprs.streams[i],
            progress_pct=progress[i + 1],
            start_timestamp_ms=schedule.start_time(),
            end_timestamp_ms=schedule.end_time(),
            is_started=reference_time_ms >= schedule.start_time(),
        ))

    return ProtocolMetrics(
        base_apr=aprs.base,
        total_apr=aprs.total,
        per_stream_apr=aprs.streams,
        vote_circulating_supply=vote_supply,
        staked_pct_of_supply=staked_pct,
        total_staked=total_staked,
        streams=tuple(streams),
        reference_time_ms=reference_time_ms,
    )


def with_streamed_amounts(metrics: ProtocolMetrics, snapshot: AccountSnapshot) -> ProtocolMetrics:
    """Copy of ``metrics`` whose streams carry the snapshot's streamed amounts"""
    if len(snapshot.streamed_amounts) != len(metrics.streams):
        raise ValueError(
            f"Snapshot has {len(snapshot.streamed_amounts)} streamed amounts "
            f"for {len(metrics.streams)} streams"
        )
    streams = tuple(
        replace(stream, streamed_amount=amount)
        for stream, amount in zip(metrics.streams, snapshot.streamed_amounts)
    )
    return replace(metrics, streams=streams)
