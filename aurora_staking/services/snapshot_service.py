"""Account snapshot synchronizer.

Fans out every account-scoped read (balances, shares, pending withdrawals,
streamed rewards, prices, pause flag) on a thread pool, waits for all of
them, and publishes one immutable AccountSnapshot.

Failure policy:
    - streamed-amount reads are one unit; if any of them fails (the
      contract reverts for accounts without shares) all degrade to 0
    - any other failed read aborts the cycle; the previous snapshot stays
      published and ``synced`` stays False

Overlapping cycles are ordered by a generation counter: a cycle publishes
only if no newer cycle (or disconnect) started meanwhile.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from aurora_staking.adapters.base import PriceOracle, StakingReader
from aurora_staking.errors import ReadFailure
from aurora_staking.models import (
    BASE_STREAM_ID,
    AccountSnapshot,
    NetworkConfig,
    PendingWithdrawal,
)
from aurora_staking.services.fanout import wait_all

logger = logging.getLogger(__name__)


def has_shares(reader: StakingReader, account: str) -> bool:
    """Confirm that an account holds base-stream shares"""
    return reader.user_shares(account, BASE_STREAM_ID) != 0


class AccountSnapshotSynchronizer:
    """Builds and publishes AccountSnapshot values for one network"""

    def __init__(self, reader: StakingReader, oracle: PriceOracle, network: NetworkConfig,
                 executor: Optional[ThreadPoolExecutor] = None):
        self.reader = reader
        self.oracle = oracle
        self.network = network
        self.read_timeout = network.read_timeout_seconds

        # Raises ConfigurationError up front for configs without a vote stream
        self._vote_index = network.vote_index

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=network.max_workers, thread_name_prefix='snapshot-sync'
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot: Optional[AccountSnapshot] = None
        self._synced = False

    # ------------------------------------------------------------------ #
    # Published state
    # ------------------------------------------------------------------ #

    @property
    def snapshot(self) -> Optional[AccountSnapshot]:
        """Last published snapshot, None if never synced or disconnected"""
        return self._snapshot

    @property
    def synced(self) -> bool:
        """True once the latest cycle has published; False while one runs or after it failed"""
        return self._synced

    @property
    def generation(self) -> int:
        return self._generation

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            self._synced = False
            return self._generation

    def _publish(self, generation: int, snapshot: AccountSnapshot) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.warning(
                    f"Discarding stale snapshot for {snapshot.account} "
                    f"(cycle {generation}, current {self._generation})"
                )
                return False
            self._snapshot = snapshot
            self._synced = True
            return True

    # ------------------------------------------------------------------ #
    # Cycles
    # ------------------------------------------------------------------ #

    def sync(self, account: str) -> Optional[AccountSnapshot]:
        """
        Run one full synchronization cycle for ``account``.

        Returns:
            The published snapshot, or None if the cycle failed or was
            superseded by a newer one
        """
        generation = self._begin()
        logger.info(f"Syncing account {account} (cycle {generation})")

        try:
            snapshot = self._collect(account)
        except Exception as e:
            logger.error(f"Failed to sync account {account}: {e}", exc_info=True)
            return None

        if not self._publish(generation, snapshot):
            return None
        logger.info(f"Account {account} synced (cycle {generation})")
        return snapshot

    def sync_allowance(self, account: str) -> Optional[AccountSnapshot]:
        """
        Re-read only the allowance and republish the current snapshot with it.

        Falls back to a full sync when there is no snapshot for ``account``.
        """
        with self._lock:
            current = self._snapshot
            generation = self._generation
        if current is None or current.account != account:
            return self.sync(account)

        try:
            allowance = self.reader.allowance(
                self.network.token_contract_address, account, self.network.staking_contract_address
            )
        except Exception as e:
            logger.error(f"Failed to sync allowance for {account}: {e}")
            return None

        snapshot = replace(current, allowance=allowance)
        with self._lock:
            if generation != self._generation or self._snapshot is not current:
                logger.warning(f"Discarding stale allowance for {account}")
                return None
            self._snapshot = snapshot
        return snapshot

    def disconnect(self):
        """Hide account state and invalidate any cycle still in flight"""
        with self._lock:
            self._generation += 1
            self._snapshot = None
            self._synced = False
        logger.info("Account disconnected, snapshot cleared")

    def close(self):
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def _collect(self, account: str) -> AccountSnapshot:
        network = self.network
        reader = self.reader
        submit = self._executor.submit
        vote_stream = network.streams[self._vote_index]
        stream_ids = network.stream_ids
        reward_ids = stream_ids[1:]

        reads: Dict[str, Future] = {
            'base_balance': submit(reader.balance_of, network.token_contract_address, account),
            'vote_balance': submit(reader.balance_of, vote_stream.address, account),
            'allowance': submit(
                reader.allowance, network.token_contract_address, account,
                network.staking_contract_address
            ),
            'deposit': submit(reader.total_deposit, account),
            'user_shares': submit(reader.user_shares, account, BASE_STREAM_ID),
            'total_shares': submit(reader.total_shares),
            'total_staked': submit(reader.total_staked),
            'is_paused': submit(reader.is_paused),
            'prices': submit(self.oracle.get_prices, network.price_keys),
        }
        pending_reads = [submit(reader.pending_amount, sid, account) for sid in stream_ids]
        release_reads = [submit(reader.release_time, sid, account) for sid in stream_ids]
        streamed_reads = [submit(reader.streamed_amount, sid, account) for sid in reward_ids]

        wait_all(
            list(reads.values()) + pending_reads + release_reads + streamed_reads,
            self.read_timeout,
            f"sync {account}",
        )

        values = {name: future.result() for name, future in reads.items()}
        pending_withdrawals = self._pending_withdrawals(pending_reads, release_reads)
        streamed_amounts = self._streamed_amounts(streamed_reads, account)

        quote = values['prices']
        if len(quote.prices) != len(network.price_keys):
            raise ReadFailure(
                'prices', f"expected {len(network.price_keys)} prices, got {len(quote.prices)}"
            )

        return assemble_snapshot(
            network,
            account=account,
            base_balance=values['base_balance'],
            vote_balance=values['vote_balance'],
            allowance=values['allowance'],
            deposit=values['deposit'],
            user_shares=values['user_shares'],
            total_shares=values['total_shares'],
            total_staked=values['total_staked'],
            pending_withdrawals=pending_withdrawals,
            streamed_amounts=streamed_amounts,
            is_paused=values['is_paused'],
            base_price=quote.prices[0],
            unit_prices=tuple(quote.prices[1:]),
        )

    def _pending_withdrawals(self, pending_reads: List[Future],
                             release_reads: List[Future]) -> Tuple[PendingWithdrawal, ...]:
        withdrawals = []
        for i, (stream_id, decimals) in enumerate(zip(self.network.stream_ids, self.network.stream_decimals)):
            amount = pending_reads[i].result()
            release_time = release_reads[i].result()
            if amount > 0:
                withdrawals.append(PendingWithdrawal(
                    stream_id=stream_id,
                    amount=amount,
                    decimals=decimals,
                    release_time_ms=release_time * 1000,
                ))
        return tuple(withdrawals)

    def _streamed_amounts(self, streamed_reads: List[Future], account: str) -> Tuple[int, ...]:
        try:
            return tuple(future.result() for future in streamed_reads)
        except Exception as e:
            logger.warning(f"Streamed amounts unavailable for {account} (zero staked shares?): {e}")
            return tuple(0 for _ in streamed_reads)


def assemble_snapshot(network: NetworkConfig, **fields) -> AccountSnapshot:
    """
    Build an AccountSnapshot from resolved reads and derive the totals.

    ``vote_total_balance`` adds wallet, streamed and withdrawable VOTE;
    ``user_shares_value`` is ``total_staked * user_shares // total_shares``.
    """
    vote_stream = network.vote_stream
    streamed_amounts = fields['streamed_amounts']
    withdrawable_vote = next(
        (w.amount for w in fields['pending_withdrawals'] if w.stream_id == vote_stream.id), 0
    )
    vote_total = fields['vote_balance'] + streamed_amounts[network.vote_index] + withdrawable_vote

    total_shares = fields['total_shares']
    if total_shares == 0:
        shares_value = 0
    else:
        shares_value = fields['total_staked'] * fields['user_shares'] // total_shares

    return AccountSnapshot(
        withdrawable_vote_balance=withdrawable_vote,
        vote_total_balance=vote_total,
        user_shares_value=shares_value,
        synced=True,
        **fields,
    )
