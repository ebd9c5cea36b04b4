"""Guards and resync for state-changing staking actions.

Sending transactions and waiting for confirmation happen outside this
package; callers pass a ``submit`` callable that returns once the
transaction is confirmed. This module decides whether it may run and
re-synchronizes the account after the settle delay.
"""

import logging
import threading
import time
from typing import Callable, Optional, Set

from aurora_staking.errors import ActionInProgress
from aurora_staking.models import AccountSnapshot, NetworkConfig
from aurora_staking.services.snapshot_service import AccountSnapshotSynchronizer

logger = logging.getLogger(__name__)

APPROVE = 'approve'
ACTIONS = (
    APPROVE,
    'stake',
    'unstake',
    'unstake_all',
    'withdraw',
    'withdraw_all',
    'claim',
    'claim_all',
)


class StakingActions:
    """Runs one action at a time per account, then resyncs its snapshot"""

    def __init__(self, synchronizer: AccountSnapshotSynchronizer, network: NetworkConfig,
                 settle_delay_seconds: Optional[float] = None,
                 switch_chain: Optional[Callable[[int], None]] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.synchronizer = synchronizer
        self.network = network
        self.settle_delay_seconds = (
            network.settle_delay_seconds if settle_delay_seconds is None else settle_delay_seconds
        )
        self.switch_chain = switch_chain
        self._sleep = sleep
        self._busy: Set[str] = set()
        self._busy_guard = threading.Lock()

    def _claim(self, account: str) -> bool:
        key = account.lower()
        with self._busy_guard:
            if key in self._busy:
                return False
            self._busy.add(key)
            return True

    def _release(self, account: str):
        with self._busy_guard:
            self._busy.discard(account.lower())

    def is_busy(self, account: str) -> bool:
        with self._busy_guard:
            return account.lower() in self._busy

    def run(self, action: str, submit: Callable[[], object], account: str,
            chain_id: int) -> bool:
        """
        Submit an action and resync the account once it has settled.

        Args:
            action: One of ACTIONS
            submit: Sends the transaction and blocks until it is confirmed
            account: Account the action is signed by
            chain_id: Chain the wallet is currently connected to

        Returns:
            True if the action was submitted, False if the wallet was on
            the wrong chain (a chain switch is requested instead)

        Raises:
            ActionInProgress: If another action for ``account`` is running
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown staking action: {action}")

        if chain_id != self.network.chain_id:
            logger.warning(
                f"Wallet on chain {chain_id}, expected {self.network.chain_id}; {action} not submitted"
            )
            if self.switch_chain is not None:
                self.switch_chain(self.network.chain_id)
            return False

        if not self._claim(account):
            raise ActionInProgress(f"An action is already running for {account}")

        try:
            logger.info(f"Submitting {action} for {account}")
            submit()
            logger.debug(f"{action} confirmed, waiting {self.settle_delay_seconds}s before resync")
            self._sleep(self.settle_delay_seconds)
            self._resync(action, account)
        finally:
            self._release(account)
        return True

    def _resync(self, action: str, account: str) -> Optional[AccountSnapshot]:
        if action == APPROVE:
            return self.synchronizer.sync_allowance(account)
        return self.synchronizer.sync(account)
