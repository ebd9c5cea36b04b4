"""Synchronization and metrics services"""
from aurora_staking.services.snapshot_service import (
    AccountSnapshotSynchronizer,
    assemble_snapshot,
    has_shares,
)
from aurora_staking.services.metrics_service import (
    ProtocolMetricsService,
    compute_metrics,
    now_ms,
    with_streamed_amounts,
)
from aurora_staking.services.action_service import ACTIONS, StakingActions

__all__ = [
    'AccountSnapshotSynchronizer',
    'assemble_snapshot',
    'has_shares',
    'ProtocolMetricsService',
    'compute_metrics',
    'now_ms',
    'with_streamed_amounts',
    'ACTIONS',
    'StakingActions',
]
