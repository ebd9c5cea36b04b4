#!/usr/bin/env python3
"""
Staking Metrics Collection Script

Reads reward schedules, prices and total stake from an Aurora network and
prints protocol metrics (APRs, stream progress, vote supply, staked share).
With --account, also syncs and prints that account's snapshot.

Usage:
    python scripts/collect_staking_metrics.py
    python scripts/collect_staking_metrics.py --network testnet --account 0xabc...
    python scripts/collect_staking_metrics.py --at 2024-11-13T12:00:00Z
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aurora_staking.adapters.aurora import AuroraChainAdapter, CoinGeckoPriceOracle
from aurora_staking.collectors import NetworkRegistry
from aurora_staking.economics import vote_power_pct
from aurora_staking.errors import StakingError
from aurora_staking.services import (
    AccountSnapshotSynchronizer,
    ProtocolMetricsService,
    with_streamed_amounts,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_reference_time(value: str) -> int:
    """ISO-8601 timestamp to milliseconds"""
    dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return int(dt.timestamp() * 1000)


def main():
    """Collect and print staking metrics."""
    import argparse

    parser = argparse.ArgumentParser(description='Collect Aurora staking metrics')
    parser.add_argument('--network', help='Network name from the config (default: config default)')
    parser.add_argument('--config', help='Path to networks.yaml')
    parser.add_argument('--account', help='Also sync this account')
    parser.add_argument('--at', help='Reference time (ISO-8601), default now')
    args = parser.parse_args()

    try:
        registry = NetworkRegistry(args.config)
        network = registry.get_network(args.network)
    except StakingError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    chain = AuroraChainAdapter(network)
    reader = chain.get_staking_reader()
    oracle = CoinGeckoPriceOracle()

    reference_time_ms = parse_reference_time(args.at) if args.at else None

    metrics_service = ProtocolMetricsService(reader, oracle, network)
    try:
        metrics = metrics_service.collect(reference_time_ms)
    except StakingError as e:
        logger.error(f"Failed to collect metrics for {network.name}: {e}")
        return 1
    finally:
        metrics_service.close()

    output = {'network': network.name, 'metrics': metrics.to_dict()}

    if args.account:
        with AccountSnapshotSynchronizer(reader, oracle, network) as synchronizer:
            snapshot = synchronizer.sync(args.account)
        if snapshot is None:
            logger.error(f"Could not sync account {args.account}")
            return 1
        output['metrics'] = with_streamed_amounts(metrics, snapshot).to_dict()
        output['account'] = snapshot.to_dict()
        output['account']['vote_power_pct'] = vote_power_pct(
            snapshot.vote_total_balance,
            metrics.vote_circulating_supply,
            network.vote_stream.decimals,
        )

    print(json.dumps(output, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
