"""Data source adapters"""
from aurora_staking.adapters.base import PriceOracle, StakingReader

__all__ = [
    'PriceOracle',
    'StakingReader',
]
