"""Configuration collectors"""
from aurora_staking.collectors.network_registry import NetworkRegistry

__all__ = [
    'NetworkRegistry',
]
