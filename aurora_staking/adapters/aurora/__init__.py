"""Aurora chain adapter, staking contract reader and price feed"""
from aurora_staking.adapters.aurora.chain_adapter import AuroraChainAdapter
from aurora_staking.adapters.aurora.staking_contract import Web3StakingReader
from aurora_staking.adapters.aurora.coingecko_price import CoinGeckoPriceOracle

__all__ = [
    'AuroraChainAdapter',
    'Web3StakingReader',
    'CoinGeckoPriceOracle',
]
