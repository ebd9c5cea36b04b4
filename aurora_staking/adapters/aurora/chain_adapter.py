"""Aurora chain adapter implementation"""
import logging
from typing import Optional

from web3 import Web3

from aurora_staking.errors import ConfigurationError
from aurora_staking.models import NetworkConfig

logger = logging.getLogger(__name__)


class AuroraChainAdapter:
    """Adapter for an Aurora network (mainnet or testnet)"""

    def __init__(self, network: NetworkConfig, request_timeout: Optional[float] = 30):
        self.network = network
        self.rpc_url = network.rpc_url
        self.request_timeout = request_timeout
        self.web3_instance = None
        self._reader = None

    def get_web3_instance(self) -> Web3:
        """Get web3.py instance for this network"""
        if self.web3_instance is None:
            if not self.rpc_url:
                raise ConfigurationError(f"RPC URL not configured for {self.network.name}")
            request_kwargs = {'timeout': self.request_timeout} if self.request_timeout else {}
            self.web3_instance = Web3(Web3.HTTPProvider(self.rpc_url, request_kwargs=request_kwargs))
            logger.info(f"Connected web3 to {self.network.name} at {self.rpc_url}")
        return self.web3_instance

    def get_staking_reader(self):
        """Get the contract-backed StakingReader for this network"""
        if self._reader is None:
            from aurora_staking.adapters.aurora.staking_contract import Web3StakingReader
            self._reader = Web3StakingReader(self.get_web3_instance(), self.network)
        return self._reader
