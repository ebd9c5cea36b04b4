"""Network registry for loading per-deployment staking configuration"""
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from eth_utils import is_hex_address

from aurora_staking.errors import ConfigurationError
from aurora_staking.models import VOTE_SYMBOL, BaseTokenConfig, NetworkConfig, StreamConfig

logger = logging.getLogger(__name__)

RPC_URL_ENV = 'AURORA_STAKING_RPC_URL'
MAX_DECIMALS = 36

_NETWORK_KEYS = ('token_contract_address', 'staking_contract_address', 'rpc_url', 'chain_id', 'streams')
_STREAM_KEYS = ('id', 'symbol', 'name', 'decimals', 'address', 'coingecko_key')


class NetworkRegistry:
    """Registry of configured Aurora networks"""

    def __init__(self, config_path: Optional[str] = None, config: Optional[Dict] = None):
        if config is not None:
            self.config_path = None
            self._load(config)
            return
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "networks.yaml"
        self.config_path = Path(config_path)
        self.load_config()

    def load_config(self):
        """Load network configuration from YAML file"""
        if not self.config_path.exists():
            raise ConfigurationError(f"Network config not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        self._load(config or {})

    def _load(self, config: Dict):
        self.default_network = config.get('default_network', 'mainnet')
        self.settle_delay_seconds = float(config.get('settle_delay_seconds', 2.0))
        timeout = config.get('read_timeout_seconds')
        self.read_timeout_seconds = float(timeout) if timeout is not None else None
        self.max_workers = int(config.get('max_workers', 16))

        base_cfg = config.get('base_token') or {}
        self.base_token = BaseTokenConfig(**{
            key: base_cfg[key] for key in ('coingecko_key', 'decimals', 'symbol', 'name')
            if key in base_cfg
        })
        _check_decimals(self.base_token.decimals, 'base_token')

        network_configs = config.get('networks') or {}
        if not network_configs:
            raise ConfigurationError("No networks configured")

        self.networks: Dict[str, NetworkConfig] = {
            name: self._build_network(name, cfg) for name, cfg in network_configs.items()
        }
        logger.info(f"Loaded networks: {', '.join(self.networks)}")

    def _build_network(self, name: str, cfg: Dict) -> NetworkConfig:
        missing = [key for key in _NETWORK_KEYS if key not in cfg]
        if missing:
            raise ConfigurationError(f"Network '{name}' missing keys: {', '.join(missing)}")

        for key in ('token_contract_address', 'staking_contract_address'):
            _check_address(cfg[key], f"{name} {key}")

        streams = []
        for i, stream_cfg in enumerate(cfg['streams'] or []):
            stream_missing = [key for key in _STREAM_KEYS if key not in stream_cfg]
            if stream_missing:
                raise ConfigurationError(
                    f"Network '{name}' stream {i} missing keys: {', '.join(stream_missing)}"
                )
            _check_address(stream_cfg["address"], f"{name} stream {stream_cfg['symbol']}")
            decimals = int(stream_cfg['decimals'])
            _check_decimals(decimals, f"{name} stream {stream_cfg['symbol']}")
            streams.append(StreamConfig(
                id=int(stream_cfg['id']),
                symbol=str(stream_cfg['symbol']),
                name=str(stream_cfg['name']),
                decimals=decimals,
                address=str(stream_cfg['address']),
                coingecko_key=str(stream_cfg['coingecko_key']),
            ))

        vote_streams = [s for s in streams if s.symbol == VOTE_SYMBOL]
        if len(vote_streams) != 1:
            raise ConfigurationError(
                f"Network '{name}' must configure exactly one {VOTE_SYMBOL} stream, "
                f"found {len(vote_streams)}"
            )

        return NetworkConfig(
            name=name,
            token_contract_address=str(cfg['token_contract_address']),
            staking_contract_address=str(cfg['staking_contract_address']),
            rpc_url=str(cfg['rpc_url']),
            chain_id=int(cfg['chain_id']),
            streams=tuple(streams),
            base_token=self.base_token,
            settle_delay_seconds=self.settle_delay_seconds,
            read_timeout_seconds=self.read_timeout_seconds,
            max_workers=self.max_workers,
        )

    def get_network(self, network_name: Optional[str] = None) -> NetworkConfig:
        """
        Get a network configuration by name.

        Args:
            network_name: Network name, or None for ``default_network``

        Returns:
            NetworkConfig, with the RPC URL overridden from the environment if set
        """
        name = network_name or self.default_network
        network = self.networks.get(name)
        if network is None:
            raise ConfigurationError(f"Network '{name}' not found in config")

        rpc_override = os.environ.get(RPC_URL_ENV)
        if rpc_override:
            network = replace(network, rpc_url=rpc_override)
        return network

    def get_all_networks(self) -> List[str]:
        """Get list of all configured network names"""
        return list(self.networks)


def _check_decimals(decimals: int, where: str):
    if not 0 <= decimals <= MAX_DECIMALS:
        raise ConfigurationError(f"Decimals for {where} out of range 0..{MAX_DECIMALS}: {decimals}")


def _check_address(address, where: str):
    if not isinstance(address, str) or not is_hex_address(address):
        raise ConfigurationError(f"Invalid address for {where}: {address!r}")
