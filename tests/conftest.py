"""
Shared fixtures for the staking tracker tests.

The fakes below stand in for the chain and the price API; they answer
from plain dictionaries and record which reads were issued.
"""

import os
import sys
import threading

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from aurora_staking.adapters.base import PriceOracle, StakingReader
from aurora_staking.errors import ReadFailure
from aurora_staking.models import NetworkConfig, PriceQuote, StreamConfig
from tests.fixtures.streams_schedule import STREAMS_SCHEDULE

ACCOUNT = "0x1111111111111111111111111111111111111111"
OTHER_ACCOUNT = "0x2222222222222222222222222222222222222222"

TOKEN_ADDRESS = "0x8bec47865ade3b172a928df8f990bc7f2a3b9f79"
STAKING_ADDRESS = "0xccc2b1aD21666A5847A804a73a41F904C4a4A0Ec"
VOTE_ADDRESS = "0x6edE987A51d7b4d3945E7a76Af59Ff2b968910A8"

PRICE_TABLE = {
    'aurora-near': (0.135344, 0.135344 * 1_000_000_000),
    'aurigami': (0.00007611, 10_000.0),
    'trisolaris': (0.00141883, 20_000.0),
    'bastion-protocol': (0.00000127, 30_000.0),
    'usn': (0.245603, 40_000.0),
    'vote': (0.0, 0.0),
}


def make_network(**overrides) -> NetworkConfig:
    """Mainnet-shaped network: PLY, TRI, BSTN, USN and VOTE streams"""
    streams = (
        StreamConfig(1, 'PLY', 'Aurigami Token', 18, "0x09C9D464b58d96837f8d8b6f4d9fE4aD408d3A4f", 'aurigami'),
        StreamConfig(2, 'TRI', 'Trisolaris', 18, "0xFa94348467f64D5A457F75F8bc40495D33c65aBB", 'trisolaris'),
        StreamConfig(3, 'BSTN', 'Bastion', 18, "0x9f1f933c660a1dc856f0e0fe058435879c5ccef0", 'bastion-protocol'),
        StreamConfig(4, 'USN', 'USN', 18, "0x5183e1b1091804bc2602586919e6880ac1cf2896", 'usn'),
        StreamConfig(5, 'VOTE', 'Aurora Vote Token', 18, VOTE_ADDRESS, 'vote'),
    )
    params = dict(
        name='mainnet',
        token_contract_address=TOKEN_ADDRESS,
        staking_contract_address=STAKING_ADDRESS,
        rpc_url='https://mainnet.aurora.dev',
        chain_id=1313161554,
        streams=streams,
        settle_delay_seconds=2.0,
        read_timeout_seconds=5.0,
        max_workers=16,
    )
    params.update(overrides)
    return NetworkConfig(**params)


class FakeStakingReader(StakingReader):
    """
    In-memory StakingReader.

    ``failing`` names methods that raise ReadFailure. ``gates`` maps an
    account to an Event that its ``balance_of`` reads wait on; ``entered``
    is set when such a gated read starts.
    """

    def __init__(self):
        self.balances = {}
        self.allowance_value = 0
        self.deposit = 0
        self.shares = {}
        self.total_shares_value = 0
        self.total_staked_value = 0
        self.paused = False
        self.pending = {}
        self.release = {}
        self.streamed = {}
        self.schedules = {sid: STREAMS_SCHEDULE[sid] for sid in range(len(STREAMS_SCHEDULE))}
        self.failing = set()
        self.gates = {}
        self.entered = threading.Event()
        self.calls = []
        self._calls_lock = threading.Lock()

    def _record(self, name, *args):
        with self._calls_lock:
            self.calls.append((name,) + args)
        if name in self.failing:
            raise ReadFailure(name, "execution reverted")

    def balance_of(self, token_address, account):
        gate = self.gates.get(account)
        if gate is not None:
            self.entered.set()
            gate.wait(5)
        self._record('balance_of', token_address, account)
        return self.balances.get((token_address, account), 0)

    def allowance(self, token_address, owner, spender):
        self._record('allowance', token_address, owner, spender)
        return self.allowance_value

    def total_deposit(self, account):
        self._record('total_deposit', account)
        return self.deposit

    def user_shares(self, account, stream_id):
        self._record('user_shares', account, stream_id)
        return self.shares.get(stream_id, 0)

    def total_shares(self):
        self._record('total_shares')
        return self.total_shares_value

    def total_staked(self):
        self._record('total_staked')
        return self.total_staked_value

    def is_paused(self):
        self._record('is_paused')
        return self.paused

    def pending_amount(self, stream_id, account):
        self._record('pending_amount', stream_id, account)
        return self.pending.get(stream_id, 0)

    def release_time(self, stream_id, account):
        self._record('release_time', stream_id, account)
        return self.release.get(stream_id, 0)

    def streamed_amount(self, stream_id, account):
        self._record('streamed_amount', stream_id, account)
        return self.streamed.get(stream_id, 0)

    def stream_schedule(self, stream_id):
        self._record('stream_schedule', stream_id)
        return self.schedules[stream_id]


class FakePriceOracle(PriceOracle):
    """Answers from a key -> (price, market_cap) table; unknown keys get None"""

    def __init__(self, table=None):
        self.table = dict(PRICE_TABLE if table is None else table)
        self.fail = False
        self.requests = []

    def get_prices(self, keys):
        self.requests.append(tuple(keys))
        if self.fail:
            raise ReadFailure('prices', "service unavailable")
        entries = [self.table.get(key, (None, None)) for key in keys]
        return PriceQuote(
            prices=tuple(price for price, _ in entries),
            market_caps=tuple(market_cap for _, market_cap in entries),
        )


@pytest.fixture
def network():
    return make_network()


@pytest.fixture
def reader():
    return FakeStakingReader()


@pytest.fixture
def oracle():
    return FakePriceOracle()
