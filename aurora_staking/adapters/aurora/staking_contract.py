"""
Aurora staking contract reader.

Implements the StakingReader port over web3.py contract calls. Only the
view functions the tracker needs are declared in the minimal ABIs below;
every return value is type-checked before it leaves this module.
"""

import logging
from typing import Any, Callable, Dict, Tuple

from web3 import Web3

from aurora_staking.adapters.base import StakingReader
from aurora_staking.errors import ReadFailure
from aurora_staking.models import NetworkConfig

logger = logging.getLogger(__name__)


# ============================================
# ABI Definitions
# ============================================

def _view(name: str, inputs: list, outputs: list) -> Dict[str, Any]:
    return {
        "inputs": inputs,
        "name": name,
        "outputs": outputs,
        "stateMutability": "view",
        "type": "function"
    }


_UINT = {"type": "uint256", "name": ""}
_STREAM_ID = {"type": "uint256", "name": "streamId"}
_ACCOUNT = {"type": "address", "name": "account"}

# Minimal staking contract ABI
STAKING_ABI = [
    _view("getUserTotalDeposit", [_ACCOUNT], [_UINT]),
    _view("getAmountOfShares", [_STREAM_ID, _ACCOUNT], [_UINT]),
    _view("totalAuroraShares", [], [_UINT]),
    _view("getTotalAmountOfStakedAurora", [], [_UINT]),
    _view("paused", [], [_UINT]),
    _view("getPending", [_STREAM_ID, _ACCOUNT], [_UINT]),
    _view("getReleaseTime", [_STREAM_ID, _ACCOUNT], [_UINT]),
    _view("getStreamClaimableAmount", [_STREAM_ID, _ACCOUNT], [_UINT]),
    _view(
        "getStreamSchedule",
        [_STREAM_ID],
        [
            {"type": "uint256[]", "name": "scheduleTimes"},
            {"type": "uint256[]", "name": "scheduleRewards"}
        ]
    ),
]

# Minimal ERC-20 ABI
ERC20_ABI = [
    _view("balanceOf", [_ACCOUNT], [_UINT]),
    _view(
        "allowance",
        [{"type": "address", "name": "owner"}, {"type": "address", "name": "spender"}],
        [_UINT]
    ),
]


class Web3StakingReader(StakingReader):
    """StakingReader backed by the deployed staking and ERC-20 contracts"""

    def __init__(self, web3: Web3, network: NetworkConfig):
        self.web3 = web3
        self.network = network
        self.staking_address = Web3.to_checksum_address(network.staking_contract_address)
        self._staking = web3.eth.contract(address=self.staking_address, abi=STAKING_ABI)
        self._tokens: Dict[str, Any] = {}

    def _token(self, token_address: str):
        address = Web3.to_checksum_address(token_address)
        contract = self._tokens.get(address)
        if contract is None:
            contract = self.web3.eth.contract(address=address, abi=ERC20_ABI)
            self._tokens[address] = contract
        return contract

    @staticmethod
    def _call(read: str, fn: Callable[[], Any]) -> Any:
        try:
            value = fn()
        except Exception as e:
            raise ReadFailure(read, str(e)) from e
        logger.debug(f"{read} -> {value}")
        return value

    @classmethod
    def _call_uint(cls, read: str, fn: Callable[[], Any]) -> int:
        value = cls._call(read, fn)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ReadFailure(read, f"expected uint256, got {type(value).__name__}")
        return value

    # ------------------------------------------------------------------ #
    # StakingReader interface
    # ------------------------------------------------------------------ #

    def balance_of(self, token_address: str, account: str) -> int:
        account = Web3.to_checksum_address(account)
        return self._call_uint(
            f"balanceOf({token_address})",
            self._token(token_address).functions.balanceOf(account).call
        )

    def allowance(self, token_address: str, owner: str, spender: str) -> int:
        owner = Web3.to_checksum_address(owner)
        spender = Web3.to_checksum_address(spender)
        return self._call_uint(
            f"allowance({token_address})",
            self._token(token_address).functions.allowance(owner, spender).call
        )

    def total_deposit(self, account: str) -> int:
        account = Web3.to_checksum_address(account)
        return self._call_uint(
            "getUserTotalDeposit",
            self._staking.functions.getUserTotalDeposit(account).call
        )

    def user_shares(self, account: str, stream_id: int) -> int:
        account = Web3.to_checksum_address(account)
        return self._call_uint(
            f"getAmountOfShares({stream_id})",
            self._staking.functions.getAmountOfShares(stream_id, account).call
        )

    def total_shares(self) -> int:
        return self._call_uint("totalAuroraShares", self._staking.functions.totalAuroraShares().call)

    def total_staked(self) -> int:
        return self._call_uint(
            "getTotalAmountOfStakedAurora",
            self._staking.functions.getTotalAmountOfStakedAurora().call
        )

    def is_paused(self) -> bool:
        return self._call_uint("paused", self._staking.functions.paused().call) == 1

    def pending_amount(self, stream_id: int, account: str) -> int:
        account = Web3.to_checksum_address(account)
        return self._call_uint(
            f"getPending({stream_id})",
            self._staking.functions.getPending(stream_id, account).call
        )

    def release_time(self, stream_id: int, account: str) -> int:
        account = Web3.to_checksum_address(account)
        return self._call_uint(
            f"getReleaseTime({stream_id})",
            self._staking.functions.getReleaseTime(stream_id, account).call
        )

    def streamed_amount(self, stream_id: int, account: str) -> int:
        account = Web3.to_checksum_address(account)
        return self._call_uint(
            f"getStreamClaimableAmount({stream_id})",
            self._staking.functions.getStreamClaimableAmount(stream_id, account).call
        )

    def stream_schedule(self, stream_id: int) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        read = f"getStreamSchedule({stream_id})"
        schedule = self._call(read, self._staking.functions.getStreamSchedule(stream_id).call)
        if not isinstance(schedule, (list, tuple)) or len(schedule) != 2:
            raise ReadFailure(read, f"expected (scheduleTimes, scheduleRewards), got {schedule!r}")
        times, rewards = schedule
        return tuple(times), tuple(rewards)
