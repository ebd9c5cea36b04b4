import pytest
import requests

from aurora_staking.adapters.aurora.coingecko_price import CoinGeckoPriceOracle
from aurora_staking.errors import ReadFailure


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        return self.response


def _oracle(response):
    oracle = CoinGeckoPriceOracle(api_key='')
    oracle.session = FakeSession(response)
    return oracle


def test_prices_are_aligned_with_keys():
    oracle = _oracle(FakeResponse({
        'aurora-near': {'usd': 0.135344, 'usd_market_cap': 70_000_000},
        'trisolaris': {'usd': 0.00141883, 'usd_market_cap': 1_000},
    }))

    quote = oracle.get_prices(['aurora-near', 'trisolaris', 'vote', 'unlisted-coin'])

    assert quote.prices == (0.135344, 0.00141883, 0.0, None)
    assert quote.market_caps == (70_000_000.0, 1_000.0, 0.0, None)


def test_single_request_for_listed_tokens():
    oracle = _oracle(FakeResponse({}))
    oracle.get_prices(['trisolaris', 'aurora-near', 'vote', 'trisolaris'])

    assert len(oracle.session.requests) == 1
    url, params, timeout = oracle.session.requests[0]
    assert url.endswith('/simple/price')
    assert params['ids'] == 'aurora-near,trisolaris'
    assert params['vs_currencies'] == 'usd'
    assert params['include_market_cap'] == 'true'
    assert timeout == 15


def test_only_unlisted_tokens_skip_request():
    oracle = _oracle(FakeResponse({}))
    quote = oracle.get_prices(['vote'])
    assert oracle.session.requests == []
    assert quote.prices == (0.0,)


def test_http_error_is_read_failure():
    oracle = _oracle(FakeResponse({}, status_code=429))
    with pytest.raises(ReadFailure):
        oracle.get_prices(['aurora-near'])


def test_invalid_json_is_read_failure():
    oracle = _oracle(FakeResponse(ValueError("Expecting value")))
    with pytest.raises(ReadFailure):
        oracle.get_prices(['aurora-near'])


def test_unexpected_payload_is_read_failure():
    oracle = _oracle(FakeResponse(['aurora-near']))
    with pytest.raises(ReadFailure):
        oracle.get_prices(['aurora-near'])


def test_api_key_header():
    assert 'x-cg-demo-api-key' not in CoinGeckoPriceOracle(api_key='').session.headers
    oracle = CoinGeckoPriceOracle(api_key='demo-key')
    assert oracle.session.headers['x-cg-demo-api-key'] == 'demo-key'
