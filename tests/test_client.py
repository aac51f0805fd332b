"""CoinGeckoClient 테스트 (모킹)"""

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
import requests

from fum_ai.client import CoinGeckoClient
from fum_ai.models import MarketSnapshot


def _response(payload):
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()
    return mock_response


class TestCoinGeckoClient:
    """CoinGeckoClient 테스트"""

    @pytest.fixture
    def client(self):
        return CoinGeckoClient("demo-key", timeout=5)

    @pytest.fixture
    def mock_coin_response(self):
        return {
            "id": "ethereum",
            "symbol": "eth",
            "name": "Ethereum",
            "market_data": {
                "current_price": {"usd": 3000.0},
                "price_change_percentage_24h": -1.2,
                "price_change_percentage_7d": 5.3,
                "price_change_percentage_30d": -25.0,
                "market_cap": {"usd": 360000000000.0},
                "total_volume": {"usd": 15000000000.0},
                "ath_change_percentage": {"usd": -38.5},
            },
        }

    @pytest.fixture
    def mock_chart_response(self):
        return {
            "prices": [
                [1700086400000, 2050.0],
                [1700000000000, 2000.0],
                [1700172800000, 2100.0],
            ]
        }

    def test_initialization(self, client):
        assert client.api_key == "demo-key"
        assert client.headers["x-cg-demo-api-key"] == "demo-key"

    def test_initialization_without_key(self):
        assert "x-cg-demo-api-key" not in CoinGeckoClient().headers

    @patch("fum_ai.client.requests.get")
    def test_get_snapshot(self, mock_get, client, mock_coin_response):
        mock_get.return_value = _response(mock_coin_response)

        snapshot = client.get_snapshot("ethereum")

        assert isinstance(snapshot, MarketSnapshot)
        assert snapshot.symbol == "ETH"
        assert snapshot.current_price == 3000.0
        assert snapshot.price_change_30d == -25.0
        assert snapshot.market_cap == 360000000000.0
        assert snapshot.ath_change_percentage == -38.5

        url = mock_get.call_args.args[0]
        assert url.endswith("/coins/ethereum")
        assert mock_get.call_args.kwargs["timeout"] == 5

    @patch("fum_ai.client.requests.get")
    def test_get_market_chart_sorted(self, mock_get, client, mock_chart_response):
        mock_get.return_value = _response(mock_chart_response)

        df = client.get_market_chart("ethereum", days=3)

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["timestamp", "price"]
        assert df["price"].tolist() == [2000.0, 2050.0, 2100.0]
        assert mock_get.call_args.kwargs["params"] == {"vs_currency": "usd", "days": 3}

    @patch("fum_ai.client.requests.get")
    def test_get_historical_series(self, mock_get, client, mock_chart_response):
        mock_get.return_value = _response(mock_chart_response)

        series = client.get_historical_series("ethereum", days=3)

        assert series[0] == (1700000000000, 2000.0)
        assert all(isinstance(ts, int) for ts, _ in series)

    @patch("fum_ai.client.requests.get")
    def test_get_market_chart_empty(self, mock_get, client):
        mock_get.return_value = _response({})

        assert client.get_historical_series("ethereum") == []

    @patch("fum_ai.client.requests.get")
    def test_get_global(self, mock_get, client):
        mock_get.return_value = _response({"data": {"market_cap_change_percentage_24h_usd": 1.7}})

        assert client.get_global() == {"market_cap_change_percentage_24h_usd": 1.7}

    @patch("fum_ai.client.requests.get")
    def test_get_simple_price_defaults_to_usd(self, mock_get, client):
        mock_get.return_value = _response({"ethereum": {"usd": 3000.0}})

        assert client.get_simple_price(["ethereum", "bitcoin"]) == {"ethereum": {"usd": 3000.0}}
        params = mock_get.call_args.kwargs["params"]
        assert params["ids"] == "ethereum,bitcoin"
        assert params["vs_currencies"] == "usd"

    @patch("fum_ai.client.requests.get")
    def test_get_simple_price_currencies(self, mock_get, client):
        mock_get.return_value = _response({})

        client.get_simple_price(["ethereum"], ["usd", "krw"])

        assert mock_get.call_args.kwargs["params"]["vs_currencies"] == "usd,krw"

    @patch("time.sleep")
    @patch("fum_ai.client.requests.get")
    def test_retry_on_connection_error(self, mock_get, _sleep, client):
        mock_get.side_effect = [
            requests.ConnectionError("reset"),
            requests.Timeout("slow"),
            _response([{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"}]),
        ]

        coins = client.get_coin_list()

        assert coins[0]["id"] == "bitcoin"
        assert mock_get.call_count == 3

    @patch("time.sleep")
    @patch("fum_ai.client.requests.get")
    def test_retry_exhausted(self, mock_get, _sleep, client):
        mock_get.side_effect = requests.ConnectionError("down")

        with pytest.raises(requests.ConnectionError):
            client.get_coin_list()

        assert mock_get.call_count == 3

    @patch("fum_ai.client.requests.get")
    def test_http_error_not_retried(self, mock_get, client):
        mock_response = _response({})
        mock_response.raise_for_status.side_effect = requests.HTTPError("404")
        mock_get.return_value = mock_response

        with pytest.raises(requests.HTTPError):
            client.get_coin("unknown")

        assert mock_get.call_count == 1
