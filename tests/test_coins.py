from decimal import Decimal

import pytest

from cosmosclient.coins import (Coin, DecCoin, coins_from_json, coins_to_json, fees_from_gas_prices,
                                parse_coin, parse_coins, parse_dec_coins)


def test_parse_coins_sorted_and_zero_dropped():
    assert parse_coins("10token, 5stake,0atom") == (Coin("stake", 5), Coin("token", 10))
    assert parse_coins("") == ()


@pytest.mark.parametrize("raw", ["token", "10", "1.5token", "-1token", "10t"])
def test_parse_coin_rejects(raw):
    with pytest.raises(ValueError):
        parse_coin(raw)


def test_duplicate_denoms_rejected():
    with pytest.raises(ValueError, match="duplicate"):
        parse_coins("1token,2token")


def test_parse_dec_coins():
    assert parse_dec_coins("0.025token,1stake") == (
        DecCoin("stake", Decimal("1")),
        DecCoin("token", Decimal("0.025")),
    )


def test_ibc_denoms_parse():
    denom = "ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2"
    assert parse_coins(f"7{denom}") == (Coin(denom, 7),)


def test_fees_from_gas_prices_ceil():
    prices = parse_dec_coins("0.5token")
    assert fees_from_gas_prices(prices, 3) == (Coin("token", 2),)
    assert fees_from_gas_prices(prices, 4) == (Coin("token", 2),)


def test_json_shape():
    coins = (Coin("token", 1),)
    assert coins_to_json(coins) == [{"denom": "token", "amount": "1"}]
    assert coins_from_json(coins_to_json(coins)) == coins
    assert str(coins[0]) == "1token"


def test_negative_amount_rejected():
    with pytest.raises(ValueError):
        Coin("token", -1)
