"""Token amount arithmetic, comparison and resolving."""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from web3.contract import AsyncContract

from tokenamount.amount import TokenAmount
from tokenamount.exceptions import ConstructionError, TokenMismatch, UnsupportedError, ValidationError
from tokenamount.token import Token


def test_direct_constructor_call(usdc: Token):
    with pytest.raises(ConstructionError, match=r"\[TokenAmount\] no constructor direct call"):
        TokenAmount({})

    with pytest.raises(ConstructionError):
        TokenAmount(token=usdc, number=1)


def test_subclass():
    with pytest.raises(ConstructionError):
        class MyAmount(TokenAmount):
            pass


def test_create(usdc: Token):
    amount = TokenAmount.create(token=usdc, number=3_000_000)
    assert amount.token is usdc
    assert amount.number == 3_000_000
    assert amount.tags == []
    assert str(amount) == "USDC 3.00"


def test_create_needs_integer(usdc: Token):
    with pytest.raises(ValidationError):
        TokenAmount.create(token=usdc, number=0.99)

    with pytest.raises(TypeError):
        TokenAmount.create(token=usdc, number="1")

    with pytest.raises(ValidationError):
        TokenAmount.create(token=usdc, number=True)


def test_create_bad_token():
    with pytest.raises(ValidationError):
        TokenAmount.create(token={"symbol": "USDC"}, number=1)


def test_create_bad_tags(usdc: Token):
    with pytest.raises(ValidationError):
        TokenAmount.create(token=usdc, number=1, tags="fee")


def test_format_derived_from_number(usdc: Token):
    amount = TokenAmount.resolve(usdc, 0.99)
    assert amount.to_display_string() == "USDC 0.99"

    amount = TokenAmount.resolve(usdc, "11111")
    assert str(amount) == "USDC 11,111.00"


def test_format_derived_from_int(usdc: Token):
    amount = TokenAmount.resolve(usdc, 3_000_000)
    assert str(amount) == "USDC 3.00"


def test_arithmetic_operations_with_different_input_types(usdc: Token):
    amount_a = TokenAmount.resolve(usdc, "3")
    amount_b = TokenAmount.resolve(usdc, "2")

    assert amount_a.add(amount_b).to_display_string() == "USDC 5.00"
    assert amount_a.add("2").to_display_string() == "USDC 5.00"
    assert amount_a.add(2_000_000).to_display_string() == "USDC 5.00"

    assert amount_a.subtract(amount_b).to_display_string() == "USDC 1.00"
    assert amount_a.sub(2.0).to_display_string() == "USDC 1.00"

    # Units compound
    assert amount_a.multiply(amount_b).to_display_string() == "USDC 6,000,000.00"
    assert amount_a.mul(6).to_display_string() == "USDC 18.00"

    assert amount_a.divide(3).to_display_string() == "USDC 1.00"
    assert amount_a.div(amount_b).to_display_string() == "USDC 0.00"

    # Operands are not modified
    assert amount_a.number == 3_000_000
    assert amount_b.number == 2_000_000


def test_divide_truncates_toward_zero(usdc: Token):
    assert usdc.new_amount(7).divide(2).number == 3
    assert usdc.new_amount(-7).divide(2).number == -3
    assert usdc.new_amount(7).divide(-2).number == -3
    assert usdc.new_amount(-7).divide(-2).number == 3


def test_divide_by_zero(usdc: Token):
    with pytest.raises(ZeroDivisionError):
        usdc.new_amount("1").divide(0)


def test_comparison_operations(usdc: Token):
    amount_a = TokenAmount.resolve(usdc, "2")
    amount_b = TokenAmount.resolve(usdc, "3")

    assert not amount_a.equal(amount_b)
    assert amount_a.equal(2.0)
    assert amount_a.eq("2")

    assert not amount_a.greater_than(3.0)
    assert amount_a.greater_than(1.0)
    assert not amount_a.gt(amount_b)

    assert not amount_a.greater_or_equal(amount_b)
    assert amount_a.gte("2")

    assert amount_a.less_than(amount_b)
    assert amount_a.lte(2_000_000)
    assert not amount_a.less_or_equal("1.999999")


def test_operators(usdc: Token):
    a = usdc.new_amount("3")
    b = usdc.new_amount("2")

    assert a + b == usdc.new_amount("5")
    assert a - b == usdc.new_amount("1")
    assert a * 2 == usdc.new_amount("6")
    assert 2 * a == usdc.new_amount("6")
    assert a / 3 == usdc.new_amount("1")
    assert -a == usdc.new_amount("-3")
    assert abs(-a) == a

    assert sum([a, b]) == usdc.new_amount("5")

    assert a > b
    assert b < a
    assert a >= "3"
    assert b <= "2"

    assert int(a) == 3_000_000
    assert bool(a)
    assert not usdc.new_amount(0)


def test_equality_needs_same_token(usdc: Token, dai: Token):
    assert usdc.new_amount(1) != dai.new_amount(1)
    # Use equal() against plain numbers
    assert usdc.new_amount(1) != 1
    assert usdc.new_amount(1).equal(1)


def test_cross_token_arithmetic_rejected(usdc: Token, dai: Token):
    with pytest.raises(TokenMismatch):
        usdc.new_amount("1").add(dai.new_amount("1"))

    with pytest.raises(TokenMismatch):
        usdc.new_amount("1") < dai.new_amount("1")

    # Mismatch is a validation error
    with pytest.raises(ValidationError):
        usdc.new_amount("1").multiply(dai.new_amount("1"))


def test_same_token_different_display_mixes(usdc: Token):
    data = usdc.to_serializable()
    data["formatSymbol"] = "$"
    dollar_usdc = Token.resolve(data)

    total = usdc.new_amount("1") + dollar_usdc.new_amount("2")
    assert str(total) == "USDC 3.00"


def test_tags(usdc: Token):
    amount = usdc.new_amount("1")
    amount.add_tag("fee")
    amount.add_tag("fee")
    amount.add_tag(("position", 4))
    assert amount.tags == ["fee", "fee", ("position", 4)]

    # Tags do not matter in equality
    assert amount == usdc.new_amount("1")

    # Arithmetic results have no tags
    assert (amount + 1).tags == []


def test_create_copies_tags(usdc: Token):
    tags = ["a"]
    amount = TokenAmount.create(token=usdc, number=1, tags=tags)
    amount.add_tag("b")
    assert tags == ["a"]

    amount = TokenAmount.create(token=usdc, number=1, tags=("a", "b"))
    assert amount.tags == ["a", "b"]


def test_clone(usdc: Token):
    amount = usdc.new_amount("1")
    amount.add_tag("original")

    clone = amount.clone()
    clone.add_tag("cloned")

    assert clone is not amount
    assert clone.token is amount.token
    assert clone.number == amount.number
    assert amount.tags == ["original"]
    assert clone.tags == ["original", "cloned"]


def test_scale_down(usdc: Token):
    assert usdc.new_amount("0.99").scale_down() == Decimal("0.99")


def test_resolve_from_amount(usdc: Token):
    amount = usdc.new_amount("1")
    amount.add_tag("x")

    copy = TokenAmount.resolve(amount)
    assert copy == amount
    assert copy is not amount

    other = TokenAmount.resolve(amount, "5")
    assert other == usdc.new_amount("5")


def test_resolve_from_token_data():
    amount = TokenAmount.resolve(
        {
            "chainId": 1,
            "address": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
            "decimals": 6,
            "symbol": "USDC",
        },
        "1.5",
    )
    assert str(amount) == "USDC 1.50"


def test_resolve_from_object():
    """Read a serialised amount with extra type markers."""
    from_object = {
        "token": {
            "type": "ERC20",
            "_isToken": True,
            "_isNative": False,
            "address": "0x3917c8b4358ce1167470cbe286f1c8096dc15d33",
            "chainId": 1337,
            "name": "USDC Test",
            "symbol": "USDC",
            "decimals": 6,
        },
        "number": {
            "type": "BigNumber",
            "hex": "0x34edce00",
        },
        "_isTokenAmount": True,
    }

    amount = TokenAmount.resolve(from_object)
    assert amount.number == 888_000_000
    assert amount.token.chain_id == 1337
    assert amount.tags == []
    assert str(amount) == "USDC 888.00"

    # Override the stored number
    amount = TokenAmount.resolve(from_object, "1")
    assert amount.number == 1_000_000


def test_resolve_needs_number(usdc: Token):
    with pytest.raises(ValidationError):
        TokenAmount.resolve(usdc)


def test_resolve_from_contract_not_supported():
    contract = MagicMock(spec=AsyncContract)
    with pytest.raises(UnsupportedError):
        TokenAmount.resolve(contract, "1")


def test_resolve_unsupported():
    with pytest.raises(UnsupportedError):
        TokenAmount.resolve(object(), 1)

    # Unsupported is also NotImplementedError
    with pytest.raises(NotImplementedError):
        TokenAmount.resolve("USDC", 1)
