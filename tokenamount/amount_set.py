"""Aggregate amounts of many tokens."""
import logging
from typing import Iterable, Iterator, Optional

from .amount import TokenAmount
from .exceptions import ValidationError
from .token import Token
from .types import TokenIdentity

logger = logging.getLogger(__name__)


class TokenAmountSet:
    """Sum token amounts per token.

    - One entry per token, keyed by :py:attr:`tokenamount.token.Token.identity_key`

    - Entries keep the order in which their token was first added

    - Native tokens of different chains are different entries

    .. code-block:: python

        balances = TokenAmountSet.from_list([usdc.new_amount("10"), eth.new_amount("1"), usdc.new_amount("2")])
        assert str(balances) == "USDC 12.00, ETH 1.00"
    """

    def __init__(self):
        #: Token identity -> accumulated amount
        self.map: dict[TokenIdentity, TokenAmount] = {}

    def __repr__(self):
        return f"<TokenAmountSet {self.to_display_string()}>"

    def __str__(self):
        return self.to_display_string()

    def __len__(self):
        return len(self.map)

    def __iter__(self) -> Iterator[TokenAmount]:
        return iter(self.values())

    def __contains__(self, token: Token | TokenAmount) -> bool:
        if isinstance(token, TokenAmount):
            token = token.token
        if not isinstance(token, Token):
            return False
        return token.identity_key in self.map

    def add(self, amount: TokenAmount):
        """Add an amount to the running total of its token.

        Tags of the added amount are not carried over.

        :raise ValidationError:
            If not given a token amount
        """
        if not isinstance(amount, TokenAmount):
            raise ValidationError(f"can only add token amount in set, got {type(amount)}")

        key = amount.token.identity_key
        existing = self.map.get(key)
        if existing is not None:
            self.map[key] = existing.add(amount.number)
        else:
            self.map[key] = amount.token.new_amount(amount.number)

        logger.debug("Token %s total is now %s", key, self.map[key])

    def get(self, token: Token) -> Optional[TokenAmount]:
        """Accumulated amount of a token, or None if the token has not been added."""
        return self.map.get(token.identity_key)

    def values(self) -> list[TokenAmount]:
        """Accumulated amounts in the order their tokens were first added."""
        return list(self.map.values())

    def to_display_string(self, separator: str = ", ") -> str:
        return separator.join(amount.to_display_string() for amount in self.map.values())

    def to_serializable(self) -> list[dict]:
        return [amount.to_serializable() for amount in self.map.values()]

    @staticmethod
    def from_list(amounts: Iterable[TokenAmount]) -> "TokenAmountSet":
        """Create a set and add amounts in order."""
        amount_set = TokenAmountSet()
        for amount in amounts:
            amount_set.add(amount)
        return amount_set
