"""Blockchain ids.

Because the same token symbol can exist across multiple blockchains,
tokens carry the id of the chain they live on.
See :py:class:`ChainId` enum class for well known chains.
This is based on the underlying `web3.eth.chain_id` attribute of a chain.

Tokens are not limited to the chains listed here: any integer chain id is accepted,
see :py:func:`normalise_chain_id`.
"""

import enum
from typing import Optional

from .exceptions import ValidationError
from .types import RawChainId


class ChainId(enum.IntEnum):
    """Chain ids of well known chains.

    Chain id is an integer that defines the identity of a blockchain,
    all running on same or different EVM implementations.

    For the full chain id list see:

    - `chainid.network <https://chainid.network/>`_

    - `chains repo <https://github.com/ethereum-lists/chains>`_
    """

    #: Ethereum mainnet chain id
    ethereum = 1

    #: BNB Smart Chain mainnet chain id
    bsc = 56

    #: Alias for Binance Smart Chain
    binance = bsc

    #: Polygon chain id
    polygon = 137

    #: Avalanche C-chain id
    avalanche = 43114

    #: Arbitrum One id
    arbitrum = 42161

    #: Base mainnet
    base = 8453

    #: Ethereum Classic chain id.
    #:
    #: This is also the value used by EthereumTester in unit tests.
    #: https://github.com/ethereum/eth-tester
    ethereum_classic = 61

    #: Ganache test chain.
    #:
    #: This is the chain id for Ganache local tester / mainnet forks.
    ganache = 1337

    #: Anvil test chain.
    #:
    #: Standalone Anvil chain launch.
    anvil = 31337

    #: Chain id not known
    unknown = 0

    #: Python EVM test backend
    #:
    #: See https://github.com/ethereum/eth-tester/blob/84378ee7eb714633fbb3169378812ccfcbbd495a/eth_tester/backends/pyevm/main.py#L197
    ethereum_tester = 131277322940537

    def get_name(self) -> str:
        """Get full human readable name for this blockchain"""
        return _CHAIN_NAMES[self.value]

    @staticmethod
    def get_by_value(chain_id: RawChainId) -> Optional["ChainId"]:
        """Map a raw chain id to a known chain.

        :return:
            None if the chain is not one of the listed chains
        """
        try:
            return ChainId(chain_id)
        except ValueError:
            return None


#: Human readable names of the listed chains
_CHAIN_NAMES = {
    ChainId.ethereum.value: "Ethereum",
    ChainId.bsc.value: "BNB Smart Chain",
    ChainId.polygon.value: "Polygon",
    ChainId.avalanche.value: "Avalanche C-chain",
    ChainId.arbitrum.value: "Arbitrum One",
    ChainId.base.value: "Base",
    ChainId.ethereum_classic.value: "Ethereum Classic",
    ChainId.ganache.value: "Ganache",
    ChainId.anvil.value: "Anvil",
    ChainId.unknown.value: "Unknown",
    ChainId.ethereum_tester.value: "Ethereum tester",
}


def get_chain_name(chain_id: RawChainId) -> str:
    """Human readable chain name, or `chain #<id>` for chains we do not list."""
    chain = ChainId.get_by_value(chain_id)
    if chain is None:
        return f"chain #{chain_id}"
    return chain.get_name()


def normalise_chain_id(value) -> RawChainId:
    """Convert a chain id from its different presentations to a raw integer.

    Chain ids travel as

    - Python `int`

    - :py:class:`ChainId` enum members

    - Decimal strings, when they have been through JSON serialisation
      that cannot present large integers, or read from environment

    :raise ValidationError:
        If the value is not any of the above
    """

    if isinstance(value, bool):
        raise ValidationError(f"chain_id must be an integer, got {value!r}")

    if isinstance(value, int):
        # Unwraps ChainId
        return int(value)

    if isinstance(value, str):
        stripped = value.strip()
        try:
            return int(stripped, 10)
        except ValueError as e:
            raise ValidationError(f"chain_id string must be a decimal integer, got {value!r}") from e

    raise ValidationError(f"chain_id must be an integer or a decimal string, got {type(value)}: {value!r}")
