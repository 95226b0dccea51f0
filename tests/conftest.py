"""Test fixtures."""
import logging
import sys

import coloredlogs
import pytest

from tokenamount.token import Token


#: Mainnet USDC
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

#: Mainnet DAI, non-checksummed
DAI_ADDRESS = "0x6b175474e89094c44da98b954eedeac495271d0f"


@pytest.fixture(scope="session")
def logger(request) -> logging.Logger:
    """Initialize stdout logger using colored output."""

    logger = logging.getLogger()

    # pytest --log-level option
    log_level = request.config.getoption("--log-level") or logging.INFO

    # Set log format to dislay the logger name to hunt down verbose logging modules
    fmt = "%(name)-25s %(levelname)-8s %(message)s"

    coloredlogs.install(level=log_level, fmt=fmt, logger=logger, stream=sys.stdout)

    # Disable logging of JSON-RPC requests and reploes
    logging.getLogger("web3.RequestManager").setLevel(logging.WARNING)
    logging.getLogger("web3.providers.HTTPProvider").setLevel(logging.WARNING)

    # IPython notebook internal
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return logger


@pytest.fixture()
def usdc() -> Token:
    return Token.create(
        chain_id=1,
        name="USD Coin",
        symbol="USDC",
        decimals=6,
        address=USDC_ADDRESS,
    )


@pytest.fixture()
def dai() -> Token:
    return Token.create(
        chain_id=1,
        name="Dai Stablecoin",
        symbol="DAI",
        decimals=18,
        address=DAI_ADDRESS,
    )


@pytest.fixture()
def eth() -> Token:
    return Token.create_native(
        chain_id=1,
        name="Ether",
        symbol="ETH",
    )
