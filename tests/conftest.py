"""Shared pytest fixtures for the send flow tests."""

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount

from network import ChainRegistry
from tests.fixtures.fakes import FakeBridge, FakeNetwork

# Well-known development key (hardhat/anvil account #0)
SENDER_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


@pytest.fixture
def account() -> LocalAccount:
    return Account.from_key(SENDER_PRIVATE_KEY)


@pytest.fixture
def recipient() -> str:
    return RECIPIENT


@pytest.fixture
def fake_network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def registry(fake_network: FakeNetwork) -> ChainRegistry:
    return ChainRegistry([fake_network])


@pytest.fixture
def fake_bridge() -> FakeBridge:
    return FakeBridge()
