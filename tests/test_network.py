"""Tests for the chain registry, balance reader and web3 error translation."""

import threading
from unittest.mock import MagicMock, PropertyMock

import pytest
import requests
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError, TransactionNotFound, Web3RPCError

from base.errors import (ContractCallReverted, InvalidRequest, OperationCancelled, RpcUnavailable, TransactionFailed,
                         UnsupportedChain)
from config import create_default_registry
from network import BalanceReader, ChainRegistry, EVMNetwork, Sepolia, TransactionStatus
from network.token import TokenBinding
from tests.conftest import RECIPIENT
from tests.fixtures.fakes import ADAPTER_ADDRESS, OFT_ADDRESS, SEPOLIA_EID, WETH_ADDRESS, FakeNetwork

TX_HASH = HexBytes(b"\xab" * 32)


def make_network() -> EVMNetwork:
    network = EVMNetwork("Test Chain", "ETH", "http://127.0.0.1:8545", SEPOLIA_EID, 11155111, True,
                         "https://sepolia.etherscan.io/", {})
    network.w3 = MagicMock()
    return network


class TestChainRegistry:

    def test_lookup(self, registry, fake_network) -> None:
        assert registry.get_network(SEPOLIA_EID) is fake_network
        assert SEPOLIA_EID in registry
        assert 40232 not in registry

    def test_unknown_eid(self, registry) -> None:
        with pytest.raises(UnsupportedChain):
            registry.get_network(30101)

    def test_token_binding(self, registry) -> None:
        binding = registry.get_token_binding(SEPOLIA_EID, "weth")

        assert binding.token_address == WETH_ADDRESS
        assert binding.bridge_address == ADAPTER_ADDRESS
        assert binding.is_native_wrapped

    def test_unknown_token(self, registry) -> None:
        with pytest.raises(UnsupportedChain):
            registry.get_token_binding(SEPOLIA_EID, "USDC")

    def test_bridge_address(self, registry) -> None:
        assert registry.resolve_bridge_address(SEPOLIA_EID, "PAYMEE") == OFT_ADDRESS
        assert registry.resolve_bridge_address(SEPOLIA_EID, "PAYMEE", RECIPIENT) == RECIPIENT

    def test_duplicate_eid(self) -> None:
        with pytest.raises(ValueError):
            ChainRegistry([FakeNetwork(), FakeNetwork()])

    def test_default_registry(self) -> None:
        registry = create_default_registry()

        assert [network.layerzero_chain_id for network in registry.networks] == [40161, 40232]
        for network in registry.networks:
            assert network.is_testnet
            assert network.get_token_binding("PAYMEE").bridge_address
            assert network.get_token_binding("WETH").is_native_wrapped
            assert network.get_wrapped_native_address() == network.get_token_binding("WETH").token_address


class TestBalanceReader:

    def test_reads(self, registry, fake_network) -> None:
        fake_network.token_balances[OFT_ADDRESS.lower()] = 42
        fake_network.allowances[WETH_ADDRESS.lower()] = 7
        reader = BalanceReader(registry)

        assert reader.get_native_balance(RECIPIENT, SEPOLIA_EID) == fake_network.native_balance
        assert reader.get_token_balance(RECIPIENT, SEPOLIA_EID) == 42
        assert reader.get_token_balance(RECIPIENT, SEPOLIA_EID, token_address=OFT_ADDRESS) == 42
        assert reader.get_allowance(RECIPIENT, ADAPTER_ADDRESS, SEPOLIA_EID, "WETH") == 7
        assert reader.get_decimals(SEPOLIA_EID, OFT_ADDRESS) == 18

    def test_pinned_decimals(self, registry, fake_network) -> None:
        """Decimals pinned in the binding are returned without a contract call."""
        fake_network.decimals = 6
        reader = BalanceReader(registry)

        assert reader.get_decimals(SEPOLIA_EID, WETH_ADDRESS.lower()) == 18
        assert fake_network.calls == []
        assert reader.get_decimals(SEPOLIA_EID, OFT_ADDRESS) == 6
        assert fake_network.calls == ["get_token_decimals"]

    def test_malformed_address(self, registry, fake_network) -> None:
        with pytest.raises(InvalidRequest):
            BalanceReader(registry).get_native_balance("0x1234", SEPOLIA_EID)
        assert fake_network.calls == []

    def test_unknown_chain(self, registry) -> None:
        with pytest.raises(UnsupportedChain):
            BalanceReader(registry).get_native_balance(RECIPIENT, 1)


class TestErrorTranslation:
    """web3 and requests failures surface as bridger errors."""

    def test_rpc_unavailable(self) -> None:
        network = make_network()
        network.w3.eth.get_balance.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(RpcUnavailable):
            network.get_balance(RECIPIENT)

    def test_revert_keeps_data(self) -> None:
        network = make_network()
        contract = network.w3.eth.contract.return_value
        contract.functions.balanceOf.return_value.call.side_effect = ContractLogicError("execution reverted",
                                                                                        data="0x1234abcd")

        with pytest.raises(ContractCallReverted) as ex:
            network.get_token_balance(WETH_ADDRESS, RECIPIENT)

        assert ex.value.data == "0x1234abcd"

    def test_decimals(self) -> None:
        network = make_network()
        network.w3.eth.contract.return_value.functions.decimals.return_value.call.return_value = 6

        assert network.get_token_decimals(WETH_ADDRESS) == 6

    def test_rejected_transaction(self) -> None:
        network = make_network()
        network.w3.eth.send_raw_transaction.side_effect = ValueError("nonce too low")

        with pytest.raises(TransactionFailed):
            network.sign_and_send_transaction("0x" + "11" * 32, {})

    def test_submission_without_rpc(self) -> None:
        network = make_network()
        network.w3.eth.send_raw_transaction.side_effect = requests.exceptions.Timeout("read timeout")

        with pytest.raises(RpcUnavailable):
            network.sign_and_send_transaction("0x" + "11" * 32, {})

    def test_node_error_response(self) -> None:
        """A JSON-RPC error from the node (rate limit, missing header) is reported as an unavailable RPC."""
        network = make_network()
        network.w3.eth.get_transaction_count.side_effect = Web3RPCError("header not found")

        with pytest.raises(RpcUnavailable):
            network.get_nonce(RECIPIENT)

    def test_node_error_on_contract_call(self) -> None:
        network = make_network()
        contract = network.w3.eth.contract.return_value
        contract.functions.balanceOf.return_value.call.side_effect = Web3RPCError("too many requests")

        with pytest.raises(RpcUnavailable):
            network.get_token_balance(WETH_ADDRESS, RECIPIENT)

    def test_sepolia_priority_fee_without_rpc(self) -> None:
        network = Sepolia()
        network.w3 = MagicMock()
        network.w3.eth.gas_price = 1_000_000_000
        type(network.w3.eth).max_priority_fee = PropertyMock(side_effect=requests.exceptions.ConnectionError("reset"))

        with pytest.raises(RpcUnavailable):
            network.get_transaction_gas_params()

    def test_sepolia_gas_params(self) -> None:
        network = Sepolia()
        network.w3 = MagicMock()
        network.w3.eth.gas_price = 1_000_000_000
        network.w3.eth.max_priority_fee = 2_000

        assert network.get_transaction_gas_params() == {'maxFeePerGas': 2_000_000_000, 'maxPriorityFeePerGas': 2_000}

    def test_explorer_link(self) -> None:
        assert make_network().get_explorer_link("0xabc") == "https://sepolia.etherscan.io/tx/0xabc"


class TestWaitForTransaction:

    def test_success(self) -> None:
        network = make_network()
        network.w3.eth.get_transaction_receipt.return_value = {"status": 1}

        assert network.wait_for_transaction(TX_HASH, timeout=10, poll_interval=0) == TransactionStatus.SUCCESS

    def test_reverted(self) -> None:
        network = make_network()
        network.w3.eth.get_transaction_receipt.return_value = {"status": 0}

        assert network.wait_for_transaction(TX_HASH, timeout=10, poll_interval=0) == TransactionStatus.FAILED

    def test_timeout(self) -> None:
        network = make_network()
        network.w3.eth.get_transaction_receipt.side_effect = TransactionNotFound("not found")

        assert network.wait_for_transaction(TX_HASH, timeout=0, poll_interval=0) == TransactionStatus.NOT_FOUND

    def test_receipt_after_rpc_hiccup(self) -> None:
        network = make_network()
        network.w3.eth.get_transaction_receipt.side_effect = [requests.exceptions.ConnectionError("reset"),
                                                              {"status": 1}]

        assert network.wait_for_transaction(TX_HASH, timeout=10, poll_interval=0) == TransactionStatus.SUCCESS

    def test_receipt_after_node_error(self) -> None:
        network = make_network()
        network.w3.eth.get_transaction_receipt.side_effect = [Web3RPCError("header not found"), {"status": 1}]

        assert network.wait_for_transaction(TX_HASH, timeout=10, poll_interval=0) == TransactionStatus.SUCCESS

    def test_cancelled(self) -> None:
        network = make_network()
        network.w3.eth.get_transaction_receipt.side_effect = TransactionNotFound("not found")
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(OperationCancelled):
            network.wait_for_transaction(TX_HASH, timeout=60, poll_interval=1, cancel_event=cancel_event)


class TestWrapNativeToken:

    def make_wrapping_network(self, supported_tokens) -> EVMNetwork:
        network = EVMNetwork("Test Chain", "ETH", "http://127.0.0.1:8545", SEPOLIA_EID, 11155111, True,
                             "https://sepolia.etherscan.io/", supported_tokens)
        network.w3 = MagicMock()
        network.w3.eth.account.from_key.return_value.address = RECIPIENT
        network.w3.eth.get_transaction_count.return_value = 3
        network.w3.eth.send_raw_transaction.return_value = TX_HASH
        network.get_transaction_gas_params = MagicMock(return_value={'gasPrice': 1_000_000_000})
        return network

    def test_deposit(self) -> None:
        """Wrapping calls deposit() on the wrapped native contract with the amount as value."""
        network = self.make_wrapping_network(
            {'WETH': TokenBinding('WETH', SEPOLIA_EID, WETH_ADDRESS, ADAPTER_ADDRESS, 18, is_native_wrapped=True)})
        contract = network.w3.eth.contract.return_value

        tx_hash = network.wrap_native_token("0x" + "11" * 32, 10 ** 16)

        assert tx_hash == TX_HASH
        assert network.w3.eth.contract.call_args.kwargs['address'] == WETH_ADDRESS
        contract.functions.deposit.assert_called_once_with()
        contract.functions.deposit.return_value.build_transaction.assert_called_once_with(
            {'from': RECIPIENT, 'value': 10 ** 16, 'gasPrice': 1_000_000_000, 'nonce': 3})
        network.w3.eth.send_raw_transaction.assert_called_once()

    def test_without_wrapped_token(self) -> None:
        network = self.make_wrapping_network(
            {'PAYMEE': TokenBinding('PAYMEE', SEPOLIA_EID, OFT_ADDRESS, OFT_ADDRESS)})

        with pytest.raises(UnsupportedChain):
            network.wrap_native_token("0x" + "11" * 32, 10 ** 16)
        network.w3.eth.send_raw_transaction.assert_not_called()

    def test_deposit_revert(self) -> None:
        network = self.make_wrapping_network(
            {'WETH': TokenBinding('WETH', SEPOLIA_EID, WETH_ADDRESS, ADAPTER_ADDRESS, 18, is_native_wrapped=True)})
        contract = network.w3.eth.contract.return_value
        contract.functions.deposit.return_value.build_transaction.side_effect = ContractLogicError(
            "execution reverted")

        with pytest.raises(ContractCallReverted):
            network.wrap_native_token("0x" + "11" * 32, 10 ** 16)
