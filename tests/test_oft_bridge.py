"""Tests for the OFT contract wrapper against a mocked web3 contract."""

from unittest.mock import MagicMock

import pytest
import requests
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError, Web3RPCError

from base.errors import QuoteFailed, RpcUnavailable, SendTransactionFailed
from network import EVMNetwork
from oft import AdapterToken, MessagingFee, NativeOFTToken, OFTBridge, OFTConstants, OptionsBuilder, SendParam
from tests.conftest import RECIPIENT
from tests.fixtures.fakes import ADAPTER_ADDRESS, OFT_ADDRESS, SEPOLIA_EID, WETH_ADDRESS
from utility import AddressHelper

SEND_PARAM = SendParam(dst_eid=40232, to=AddressHelper.address_to_bytes32(RECIPIENT), amount_ld=10 ** 16,
                       min_amount_ld=10 ** 16, extra_options=OptionsBuilder().to_bytes())


def make_bridge(address: str = OFT_ADDRESS):
    network = EVMNetwork("Test Chain", "ETH", "http://127.0.0.1:8545", SEPOLIA_EID, 11155111, True,
                         "https://sepolia.etherscan.io", {})
    network.w3 = MagicMock()
    network.get_transaction_gas_params = MagicMock(return_value={'gasPrice': 1_000_000_000})
    network.w3.eth.get_transaction_count.return_value = 5

    bridge = OFTBridge(network, address)
    return bridge, network.w3.eth.contract.return_value


class TestResolveToken:

    def test_adapter(self) -> None:
        bridge, contract = make_bridge(ADAPTER_ADDRESS)
        contract.functions.token.return_value.call.return_value = WETH_ADDRESS.lower()

        assert bridge.resolve_token() == AdapterToken(ADAPTER_ADDRESS, WETH_ADDRESS)

    def test_token_is_the_contract(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.token.return_value.call.return_value = OFT_ADDRESS

        assert bridge.resolve_token() == NativeOFTToken(OFT_ADDRESS)

    def test_missing_token_accessor(self) -> None:
        """A reverted token() call means the OFT is the token itself."""
        bridge, contract = make_bridge()
        contract.functions.token.return_value.call.side_effect = ContractLogicError("execution reverted")

        assert bridge.resolve_token() == NativeOFTToken(OFT_ADDRESS)

    def test_transport_failure_propagates(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.token.return_value.call.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(RpcUnavailable):
            bridge.resolve_token()


class TestApprovalRequired:

    def test_required(self) -> None:
        bridge, contract = make_bridge(ADAPTER_ADDRESS)
        contract.functions.approvalRequired.return_value.call.return_value = True

        assert bridge.is_approval_required() is True

    def test_missing_accessor(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.approvalRequired.return_value.call.side_effect = ContractLogicError("execution reverted")

        assert bridge.is_approval_required() is False


class TestQuoteAndSend:

    def test_quote(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.quoteSend.return_value.call.return_value = (123, 0)

        assert bridge.quote_send(SEND_PARAM) == MessagingFee(123, 0)
        contract.functions.quoteSend.assert_called_once_with(SEND_PARAM.as_tuple(), False)

    def test_quote_revert(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.quoteSend.return_value.call.side_effect = ContractLogicError("execution reverted",
                                                                                        data="0x6c1ccdb5")

        with pytest.raises(QuoteFailed) as ex:
            bridge.quote_send(SEND_PARAM)

        assert ex.value.data == "0x6c1ccdb5"

    def test_send(self, account) -> None:
        """The send pays the native fee as value and refunds to the sender."""
        bridge, contract = make_bridge()
        fee = MessagingFee(123)
        bridge.network.w3.eth.send_raw_transaction.return_value = HexBytes(b"\xab" * 32)

        tx_hash = bridge.send(account, SEND_PARAM, fee)

        assert tx_hash == HexBytes(b"\xab" * 32)
        contract.functions.send.assert_called_once_with(SEND_PARAM.as_tuple(), (123, 0), account.address)
        contract.functions.send.return_value.build_transaction.assert_called_once_with(
            {'from': account.address, 'value': 123, 'gasPrice': 1_000_000_000, 'nonce': 5})

    def test_send_build_revert(self, account) -> None:
        bridge, contract = make_bridge()
        contract.functions.send.return_value.build_transaction.side_effect = ContractLogicError(
            "execution reverted", data="0x08c379a0")

        with pytest.raises(SendTransactionFailed) as ex:
            bridge.send(account, SEND_PARAM, MessagingFee(123))

        assert ex.value.data == "0x08c379a0"

    def test_gas_params_without_rpc(self, account) -> None:
        """A failed gas read is an unavailable RPC, not a failed send, and nothing is built."""
        bridge, contract = make_bridge()
        bridge.network.get_transaction_gas_params.side_effect = RpcUnavailable("gas price request failed")

        with pytest.raises(RpcUnavailable):
            bridge.send(account, SEND_PARAM, MessagingFee(123))

        contract.functions.send.return_value.build_transaction.assert_not_called()
        bridge.network.w3.eth.send_raw_transaction.assert_not_called()

    def test_nonce_without_rpc(self, account) -> None:
        bridge, _ = make_bridge()
        bridge.network.w3.eth.get_transaction_count.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(RpcUnavailable):
            bridge.send(account, SEND_PARAM, MessagingFee(123))

    def test_estimate_without_rpc(self, account) -> None:
        bridge, contract = make_bridge()
        contract.functions.send.return_value.build_transaction.side_effect = requests.exceptions.Timeout("timeout")

        with pytest.raises(RpcUnavailable):
            bridge.send(account, SEND_PARAM, MessagingFee(123))

    def test_estimate_rejected_by_node(self, account) -> None:
        bridge, contract = make_bridge()
        contract.functions.send.return_value.build_transaction.side_effect = Web3RPCError(
            "insufficient funds for gas * price + value")

        with pytest.raises(SendTransactionFailed):
            bridge.send(account, SEND_PARAM, MessagingFee(123))

    def test_send_rejected_by_node(self, account) -> None:
        bridge, _ = make_bridge()
        bridge.network.w3.eth.send_raw_transaction.side_effect = ValueError("insufficient funds for gas")

        with pytest.raises(SendTransactionFailed):
            bridge.send(account, SEND_PARAM, MessagingFee(123))


class TestPeers:

    def test_peer(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.peers.return_value.call.return_value = AddressHelper.address_to_bytes32(RECIPIENT)

        assert AddressHelper.bytes32_to_address(bridge.get_peer(40232)) == RECIPIENT
        contract.functions.peers.assert_called_once_with(40232)

    def test_owner(self) -> None:
        bridge, contract = make_bridge()
        contract.functions.owner.return_value.call.return_value = RECIPIENT

        assert bridge.get_owner() == RECIPIENT


def test_scan_links() -> None:
    assert OFTConstants.get_scan_link("0xabc", is_testnet=True) == "https://testnet.layerzeroscan.com/tx/0xabc"
    assert OFTConstants.get_scan_link("0xabc") == "https://layerzeroscan.com/tx/0xabc"
