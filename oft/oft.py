import logging

import requests
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3RPCError
from web3.types import TxParams

from abi import OFT_ABI
from base.errors import ContractCallReverted, QuoteFailed, RpcUnavailable, SendTransactionFailed, TransactionFailed
from network.network import EVMNetwork, get_revert_data, translate_rpc_errors
from oft.types import AdapterToken, MessagingFee, NativeOFTToken, SendParam, TokenResolution

logger = logging.getLogger(__name__)


class OFTBridge:
    """ Wrapper over a deployed OFT / OFT adapter contract on the source chain """

    def __init__(self, network: EVMNetwork, address: str) -> None:
        self.network = network
        self.address = Web3.to_checksum_address(address)
        self.contract = network.w3.eth.contract(address=self.address, abi=OFT_ABI)

    def resolve_token(self) -> TokenResolution:
        """ Method that decides whether the contract is an adapter over an ERC-20 token or the token itself """

        try:
            with translate_rpc_errors(f"{self.network.name} token() call on {self.address}"):
                underlying = self.contract.functions.token().call()
        except ContractCallReverted:
            logger.info(f"{self.address} has no token() accessor. Treating it as a native OFT")
            return NativeOFTToken(self.address)

        if Web3.to_checksum_address(underlying) == self.address:
            return NativeOFTToken(self.address)

        return AdapterToken(self.address, Web3.to_checksum_address(underlying))

    def is_approval_required(self) -> bool:
        """ Method that checks if the token must be approved to the contract. Missing accessor means no """

        try:
            with translate_rpc_errors(f"{self.network.name} approvalRequired() call on {self.address}"):
                return bool(self.contract.functions.approvalRequired().call())
        except ContractCallReverted:
            logger.info(f"{self.address} has no approvalRequired() accessor. No approval needed")
            return False

    def quote_send(self, send_param: SendParam, pay_in_lz_token: bool = False) -> MessagingFee:
        """ Method that quotes the LayerZero messaging fee for the send """

        try:
            with translate_rpc_errors(f"{self.network.name} quoteSend() call on {self.address}"):
                native_fee, lz_token_fee = self.contract.functions.quoteSend(send_param.as_tuple(),
                                                                             pay_in_lz_token).call()
        except ContractCallReverted as ex:
            raise QuoteFailed(f"Failed to quote gas cost: {ex}", data=ex.data) from ex

        return MessagingFee(native_fee, lz_token_fee)

    def build_send_transaction(self, address: str, send_param: SendParam, fee: MessagingFee) -> TxParams:
        # Gas and nonce reads raise RpcUnavailable on their own. Gas estimation inside build_transaction
        # reports reverts and node rejections (e.g. insufficient funds) as a failed send
        try:
            gas_params = self.network.get_transaction_gas_params()
            nonce = self.network.get_nonce(address)

            logger.info(f'Estimated fees. LayerZero fee: {fee.native_fee}. Gas settings: {gas_params}')

            tx = self.contract.functions.send(
                send_param.as_tuple(),
                fee.as_tuple(),
                address  # refund address. Unused fee is returned here
            ).build_transaction(
                {
                    'from': address,
                    'value': fee.native_fee,
                    **gas_params,
                    'nonce': nonce
                }
            )
        except (ContractLogicError, BadFunctionCallOutput) as ex:
            raise SendTransactionFailed(f"Failed to send transaction: {ex}", data=get_revert_data(ex)) from ex
        except requests.exceptions.RequestException as ex:
            raise RpcUnavailable(f"{self.network.name} send() transaction build failed. "
                                 f"RPC is unavailable: {ex}") from ex
        except (Web3RPCError, ValueError) as ex:
            raise SendTransactionFailed(f"Failed to send transaction: {ex}", data=get_revert_data(ex)) from ex

        return tx

    def send(self, account: LocalAccount, send_param: SendParam, fee: MessagingFee) -> HexBytes:
        """ Method that signs and submits the send transaction. Returns transaction hash """

        tx = self.build_send_transaction(account.address, send_param, fee)

        try:
            tx_hash = self.network.sign_and_send_transaction(account.key, tx)
        except TransactionFailed as ex:
            raise SendTransactionFailed(f"Failed to send transaction: {ex}", data=ex.data) from ex

        logger.info(f'OFT send transaction signed and sent. Hash: {tx_hash.to_0x_hex()}')

        return tx_hash

    def get_peer(self, eid: int) -> bytes:
        with translate_rpc_errors(f"{self.network.name} peers({eid}) call on {self.address}"):
            return bytes(self.contract.functions.peers(eid).call())

    def get_owner(self) -> str:
        with translate_rpc_errors(f"{self.network.name} owner() call on {self.address}"):
            return self.contract.functions.owner().call()
