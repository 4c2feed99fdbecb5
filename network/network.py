import logging
import threading
import time
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, Optional, Union

import requests
from eth_typing import Hash32, HexStr
from hexbytes import HexBytes
from web3 import HTTPProvider, Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, TransactionNotFound, Web3RPCError
from web3.types import TxParams

from abi import ERC20_ABI, WETH_ABI
from base.errors import (ContractCallReverted, NotSupported, OperationCancelled, RpcUnavailable, TransactionFailed,
                         UnsupportedChain)
from network.token import TokenBinding

logger = logging.getLogger(__name__)

RPC_REQUEST_TIMEOUT = 30


class TransactionStatus(Enum):
    NOT_FOUND = 0
    SUCCESS = 1
    FAILED = 2


def get_revert_data(ex: Exception) -> Optional[str]:
    data = getattr(ex, "data", None)
    if data is None:
        return None
    if isinstance(data, (bytes, bytearray)):
        return HexBytes(data).to_0x_hex()

    return str(data)


@contextmanager
def translate_rpc_errors(description: str) -> Iterator[None]:
    """ Context manager that turns web3/requests failures of a read call into RpcUnavailable/ContractCallReverted """

    try:
        yield
    except (ContractLogicError, BadFunctionCallOutput) as ex:
        raise ContractCallReverted(f"{description} reverted: {ex}", data=get_revert_data(ex)) from ex
    except requests.exceptions.RequestException as ex:
        raise RpcUnavailable(f"{description} failed. RPC is unavailable: {ex}") from ex
    # JSON-RPC error returned by the node itself (rate limit, missing block header, ...)
    except Web3RPCError as ex:
        raise RpcUnavailable(f"{description} failed. Node returned an error: {ex}", data=get_revert_data(ex)) from ex


class Network:

    def __init__(self, name: str, native_token: str, rpc: str, layerzero_chain_id: int, chain_id: int,
                 is_testnet: bool, explorer_url: str) -> None:
        self.name = name
        self.native_token = native_token
        self.rpc = rpc
        self.layerzero_chain_id = layerzero_chain_id
        self.chain_id = chain_id
        self.is_testnet = is_testnet
        self.explorer_url = explorer_url

    def get_balance(self, address: str) -> int:
        """ Method that checks native token balance """
        raise NotSupported(f"{self.name} get_balance() is not implemented")

    def get_token_balance(self, contract_address: str, address: str) -> int:
        """ Method that checks ERC-20 token balance """
        raise NotSupported(f"{self.name} get_token_balance() is not implemented")

    def get_token_allowance(self, contract_address: str, owner: str, spender: str) -> int:
        """ Method that checks ERC-20 token allowance """
        raise NotSupported(f"{self.name} get_token_allowance() is not implemented")

    def get_token_decimals(self, contract_address: str) -> int:
        """ Method that reads ERC-20 token decimals """
        raise NotSupported(f"{self.name} get_token_decimals() is not implemented")

    def get_current_gas(self) -> int:
        """ Method that checks network gas price """
        raise NotSupported(f"{self.name} get_current_gas() is not implemented")

    def get_nonce(self, address: str) -> int:
        """ Method that fetches account nonce """
        raise NotSupported(f"{self.name} get_nonce() is not implemented")

    def get_explorer_link(self, tx_hash: str) -> str:
        if not self.explorer_url:
            return ""

        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"


class EVMNetwork(Network):

    def __init__(self, name: str, native_token: str, rpc: str, layerzero_chain_id: int, chain_id: int,
                 is_testnet: bool, explorer_url: str, supported_tokens: Dict[str, TokenBinding]) -> None:
        super().__init__(name, native_token, rpc, layerzero_chain_id, chain_id, is_testnet, explorer_url)
        self.w3 = Web3(HTTPProvider(rpc, request_kwargs={'timeout': RPC_REQUEST_TIMEOUT}))
        self.supported_tokens = supported_tokens

    def get_token_binding(self, symbol: str) -> TokenBinding:
        binding = self.supported_tokens.get(symbol.upper())
        if binding is None:
            raise UnsupportedChain(f"{symbol} is not supported by {self.name}")

        return binding

    def get_wrapped_native_address(self) -> Optional[str]:
        for binding in self.supported_tokens.values():
            if binding.is_native_wrapped:
                return binding.token_address

        return None

    def get_balance(self, address: str) -> int:
        """ Method that checks native token balance """

        with translate_rpc_errors(f"{self.name} native balance request"):
            return self.w3.eth.get_balance(Web3.to_checksum_address(address))

    def get_current_gas(self) -> int:
        """ Method that checks network gas price """

        with translate_rpc_errors(f"{self.name} gas price request"):
            return self.w3.eth.gas_price

    def get_transaction_gas_params(self) -> dict:
        """ Method that returns formatted gas params to be added to build_transaction """

        raise NotSupported(f"{self.name} get_transaction_gas_params() is not implemented")

    def get_nonce(self, address: str) -> int:
        """ Method that fetches account nonce """

        with translate_rpc_errors(f"{self.name} nonce request"):
            return self.w3.eth.get_transaction_count(Web3.to_checksum_address(address))

    @staticmethod
    def check_tx_result(result: TransactionStatus, name: str) -> bool:
        """ Utility method that checks transaction result and returns false if it's not mined or failed """

        if result == TransactionStatus.SUCCESS:
            logger.info(f"{name} transaction succeed")
            return True
        if result == TransactionStatus.NOT_FOUND:
            logger.info(f"{name} transaction can't be found in the blockchain"
                        " for a long time. Consider changing fee settings")
            return False
        if result == TransactionStatus.FAILED:
            logger.info(f"{name} transaction failed")
            return False

        return False

    def wait_for_transaction(self, tx_hash: Union[Hash32, HexBytes, HexStr], timeout: int = 300,
                             poll_interval: float = 10,
                             cancel_event: Optional[threading.Event] = None) -> TransactionStatus:
        """ Method that polls for the transaction receipt until it's mined, the timeout is reached or
        cancel_event is set. Cancelling only stops the waiting, the transaction stays submitted """

        start_time = time.time()

        logger.info(f'Waiting for transaction {HexBytes(tx_hash).to_0x_hex()} to be mined')
        while True:
            try:
                tx_receipt = self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                pass
            except (requests.exceptions.RequestException, Web3RPCError) as ex:
                logger.warning(f"{self.name} receipt request failed: {ex}")
            else:
                if tx_receipt is not None:
                    if tx_receipt["status"]:
                        logger.info("Transaction mined successfully! Status: Success")
                        return TransactionStatus.SUCCESS
                    else:
                        logger.info("Transaction mined successfully! Status: Failed")
                        return TransactionStatus.FAILED

            if time.time() - start_time >= timeout:
                logger.info("Timeout reached. Transaction not mined within the specified time")
                return TransactionStatus.NOT_FOUND

            if cancel_event is None:
                time.sleep(poll_interval)
            elif cancel_event.wait(poll_interval):
                raise OperationCancelled(f"Stopped waiting for transaction {HexBytes(tx_hash).to_0x_hex()}")

    def sign_and_send_transaction(self, private_key: str, tx: TxParams) -> HexBytes:
        """ Method that signs the transaction with private_key and submits it. Returns transaction hash """

        signed_tx = self.w3.eth.account.sign_transaction(tx, private_key)

        try:
            return self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except requests.exceptions.RequestException as ex:
            raise RpcUnavailable(f"{self.name} transaction submission failed. RPC is unavailable: {ex}") from ex
        except (Web3RPCError, ValueError) as ex:
            raise TransactionFailed(f"{self.name} node rejected the transaction: {ex}",
                                    data=get_revert_data(ex)) from ex

    # MARK: ERC-20 Token functions

    def _get_token_contract(self, contract_address: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(contract_address), abi=ERC20_ABI)

    def get_token_balance(self, contract_address: str, address: str) -> int:
        """ Method that checks ERC-20 token balance """

        contract = self._get_token_contract(contract_address)
        with translate_rpc_errors(f"{self.name} balanceOf({address}) call"):
            return contract.functions.balanceOf(Web3.to_checksum_address(address)).call()

    def get_token_allowance(self, contract_address: str, owner: str, spender: str) -> int:
        """ Method that checks ERC-20 token allowance """

        contract = self._get_token_contract(contract_address)
        with translate_rpc_errors(f"{self.name} allowance({owner}, {spender}) call"):
            return contract.functions.allowance(Web3.to_checksum_address(owner),
                                                Web3.to_checksum_address(spender)).call()

    def get_token_decimals(self, contract_address: str) -> int:
        """ Method that reads ERC-20 token decimals """

        contract = self._get_token_contract(contract_address)
        with translate_rpc_errors(f"{self.name} decimals() call on {contract_address}"):
            return contract.functions.decimals().call()

    def _build_approve_transaction(self, address: str, contract_address: str, spender: str, amount: int) -> TxParams:
        contract = self._get_token_contract(contract_address)
        gas_params = self.get_transaction_gas_params()

        with translate_rpc_errors(f"{self.name} approve transaction build"):
            tx = contract.functions.approve(Web3.to_checksum_address(spender), amount).build_transaction(
                {
                    'from': address,
                    **gas_params,
                    'nonce': self.get_nonce(address)
                }
            )

        return tx

    def approve_token_usage(self, private_key: str, contract_address: str, spender: str, amount: int) -> HexBytes:
        """ Method that approves token usage by spender address and returns transaction hash """

        account = self.w3.eth.account.from_key(private_key)
        tx = self._build_approve_transaction(account.address, contract_address, spender, amount)

        tx_hash = self.sign_and_send_transaction(private_key, tx)
        logger.info(f'Approve transaction signed and sent. Hash: {tx_hash.to_0x_hex()}')

        return tx_hash

    # MARK: Wrapped native token functions

    def _build_deposit_transaction(self, address: str, contract_address: str, amount: int) -> TxParams:
        contract = self.w3.eth.contract(address=Web3.to_checksum_address(contract_address), abi=WETH_ABI)
        gas_params = self.get_transaction_gas_params()

        with translate_rpc_errors(f"{self.name} deposit transaction build"):
            tx = contract.functions.deposit().build_transaction(
                {
                    'from': address,
                    'value': amount,
                    **gas_params,
                    'nonce': self.get_nonce(address)
                }
            )

        return tx

    def wrap_native_token(self, private_key: str, amount: int) -> HexBytes:
        """ Method that deposits amount of native token into the wrapped native contract. Returns transaction hash """

        contract_address = self.get_wrapped_native_address()
        if contract_address is None:
            raise UnsupportedChain(f"No wrapped {self.native_token} contract is configured for {self.name}")

        account = self.w3.eth.account.from_key(private_key)
        tx = self._build_deposit_transaction(account.address, contract_address, amount)

        tx_hash = self.sign_and_send_transaction(private_key, tx)
        logger.info(f'Wrap transaction signed and sent. Hash: {tx_hash.to_0x_hex()}')

        return tx_hash
