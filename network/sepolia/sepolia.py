import logging

from network.network import EVMNetwork, translate_rpc_errors
from network.sepolia.constants import SepoliaConstants
from network.token import TokenBinding

logger = logging.getLogger(__name__)


class Sepolia(EVMNetwork):

    def __init__(self) -> None:
        supported_tokens = {
            'PAYMEE': TokenBinding('PAYMEE', SepoliaConstants.LAYERZERO_CHAIN_ID,
                                   SepoliaConstants.PAYMEE_OFT_CONTRACT_ADDRESS,
                                   SepoliaConstants.PAYMEE_OFT_CONTRACT_ADDRESS),
            'WETH': TokenBinding('WETH', SepoliaConstants.LAYERZERO_CHAIN_ID,
                                 SepoliaConstants.WETH_CONTRACT_ADDRESS,
                                 SepoliaConstants.WETH_OFT_ADAPTER_CONTRACT_ADDRESS,
                                 SepoliaConstants.WETH_DECIMALS, is_native_wrapped=True)
        }

        super().__init__(SepoliaConstants.NAME, SepoliaConstants.NATIVE_TOKEN, SepoliaConstants.RPC,
                         SepoliaConstants.LAYERZERO_CHAIN_ID, SepoliaConstants.CHAIN_ID,
                         SepoliaConstants.IS_TESTNET, SepoliaConstants.EXPLORER_URL, supported_tokens)

    def get_max_fee_per_gas(self) -> int:
        return int(self.get_current_gas() * 2)

    def get_transaction_gas_params(self) -> dict:
        max_fee_per_gas = self.get_max_fee_per_gas()
        with translate_rpc_errors(f"{self.name} priority fee request"):
            max_priority_fee = self.w3.eth.max_priority_fee

        gas_params = {
            'maxFeePerGas': max_fee_per_gas,
            'maxPriorityFeePerGas': max_priority_fee
        }

        logger.debug(f"{self.name} gas params fetched. Params: {gas_params}")

        return gas_params
