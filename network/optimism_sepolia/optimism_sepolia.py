import logging

from network.network import EVMNetwork
from network.optimism_sepolia.constants import OptimismSepoliaConstants
from network.token import TokenBinding

logger = logging.getLogger(__name__)


class OptimismSepolia(EVMNetwork):

    def __init__(self) -> None:
        supported_tokens = {
            'PAYMEE': TokenBinding('PAYMEE', OptimismSepoliaConstants.LAYERZERO_CHAIN_ID,
                                   OptimismSepoliaConstants.PAYMEE_OFT_CONTRACT_ADDRESS,
                                   OptimismSepoliaConstants.PAYMEE_OFT_CONTRACT_ADDRESS),
            'WETH': TokenBinding('WETH', OptimismSepoliaConstants.LAYERZERO_CHAIN_ID,
                                 OptimismSepoliaConstants.WETH_CONTRACT_ADDRESS,
                                 OptimismSepoliaConstants.WETH_OFT_ADAPTER_CONTRACT_ADDRESS,
                                 OptimismSepoliaConstants.WETH_DECIMALS, is_native_wrapped=True)
        }

        super().__init__(OptimismSepoliaConstants.NAME, OptimismSepoliaConstants.NATIVE_TOKEN,
                         OptimismSepoliaConstants.RPC, OptimismSepoliaConstants.LAYERZERO_CHAIN_ID,
                         OptimismSepoliaConstants.CHAIN_ID, OptimismSepoliaConstants.IS_TESTNET,
                         OptimismSepoliaConstants.EXPLORER_URL, supported_tokens)

    def get_transaction_gas_params(self) -> dict:
        gas_params = {
            'gasPrice': self.get_current_gas()
        }

        logger.debug(f"{self.name} gas params fetched. Params: {gas_params}")

        return gas_params
