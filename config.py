import os

from dotenv import load_dotenv

from base.errors import ConfigurationError
from network import ChainRegistry, OptimismSepolia, Sepolia
from network.optimism_sepolia.constants import OptimismSepoliaConstants
from network.sepolia.constants import SepoliaConstants

load_dotenv()

PRIVATE_KEY = os.getenv("PAYMEE_PRIVATE_KEY")
DEFAULT_PRIVATE_KEYS_FILE_PATH = os.getenv("DEFAULT_PRIVATE_KEYS_FILE_PATH")
PAYMENT_LINKS_FILE_PATH = os.getenv("PAYMENT_LINKS_FILE_PATH", "data/paymees.json")
TX_CONFIRMATION_TIMEOUT = os.getenv("TX_CONFIRMATION_TIMEOUT", "300")
LOG_DIRECTORY = os.getenv("LOG_DIRECTORY", "logs")


# Route used to settle payment links: WETH from Ethereum Sepolia to Optimism Sepolia
class PaymentRoute:
    SRC_EID = SepoliaConstants.LAYERZERO_CHAIN_ID
    DST_EID = OptimismSepoliaConstants.LAYERZERO_CHAIN_ID
    TOKEN_SYMBOL = "WETH"


def create_default_registry() -> ChainRegistry:
    return ChainRegistry([
        Sepolia(),
        OptimismSepolia()
    ])


# -------- Utility class --------
class ConfigurationHelper:
    @staticmethod
    def get_confirmation_timeout() -> int:
        try:
            timeout = int(TX_CONFIRMATION_TIMEOUT)
        except ValueError as ex:
            raise ConfigurationError(f"TX_CONFIRMATION_TIMEOUT must be an integer number of seconds, "
                                     f"got {TX_CONFIRMATION_TIMEOUT!r}") from ex

        if timeout <= 0:
            raise ConfigurationError("TX_CONFIRMATION_TIMEOUT must be positive. Check configuration settings")

        return timeout

    @staticmethod
    def check_networks_list(registry: ChainRegistry) -> None:
        if len(registry.networks) == 0:
            raise ConfigurationError('Supported network list is empty. Unable to run with such a configuration')

        for network in registry.networks:
            if not network.rpc:
                raise ConfigurationError(f"RPC is not configured for {network.name}")

    @staticmethod
    def create_logging_directory() -> None:
        if not os.path.exists(LOG_DIRECTORY):
            os.makedirs(LOG_DIRECTORY)

    @staticmethod
    def check_configuration(registry: ChainRegistry) -> None:
        ConfigurationHelper.check_networks_list(registry)
        ConfigurationHelper.get_confirmation_timeout()

        ConfigurationHelper.create_logging_directory()
