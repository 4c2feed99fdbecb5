from network.network import Network, EVMNetwork, TransactionStatus
from network.optimism_sepolia.optimism_sepolia import OptimismSepolia
from network.sepolia.sepolia import Sepolia

from network.balance_helper import BalanceReader
from network.registry import ChainRegistry
from network.token import TokenBinding, DEFAULT_TOKEN_SYMBOL
