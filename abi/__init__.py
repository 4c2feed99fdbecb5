from abi.erc20 import ERC20_ABI
from abi.oft import OFT_ABI
from abi.weth import WETH_ABI
