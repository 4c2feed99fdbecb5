import os
from dotenv import load_dotenv

load_dotenv()


class OptimismSepoliaConstants:
    NAME = "Optimism Sepolia"
    NATIVE_TOKEN = "ETH"
    RPC = os.getenv("OPTIMISM_SEPOLIA_RPC", "https://sepolia.optimism.io")
    CHAIN_ID = 11155420
    LAYERZERO_CHAIN_ID = 40232
    IS_TESTNET = True
    EXPLORER_URL = "https://sepolia-optimism.etherscan.io"

    # Contracts
    PAYMEE_OFT_CONTRACT_ADDRESS = "0xaDd23f5D0Ec63245D3b33051dbFCE0CF81F49076"

    # OP Stack predeploy
    WETH_CONTRACT_ADDRESS = "0x4200000000000000000000000000000000000006"
    WETH_OFT_ADAPTER_CONTRACT_ADDRESS = "0x1b421839E647953739D30e2EE06eb80b8A141BAB"
    WETH_DECIMALS = 18
