import os
from dotenv import load_dotenv

load_dotenv()


class SepoliaConstants:
    NAME = "Ethereum Sepolia"
    NATIVE_TOKEN = "ETH"
    RPC = os.getenv("SEPOLIA_RPC", "https://ethereum-sepolia-rpc.publicnode.com")
    CHAIN_ID = 11155111
    LAYERZERO_CHAIN_ID = 40161
    IS_TESTNET = True
    EXPLORER_URL = "https://sepolia.etherscan.io"

    # Contracts
    PAYMEE_OFT_CONTRACT_ADDRESS = "0x7a411471724e12Bd057652B1FF7c52c068e1C9b7"

    WETH_CONTRACT_ADDRESS = "0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14"
    WETH_OFT_ADAPTER_CONTRACT_ADDRESS = "0x2F26C64514f40833F5b01e1FeEB2db35167a1028"
    WETH_DECIMALS = 18
