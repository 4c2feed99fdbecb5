class OFTConstants:
    # Destination gas for lzReceive when the caller gives no receive option. High enough to cover
    # WETH unwrapping on the adapter side; callers may override it
    DEFAULT_LZ_RECEIVE_GAS = 500_000
    DEFAULT_LZ_RECEIVE_VALUE = 0

    MAX_UINT16 = 2 ** 16 - 1
    MAX_UINT32 = 2 ** 32 - 1
    MAX_UINT128 = 2 ** 128 - 1
    MAX_UINT256 = 2 ** 256 - 1

    LAYERZERO_SCAN_URL = "https://layerzeroscan.com"
    LAYERZERO_TESTNET_SCAN_URL = "https://testnet.layerzeroscan.com"

    NATIVE_DECIMALS = 18

    @staticmethod
    def get_scan_link(tx_hash: str, is_testnet: bool = False) -> str:
        base_url = OFTConstants.LAYERZERO_TESTNET_SCAN_URL if is_testnet else OFTConstants.LAYERZERO_SCAN_URL
        return f"{base_url}/tx/{tx_hash}"
