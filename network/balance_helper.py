from typing import Optional

from network.network import EVMNetwork
from network.registry import ChainRegistry
from network.token import DEFAULT_TOKEN_SYMBOL
from utility import AddressHelper


class BalanceReader:
    """ Read-only balance and allowance queries used for pre-flight checks """

    def __init__(self, registry: ChainRegistry) -> None:
        self.registry = registry

    def _resolve_token(self, network: EVMNetwork, symbol: str, token_address: Optional[str]) -> str:
        if token_address:
            return AddressHelper.to_checksum(token_address)

        return network.get_token_binding(symbol).token_address

    def get_native_balance(self, address: str, eid: int) -> int:
        network = self.registry.get_network(eid)

        return network.get_balance(AddressHelper.to_checksum(address))

    def get_token_balance(self, address: str, eid: int, symbol: str = DEFAULT_TOKEN_SYMBOL,
                          token_address: Optional[str] = None) -> int:
        network = self.registry.get_network(eid)
        token = self._resolve_token(network, symbol, token_address)

        return network.get_token_balance(token, AddressHelper.to_checksum(address))

    def get_allowance(self, owner: str, spender: str, eid: int, symbol: str = DEFAULT_TOKEN_SYMBOL,
                      token_address: Optional[str] = None) -> int:
        network = self.registry.get_network(eid)
        token = self._resolve_token(network, symbol, token_address)

        return network.get_token_allowance(token, AddressHelper.to_checksum(owner),
                                           AddressHelper.to_checksum(spender))

    def get_decimals(self, eid: int, token_address: str) -> int:
        """ Decimals pinned in the token binding win. Otherwise they are read from the token contract """

        network = self.registry.get_network(eid)
        token = AddressHelper.to_checksum(token_address)

        for binding in network.supported_tokens.values():
            if binding.decimals is not None and binding.token_address.lower() == token.lower():
                return binding.decimals

        return network.get_token_decimals(token)
