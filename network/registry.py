from typing import Dict, Iterable, List, Optional

from base.errors import UnsupportedChain
from network.network import EVMNetwork
from network.token import TokenBinding


class ChainRegistry:
    """ Lookup of the networks the bridger is allowed to send from, keyed by LayerZero endpoint id """

    def __init__(self, networks: Iterable[EVMNetwork]) -> None:
        self._networks: Dict[int, EVMNetwork] = {}

        for network in networks:
            if network.layerzero_chain_id in self._networks:
                raise ValueError(f"Endpoint id {network.layerzero_chain_id} is registered twice")
            self._networks[network.layerzero_chain_id] = network

    def __contains__(self, eid: int) -> bool:
        return eid in self._networks

    @property
    def networks(self) -> List[EVMNetwork]:
        return list(self._networks.values())

    def get_network(self, eid: int) -> EVMNetwork:
        network = self._networks.get(eid)
        if network is None:
            raise UnsupportedChain(f"Unsupported chain: {eid}")

        return network

    def get_token_binding(self, eid: int, symbol: str) -> TokenBinding:
        return self.get_network(eid).get_token_binding(symbol)

    def resolve_bridge_address(self, eid: int, symbol: str, override: Optional[str] = None) -> str:
        network = self.get_network(eid)
        if override:
            return override

        binding = network.get_token_binding(symbol)
        if not binding.bridge_address:
            raise UnsupportedChain(f"No OFT contract address found for {symbol} on chain {eid}")

        return binding.bridge_address
