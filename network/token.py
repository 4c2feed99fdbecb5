from dataclasses import dataclass
from typing import Optional

DEFAULT_TOKEN_SYMBOL = "PAYMEE"


@dataclass(frozen=True)
class TokenBinding:
    symbol: str
    layerzero_chain_id: int
    token_address: str
    bridge_address: str
    decimals: Optional[int] = None  # Read from the token contract when not pinned
    is_native_wrapped: bool = False
