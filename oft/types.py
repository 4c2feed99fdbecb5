from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from base.errors import BaseError
from network.token import DEFAULT_TOKEN_SYMBOL


@dataclass(frozen=True)
class SendParam:
    dst_eid: int
    to: bytes
    amount_ld: int
    min_amount_ld: int
    extra_options: bytes
    compose_msg: bytes = b""
    oft_cmd: bytes = b""

    def as_tuple(self) -> tuple:
        """ Field order of the SendParam struct: (dstEid, to, amountLD, minAmountLD, extraOptions, composeMsg, oftCmd) """

        return (self.dst_eid, self.to, self.amount_ld, self.min_amount_ld,
                self.extra_options, self.compose_msg, self.oft_cmd)


@dataclass(frozen=True)
class MessagingFee:
    native_fee: int
    lz_token_fee: int = 0

    def as_tuple(self) -> tuple:
        return self.native_fee, self.lz_token_fee


# Results of probing the OFT contract for an underlying token

@dataclass(frozen=True)
class AdapterToken:
    """ OFT adapter that locks an existing ERC-20 token """
    bridge_address: str
    underlying_token: str

    @property
    def token_address(self) -> str:
        return self.underlying_token


@dataclass(frozen=True)
class NativeOFTToken:
    """ OFT that is the token itself (mint/burn) """
    bridge_address: str

    @property
    def token_address(self) -> str:
        return self.bridge_address


TokenResolution = Union[AdapterToken, NativeOFTToken]


@dataclass
class SendRequest:
    src_eid: int
    dst_eid: int
    amount: str
    to: str
    min_amount: Optional[str] = None
    oft_address: Optional[str] = None
    token_symbol: str = DEFAULT_TOKEN_SYMBOL
    compose_msg: Optional[str] = None
    lz_receive_options: List[Tuple[int, int]] = field(default_factory=list)
    lz_compose_options: List[Tuple[int, int, int]] = field(default_factory=list)
    native_drop_options: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class SendResult:
    success: bool
    transaction_hash: Optional[str] = None
    explorer_link: Optional[str] = None
    scan_link: Optional[str] = None
    error_message: Optional[str] = None
    error_type: Optional[str] = None
    revert_data: Optional[str] = None
    failed_step: Optional[str] = None

    @classmethod
    def from_error(cls, error: BaseError, failed_step: str, transaction_hash: Optional[str] = None,
                   explorer_link: Optional[str] = None, scan_link: Optional[str] = None) -> 'SendResult':
        return cls(success=False, transaction_hash=transaction_hash, explorer_link=explorer_link,
                   scan_link=scan_link, error_message=str(error), error_type=type(error).__name__,
                   revert_data=getattr(error, "data", None), failed_step=failed_step)
