import logging
import threading
from typing import Callable, Optional

from eth_account.signers.local import LocalAccount

from base.errors import BaseError, OperationCancelled
from logic.send_states import ValidateRequestState
from logic.state import State
from network import BalanceReader, ChainRegistry, EVMNetwork
from oft import MessagingFee, OFTBridge, OFTConstants, SendParam, SendRequest, SendResult, TokenResolution

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TIMEOUT = 300
DEFAULT_POLL_INTERVAL = 10


class SendFlow:
    """ Runs a single OFT send: validate, resolve bridge, resolve token, resolve decimals, approve,
    build options, quote, check balance, submit, confirm.

    Steps run strictly in order and only move forward. Nothing is retried: a failed step ends the flow
    with a failed SendResult. Setting cancel_event stops the flow before the next step or while it waits
    for a receipt. A transaction that is already submitted stays submitted and its hash is reported.
    """

    def __init__(self, registry: ChainRegistry, account: LocalAccount, request: SendRequest,
                 bridge_factory: Callable[[EVMNetwork, str], OFTBridge] = OFTBridge,
                 confirmation_timeout: int = DEFAULT_CONFIRMATION_TIMEOUT,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 cancel_event: Optional[threading.Event] = None) -> None:
        self.registry = registry
        self.balance_reader = BalanceReader(registry)
        self.account = account
        self.request = request
        self.bridge_factory = bridge_factory
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.cancel_event = cancel_event

        self.state: State = ValidateRequestState()
        self.result: Optional[SendResult] = None

        # Filled in by the states
        self.network: Optional[EVMNetwork] = None
        self.bridge: Optional[OFTBridge] = None
        self.token: Optional[TokenResolution] = None
        self.decimals: Optional[int] = None
        self.amount: Optional[int] = None
        self.min_amount: Optional[int] = None
        self.send_param: Optional[SendParam] = None
        self.fee: Optional[MessagingFee] = None
        self.approval_tx_hash: Optional[str] = None
        self.tx_hash: Optional[str] = None

    def set_state(self, state: State) -> None:
        if state.step <= self.state.step:
            raise ValueError(f"Can't move from {self.state.step.name} back to {state.step.name}")

        self.state = state

    def is_cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _links(self) -> dict:
        if self.tx_hash is None or self.network is None:
            return {}

        return {
            'explorer_link': self.network.get_explorer_link(self.tx_hash),
            'scan_link': OFTConstants.get_scan_link(self.tx_hash, self.network.is_testnet),
        }

    def finish_successfully(self) -> None:
        self.result = SendResult(success=True, transaction_hash=self.tx_hash, **self._links())

        logger.info(f"Transaction confirmed. Hash: {self.tx_hash}")
        logger.info(f"LayerZero scan: {self.result.scan_link}")
        if self.result.explorer_link:
            logger.info(f"Block explorer: {self.result.explorer_link}")

    def run(self) -> SendResult:
        logger.info("Starting OFT transfer")

        while self.result is None:
            step = self.state.step
            try:
                if self.is_cancelled():
                    raise OperationCancelled(f"Send cancelled before the {step.name} step")

                logger.debug(f"Running {step.name} step")
                self.state.handle(self)
            except BaseError as ex:
                logger.error(f"{step.name} step failed. {type(ex).__name__}: {ex}")
                self.result = SendResult.from_error(ex, step.name, transaction_hash=self.tx_hash, **self._links())

        return self.result
