import logging
from typing import Callable

from eth_account.signers.local import LocalAccount

from base.errors import BaseError, InvalidRequest
from logic import SendFlow
from network import ChainRegistry
from oft import SendRequest, SendResult
from paylink.store import PaymentLinkStore

logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, store: PaymentLinkStore, registry: ChainRegistry, account: LocalAccount,
                 flow_factory: Callable[..., SendFlow] = SendFlow) -> None:
        self.store = store
        self.registry = registry
        self.account = account
        self.flow_factory = flow_factory

    def pay(self, link_id: str, src_eid: int, dst_eid: int, token_symbol: str) -> SendResult:
        """ Method that bridges the link amount to the link recipient and marks the link as paid on success """

        link = self.store.get_by_id(link_id)
        if not link.is_pending:
            raise InvalidRequest(f"Payment link {link_id} is {link.status.value}")

        logger.info(f"Paying link {link.id} ({link.concept}) for {link.client_name}. "
                    f"Amount: {link.amount} {token_symbol}")

        request = SendRequest(src_eid=src_eid, dst_eid=dst_eid, amount=link.amount, to=link.recipient_address,
                              token_symbol=token_symbol)
        result = self.flow_factory(self.registry, self.account, request).run()

        if result.success:
            try:
                self.store.mark_paid(link.id)
            except (BaseError, OSError) as ex:
                # Tokens are already on their way. Keep the hash so the link can be settled by hand
                logger.error(f"Payment link {link.id} was paid in transaction {result.transaction_hash} "
                             f"but couldn't be marked as paid: {ex}")
                raise
        else:
            logger.error(f"Payment link {link.id} was not paid: {result.error_message}")

        return result
