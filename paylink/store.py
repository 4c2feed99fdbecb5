import json
import logging
import os
import tempfile
from typing import List

from base.errors import NotSupported, PaymentLinkNotFound, PaymentLinkStoreError
from paylink.models import PaymentLink, PaymentLinkStatus

logger = logging.getLogger(__name__)


class PaymentLinkStore:

    def get_by_id(self, link_id: str) -> PaymentLink:
        """ Method that returns the payment link or raises PaymentLinkNotFound """
        raise NotSupported("get_by_id() is not implemented")

    def mark_paid(self, link_id: str) -> None:
        """ Method that flips the payment link status to paid """
        raise NotSupported("mark_paid() is not implemented")

    def add(self, link: PaymentLink) -> None:
        raise NotSupported("add() is not implemented")

    def list(self) -> List[PaymentLink]:
        raise NotSupported("list() is not implemented")


class JsonPaymentLinkStore(PaymentLinkStore):
    """ Keeps payment links as a JSON array in a single file """

    def __init__(self, path: str) -> None:
        self.path = path

    def _load(self) -> List[PaymentLink]:
        if not os.path.exists(self.path):
            return []

        try:
            with open(self.path, 'r') as file:
                data = json.load(file)

            # Export of the web app's local storage: {"paymees": [...]}
            if isinstance(data, dict):
                data = data.get('paymees', [])

            return [PaymentLink.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as ex:
            raise PaymentLinkStoreError(f"Payment links file {self.path} is malformed: {ex!r}") from ex

    def _save(self, links: List[PaymentLink]) -> None:
        """ Write to a temporary file next to the target and swap it in, so an interrupted write
        leaves the previous file untouched """

        directory = os.path.dirname(self.path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        fd, temp_path = tempfile.mkstemp(dir=directory or '.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w') as file:
                json.dump([link.to_dict() for link in links], file, indent=2)
            os.replace(temp_path, self.path)
        finally:
            if os.path.exists(temp_path):
                os.remove(temp_path)

    def get_by_id(self, link_id: str) -> PaymentLink:
        for link in self._load():
            if link.id == link_id:
                return link

        raise PaymentLinkNotFound(f"Payment link {link_id} not found")

    def mark_paid(self, link_id: str) -> None:
        links = self._load()

        for link in links:
            if link.id == link_id:
                link.status = PaymentLinkStatus.PAID
                self._save(links)
                logger.info(f"Payment link {link_id} marked as paid")
                return

        raise PaymentLinkNotFound(f"Payment link {link_id} not found")

    def add(self, link: PaymentLink) -> None:
        links = self._load()
        links.append(link)
        self._save(links)

    def list(self) -> List[PaymentLink]:
        return self._load()
