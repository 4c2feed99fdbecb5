import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from base.errors import InvalidAmountFormat, InvalidRequest
from utility import AddressHelper, parse_amount


class PaymentLinkStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"


@dataclass
class PaymentLink:
    id: str
    amount: str
    concept: str
    client_name: str
    recipient_address: str
    created_at: str
    status: PaymentLinkStatus = PaymentLinkStatus.PENDING

    @classmethod
    def create(cls, amount: str, concept: str, client_name: str, recipient_address: str) -> 'PaymentLink':
        if not amount or not concept or not client_name:
            raise InvalidRequest("Amount, concept and client name are required")

        try:
            if parse_amount(amount, 18) == 0:
                raise InvalidRequest("Amount must be greater than zero")
        except InvalidAmountFormat as ex:
            raise InvalidRequest(f"Invalid amount: {ex}") from ex

        if not AddressHelper.is_valid_address(recipient_address):
            raise InvalidRequest(f"Invalid recipient address: {recipient_address!r}")

        return cls(id=str(uuid.uuid4()), amount=amount.strip(), concept=concept, client_name=client_name,
                   recipient_address=AddressHelper.to_checksum(recipient_address),
                   created_at=datetime.now(timezone.utc).isoformat())

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentLinkStatus.PENDING

    def to_dict(self) -> dict:
        """ Same keys the web app keeps under the paymees key """

        return {
            'id': self.id,
            'amount': self.amount,
            'concept': self.concept,
            'clientName': self.client_name,
            'recipientAddress': self.recipient_address,
            'createdAt': self.created_at,
            'status': self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PaymentLink':
        return cls(id=data['id'], amount=data['amount'], concept=data['concept'],
                   client_name=data['clientName'], recipient_address=data['recipientAddress'],
                   created_at=data['createdAt'], status=PaymentLinkStatus(data.get('status', 'pending')))
