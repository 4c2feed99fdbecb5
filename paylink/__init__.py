from paylink.models import PaymentLink, PaymentLinkStatus
from paylink.service import PaymentService
from paylink.store import JsonPaymentLinkStore, PaymentLinkStore
