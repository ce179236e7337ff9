"""
Payment gateway integration for prepaid orders
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

import stripe
from django.conf import settings

from apps.core.exceptions import PaymentGatewayException
from apps.core.utils import to_minor_units

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntent:
    """Gateway-side payment intent."""
    reference: str
    client_secret: str


class PaymentGateway:
    """Interface for creating payment intents."""
    name = "gateway"

    def create_intent(self, amount: Decimal, currency: str, metadata: Dict[str, str]) -> PaymentIntent:
        raise NotImplementedError

    def cancel_intent(self, reference: str) -> None:
        raise NotImplementedError


class StripePaymentGateway(PaymentGateway):
    """
    Stripe-backed gateway. Amounts are sent in minor units.
    """
    name = "stripe"

    def __init__(self, api_key: str):
        self.client = stripe.StripeClient(api_key)

    def create_intent(self, amount: Decimal, currency: str, metadata: Dict[str, str]) -> PaymentIntent:
        try:
            intent = self.client.payment_intents.create(
                params={
                    "amount": to_minor_units(amount),
                    "currency": currency,
                    "metadata": metadata,
                }
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent failed: {e}")
            raise PaymentGatewayException(str(e), provider=self.name)

        logger.info(f"Stripe payment intent {intent.id} created")
        return PaymentIntent(reference=intent.id, client_secret=intent.client_secret)

    def cancel_intent(self, reference: str) -> None:
        try:
            self.client.payment_intents.cancel(reference)
        except stripe.StripeError as e:
            logger.error(f"Stripe cancel of {reference} failed: {e}")
            raise PaymentGatewayException(str(e), provider=self.name)

        logger.info(f"Stripe payment intent {reference} cancelled")


def get_payment_gateway() -> Optional[PaymentGateway]:
    """Build the configured gateway, or None when no key is set."""
    if not settings.STRIPE_SECRET_KEY:
        return None
    return StripePaymentGateway(settings.STRIPE_SECRET_KEY)
