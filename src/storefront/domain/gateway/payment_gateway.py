"""Payment provider webhook port.

Swapping the Stripe adapter for a fake (tests, local development) does
not touch the reducer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.payment import PaymentNotification


class PaymentWebhookVerifier(ABC):

    @abstractmethod
    def parse(self, payload: bytes | str, signature: str) -> PaymentNotification:
        """Verify *signature* over *payload* and decode the notification.

        Raises WebhookVerificationError when the signature does not check
        out or the body cannot be decoded.  Nothing may be written before
        this returns.
        """
