"""Static admin PIN authentication for Django REST Framework.

The admin views of the laundry app are gated by a single PIN configured
through ``ADMIN_PIN``.  The PIN travels in the ``X-Admin-Pin`` header and
is compared in memory.

Security decisions
------------------
* This is **not** a security boundary.  It keeps casual visitors out of
  the admin endpoints and nothing more; swap it for a real identity
  provider before the service is exposed publicly.
* ``hmac.compare_digest`` is used for the comparison.
* A request without the header is anonymous (``None``) so public
  endpoints keep working; a wrong PIN is rejected with 401.
"""

import hmac

import structlog
from django.conf import settings

from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)

ADMIN_PIN_HEADER = "HTTP_X_ADMIN_PIN"


class AdminUser:
    """Lightweight principal for requests that presented the admin PIN.

    No Django ``User`` row backs it.  Views only need to know that the
    caller passed the gate.
    """

    username = "admin"

    # DRF checks
    is_authenticated = True
    is_active = True
    is_staff = True

    def __str__(self) -> str:  # pragma: no cover
        return self.username


class AdminPinAuthentication(BaseAuthentication):
    """DRF authentication class that validates the ``X-Admin-Pin`` header."""

    keyword = "AdminPin"

    # ------------------------------------------------------------------
    # Public API (DRF contract)
    # ------------------------------------------------------------------

    def authenticate(self, request):
        """Return ``(AdminUser, pin)`` or ``None`` (no credentials)."""
        pin = request.META.get(ADMIN_PIN_HEADER, "")
        if not pin:
            return None

        if not self.check_pin(pin):
            logger.warning("admin_pin_rejected", path=request.path)
            raise AuthenticationFailed("Invalid admin PIN.")

        logger.info("admin_pin_accepted", path=request.path)
        return (AdminUser(), pin)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="admin"'

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def check_pin(pin: str) -> bool:
        expected = str(settings.ADMIN_PIN)
        return hmac.compare_digest(pin.strip().encode(), expected.encode())
