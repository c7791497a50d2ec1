"""Order domain constants.

Defines the service tier and payment choices, the price table and the
fixed six-stage processing pipeline every laundry order goes through.
"""

from decimal import Decimal
from types import MappingProxyType

from django.db import models


class ServiceTier(models.TextChoices):
    REGULAR = "regular", "Regular"
    EXPRESS = "express", "Express"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    TRANSFER = "transfer", "Transfer"


class Stage(models.IntegerChoices):
    RECEIVED = 0, "Diterima"
    WASHING = 1, "Dicuci"
    DRYING = 2, "Pengeringan"
    IRONING = 3, "Disetrika"
    READY = 4, "Siap Diambil/Antar"
    DONE = 5, "Selesai"


# Ordered stage names, index == ``Stage`` value.
STATUS_FLOW: tuple[str, ...] = tuple(str(stage.label) for stage in Stage)

FIRST_STAGE_INDEX = 0
LAST_STAGE_INDEX = len(STATUS_FLOW) - 1

# Weights above this are treated as unusable input, like NaN.
MAX_WEIGHT_KG = 10_000.0

# Price table (IDR).  Rates are per kilogram, fees are per order.
PRICES = MappingProxyType(
    {
        "base_per_kg": Decimal("7000"),
        "express_multiplier": Decimal("1.5"),
        "ironing_per_kg": Decimal("3000"),
        "stain_flat_fee": Decimal("5000"),
        "delivery_flat_fee": Decimal("10000"),
    }
)

ORDER_CODE_PREFIX = "CR"
ORDER_CODE_SUFFIX_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ORDER_CODE_SUFFIX_LENGTH = 4
ORDER_CODE_MAX_RETRIES = 5

# History notes
NOTE_CREATED = "Order dibuat"
NOTE_ADVANCED = "Maju"
NOTE_REVERTED = "Mundur"

CURRENCY_CODE = "IDR"
LOCALE = "id-ID"
