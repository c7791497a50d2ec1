"""Order summary and WhatsApp share link.

Builds the pre-filled message staff send to a customer after creating an
order.  Nothing is sent from here: the link is returned to the caller and
opened by the browser.

Formatting follows the ``id-ID`` locale: ``Rp 21.000`` for amounts and
``17/8/2025, 10.30.00`` for dates.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Union
from urllib.parse import quote

from django.utils import timezone

from modules.orders.constants import ServiceTier
from modules.orders.dtos import OrderRecord

WHATSAPP_BASE_URL = "https://wa.me/"
SHOP_NAME = "CleanRush"

_NON_DIGITS = re.compile(r"[^0-9]")


def format_currency(amount: Union[int, float, Decimal, None]) -> str:
    """Format *amount* as whole Rupiah, e.g. ``Rp 21.000``."""
    try:
        value = int(round(Decimal(str(amount))))
    except (ArithmeticError, ValueError, TypeError):
        value = 0
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"


def format_datetime(value: datetime) -> str:
    """``d/M/yyyy, HH.mm.ss`` in the shop's time zone."""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return f"{value.day}/{value.month}/{value.year}, {value:%H.%M.%S}"


def format_weight(weight_kg: float) -> str:
    return f"{weight_kg:g}"


def build_share_message(record: OrderRecord) -> str:
    """The order summary sent to the customer, one fact per line."""
    service = "Express" if record.service_tier == ServiceTier.EXPRESS else "Regular"
    lines = [
        f"Halo *{record.customer_name}*",
        f"Terima kasih telah order di *{SHOP_NAME}*.",
        "",
        f"Kode: *{record.code}*",
        f"Layanan: {service}",
        f"Berat: {format_weight(record.weight_kg)} kg",
    ]
    if record.ironing_requested:
        lines.append("+ Setrika")
    if record.stain_treatment_requested:
        lines.append("+ Hilangkan noda")
    if record.delivery_requested:
        lines.append("+ Antar")
    lines += [
        f"Jadwal pickup: {format_datetime(record.scheduled_pickup_at)}",
        f"Metode bayar: {record.payment_method}",
        f"Total: *{format_currency(record.total_price)}*",
        "",
        "Lacak status: buka halaman Lacak dan masukkan kode di atas.",
    ]
    return "\n".join(lines)


def build_share_link(record: OrderRecord) -> str:
    """``https://wa.me/<digits>?text=<message>`` for *record*."""
    digits = _NON_DIGITS.sub("", record.phone)
    text = quote(build_share_message(record), safe="")
    return f"{WHATSAPP_BASE_URL}{digits}?text={text}"
