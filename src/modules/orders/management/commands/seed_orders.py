from __future__ import annotations

import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.orders.constants import PaymentMethod, ServiceTier
from modules.orders.dtos import CreateOrderDTO
from modules.orders.pipeline import FORWARD
from modules.orders.repositories.django_repository import OrderStoreDjangoRepository
from modules.orders.services import OrderService

SEED_CUSTOMERS = [
    ("Ani Wijaya", "081234567801", "Jl. Melati No. 3, Bandung"),
    ("Budi Santoso", "081234567802", "Jl. Kenanga No. 12, Bandung"),
    ("Citra Lestari", "081234567803", "Jl. Mawar No. 7, Cimahi"),
    ("Dedi Kurniawan", "081234567804", "Jl. Anggrek No. 21, Bandung"),
    ("Eka Putri", "081234567805", "Jl. Dahlia No. 9, Lembang"),
    ("Fajar Nugroho", "081234567806", "Jl. Flamboyan No. 15, Bandung"),
]


class Command(BaseCommand):
    help = "Seed the order store with demo laundry orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Clear every existing order before seeding.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        service = OrderService(order_store=OrderStoreDjangoRepository())

        if options["reset"]:
            service.reset_all()
            self.stdout.write("Existing orders cleared.")

        self.stdout.write("Creating orders...")
        created = 0
        now = timezone.now()
        for offset, (name, phone, address) in enumerate(SEED_CUSTOMERS):
            dto = CreateOrderDTO(
                customer_name=name,
                phone=phone,
                address=address,
                service_tier=random.choice(ServiceTier.values),
                weight_kg=random.choice([2, 3, 4.5, 5, 7]),
                ironing_requested=random.random() < 0.5,
                stain_treatment_requested=random.random() < 0.3,
                delivery_requested=random.random() < 0.7,
                scheduled_pickup_at=now + timedelta(hours=offset + 1),
                payment_method=random.choice(PaymentMethod.values),
            )
            order = service.create_order(dto)
            for _ in range(random.randint(0, 5)):
                service.advance_stage(order.code, FORWARD)
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Seed completed: orders={created}"))
