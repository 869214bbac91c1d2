"""Seed the database with a demo technician, a few clients and one service order."""

import asyncio

from fieldservice.db.engine import engine, async_session_factory, create_tables
from fieldservice.db import crud
from fieldservice.services import auth as auth_service, orders, order_records

DEMO_EMAIL = "tecnico@demo.local"
DEMO_PASSWORD = "demo12345"


async def seed():
    await create_tables()

    async with async_session_factory() as db:
        if await crud.get_technician_by_email(db, DEMO_EMAIL):
            print("Demo technician already exists, skipping seed.")
            return

        result = await auth_service.register(db, DEMO_EMAIL, DEMO_PASSWORD, "Técnico Demo")
        auth = auth_service.context_for(result.technician)
        print(f"Created technician: {DEMO_EMAIL} / {DEMO_PASSWORD}")

        for name, phone, city in [
            ("Mercado Bom Preço", "+5511988887777", "São Paulo"),
            ("Padaria Pão Quente", "+5511977776666", "Guarulhos"),
            ("Restaurante Sabor Caseiro", "+5511966665555", "Osasco"),
        ]:
            client = await crud.create_client(db, created_by=auth.technician_id, name=name, phone=phone, city=city)
            print(f"Created client: {client.name}")

        order = await orders.create_order(db, auth, {
            "client_name": "Mercado Bom Preço",
            "location": "Rua das Flores, 120 - São Paulo",
            "contact_name": "Carlos",
            "contact_phone": "+5511988887777",
            "problem_description": "Balcão refrigerado não gela",
        })
        await order_records.add_part(db, auth, order.id, "Compressor 1/3 HP", "Compressor 1/3 HP Embraco", 850.0)
        await order_records.add_part(db, auth, order.id, "Relé de partida", "Relé de partida novo", 45.5)
        print(f"Created service order OS #{order.os_number}")

    await engine.dispose()
    print("\nSeed complete. Start the server with: python -m fieldservice.cli serve")


if __name__ == "__main__":
    asyncio.run(seed())
