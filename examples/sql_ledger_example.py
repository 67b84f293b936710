"""
SQL ledger: shared stock across two terminals.
"""

import asyncio

from pakasir import PaymentMethod
from pakasir import ledger as LG
from pakasir.order import BuyerInfo
from examples._infra import banner, run, demo_pos, LEVELS


async def main(url: str = "sqlite+aiosqlite:///pakasir_demo.db") -> None:
    session_factory, engine = await LG.create_ledger_database(url)
    ledger = LG.SQLAlchemyLedger(session_factory)
    await ledger.seed(LEVELS, min_stock={"canva-1m": 1})

    first, second = demo_pos(ledger), demo_pos(ledger)
    await first.add_to_cart("canva-1m")
    await second.add_to_cart("canva-1m")

    banner("Two terminals, one Canva left")
    results = await asyncio.gather(
        first.checkout(BuyerInfo("Budi"), PaymentMethod.CASH),
        second.checkout(BuyerInfo("Sari"), PaymentMethod.TRANSFER),
    )
    for r in results:
        print(f"  {'✓ ' + r.unwrap().id if r else '✗ ' + r.unwrap_err().kind.name}")

    banner("Journal")
    for m in await ledger.movements():
        print(f"  {m.kind.value} {m.quantity} x {m.item_id} -> {m.balance_after} ({m.reason})")

    await engine.dispose()


if __name__ == "__main__":
    run(main)
