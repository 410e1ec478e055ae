"""Example: CRUD against a customers resource through HttpServiceProxy."""

import asyncio
import logging
import os
from typing import Optional

from dataproxy.http import (
    ConcurrencyError,
    DomainObject,
    HttpServiceProxy,
    NotFoundError,
    RunWithinTaskStrategy,
    ServiceError,
    load_dotenv_for_proxy,
)


class Customer(DomainObject[int]):
    Name: Optional[str] = None


def localized(message: str) -> str:
    return f"The customer service rejected the request: {message}"


async def main() -> None:
    """Walk through the async API."""

    load_dotenv_for_proxy()
    api = os.getenv("CUSTOMERS_API", "http://localhost:5000/api/customers")

    proxy = HttpServiceProxy(api, Customer, format_server_error=localized)

    print("=== Customers Proxy Example ===\n")

    print("1. Inserting a customer...")
    try:
        customer = await proxy.insert_async(Customer(Name="Frank Zappa"))
    except ServiceError as exc:
        print(f"   ✗ {exc}")
        return
    print(f"   ✓ Inserted with ID {customer.ID}")

    print("\n2. Renaming it...")
    customer.Name = "Francis Vincent Zappa"
    try:
        customer = await proxy.update_async(customer)
        print(f"   ✓ Now called {customer.Name}")
    except ConcurrencyError as exc:
        print(f"   ✗ Someone else changed it first: {exc}")

    print("\n3. Listing customers...")
    for item in await proxy.get_all_async():
        print(f"   - {item.ID}: {item.Name}")

    print("\n4. Deleting it...")
    await proxy.delete_async(customer.ID)
    try:
        await proxy.get_by_id_async(customer.ID)
    except NotFoundError:
        print("   ✓ Gone")

    # Blocking calls made from inside a running loop need the detached strategy
    blocking = HttpServiceProxy(api, Customer, invocation_strategy=RunWithinTaskStrategy())
    print(f"\n5. Blocking get_all from inside the loop: {len(blocking.get_all())} customers")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
