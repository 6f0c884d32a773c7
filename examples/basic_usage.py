"""Generate logging for the shop example, then call the instrumented service."""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

from aoplog import DefaultMethodLogger, RuntimeOptions, inject_method_logger
from aoplog.generator import Compilation, generate, write_sources
from aoplog.renderers import render_generation

EXAMPLES_DIR = Path(__file__).resolve().parent


def main() -> None:
    result = generate(Compilation.from_directory(EXAMPLES_DIR))
    for path in write_sources(result):
        print(f"wrote {path}")
    print(render_generation(result, verbosity="full"))

    sys.path.insert(0, str(EXAMPLES_DIR))
    orders = importlib.import_module("shop.orders")

    logging.basicConfig(level=logging.DEBUG, format="%(levelname)-8s %(message)s")
    options = RuntimeOptions(
        default_level="debug",
        entry_format="Entering {ClassName}.{MethodName} with {Parameters}",
        exit_format="Exiting {ClassName}.{MethodName} -> {ReturnValue} ({ExecutionTime}ms)",
        include_exception_details=False,
    )
    service = orders.OrderService()
    inject_method_logger(service, DefaultMethodLogger(options=options), options)

    customer = orders.Customer(email="ada@example.com", card_number="4111111111111111")
    order_id = service.place_order(customer, "book", quantity=2, note="gift wrap, please")
    service.inventory_logged()
    service.cancel(order_id, reason="changed mind")
    try:
        service.place_order(customer, "pen")
    except orders.OutOfStock as exc:
        print(f"caught: {exc}")


if __name__ == "__main__":
    main()
