"""An order service instrumented with aoplog directives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from aoplog import (
    LogLevel,
    LogParameter,
    SensitiveData,
    log_class,
    log_exception,
    log_method,
    partial,
)


class OutOfStock(Exception):
    pass


@dataclass
class Customer:
    email: str
    card_number: Annotated[str, SensitiveData(show_length=True)]


@partial
@log_class
class OrderService:
    def __init__(self) -> None:
        self.stock = {"book": 3, "pen": 0}
        self.orders: list[tuple[str, str, int]] = []

    def place_order_core(
        self,
        customer: Customer,
        item: str,
        quantity: int = 1,
        note: Annotated[str, LogParameter(max_length=12)] = "",
    ) -> int:
        if self.stock.get(item, 0) < quantity:
            raise OutOfStock(f"{item} is out of stock")
        self.stock[item] -= quantity
        self.orders.append((customer.email, item, quantity))
        return len(self.orders)

    @log_method(LogLevel.DEBUG, log_return_value=False)
    def inventory(self) -> dict[str, int]:
        return dict(self.stock)

    @log_exception(LogLevel.WARNING)
    def cancel_core(self, order_id: int, reason: Annotated[str, LogParameter("why")]) -> None:
        del self.orders[order_id - 1]

    def audit_trail(self, limit: int = 100) -> list[tuple[str, str, int]]:
        return self.orders[:limit]

    @staticmethod
    def normalise(item: str) -> str:
        return item.strip().lower()
