from dcabot.models.account import Account
from dcabot.models.holding import Holding
from dcabot.models.ledger import LedgerEntry
from dcabot.models.order import Order
from dcabot.models.base import Base

__all__ = [
    "Base",
    "Account",
    "Holding",
    "LedgerEntry",
    "Order",
]
