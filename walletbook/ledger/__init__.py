"""Balance ledger package."""

from walletbook.ledger.document_ledger import DocumentStoreBalanceLedger
from walletbook.ledger.interface import BalanceLedger, signed_amount

__all__ = ["BalanceLedger", "DocumentStoreBalanceLedger", "signed_amount"]
