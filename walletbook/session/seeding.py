"""
Default Data Seeding

A user seen for the first time (no categories at all) gets the default
category set and a zero-balance "Cash" wallet.
"""

from walletbook.models.finance import (
    CategoryInput,
    TransactionType,
    WalletInput,
    WalletType,
)
from walletbook.repositories.finance import CategoryRepository, WalletRepository


DEFAULT_CATEGORIES: list[CategoryInput] = [
    # Income categories
    CategoryInput(name="Salary", type=TransactionType.INCOME, icon="💰", color="#4CAF50"),
    CategoryInput(name="Bonus", type=TransactionType.INCOME, icon="🎁", color="#8BC34A"),
    CategoryInput(name="Investment", type=TransactionType.INCOME, icon="📈", color="#CDDC39"),
    CategoryInput(name="Other Income", type=TransactionType.INCOME, icon="💵", color="#FFC107"),
    # Expense categories
    CategoryInput(name="Food & Drinks", type=TransactionType.EXPENSE, icon="🍔", color="#F44336"),
    CategoryInput(name="Transportation", type=TransactionType.EXPENSE, icon="🚗", color="#E91E63"),
    CategoryInput(name="Shopping", type=TransactionType.EXPENSE, icon="🛒", color="#9C27B0"),
    CategoryInput(name="Entertainment", type=TransactionType.EXPENSE, icon="🎬", color="#673AB7"),
    CategoryInput(name="Bills & Utilities", type=TransactionType.EXPENSE, icon="💡", color="#3F51B5"),
    CategoryInput(name="Healthcare", type=TransactionType.EXPENSE, icon="🏥", color="#2196F3"),
    CategoryInput(name="Education", type=TransactionType.EXPENSE, icon="📚", color="#00BCD4"),
    CategoryInput(name="Travel", type=TransactionType.EXPENSE, icon="✈️", color="#009688"),
    CategoryInput(name="Other", type=TransactionType.EXPENSE, icon="📦", color="#795548"),
]

DEFAULT_WALLET = WalletInput(name="Cash", type=WalletType.CASH, icon="💵", balance=0)


class DefaultDataSeeder:
    """Creates the default categories and wallet for a new user."""

    def __init__(
        self,
        categories: CategoryRepository,
        wallets: WalletRepository,
    ):
        self._categories = categories
        self._wallets = wallets

    async def needs_seeding(self, user_id: str) -> bool:
        """A user with zero categories has never been seeded."""
        return len(await self._categories.list_all(user_id)) == 0

    async def seed(self, user_id: str) -> tuple[int, int]:
        """
        Write the defaults. Categories go in one batch, then the wallet.

        Returns:
            (categories_created, wallets_created)

        Raises:
            StorageError: If either write fails
        """
        category_ids = await self._categories.add_many(user_id, DEFAULT_CATEGORIES)
        await self._wallets.add(user_id, DEFAULT_WALLET)
        return len(category_ids), 1
