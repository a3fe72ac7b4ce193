import sys
import os
import random
from datetime import date, timedelta
from decimal import Decimal
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.config import get_settings
from src.crud import (
    crud_account,
    crud_budget,
    crud_category,
    crud_goal,
    crud_investment,
    crud_transaction,
    crud_user,
)
from src.db.core import Database, UserDB, AccountType, BudgetPeriod, CategoryType, InvestmentType
from src.models.account import AccountCreate, MemberInvite
from src.models.budget import BudgetCreate
from src.models.category import CategoryCreate
from src.models.goal import GoalCreate
from src.models.investment import InvestmentCreate
from src.models.transaction import TransactionCreate
from src.models.user import UserRegister

fake = Faker()

DEMO_PASSWORD = "password123"

CATEGORIES = {
    CategoryType.INCOME: ["Salary", "Freelance", "Dividends"],
    CategoryType.EXPENSE: ["Groceries", "Rent", "Transport", "Restaurants", "Utilities", "Health"],
}


def seed_database(user_count: int = 5):
    """
    Fills the database with demo users, each owning one personal account
    with categories, transactions, a budget, a goal and a few assets.
    The first two users also share a household account.

    Everything goes through the crud layer so balances and derived
    fields are consistent.
    """
    settings = get_settings()
    database = Database.from_settings(settings)
    database.create_all()
    db = database.session_local()

    try:
        if db.query(UserDB).count() > 0:
            print("Database appears to be already seeded. Exiting.")
            return

        users = []
        for i in range(user_count):
            user = crud_user.create_db_user(db, UserRegister(
                email=f"demo{i}@example.com",
                password=DEMO_PASSWORD,
                full_name=fake.name(),
            ), bcrypt_rounds=settings.bcrypt_rounds)
            users.append(user)
            print(f"--- Seeding {user.email} ({i + 1}/{user_count}) ---")

            account = crud_account.create_db_account(db, user.id, AccountCreate(
                name=f"{user.full_name.split()[0]}'s Wallet",
                type=AccountType.PERSONAL,
                initial_balance=Decimal(random.randint(500, 5000)),
                color=fake.hex_color(),
            ))
            seed_ledger(db, user.id, account.id)

        if len(users) >= 2:
            owner, partner = users[0], users[1]
            household = crud_account.create_db_account(db, owner.id, AccountCreate(
                name="Household", type=AccountType.HOUSEHOLD
            ))
            crud_account.invite_member(db, household.id, owner.id, MemberInvite(email=partner.email, role="editor"))
            crud_account.accept_invitation(db, household.id, partner.id)
            seed_ledger(db, owner.id, household.id)

        print(f"Seeded {len(users)} users. Log in with demo0@example.com / {DEMO_PASSWORD}")
    finally:
        db.close()
        database.dispose()


def seed_ledger(db, user_id, account_id):
    categories = []
    for category_type, names in CATEGORIES.items():
        for name in names:
            categories.append(crud_category.create_db_category(db, user_id, CategoryCreate(
                account_id=account_id, name=name, type=category_type, color=fake.hex_color()
            )))

    for _ in range(random.randint(30, 60)):
        category = random.choice(categories)
        amount = Decimal(random.uniform(5.0, 800.0)).quantize(Decimal("0.01"))
        if category.type == CategoryType.EXPENSE:
            amount = -amount
        crud_transaction.create_db_transaction(db, user_id, TransactionCreate(
            account_id=account_id,
            category_id=category.id,
            date=fake.date_between(start_date="-1y", end_date="today"),
            description=fake.catch_phrase(),
            amount=amount,
            payment_method=random.choice(["pix", "credit_card", "debit_card", "cash"]),
        ))

    groceries = next(c for c in categories if c.name == "Groceries")
    crud_budget.create_db_budget(db, user_id, BudgetCreate(
        account_id=account_id,
        category_id=groceries.id,
        name="Monthly groceries",
        amount=Decimal("1200.00"),
        period=BudgetPeriod.MONTHLY,
        start_date=date.today().replace(day=1),
    ))

    crud_goal.create_db_goal(db, user_id, GoalCreate(
        account_id=account_id,
        name="Emergency fund",
        target_amount=Decimal("10000.00"),
        current_amount=Decimal(random.randint(0, 8000)),
        target_date=date.today() + timedelta(days=365),
    ))

    for ticker, investment_type in (("PETR4", InvestmentType.STOCK), ("TESOURO", InvestmentType.FIXED_INCOME)):
        crud_investment.create_db_investment(db, user_id, InvestmentCreate(
            account_id=account_id,
            name=fake.company(),
            type=investment_type,
            ticker=ticker,
            quantity=Decimal(random.randint(1, 200)),
            purchase_price=Decimal(random.uniform(10, 100)).quantize(Decimal("0.01")),
            current_price=Decimal(random.uniform(10, 100)).quantize(Decimal("0.01")),
            purchase_date=fake.date_between(start_date="-3y", end_date="-30d"),
        ))


if __name__ == "__main__":
    seed_database()
