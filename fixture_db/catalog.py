from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrencySeed:
    name: str
    alpha_code: str


@dataclass(frozen=True)
class AccountFixture:
    name: str
    # Resolved to the generated currencies.id after base seeding.
    currency_name: str
    balance: int


@dataclass(frozen=True)
class SeedCatalog:
    currencies: tuple[CurrencySeed, ...]
    accounts: tuple[AccountFixture, ...] = ()


CURRENCIES: tuple[CurrencySeed, ...] = (
    CurrencySeed(name="Zloty", alpha_code="PLN"),
    CurrencySeed(name="Ruble", alpha_code="RUB"),
    CurrencySeed(name="Dollar", alpha_code="USD"),
    CurrencySeed(name="Euro", alpha_code="EUR"),
)

ACCOUNT_FIXTURES: tuple[AccountFixture, ...] = (
    AccountFixture(name="Polish wallet", currency_name="Zloty", balance=3000),
    AccountFixture(name="Russian wallet", currency_name="Ruble", balance=700000),
)


DEFAULT_CATALOG = SeedCatalog(currencies=CURRENCIES, accounts=ACCOUNT_FIXTURES)
