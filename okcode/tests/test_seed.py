from __future__ import annotations

import pytest

from okcode.application.services.password_hashing import ScryptPasswordHasher
from okcode.infrastructure.repositories.users import InMemoryUserRepository
from okcode.infrastructure.seed import DEMO_ACCOUNTS, SeedError, seed_demo_users
from okcode.shared.config import AppConfig
from okcode.tests.support import make_config


def test_seeds_every_demo_account_once(fast_hasher: ScryptPasswordHasher) -> None:
    users = InMemoryUserRepository()
    config = make_config()

    created = seed_demo_users(users, fast_hasher, config, "demo-password")
    again = seed_demo_users(users, fast_hasher, config, "demo-password")

    assert created == [account["username"] for account in DEMO_ACCOUNTS]
    assert again == []
    john = users.find_by_username("john_doe")
    assert john is not None
    assert john.name == "John Doe"
    assert fast_hasher.verify("demo-password", john.password_hash)


def test_seeded_passwords_get_distinct_salts(fast_hasher: ScryptPasswordHasher) -> None:
    users = InMemoryUserRepository()

    seed_demo_users(users, fast_hasher, make_config(), "demo-password")

    hashes = {users.find_by_username(a["username"]).password_hash for a in DEMO_ACCOUNTS}
    assert len(hashes) == len(DEMO_ACCOUNTS)


def test_seeding_is_refused_in_production(fast_hasher: ScryptPasswordHasher) -> None:
    config = AppConfig(APP_ENV="production", SECRET_KEY="a-strong-random-value-0123456789")

    with pytest.raises(SeedError):
        seed_demo_users(InMemoryUserRepository(), fast_hasher, config, "demo-password")


def test_seeding_requires_a_password(fast_hasher: ScryptPasswordHasher) -> None:
    with pytest.raises(SeedError):
        seed_demo_users(InMemoryUserRepository(), fast_hasher, make_config(), "")
