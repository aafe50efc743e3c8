from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask

from okcode.application.services.password_hashing import ScryptPasswordHasher
from okcode.tests.support import FAST_SCRYPT_N, FakeClock, build_app, make_config


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def fast_hasher() -> ScryptPasswordHasher:
    return ScryptPasswordHasher(n=FAST_SCRYPT_N)


@pytest.fixture()
def session_app() -> Iterator[Flask]:
    yield from build_app(make_config(auth_mode="session"))


@pytest.fixture()
def token_app() -> Iterator[Flask]:
    yield from build_app(make_config(auth_mode="token"))


@pytest.fixture()
def denylist_app() -> Iterator[Flask]:
    yield from build_app(make_config(auth_mode="token", revocation="denylist"))


@pytest.fixture()
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'okcode-test.db'}"


@pytest.fixture()
def sqlite_session_app(sqlite_url: str) -> Iterator[Flask]:
    yield from build_app(make_config(auth_mode="session", storage="sql", database_url=sqlite_url))
