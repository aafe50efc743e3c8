"""Application dependency container."""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from okcode.application.interfaces import IdentityIssuer
from okcode.application.services.credentials import CredentialVerifier
from okcode.application.services.password_hashing import ScryptPasswordHasher
from okcode.application.services.session_identity import SessionIdentityIssuer
from okcode.application.services.token_identity import TokenIdentityIssuer
from okcode.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from okcode.application.use_cases.users.login_user import LoginUserUseCase
from okcode.application.use_cases.users.logout_user import LogoutUserUseCase
from okcode.application.use_cases.users.register_user import RegisterUserUseCase
from okcode.domain.users.repositories import RevokedTokenStore, SessionStore, UserRepository
from okcode.infrastructure.db import Database
from okcode.infrastructure.maintenance import ExpiredEntryPruner
from okcode.infrastructure.repositories.users import (
    InMemoryRevokedTokenStore,
    InMemorySessionStore,
    InMemoryUserRepository,
    SqlAlchemyRevokedTokenStore,
    SqlAlchemySessionStore,
    SqlAlchemyUserRepository,
)
from okcode.interfaces.http.controllers.auth_controller import AuthController
from okcode.interfaces.http.controllers.misc_controller import MiscController
from okcode.shared.config import AppConfig
from okcode.shared.logging import logger


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @property
    def uses_database(self) -> bool:
        return self.config.storage.backend == "sql"

    @cached_property
    def database(self) -> Database | None:
        if not self.uses_database:
            return None
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> ScryptPasswordHasher:
        return ScryptPasswordHasher.from_config(self.config.hashing)

    @cached_property
    def user_repository(self) -> UserRepository:
        if self.database is None:
            return InMemoryUserRepository()
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def session_store(self) -> SessionStore:
        if self.database is None:
            return InMemorySessionStore()
        return SqlAlchemySessionStore(self.database)

    @cached_property
    def revoked_token_store(self) -> RevokedTokenStore | None:
        if self.config.auth.token_revocation != "denylist":
            return None
        if self.database is None:
            return InMemoryRevokedTokenStore()
        return SqlAlchemyRevokedTokenStore(self.database)

    @cached_property
    def credential_verifier(self) -> CredentialVerifier:
        return CredentialVerifier(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def identity_issuer(self) -> IdentityIssuer:
        auth = self.config.auth
        if auth.mode == "token":
            return TokenIdentityIssuer(
                secret=self.config.token_secret,
                ttl=timedelta(seconds=auth.token_ttl),
                revoked=self.revoked_token_store,
            )
        return SessionIdentityIssuer(
            store=self.session_store, ttl=timedelta(seconds=auth.session_ttl)
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            issuer=self.identity_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(verifier=self.credential_verifier, issuer=self.identity_issuer)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(issuer=self.identity_issuer)

    @cached_property
    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository, issuer=self.identity_issuer)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            credential_kind=self.identity_issuer.kind,
            auth_config=self.config.auth,
            security=self.config.security,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    @cached_property
    def pruner(self) -> ExpiredEntryPruner:
        stores: list = []
        if self.config.auth.mode == "session":
            stores.append(self.session_store)
        elif self.revoked_token_store is not None:
            stores.append(self.revoked_token_store)
        return ExpiredEntryPruner(stores, interval=self.config.auth.purge_interval)

    def init_storage(self) -> None:
        if self.database is not None:
            self.database.create_all()
        logger.info(
            f"container: storage={self.config.storage.backend} auth_mode={self.config.auth.mode}"
        )

    def start_background_tasks(self) -> None:
        if self.config.auth.purge_interval > 0:
            self.pruner.start()

    def close(self) -> None:
        pruner = self.__dict__.get("pruner")
        if pruner is not None:
            pruner.stop()
        # Only dispose an engine that was actually created.
        database = self.__dict__.get("database")
        if database is not None:
            database.dispose()
