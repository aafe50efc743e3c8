# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Demo account seeding for local development."""

from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime

from okcode.domain.users.entities import User
from okcode.domain.users.exceptions import DuplicateUsernameError
from okcode.domain.users.repositories import PasswordHasher, UserRepository
from okcode.shared.config import AppConfig, load_config
from okcode.shared.logging import logger, setup_logging

DEMO_ACCOUNTS: tuple[dict[str, str], ...] = (
    {
        "username": "john_doe",
        "name": "John Doe",
        "bio": "Software developer and photography enthusiast",
        "website": "https://johndoe.dev",
        "profile_image": "https://randomuser.me/api/portraits/men/32.jpg",
    },
    {
        "username": "jane_smith",
        "name": "Jane Smith",
        "bio": "Travel blogger and content creator | Exploring the world one photo at a time",
        "website": "https://janesmith.travel",
        "profile_image": "https://randomuser.me/api/portraits/women/68.jpg",
    },
    {
        "username": "alex_tech",
        "name": "Alex Johnson",
        "bio": "Tech lover, gamer, and coffee addict",
        "website": "https://alexjohnson.tech",
        "profile_image": "https://randomuser.me/api/portraits/men/75.jpg",
    },
    {
        "username": "sarah_designs",
        "name": "Sarah Williams",
        "bio": "UI/UX Designer | Creating beautiful experiences",
        "website": "https://sarahdesigns.co",
        "profile_image": "https://randomuser.me/api/portraits/women/65.jpg",
    },
    {
        "username": "admin",
        "name": "Admin User",
        "bio": "Site administrator",
        "website": "https://okcode.app",
        "profile_image": "https://randomuser.me/api/portraits/men/36.jpg",
    },
)


class SeedError(Exception):
    pass


def seed_demo_users(
    users: UserRepository,
    password_hasher: PasswordHasher,
    config: AppConfig,
    password: str,
) -> list[str]:
    """Create the demo accounts that do not exist yet; return the created usernames."""
    if config.is_production():
        raise SeedError("refusing to seed demo accounts in production")
    if not password:
        raise SeedError("a demo password is required")

    created: list[str] = []
    for account in DEMO_ACCOUNTS:
        if users.find_by_username(account["username"]) is not None:
            logger.info(f"seed: '{account['username']}' already exists, skipping")
            continue
        user = User(
            id=0,
            password_hash=password_hasher.hash(password),
            created_at=datetime.now(UTC),
            **account,
        )
        try:
            users.add(user)
        except DuplicateUsernameError:
            logger.info(f"seed: '{account['username']}' created concurrently, skipping")
            continue
        created.append(account["username"])

    logger.info(f"seed: created {len(created)} demo account(s)")
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo accounts (development only)")
    parser.add_argument(
        "--password",
        type=str,
        default=None,
        help="Password for every seeded account (defaults to SEED_DEMO_PASSWORD)",
    )
    args = parser.parse_args()

    from okcode.container import Container

    config = load_config()
    setup_logging(config.log_level, config.log_file)
    password = args.password or config.seed_demo_password
    if not password:
        print("\n❌ SEED ERROR: pass --password or set SEED_DEMO_PASSWORD\n", file=sys.stderr)
        sys.exit(1)

    container = Container(config)
    try:
        container.init_storage()
        created = seed_demo_users(
            container.user_repository, container.password_hasher, config, password
        )
    except SeedError as exc:
        print(f"\n❌ SEED ERROR: {exc}\n", file=sys.stderr)
        sys.exit(1)
    finally:
        container.close()
    print(f"Seeded {len(created)} account(s): {', '.join(created) or '-'}")


if __name__ == "__main__":
    main()
