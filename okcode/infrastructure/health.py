# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from okcode.infrastructure.db import Database


def check_storage(database: Database | None) -> str:
    """``memory`` when no database is configured, ``ok`` when the database answers."""
    if database is None:
        return "memory"
    database.ping()
    return "ok"


__all__ = ["check_storage"]
