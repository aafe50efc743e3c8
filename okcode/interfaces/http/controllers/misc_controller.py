# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from okcode.infrastructure.db import Database
from okcode.infrastructure.health import check_storage
from okcode.shared.errors import StoreUnavailableError


class MiscController:
    def __init__(self, *, database: Database | None) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            status["storage"] = check_storage(self._database)
        except StoreUnavailableError:
            status["ok"] = False
            status["storage"] = "unavailable"
            return jsonify(status), 503
        return jsonify(status), 200
