# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import importlib
from typing import Any, Protocol, cast

from flask import Flask

from okcode.container import Container
from okcode.infrastructure.seed import seed_demo_users
from okcode.interfaces.http.middleware.identity import configure_identity
from okcode.shared.config import AppConfig, load_config
from okcode.shared.errors import register_error_handler
from okcode.shared.logging import logger, setup_logging
from okcode.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def _seed_if_requested(config: AppConfig, container: Container) -> None:
    if not config.seed_demo_users:
        return
    if config.is_production():
        logger.warning("seed: SEED_DEMO_USERS ignored in production")
        return
    if not config.seed_demo_password:
        logger.warning("seed: SEED_DEMO_USERS set without SEED_DEMO_PASSWORD, skipping")
        return
    seed_demo_users(
        container.user_repository,
        container.password_hasher,
        config,
        config.seed_demo_password,
    )


def create_app(config: AppConfig | None = None, container: Container | None = None) -> Flask:
    config = config or load_config()
    setup_logging(config.log_level, config.log_file)

    container = container or Container(config)
    container.init_storage()
    _seed_if_requested(config, container)
    container.start_background_tasks()

    app = Flask(__name__)
    register_error_handler(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_identity(
        app,
        current_user=container.get_current_user_use_case,
        kind=container.identity_issuer.kind,
        cookie_name=config.auth.session_cookie_name,
        debug_mode=config.debug_logging,
    )

    app.config.update(SECRET_KEY=config.secret_key)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=(), magnetometer=(), gyroscope=()",
        )

        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    app.extensions["okcode"] = container
    atexit.register(container.close)

    logger.info(f"Flask app initialized (auth_mode={config.auth.mode})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
