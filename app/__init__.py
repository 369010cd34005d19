# /app/__init__.py
import os
import logging
from pathlib import Path
from flask import Flask
from dotenv import load_dotenv
from config import ProductionConfig
from services.config_bridge import get_cfg, where_cfg
from services.waste.commands import lookup_command
from services.waste.parse import load_rule_store
from services.waste.policy import build_policy
from app.routes import main_routes_bp


load_dotenv()


def init_sentry():
    """Initialize Sentry error tracking if SENTRY_DSN is configured."""
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration

    environment = os.getenv("FLASK_ENV") or os.getenv("ENV") or "development"

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            integrations=[
                FlaskIntegration(),
                LoggingIntegration(
                    level=logging.INFO,       # Capture info and above as breadcrumbs
                    event_level=logging.ERROR  # Send errors and above as events
                ),
            ],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
            # Public lookup page, no user data worth sending
            send_default_pii=False,
            attach_stacktrace=True,
            debug=os.getenv("SENTRY_DEBUG", "0") == "1",
        )
        logging.info(f"Sentry initialized for environment: {environment}")
    except Exception as e:
        logging.error(f"Failed to initialize Sentry: {e}")


def create_app(config_name: str = "", overrides: dict | None = None):
    # Initialize Sentry before creating app to catch initialization errors
    init_sentry()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(ProductionConfig)

    # Secret
    app.secret_key = os.getenv("FLASK_SECRET", os.urandom(24))

    if config_name:
        app.config.from_object(f"config.{config_name}Config")

    # Explicit overrides (tests, embedding)
    if overrides:
        app.config.update(overrides)

    # Logging (basic)
    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # prevent duplicate handlers in some reload scenarios
    )

    # Merge JSON config (section "waste")
    waste_cfg = get_cfg() or {}
    app.config["waste"] = waste_cfg
    logging.debug("waste config: %s", where_cfg())

    project_root = Path(__file__).resolve().parent.parent
    data_path = Path(app.config["WASTE_DATA_PATH"])
    if not data_path.is_absolute():
        data_path = (project_root / data_path).resolve()
    app.config["WASTE_DATA_PATH"] = str(data_path)

    # The ruleset is immutable; load once, share across requests.
    app.extensions["rule_store"] = load_rule_store(data_path)
    app.extensions["resolver_policy"] = build_policy(waste_cfg)

    # Blueprints
    app.register_blueprint(main_routes_bp)

    # CLI
    app.cli.add_command(lookup_command)  # type: ignore

    return app
