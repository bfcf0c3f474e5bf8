"""Development server: ``python -m identity_admin``."""
import logging
import os
import sys

from identity_admin.config import ConfigurationError, load_settings
from identity_admin.flask_app import create_app


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    try:
        cfg = load_settings()
    except ConfigurationError as e:
        logging.getLogger("identity_admin").critical("Failed to load configuration: %s", e)
        return 1

    app = create_app(cfg)
    logging.getLogger("identity_admin").info("Starting server on port %d", cfg.port)
    app.run(host="0.0.0.0", port=cfg.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
