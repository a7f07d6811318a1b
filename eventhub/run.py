"""Entry point: ``python -m eventhub.run`` or the ``eventhub`` script."""
import logging

import uvicorn

from eventhub.core.config import get_host, get_log_level, get_port
from eventhub.main import app

logger = logging.getLogger(__name__)


def main() -> None:
    host = get_host()
    port = get_port()
    logger.info("EventHub API running on http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=get_log_level().lower())


if __name__ == "__main__":
    main()
