import logging

import uvicorn

from mealgrid.api.api_run import app
from mealgrid.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL

logger = logging.getLogger("mealgrid_app")


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Meal grid API on http://%s:%d (Press CTRL+C to quit)", APP_HOST, APP_PORT)
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())
