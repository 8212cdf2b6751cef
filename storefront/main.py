# storefront/main.py
import os

import uvicorn

from storefront.api import create_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    logger.info(f"Starting storefront dev backend on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
