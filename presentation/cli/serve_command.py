from __future__ import annotations

import uvicorn

from config import settings
from core.logging.logger import get_logger


class ServeCommand:
    """Run the HTTP API with uvicorn."""

    def __init__(self, host: str | None = None, port: int | None = None) -> None:
        self.host = host or settings.HOST
        self.port = port or settings.PORT
        self._log = get_logger(__name__, service="serve-cli")

    def run(self) -> int:
        from presentation.web import create_app

        self._log.info(lambda: f"Server running on http://{self.host}:{self.port}")
        # log_config=None keeps the handlers installed by bootstrap_logging
        uvicorn.run(create_app(), host=self.host, port=self.port, log_config=None)
        return 0
