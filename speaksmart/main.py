# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ASGI entry point.

    uvicorn speaksmart.main:app
"""

import uvicorn

from speaksmart.api.app import create_app
from speaksmart.core.config import get_settings

app = create_app()


def run() -> None:
    """Serve the API with the configured host, port and workers."""
    settings = get_settings()
    uvicorn.run(
        "speaksmart.main:app",
        host=settings.api.host,
        port=settings.api.port,
        workers=settings.api.workers,
        reload=settings.api.reload,
        log_config=None,
    )


if __name__ == "__main__":
    run()
