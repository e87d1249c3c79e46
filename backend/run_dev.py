#!/usr/bin/env python3
"""Development server runner for the Mingle backend, with reload"""

import os

import setproctitle
import uvicorn

setproctitle.setproctitle("Mingle DEV API")
if __name__ == "__main__":  # pragma: no cover
    uvicorn.run(
        "app:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="debug",
    )
