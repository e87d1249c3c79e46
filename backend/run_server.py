#!/usr/bin/env python3
"""Production server runner for the Mingle backend.

Several workers share one database: the unique pair constraint, not the
process, keeps relationship creation consistent across them.
"""

import os

import uvicorn

if __name__ == "__main__":  # pragma: no cover
    uvicorn.run(
        "app:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3626")),
        reload=False,
        workers=int(os.getenv("WORKERS", "2")),
        log_level="info",
        proxy_headers=True,
    )
