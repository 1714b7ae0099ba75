#!/usr/bin/env python3
"""
Simple launcher script for the Napcast API.
Run this from the root directory to start the application.
"""

import uvicorn

if __name__ == "__main__":
    # Use import string format for reload to work properly
    uvicorn.run(
        "napcast.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["napcast"],
        log_level="info"
    )
