#!/usr/bin/env python
"""Serve the taskgate API with uvicorn (HOST, PORT and RELOAD come from the environment)."""
import os
import sys
from pathlib import Path

project_dir = Path(__file__).resolve().parent

# Make taskgate importable without installing it
sys.path.insert(0, str(project_dir))

# Relative SQLite URLs such as the default ./taskgate.db resolve against the project root
os.chdir(project_dir)

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskgate.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        reload=os.getenv("RELOAD", "false").lower() in ("1", "true", "yes"),
    )
