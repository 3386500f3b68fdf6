#!/usr/bin/env python3
"""
Run the backend locally.

Usage:
    python backend/run_local.py

This will start the API server at http://localhost:8000
- API Docs: http://localhost:8000/docs
- Health Check: http://localhost:8000/health
"""

import os
import sys
from pathlib import Path

# Make the docchat package importable without installing it
backend_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(backend_dir))

os.environ.setdefault("DEBUG", "true")


def main():
    print("=" * 60)
    print("  DocChat - Local Development Server")
    print("=" * 60)
    print()
    print("  API URL:      http://localhost:8000")
    print("  API Docs:     http://localhost:8000/docs")
    print("  Health Check: http://localhost:8000/health")
    print()
    print("  Press Ctrl+C to stop")
    print("=" * 60)
    print()

    import uvicorn
    uvicorn.run(
        "docchat.main:app",
        app_dir=str(backend_dir),
        host="0.0.0.0",
        port=8000,
        reload=True,  # Auto-reload on code changes
        log_level="info",
    )


if __name__ == "__main__":
    main()
