#!/usr/bin/env python3
"""
Development server startup script for the VMTB core API.
Checks the Supabase configuration and starts uvicorn.
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

from vmtb.utils.config import settings


def check_environment():
    """Check if environment is properly configured."""
    print(" Checking environment...")

    if not Path(".env").exists():
        print("[WARN] .env file not found, relying on process environment")

    if not settings.supabase_url or not settings.supabase_key:
        print("[ERROR] SUPABASE_URL and SUPABASE_KEY must be set")
        print("   Case-name checks and meeting storage need the Supabase project.")
        return False

    print("[OK] Environment check passed")
    return True


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="VMTB Core Development Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument(
        "--production", action="store_true", help="Run in production mode (no reload)"
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level.lower(),
        choices=["debug", "info", "warning", "error"],
        help="Log level",
    )
    parser.add_argument(
        "--skip-checks", action="store_true", help="Skip the environment check"
    )
    return parser.parse_args()


def main():
    """Main startup function."""
    args = parse_arguments()

    print(" VMTB Core Development Server")
    print("=" * 60)
    print(f"Mode: {'Production' if args.production else 'Development'}")
    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    print(f"Log Level: {args.log_level}")
    print("-" * 60)

    os.chdir(Path(__file__).parent)

    if not args.skip_checks and not check_environment():
        sys.exit(1)

    try:
        uvicorn.run(
            "vmtb.api.main:app",
            host=args.host,
            port=args.port,
            reload=not args.production,
            log_level=args.log_level,
        )
    except KeyboardInterrupt:
        print("\nServer stopped")


if __name__ == "__main__":
    main()
