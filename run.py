#!/usr/bin/env python3
"""
City Explorer - Run Script
This script starts the FastAPI server
"""

import sys
import subprocess
from pathlib import Path

from city_explorer.core.config import Settings, settings

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def has_api_key(config: Settings = settings) -> bool:
    """Same source the app reads: environment, .env or ../.env"""
    return bool(config.GOOGLE_MAPS_API_KEY.strip())

def main():
    print_colored("🚀 Starting City Explorer...", "blue")

    check_file_exists("city_explorer/main.py", "city_explorer/main.py not found. Please run this script from the project root.")

    if not has_api_key():
        print_colored("⚠️  Warning: GOOGLE_MAPS_API_KEY is not configured.", "yellow")
        print("Please create a .env file with the following variables:")
        print("  GOOGLE_MAPS_API_KEY=your_api_key_here")
        print("  SEARCH_RADIUS=30000")
        print("  LOGGER=20")
        sys.exit(1)

    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 API will be available at: http://localhost:8000")
    print("📍 API Health check: http://localhost:8000/health")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "city_explorer.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
