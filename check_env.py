#!/usr/bin/env python3
"""Helper script to check and create the .env file for Supabase configuration."""

from pathlib import Path
import os
import sys

ENV_TEMPLATE = """# Supabase Configuration (required)
# Get these from: https://supabase.com/dashboard -> Your Project -> Settings -> API
B2B_SUPABASE_URL=https://your-project-id.supabase.co
B2B_SUPABASE_KEY=your-service-role-key-here

# API Configuration
B2B_API_PREFIX=/api
# B2B_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list

# Pricing and approval defaults
# B2B_TAX_RATE=0.10
# B2B_DEFAULT_CREDIT_LIMIT=100000
# B2B_DEFAULT_PAYMENT_TERMS=30
# B2B_PAYMENT_TERMS_OPTIONS=15,30,45,60,90
"""


def _mask(value: str) -> str:
    if len(value) > 20:
        return value[:20] + "..." + value[-10:]
    return value


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Supabase Environment Variables Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f".env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Please edit .env and add your Supabase credentials.")
        return

    print(f"Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        if line.startswith("B2B_SUPABASE_KEY=") and "=" in line:
            name, value = line.split("=", 1)
            print(f"{name}={_mask(value.strip())}")
        else:
            print(line)
    print("-" * 60)
    print()

    for name in ("B2B_SUPABASE_URL", "B2B_SUPABASE_KEY"):
        value = os.getenv(name)
        if value:
            print(f"{name} (from environment): {_mask(value)}")
        else:
            print(f"{name} not found in environment")
    print()

    print("Testing config loading...")
    try:
        sys.path.insert(0, str(project_root))
        from src.b2b_portal.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return

    if settings.supabase_url and settings.supabase_key:
        print("SUCCESS: Supabase is configured!")
    else:
        print("ERROR: Supabase is NOT configured")
        print("1. Make sure .env file exists in project root")
        print("2. Make sure variables start with B2B_ prefix")
        print("3. Restart backend after editing .env")


if __name__ == "__main__":
    main()
