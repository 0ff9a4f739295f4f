#!/usr/bin/env python3
"""Start script that honours the PORT environment variable set by the host."""

import os
import sys
import subprocess

# Get PORT from environment, default to 8000
port = os.environ.get("PORT", "8000")

try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
    port_int = 8000

# Put the repository root on PYTHONPATH so `src.b2b_portal` resolves
root_path = os.path.abspath(os.path.dirname(__file__))
pythonpath = os.environ.get("PYTHONPATH", "")
os.environ["PYTHONPATH"] = f"{root_path}:{pythonpath}" if pythonpath else root_path
sys.path.insert(0, root_path)

cmd = [
    sys.executable,
    "-m",
    "uvicorn",
    "src.b2b_portal.main:app",
    "--host",
    "0.0.0.0",
    "--port",
    str(port_int),
    "--proxy-headers",
    "--forwarded-allow-ips", "*",
]

print(f"Starting server on port {port_int}...", file=sys.stderr)
print(f"PYTHONPATH={os.environ['PYTHONPATH']}", file=sys.stderr)

# Check the application imports before handing over to uvicorn
try:
    import src.b2b_portal.main  # noqa: F401
    print("Successfully imported src.b2b_portal.main", file=sys.stderr)
except Exception as e:
    print(f"Failed to import src.b2b_portal.main ({type(e).__name__}): {e}", file=sys.stderr)
    import traceback
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)

try:
    result = subprocess.call(cmd)
    if result != 0:
        print(f"Uvicorn exited with code {result}", file=sys.stderr)
    sys.exit(result)
except KeyboardInterrupt:
    print("Server interrupted by user", file=sys.stderr)
    sys.exit(0)
