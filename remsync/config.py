"""
Configuration constants for remsync
"""
import os
from typing import Optional

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS  ── overridden by apply_profile()
# ══════════════════════════════════════════════════════════════════════════════

DEFAULT_PORT = 22

# Seconds; used when the caller's context carries no deadline
CONNECT_TIMEOUT = 30.0
BANNER_TIMEOUT = 30.0
AUTH_TIMEOUT = 30.0

# Socket timeout for the scp channel
SCP_SOCKET_TIMEOUT = 30.0

# How often a blocked remote command re-checks the cancellation context
POLL_INTERVAL = 0.05

# mtime tolerance (seconds) — remote listing is truncated to whole seconds
MTIME_TOLERANCE = 1.0

# Mode for local directories created by download(mkdir=True)
LOCAL_DIR_MODE = 0o750


# ══════════════════════════════════════════════════════════════════════════════
#  ENVIRONMENT  ── CLI defaults
# ══════════════════════════════════════════════════════════════════════════════

def env_profile() -> dict:
    """Read REMSYNC_USER / REMSYNC_KEY into a profile dict."""
    profile: dict = {}
    for key, var in (("user", "REMSYNC_USER"), ("ssh_key", "REMSYNC_KEY")):
        value: Optional[str] = os.environ.get(var)
        if value:
            profile[key] = value
    return profile


# ══════════════════════════════════════════════════════════════════════════════
#  APPLY PROFILE  ── mutates module-level variables
# ══════════════════════════════════════════════════════════════════════════════

def apply_profile(profile: dict):
    """
    Apply a profile dict to the module-level config variables.
    Supports keys: port, connect_timeout, socket_timeout.
    The mtime tolerance is fixed and not part of a profile.
    """
    global DEFAULT_PORT, CONNECT_TIMEOUT, SCP_SOCKET_TIMEOUT

    if "port" in profile:
        DEFAULT_PORT = int(profile["port"])
    if "connect_timeout" in profile:
        CONNECT_TIMEOUT = float(profile["connect_timeout"])
    if "socket_timeout" in profile:
        SCP_SOCKET_TIMEOUT = float(profile["socket_timeout"])
