"""
Reporting Configuration Example

Copy this file to 'reporting_config.py' and fill in your credentials.
"""

# Collector credentials (from the app's dashboard)
DEV_KEY = 'your-dev-key-here'
APP_ID = 'your-app-id-here'

# Send to sandbox-events instead of events (integration testing)
IS_SANDBOX = False

# Product name in the User-Agent header
CLIENT_NAME = 'UnityGamesLauncher'

# Seconds before a request is abandoned
REQUEST_TIMEOUT = 15

# Directory whose creation time counts as the install time (None: launcher directory)
INSTALL_PATH = None

# Override host detection (None: detect from platform)
DEVICE_MODEL = None
OS_VERSION = None

# Write a debug log to ~/Desktop/c2s_events_debug.log
REPORTING_DEBUG = False
