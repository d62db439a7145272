from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "claudesub_debug.log")

# Credential storage
# auth.json lives inside this directory and is written with 0600 permissions
DATA_DIRECTORY = config.get("CLAUDESUB_DATA_DIRECTORY", "~/.claudesub")
AUTH_FILE_NAME = "auth.json"

# Token lifecycle
# Tokens are refreshed this long before their stated expiry so a request
# never carries a token that lapses mid-flight
REFRESH_BUFFER_MS = config.get("REFRESH_BUFFER_MS", 5 * 60 * 1000)
# Serialize concurrent refreshes behind one lock per credential document
SINGLE_FLIGHT_REFRESH = config.get("SINGLE_FLIGHT_REFRESH", True)
# Total timeout for a token endpoint round trip
TOKEN_REQUEST_TIMEOUT = config.get("TOKEN_REQUEST_TIMEOUT", 30.0)

# OAuth configuration (hardcoded - not user configurable)
# Max/Pro OAuth: claude.ai for authorization, console.anthropic.com for token exchange
AUTH_BASE_AUTHORIZE = "https://claude.ai"
AUTH_BASE_TOKEN = "https://console.anthropic.com"
AUTHORIZE_URL = f"{AUTH_BASE_AUTHORIZE}/oauth/authorize"
TOKEN_URL = f"{AUTH_BASE_TOKEN}/v1/oauth/token"
CLIENT_ID = "9d1c250a-e61b-44d9-88ed-5944d1962f5e"
REDIRECT_URI = "https://console.anthropic.com/oauth/code/callback"
SCOPES = "org:create_api_key user:profile user:inference"

# Anthropic API configuration
API_BASE_URL = "https://api.anthropic.com/v1"

# Provider identity of the subscription credential slot in auth.json
CLAUDESUB_PROVIDER_ID = "claudesub"
