# Environment variables
ENV_BASE_URL = "DECLAREST_BASE_URL"
ENV_ACCESS_TOKEN = "DECLAREST_ACCESS_TOKEN"
ENV_TIMEOUT = "DECLAREST_TIMEOUT"
ENV_DISABLE_SSL_VERIFY = "DECLAREST_DISABLE_SSL_VERIFY"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Content types
CONTENT_TYPE_JSON = "application/json"

# Attribute under which a function's pending method descriptor is stored
DESCRIPTOR_ATTRIBUTE = "__declarest_descriptor__"
