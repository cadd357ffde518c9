# cross-origin headers shared by every chat response
# NOTE: the widget is embedded on arbitrary pages, so any origin is allowed

from types import MappingProxyType

CORS_HEADERS = MappingProxyType({
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
})
