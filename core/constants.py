"""
Shared constants for SDD: scan modes, record version tags, selectors and output strings.
Use these instead of hardcoding tags or messages across modules.
"""
# Worker pool
DEFAULT_WORKERS = 10

# DNS: per-try timeout, total lifetime per query, extra attempts on timeout / no nameservers
DNS_TIMEOUT = 5.0
DNS_LIFETIME = 10.0
DNS_RETRIES = 0

# Modes (exact, case-sensitive)
MODE_SPF = "spf"
MODE_DKIM = "dkim"
MODE_DMARC = "dmarc"
MODE_ALL = "all"
VALID_MODES = (MODE_SPF, MODE_DKIM, MODE_DMARC, MODE_ALL)

# Record types, in the order "all" runs them
RECORD_SPF = "SPF"
RECORD_DKIM = "DKIM"
RECORD_DMARC = "DMARC"

# Version tags (compared case-insensitively as a prefix)
SPF_TAG = "v=spf1"
DKIM_TAG = "v=dkim1"
DMARC_TAG = "v=dmarc1"

DMARC_LABEL = "_dmarc"
DKIM_LABEL = "_domainkey"

# Built-in DKIM selectors; a selector file only appends to these
DEFAULT_SELECTORS = (
    "default", "selector1", "selector2", "mail", "smtp",
    "google", "amazonses", "mandrill", "sendgrid", "mailjet",
)

SEPARATOR = "-------------------------------"
USAGE_HINT = "Please provide an endpoint with -u, a list with -l, or pipe domains into stdin."
INVALID_MODE_MESSAGE = "Invalid mode. Please use: spf, dkim, dmarc, all"
