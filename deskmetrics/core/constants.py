"""Application constants."""

# A case still open this many hours after creation is past its SLA.
SLA_THRESHOLD_HOURS = 48

# Case listing
DEFAULT_CASE_PAGE_SIZE = 50
EXPORT_CASE_PAGE_SIZE = 10_000

# Conversation listing
DEFAULT_CONVERSATION_PAGE_SIZE = 20
MAX_CONVERSATION_PAGE_SIZE = 100
CONVERSATION_MESSAGE_CAP = 100
LAST_MESSAGE_PREVIEW_CHARS = 100

# Satisfaction
HIGHLIGHTED_COMMENTS_LIMIT = 10

# Reports
TOP_CATEGORIES_LIMIT = 10
UNKNOWN_SITE_NAME = "No site"
UNKNOWN_ASSIGNEE_NAME = "Unassigned"

# Placeholders until first-response tracking exists. Not measured values.
PLACEHOLDER_FIRST_RESPONSE_MINUTES = 15
PLACEHOLDER_FIRST_CONTACT_PERCENT = 15
