"""Core constants: Firestore wire literals shared across layers."""

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_DATABASE_ID = "(default)"

# Pseudo field path addressing the document ID in filters and ordering.
DOCUMENT_ID_FIELD_PATH = "__name__"

# Separator between the database prefix and the document path in resource names.
DOCUMENTS_SEGMENT = "/documents/"

# integerValue is a signed 64-bit integer on the wire.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
