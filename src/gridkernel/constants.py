"""
Wire-level constants for gridkernel.

Header names, metadata keys and limits shared by the transport mappers,
binders and the HTTP middleware. These names are stable contracts for
other nodes; change them only together with every producer and consumer.
"""

# HTTP header names
CORRELATION_ID_HEADER = "X-Correlation-Id"
CAUSATION_ID_HEADER = "X-Causation-Id"
TENANT_ID_HEADER = "X-Tenant-Id"
PROJECT_ID_HEADER = "X-Project-Id"
NODE_ID_HEADER = "X-Node-Id"
STUDIO_ID_HEADER = "X-Studio-Id"
ENVIRONMENT_HEADER = "X-Environment"
TRACEPARENT_HEADER = "traceparent"
BAGGAGE_HEADER = "baggage"
BAGGAGE_HEADER_PREFIX = "X-Baggage-"

# Defensive cap applied to every value read from an inbound header
DEFAULT_MAX_HEADER_LENGTH = 256
MIN_MAX_HEADER_LENGTH = 16
MAX_MAX_HEADER_LENGTH = 8192

# Messaging metadata keys, in lookup priority order
CORRELATION_ID_KEYS = ("CorrelationId", "correlation-id", "X-Correlation-Id")
CAUSATION_ID_KEYS = ("CausationId", "causation-id", "X-Causation-Id")
TENANT_ID_KEYS = ("TenantId", "tenant-id", "X-Tenant-Id")
PROJECT_ID_KEYS = ("ProjectId", "project-id", "X-Project-Id")
MESSAGE_BAGGAGE_PREFIX = "baggage-"

# Outbound message/job property names
NODE_ID_KEY = "NodeId"
STUDIO_ID_KEY = "StudioId"
ENVIRONMENT_KEY = "Environment"
CREATED_AT_KEY = "CreatedAtUtc"

# Job baggage keys
JOB_TYPE_KEY = "job-type"
JOB_ID_KEY = "job-id"
JOB_NAME_KEY = "job-name"
JOB_PARAM_PREFIX = "job-param-"
SCHEDULED_TIME_KEY = "scheduled-time"
SCHEDULED_JOB_TYPE = "scheduled"

# Operation names used at framework boundaries
HTTP_REQUEST_OPERATION = "HttpRequest"

# Baggage key fragments withheld from serialized snapshots by default
SENSITIVE_BAGGAGE_FRAGMENTS = ("secret", "password", "token", "key", "credential")

# Identity limits
MIN_NODE_ID_LENGTH = 3
MAX_NODE_ID_LENGTH = 64
