# backend/archengine/ir/identifiers.py
"""
Closed identifier sets used across the engine.

Every axis, capability, service and pattern the engine can talk about is
listed here. Lookups go through these enums so a typo fails at load time
instead of turning into a silent ``unknown``.
"""

from enum import Enum
from typing import Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


class CapabilityValue(str, Enum):
    """Tri-state capability value"""
    REQUIRED = "required"
    NONE = "none"
    UNKNOWN = "unknown"


class AxisId(str, Enum):
    """Raw decision axes understood by the capability mapper"""
    STATIC_CONTENT = "static_content"
    CDN_ENABLED = "cdn_enabled"
    API_BACKEND = "api_backend"
    STATEFUL = "stateful"
    DATA_PERSISTENCE = "data_persistence"
    PRIMARY_DATA_MODEL = "primary_data_model"
    DOCUMENT_STORAGE = "document_storage"
    FILE_STORAGE = "file_storage"
    USER_AUTHENTICATION = "user_authentication"
    MULTI_USER_ROLES = "multi_user_roles"
    REALTIME = "realtime"
    REALTIME_UPDATES = "realtime_updates"
    SCHEDULED_JOBS = "scheduled_jobs"
    MESSAGING_QUEUE = "messaging_queue"
    EVENT_DRIVEN = "event_driven"
    SEARCH = "search"
    PAYMENTS = "payments"
    OBSERVABILITY_LEVEL = "observability_level"
    DEVOPS_AUTOMATION = "devops_automation"
    REGULATORY_COMPLIANCE = "regulatory_compliance"
    DATA_SENSITIVITY = "data_sensitivity"
    PRIVATE_NETWORKING = "private_networking"
    ML = "ml"
    DOMAIN_ML_HEAVY = "domain_ml_heavy"
    DOMAIN_IOT = "domain_iot"
    DOMAIN_ANALYTICS = "domain_analytics"
    DOMAIN_FINTECH = "domain_fintech"
    DOMAIN_HEALTHCARE = "domain_healthcare"
    WORKFLOW_ORCHESTRATION = "workflow_orchestration"
    CICD = "cicd"
    SIEM = "siem"
    CACHING_REQUIRED = "caching_required"
    PERFORMANCE_SENSITIVITY = "performance_sensitivity"
    NOTIFICATION_CHANNELS = "notification_channels"
    AVAILABILITY_TARGET = "availability_target"
    MULTI_REGION = "multi_region"
    LATENCY_SENSITIVITY = "latency_sensitivity"
    ESTIMATED_MAU = "estimated_mau"
    COMPUTE_PREFERENCE = "compute_preference"
    MOBILE_CLIENTS = "mobile_clients"


class CapabilityId(str, Enum):
    """Catalog-fixed capabilities"""
    STATIC_CONTENT = "static_content"
    API_BACKEND = "api_backend"
    DATA_PERSISTENCE = "data_persistence"
    DOCUMENT_STORAGE = "document_storage"
    IDENTITY_ACCESS = "identity_access"
    MULTI_USER_ROLES = "multi_user_roles"
    REALTIME = "realtime"
    SCHEDULED_JOBS = "scheduled_jobs"
    MESSAGING = "messaging"
    EVENTING = "eventing"
    SEARCH = "search"
    PAYMENTS = "payments"
    OBSERVABILITY = "observability"
    DEVOPS_AUTOMATION = "devops_automation"
    PCI_COMPLIANT = "pci_compliant"
    HIPAA_COMPLIANT = "hipaa_compliant"
    GDPR_COMPLIANT = "gdpr_compliant"
    PRIVATE_NETWORKING = "private_networking"
    DOMAIN_IOT = "domain_iot"
    DOMAIN_ML_HEAVY = "domain_ml_heavy"
    DOMAIN_ANALYTICS = "domain_analytics"
    DOMAIN_FINTECH = "domain_fintech"
    DOMAIN_HEALTHCARE = "domain_healthcare"
    WORKFLOW_ORCHESTRATION = "workflow_orchestration"
    CICD = "cicd"
    SIEM = "siem"
    CACHING = "caching"
    NOTIFICATIONS = "notifications"
    SENSITIVE_DATA = "sensitive_data"
    HIGH_AVAILABILITY = "high_availability"
    HIGH_PERFORMANCE = "high_performance"
    AUDIT_LOGGING = "audit_logging"
    KEY_MANAGEMENT = "key_management"
    CONTENT_DELIVERY = "content_delivery"
    MOBILE_CLIENTS = "mobile_clients"


class ServiceId(str, Enum):
    """Canonical, provider-agnostic infrastructure units"""
    # Compute
    COMPUTE_SERVERLESS = "computeserverless"
    COMPUTE_CONTAINER = "computecontainer"
    COMPUTE_VM = "computevm"
    COMPUTE_BATCH = "computebatch"
    # Data
    RELATIONAL_DATABASE = "relationaldatabase"
    NOSQL_DATABASE = "nosqldatabase"
    CACHE = "cache"
    OBJECT_STORAGE = "objectstorage"
    BLOCK_STORAGE = "blockstorage"
    DATA_WAREHOUSE = "datawarehouse"
    TIMESERIES_DATABASE = "timeseriesdatabase"
    VECTOR_DATABASE = "vectordatabase"
    SEARCH_ENGINE = "searchengine"
    BACKUP = "backup"
    # Network
    CDN = "cdn"
    LOAD_BALANCER = "loadbalancer"
    API_GATEWAY = "apigateway"
    DNS = "dns"
    VPC_NETWORKING = "vpcnetworking"
    PRIVATE_LINK = "privatelink"
    NAT_GATEWAY = "natgateway"
    # Messaging
    MESSAGE_QUEUE = "messagequeue"
    EVENT_BUS = "eventbus"
    EVENT_STREAM = "eventstream"
    STREAM_PROCESSOR = "streamprocessor"
    WEBSOCKET_GATEWAY = "websocketgateway"
    PUSH_NOTIFICATION = "pushnotification"
    # Security
    IDENTITY_AUTH = "identityauth"
    SECRETS_MANAGEMENT = "secretsmanagement"
    KEY_MANAGEMENT = "keymanagement"
    WAF = "waf"
    CERTIFICATE_MANAGEMENT = "certificatemanagement"
    POLICY_GOVERNANCE = "policygovernance"
    # Observability
    LOGGING = "logging"
    MONITORING = "monitoring"
    TRACING = "tracing"
    SIEM = "siem"
    AUDIT_LOGGING = "auditlogging"
    # Domain specific
    PAYMENT_GATEWAY = "paymentgateway"
    ML_INFERENCE = "mlinference"
    ML_TRAINING = "mltraining"
    FEATURE_STORE = "featurestore"
    IOT_CORE = "iotcore"
    WORKFLOW_ORCHESTRATION = "workfloworchestration"
    # DevOps
    CICD = "cicd"
    CONTAINER_REGISTRY = "containerregistry"
    ARTIFACT_REPOSITORY = "artifactrepository"


class ServiceCategory(str, Enum):
    CLIENT = "client"
    NETWORK = "network"
    CDN = "cdn"
    API = "api"
    COMPUTE = "compute"
    SECURITY = "security"
    STORAGE = "storage"
    DATABASE = "database"
    MESSAGING = "messaging"
    OBSERVABILITY = "observability"
    ML = "ml"
    PAYMENTS = "payments"
    DEVOPS = "devops"
    IOT = "iot"


class PatternId(str, Enum):
    STATIC_SITE = "STATIC_SITE"
    STATIC_SITE_WITH_AUTH = "STATIC_SITE_WITH_AUTH"
    SERVERLESS_API = "SERVERLESS_API"
    SERVERLESS_WEB_APP = "SERVERLESS_WEB_APP"
    STATEFUL_WEB_PLATFORM = "STATEFUL_WEB_PLATFORM"
    CONTAINERIZED_WEB_APP = "CONTAINERIZED_WEB_APP"
    HYBRID_PLATFORM = "HYBRID_PLATFORM"
    MOBILE_BACKEND_PLATFORM = "MOBILE_BACKEND_PLATFORM"
    DATA_PLATFORM = "DATA_PLATFORM"
    REALTIME_PLATFORM = "REALTIME_PLATFORM"
    ML_INFERENCE_PLATFORM = "ML_INFERENCE_PLATFORM"
    ML_TRAINING_PLATFORM = "ML_TRAINING_PLATFORM"
    HIGH_AVAILABILITY_PLATFORM = "HIGH_AVAILABILITY_PLATFORM"
    IOT_PLATFORM = "IOT_PLATFORM"
    FINTECH_PAYMENT_PLATFORM = "FINTECH_PAYMENT_PLATFORM"
    HEALTHCARE_PLATFORM = "HEALTHCARE_PLATFORM"
    GAMING_BACKEND = "GAMING_BACKEND"
    E_COMMERCE_BACKEND = "E_COMMERCE_BACKEND"
    EVENT_DRIVEN_PLATFORM = "EVENT_DRIVEN_PLATFORM"


class ResolutionSource(str, Enum):
    """Layer that introduced a resolution entry"""
    PATTERN_MANDATORY = "pattern_mandatory"
    DOMAIN_CONTRACT = "domain_contract"
    REQUIREMENT_RULE = "requirement_rule"
    CAPABILITY = "capability"
    PATTERN_CONTRACT = "pattern_contract"


class ServiceState(str, Enum):
    REQUIRED = "REQUIRED"
    SUGGESTED = "SUGGESTED"


def lookup(enum_cls: Type[E], raw) -> Optional[E]:
    """Return the enum member for ``raw`` (member or value), or None."""
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(raw)
    except (ValueError, TypeError):
        return None
