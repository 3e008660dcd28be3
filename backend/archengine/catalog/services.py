# backend/archengine/catalog/services.py
"""
Canonical Service Catalog

One entry per provider-agnostic infrastructure unit. ``terraform_supported``
decides whether a service may ever reach infrastructure-as-code generation;
logical-only services stay in the architecture description.
"""

from dataclasses import dataclass
from typing import Tuple

from archengine.ir.identifiers import ServiceCategory, ServiceId


@dataclass(frozen=True)
class ServiceDefinition:
    id: ServiceId
    name: str
    category: ServiceCategory
    description: str
    terraform_supported: bool = True


def _svc(service_id, name, category, description, terraform_supported=True):
    return ServiceDefinition(
        id=service_id,
        name=name,
        category=category,
        description=description,
        terraform_supported=terraform_supported,
    )


_C = ServiceCategory
_S = ServiceId

# ============================================================
# COMPUTE
# ============================================================

COMPUTE_SERVICES = (
    _svc(_S.COMPUTE_SERVERLESS, "Serverless Compute", _C.COMPUTE,
         "Event-driven functions with per-request billing"),
    _svc(_S.COMPUTE_CONTAINER, "Container Compute", _C.COMPUTE,
         "Managed container runtime for long-running services"),
    _svc(_S.COMPUTE_VM, "Virtual Machines", _C.COMPUTE,
         "General purpose virtual machines"),
    _svc(_S.COMPUTE_BATCH, "Batch Compute", _C.COMPUTE,
         "Batch and scheduled job execution"),
    _svc(_S.WORKFLOW_ORCHESTRATION, "Workflow Orchestration", _C.COMPUTE,
         "Step/state-machine orchestration of background jobs"),
)

# ============================================================
# DATA
# ============================================================

DATA_SERVICES = (
    _svc(_S.RELATIONAL_DATABASE, "Relational Database", _C.DATABASE,
         "Managed SQL database for transactional data"),
    _svc(_S.NOSQL_DATABASE, "NoSQL Database", _C.DATABASE,
         "Managed document / key-value database"),
    _svc(_S.CACHE, "Cache", _C.DATABASE,
         "In-memory cache for hot data and sessions"),
    _svc(_S.DATA_WAREHOUSE, "Data Warehouse", _C.DATABASE,
         "Columnar analytical store"),
    _svc(_S.TIMESERIES_DATABASE, "Time-series Database", _C.DATABASE,
         "Store for telemetry and metrics over time"),
    _svc(_S.VECTOR_DATABASE, "Vector Database", _C.DATABASE,
         "Similarity search over embeddings"),
    _svc(_S.SEARCH_ENGINE, "Search Engine", _C.DATABASE,
         "Full-text search and indexing"),
    _svc(_S.OBJECT_STORAGE, "Object Storage", _C.STORAGE,
         "Durable blob storage for files and static assets"),
    _svc(_S.BLOCK_STORAGE, "Block Storage", _C.STORAGE,
         "Persistent volumes attached to compute"),
    _svc(_S.BACKUP, "Backup", _C.STORAGE,
         "Scheduled backups and point-in-time recovery"),
)

# ============================================================
# NETWORK
# ============================================================

NETWORK_SERVICES = (
    _svc(_S.CDN, "Content Delivery Network", _C.CDN,
         "Edge caching of static and dynamic content"),
    _svc(_S.LOAD_BALANCER, "Load Balancer", _C.NETWORK,
         "Distributes traffic across compute instances"),
    _svc(_S.API_GATEWAY, "API Gateway", _C.API,
         "Managed entry point for HTTP APIs"),
    _svc(_S.DNS, "DNS", _C.NETWORK,
         "Managed DNS zones and records"),
    _svc(_S.VPC_NETWORKING, "VPC Networking", _C.NETWORK,
         "Private network, subnets and routing"),
    _svc(_S.PRIVATE_LINK, "Private Link", _C.NETWORK,
         "Private endpoints to managed services"),
    _svc(_S.NAT_GATEWAY, "NAT Gateway", _C.NETWORK,
         "Outbound internet access for private subnets"),
)

# ============================================================
# MESSAGING
# ============================================================

MESSAGING_SERVICES = (
    _svc(_S.MESSAGE_QUEUE, "Message Queue", _C.MESSAGING,
         "Durable queue for asynchronous work"),
    _svc(_S.EVENT_BUS, "Event Bus", _C.MESSAGING,
         "Event routing between producers and consumers",
         terraform_supported=False),
    _svc(_S.EVENT_STREAM, "Event Stream", _C.MESSAGING,
         "Ordered, replayable event log"),
    _svc(_S.STREAM_PROCESSOR, "Stream Processor", _C.MESSAGING,
         "Continuous processing of event streams"),
    _svc(_S.WEBSOCKET_GATEWAY, "WebSocket Gateway", _C.MESSAGING,
         "Persistent bidirectional client connections"),
    _svc(_S.PUSH_NOTIFICATION, "Push Notifications", _C.MESSAGING,
         "Mobile and web push delivery"),
)

# ============================================================
# SECURITY
# ============================================================

SECURITY_SERVICES = (
    _svc(_S.IDENTITY_AUTH, "Identity & Auth", _C.SECURITY,
         "User sign-up, sign-in and token issuance"),
    _svc(_S.SECRETS_MANAGEMENT, "Secrets Management", _C.SECURITY,
         "Encrypted storage for credentials and API keys"),
    _svc(_S.KEY_MANAGEMENT, "Key Management", _C.SECURITY,
         "Managed encryption keys"),
    _svc(_S.WAF, "Web Application Firewall", _C.SECURITY,
         "Layer 7 filtering in front of public endpoints",
         terraform_supported=False),
    _svc(_S.CERTIFICATE_MANAGEMENT, "Certificate Management", _C.SECURITY,
         "TLS certificate issuance and rotation"),
    _svc(_S.POLICY_GOVERNANCE, "Policy Governance", _C.SECURITY,
         "Organisation-wide guardrails and compliance policies",
         terraform_supported=False),
)

# ============================================================
# OBSERVABILITY
# ============================================================

OBSERVABILITY_SERVICES = (
    _svc(_S.LOGGING, "Logging", _C.OBSERVABILITY,
         "Centralised log collection"),
    _svc(_S.MONITORING, "Monitoring", _C.OBSERVABILITY,
         "Metrics, dashboards and alerts"),
    _svc(_S.TRACING, "Tracing", _C.OBSERVABILITY,
         "Distributed request tracing"),
    _svc(_S.SIEM, "SIEM", _C.OBSERVABILITY,
         "Security event correlation",
         terraform_supported=False),
    _svc(_S.AUDIT_LOGGING, "Audit Logging", _C.OBSERVABILITY,
         "Tamper-evident record of privileged actions"),
)

# ============================================================
# DOMAIN SPECIFIC
# ============================================================

DOMAIN_SERVICES = (
    _svc(_S.PAYMENT_GATEWAY, "Payment Gateway", _C.PAYMENTS,
         "Third-party payment processing",
         terraform_supported=False),
    _svc(_S.ML_INFERENCE, "ML Inference", _C.ML,
         "Model serving endpoints"),
    _svc(_S.ML_TRAINING, "ML Training", _C.ML,
         "Managed training jobs"),
    _svc(_S.FEATURE_STORE, "Feature Store", _C.ML,
         "Shared store for model features"),
    _svc(_S.IOT_CORE, "IoT Core", _C.IOT,
         "Device registry and telemetry ingestion"),
)

# ============================================================
# DEVOPS
# ============================================================

DEVOPS_SERVICES = (
    _svc(_S.CICD, "CI/CD", _C.DEVOPS,
         "Build and deployment pipelines"),
    _svc(_S.CONTAINER_REGISTRY, "Container Registry", _C.DEVOPS,
         "Private container image registry"),
    _svc(_S.ARTIFACT_REPOSITORY, "Artifact Repository", _C.DEVOPS,
         "Package and build artifact storage",
         terraform_supported=False),
)


SERVICE_CATALOG: Tuple[ServiceDefinition, ...] = (
    COMPUTE_SERVICES
    + DATA_SERVICES
    + NETWORK_SERVICES
    + MESSAGING_SERVICES
    + SECURITY_SERVICES
    + OBSERVABILITY_SERVICES
    + DOMAIN_SERVICES
    + DEVOPS_SERVICES
)

# Services that describe a concern rather than a provisioned resource.
# They must never reach infrastructure-as-code generation.
LOGICAL_ONLY_SERVICES = frozenset({
    ServiceId.EVENT_BUS,
    ServiceId.WAF,
    ServiceId.POLICY_GOVERNANCE,
    ServiceId.SIEM,
    ServiceId.PAYMENT_GATEWAY,
    ServiceId.ARTIFACT_REPOSITORY,
})
