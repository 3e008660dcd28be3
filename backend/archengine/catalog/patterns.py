# backend/archengine/catalog/patterns.py
"""
Pattern Catalog - canonical architecture patterns

Patterns are data. Which pattern a request gets is decided by the router;
the catalog only states what each pattern must, may and must never
contain, plus the weights the advisory scoring router uses.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from archengine.ir.identifiers import CapabilityId, PatternId, ServiceId
from archengine.ir.requirements import CanonicalAxes


@dataclass(frozen=True)
class PatternDefinition:
    """
    A canonical architecture template

    ``contract_services`` are services the pattern contract lists on top
    of the mandatory set; contract completion re-adds them when missing.
    ``requirements`` maps canonical axis names to the value the pattern
    expects and is used for fit warnings, not for routing.
    """
    id: PatternId
    name: str
    use_case: str
    complexity: str  # simple | moderate | complex
    mandatory_services: Tuple[ServiceId, ...]
    optional_services: Tuple[ServiceId, ...] = ()
    forbidden_services: Tuple[ServiceId, ...] = ()
    contract_services: Tuple[ServiceId, ...] = ()
    requirements: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    required_capabilities: Tuple[CapabilityId, ...] = ()
    forbidden_capabilities: Tuple[CapabilityId, ...] = ()
    score_weights: Mapping[CapabilityId, float] = field(default_factory=lambda: MappingProxyType({}))
    serverless: bool = False

    @property
    def contract(self) -> Tuple[ServiceId, ...]:
        """Mandatory plus contract services, without duplicates."""
        seen = list(self.mandatory_services)
        for service_id in self.contract_services:
            if service_id not in seen:
                seen.append(service_id)
        return tuple(seen)

    def forbids(self, service_id: ServiceId) -> bool:
        return service_id in self.forbidden_services

    def fit_warnings(self, axes: CanonicalAxes) -> List[str]:
        """List canonical axes that disagree with the pattern's expectations."""
        warnings = []
        for axis_name, expected in self.requirements.items():
            actual = getattr(axes, axis_name, None)
            if actual is not None and bool(actual) != expected:
                warnings.append(
                    f"{self.id.value} expects {axis_name}={expected}, intent has {actual}"
                )
        return warnings


def _pattern(
    pattern_id: PatternId,
    name: str,
    use_case: str,
    complexity: str,
    mandatory: List[ServiceId],
    optional: List[ServiceId] = (),
    forbidden: List[ServiceId] = (),
    contract: List[ServiceId] = (),
    requirements: Dict[str, bool] = None,
    required_caps: List[CapabilityId] = (),
    forbidden_caps: List[CapabilityId] = (),
    weights: Dict[CapabilityId, float] = None,
    serverless: bool = False,
) -> PatternDefinition:
    return PatternDefinition(
        id=pattern_id,
        name=name,
        use_case=use_case,
        complexity=complexity,
        mandatory_services=tuple(mandatory),
        optional_services=tuple(optional),
        forbidden_services=tuple(forbidden),
        contract_services=tuple(contract),
        requirements=MappingProxyType(dict(requirements or {})),
        required_capabilities=tuple(required_caps),
        forbidden_capabilities=tuple(forbidden_caps),
        score_weights=MappingProxyType(dict(weights or {})),
        serverless=serverless,
    )


_P = PatternId
_S = ServiceId
_K = CapabilityId

_NO_BACKEND = [
    _S.COMPUTE_CONTAINER, _S.COMPUTE_SERVERLESS, _S.COMPUTE_VM,
    _S.RELATIONAL_DATABASE, _S.NOSQL_DATABASE, _S.API_GATEWAY, _S.LOAD_BALANCER,
]


# ============================================================
# STATIC PATTERNS
# ============================================================

STATIC_SITE = _pattern(
    _P.STATIC_SITE,
    name="Static Site",
    use_case="Informational websites, landing pages, documentation",
    complexity="simple",
    mandatory=[_S.OBJECT_STORAGE, _S.CDN, _S.LOGGING, _S.MONITORING],
    optional=[_S.IDENTITY_AUTH, _S.WAF, _S.CERTIFICATE_MANAGEMENT],
    forbidden=_NO_BACKEND,
    contract=[_S.DNS],
    requirements={"static_content": True, "api_backend": False, "stateful": False,
                  "realtime": False, "payments": False, "ml": False},
    required_caps=[_K.STATIC_CONTENT],
    forbidden_caps=[_K.DATA_PERSISTENCE, _K.PAYMENTS, _K.REALTIME, _K.API_BACKEND],
    weights={_K.STATIC_CONTENT: 1.0, _K.CONTENT_DELIVERY: 0.3, _K.DOCUMENT_STORAGE: 0.2},
)

STATIC_SITE_WITH_AUTH = _pattern(
    _P.STATIC_SITE_WITH_AUTH,
    name="Static Site with Auth",
    use_case="Marketing site with login / gated content",
    complexity="simple",
    mandatory=[_S.OBJECT_STORAGE, _S.CDN, _S.IDENTITY_AUTH, _S.LOGGING, _S.MONITORING],
    optional=[_S.WAF, _S.CERTIFICATE_MANAGEMENT],
    forbidden=_NO_BACKEND,
    contract=[_S.DNS],
    requirements={"static_content": True, "authentication": True, "api_backend": False,
                  "stateful": False, "realtime": False, "payments": False},
    required_caps=[_K.STATIC_CONTENT, _K.IDENTITY_ACCESS],
    forbidden_caps=[_K.DATA_PERSISTENCE, _K.PAYMENTS, _K.REALTIME, _K.API_BACKEND],
    weights={_K.STATIC_CONTENT: 0.7, _K.IDENTITY_ACCESS: 0.7, _K.CONTENT_DELIVERY: 0.2},
)

# ============================================================
# SERVERLESS PATTERNS
# ============================================================

SERVERLESS_API = _pattern(
    _P.SERVERLESS_API,
    name="Serverless API",
    use_case="Pure API backend, stateless, event-driven",
    complexity="simple",
    mandatory=[_S.API_GATEWAY, _S.COMPUTE_SERVERLESS, _S.LOGGING, _S.MONITORING],
    optional=[_S.NOSQL_DATABASE, _S.OBJECT_STORAGE, _S.MESSAGE_QUEUE],
    forbidden=[_S.RELATIONAL_DATABASE, _S.LOAD_BALANCER, _S.COMPUTE_CONTAINER, _S.COMPUTE_VM],
    requirements={"api_backend": True, "stateful": False, "realtime": False,
                  "payments": False, "ml": False},
    required_caps=[_K.API_BACKEND],
    forbidden_caps=[_K.DATA_PERSISTENCE],
    weights={_K.API_BACKEND: 1.0, _K.MESSAGING: 0.2, _K.MOBILE_CLIENTS: 0.2},
    serverless=True,
)

SERVERLESS_WEB_APP = _pattern(
    _P.SERVERLESS_WEB_APP,
    name="Serverless Web App",
    use_case="Simple full-stack apps, low complexity",
    complexity="simple",
    mandatory=[_S.CDN, _S.API_GATEWAY, _S.COMPUTE_SERVERLESS, _S.IDENTITY_AUTH,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.NOSQL_DATABASE, _S.OBJECT_STORAGE],
    forbidden=[_S.RELATIONAL_DATABASE, _S.LOAD_BALANCER, _S.PAYMENT_GATEWAY,
               _S.COMPUTE_CONTAINER, _S.COMPUTE_VM],
    requirements={"api_backend": True, "realtime": False, "payments": False, "ml": False},
    required_caps=[_K.API_BACKEND],
    forbidden_caps=[_K.PAYMENTS, _K.REALTIME],
    weights={_K.API_BACKEND: 0.6, _K.IDENTITY_ACCESS: 0.3, _K.STATIC_CONTENT: 0.3,
             _K.DOCUMENT_STORAGE: 0.2},
    serverless=True,
)

EVENT_DRIVEN_PLATFORM = _pattern(
    _P.EVENT_DRIVEN_PLATFORM,
    name="Event-Driven Platform",
    use_case="Decoupled event-based architecture",
    complexity="moderate",
    mandatory=[_S.MESSAGE_QUEUE, _S.COMPUTE_SERVERLESS, _S.LOGGING, _S.MONITORING],
    optional=[_S.API_GATEWAY, _S.OBJECT_STORAGE],
    contract=[_S.EVENT_BUS],
    requirements={"event_driven": True, "stateful": False, "realtime": False,
                  "payments": False, "ml": False},
    required_caps=[_K.MESSAGING],
    weights={_K.MESSAGING: 0.5, _K.EVENTING: 0.5, _K.SCHEDULED_JOBS: 0.2},
    serverless=True,
)

# ============================================================
# STATEFUL / CONTAINER PATTERNS
# ============================================================

STATEFUL_WEB_PLATFORM = _pattern(
    _P.STATEFUL_WEB_PLATFORM,
    name="Stateful Web Platform",
    use_case="SaaS, CRMs, dashboards, ERPs (supports async workflows, messaging)",
    complexity="moderate",
    mandatory=[_S.CDN, _S.LOAD_BALANCER, _S.COMPUTE_CONTAINER, _S.RELATIONAL_DATABASE,
               _S.IDENTITY_AUTH, _S.LOGGING, _S.MONITORING],
    optional=[_S.OBJECT_STORAGE, _S.CACHE, _S.MESSAGE_QUEUE, _S.WEBSOCKET_GATEWAY],
    forbidden=[_S.COMPUTE_SERVERLESS],
    requirements={"stateful": True, "api_backend": True, "realtime": False, "ml": False},
    required_caps=[_K.DATA_PERSISTENCE],
    weights={_K.DATA_PERSISTENCE: 0.5, _K.API_BACKEND: 0.3, _K.IDENTITY_ACCESS: 0.3,
             _K.MULTI_USER_ROLES: 0.2},
)

CONTAINERIZED_WEB_APP = _pattern(
    _P.CONTAINERIZED_WEB_APP,
    name="Containerized Web App",
    use_case="Web apps and APIs packaged as containers behind a load balancer",
    complexity="moderate",
    mandatory=[_S.LOAD_BALANCER, _S.COMPUTE_CONTAINER, _S.LOGGING, _S.MONITORING],
    optional=[_S.RELATIONAL_DATABASE, _S.CACHE, _S.CDN, _S.OBJECT_STORAGE],
    forbidden=[_S.COMPUTE_SERVERLESS],
    contract=[_S.CONTAINER_REGISTRY],
    requirements={"api_backend": True, "realtime": False, "ml": False},
    required_caps=[_K.API_BACKEND],
    weights={_K.API_BACKEND: 0.5, _K.DEVOPS_AUTOMATION: 0.3, _K.CICD: 0.2},
)

HYBRID_PLATFORM = _pattern(
    _P.HYBRID_PLATFORM,
    name="Hybrid Platform",
    use_case="Stateful + realtime + async workflows",
    complexity="complex",
    mandatory=[_S.CDN, _S.LOAD_BALANCER, _S.COMPUTE_CONTAINER, _S.COMPUTE_SERVERLESS,
               _S.RELATIONAL_DATABASE, _S.CACHE, _S.MESSAGE_QUEUE, _S.IDENTITY_AUTH,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.WEBSOCKET_GATEWAY, _S.PAYMENT_GATEWAY, _S.OBJECT_STORAGE],
    requirements={"stateful": True, "realtime": True},
    required_caps=[_K.REALTIME, _K.DATA_PERSISTENCE],
    weights={_K.REALTIME: 0.4, _K.DATA_PERSISTENCE: 0.3, _K.MESSAGING: 0.2,
             _K.DOMAIN_ML_HEAVY: 0.2, _K.PAYMENTS: 0.1},
)

MOBILE_BACKEND_PLATFORM = _pattern(
    _P.MOBILE_BACKEND_PLATFORM,
    name="Mobile Backend Platform",
    use_case="API backend for mobile apps, low latency required",
    complexity="moderate",
    mandatory=[_S.API_GATEWAY, _S.COMPUTE_CONTAINER, _S.RELATIONAL_DATABASE,
               _S.IDENTITY_AUTH, _S.LOGGING, _S.MONITORING],
    optional=[_S.PUSH_NOTIFICATION, _S.CACHE, _S.MESSAGE_QUEUE],
    forbidden=[_S.CDN],
    requirements={"mobile": True, "stateful": True, "realtime": False, "payments": False},
    required_caps=[_K.MOBILE_CLIENTS, _K.DATA_PERSISTENCE],
    weights={_K.MOBILE_CLIENTS: 0.6, _K.DATA_PERSISTENCE: 0.3, _K.NOTIFICATIONS: 0.3,
             _K.IDENTITY_ACCESS: 0.2},
)

HIGH_AVAILABILITY_PLATFORM = _pattern(
    _P.HIGH_AVAILABILITY_PLATFORM,
    name="High Availability Platform",
    use_case="99.99% SLA multi-region deployment",
    complexity="complex",
    mandatory=[_S.LOAD_BALANCER, _S.CDN, _S.API_GATEWAY, _S.RELATIONAL_DATABASE,
               _S.IDENTITY_AUTH, _S.LOGGING, _S.MONITORING, _S.CACHE],
    optional=[_S.MESSAGE_QUEUE],
    contract=[_S.COMPUTE_CONTAINER, _S.BACKUP, _S.DNS],
    requirements={"high_availability": True, "stateful": True},
    required_caps=[_K.HIGH_AVAILABILITY, _K.DATA_PERSISTENCE],
    weights={_K.HIGH_AVAILABILITY: 0.7, _K.DATA_PERSISTENCE: 0.2, _K.CACHING: 0.1},
)

# ============================================================
# REALTIME PATTERNS
# ============================================================

REALTIME_PLATFORM = _pattern(
    _P.REALTIME_PLATFORM,
    name="Real-time Platform",
    use_case="Chat apps, live dashboards, WebSockets, pub/sub",
    complexity="moderate",
    mandatory=[_S.WEBSOCKET_GATEWAY, _S.COMPUTE_CONTAINER, _S.CACHE, _S.MESSAGE_QUEUE,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.RELATIONAL_DATABASE, _S.IDENTITY_AUTH],
    requirements={"realtime": True, "stateful": False, "payments": False, "ml": False},
    required_caps=[_K.REALTIME],
    weights={_K.REALTIME: 0.8, _K.MESSAGING: 0.2, _K.CACHING: 0.1},
)

GAMING_BACKEND = _pattern(
    _P.GAMING_BACKEND,
    name="Gaming Backend",
    use_case="Real-time gaming with leaderboards",
    complexity="complex",
    mandatory=[_S.API_GATEWAY, _S.COMPUTE_CONTAINER, _S.CACHE, _S.RELATIONAL_DATABASE,
               _S.IDENTITY_AUTH, _S.LOGGING, _S.MONITORING],
    optional=[_S.WEBSOCKET_GATEWAY, _S.MESSAGE_QUEUE],
    requirements={"gaming": True, "realtime": True},
    required_caps=[_K.REALTIME, _K.CACHING],
    weights={_K.REALTIME: 0.5, _K.CACHING: 0.3, _K.DATA_PERSISTENCE: 0.2},
)

# ============================================================
# DATA / ML PATTERNS
# ============================================================

DATA_PLATFORM = _pattern(
    _P.DATA_PLATFORM,
    name="Data Platform",
    use_case="Internal analytics, batch processing, data warehousing",
    complexity="complex",
    mandatory=[_S.DATA_WAREHOUSE, _S.OBJECT_STORAGE, _S.COMPUTE_BATCH, _S.IDENTITY_AUTH,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.MESSAGE_QUEUE, _S.API_GATEWAY, _S.STREAM_PROCESSOR],
    forbidden=[_S.CDN, _S.LOAD_BALANCER, _S.COMPUTE_CONTAINER],
    requirements={"data_analytics": True, "realtime": False, "payments": False},
    required_caps=[_K.DOMAIN_ANALYTICS],
    weights={_K.DOMAIN_ANALYTICS: 0.7, _K.SCHEDULED_JOBS: 0.2, _K.EVENTING: 0.1},
)

ML_INFERENCE_PLATFORM = _pattern(
    _P.ML_INFERENCE_PLATFORM,
    name="ML Inference Platform",
    use_case="Model serving, prediction APIs",
    complexity="moderate",
    mandatory=[_S.ML_INFERENCE, _S.OBJECT_STORAGE, _S.LOGGING, _S.MONITORING],
    optional=[_S.API_GATEWAY, _S.CACHE],
    forbidden=[_S.RELATIONAL_DATABASE, _S.NOSQL_DATABASE, _S.MESSAGE_QUEUE, _S.COMPUTE_BATCH],
    requirements={"ml": True, "stateful": False, "realtime": False, "payments": False},
    required_caps=[_K.DOMAIN_ML_HEAVY],
    forbidden_caps=[_K.REALTIME, _K.DATA_PERSISTENCE],
    weights={_K.DOMAIN_ML_HEAVY: 0.8, _K.API_BACKEND: 0.2, _K.CACHING: 0.1},
)

ML_TRAINING_PLATFORM = _pattern(
    _P.ML_TRAINING_PLATFORM,
    name="ML Training Platform",
    use_case="Training pipelines, batch jobs, GPU workloads",
    complexity="complex",
    mandatory=[_S.COMPUTE_BATCH, _S.OBJECT_STORAGE, _S.LOGGING, _S.MONITORING],
    optional=[_S.CONTAINER_REGISTRY, _S.FEATURE_STORE, _S.DATA_WAREHOUSE],
    contract=[_S.ML_TRAINING],
    requirements={"ml": True, "batch_processing": True, "api_backend": False},
    required_caps=[_K.DOMAIN_ML_HEAVY, _K.SCHEDULED_JOBS],
    weights={_K.DOMAIN_ML_HEAVY: 0.6, _K.SCHEDULED_JOBS: 0.4},
)

IOT_PLATFORM = _pattern(
    _P.IOT_PLATFORM,
    name="IoT Platform",
    use_case="Device management, telemetry, time-series data",
    complexity="complex",
    mandatory=[_S.IOT_CORE, _S.TIMESERIES_DATABASE, _S.API_GATEWAY, _S.OBJECT_STORAGE,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.STREAM_PROCESSOR, _S.PUSH_NOTIFICATION],
    contract=[_S.EVENT_STREAM, _S.COMPUTE_SERVERLESS],
    requirements={"iot": True},
    required_caps=[_K.DOMAIN_IOT],
    weights={_K.DOMAIN_IOT: 0.8, _K.EVENTING: 0.1, _K.MESSAGING: 0.1},
)

# ============================================================
# REGULATED / VERTICAL PATTERNS
# ============================================================

FINTECH_PAYMENT_PLATFORM = _pattern(
    _P.FINTECH_PAYMENT_PLATFORM,
    name="Fintech Payment Platform",
    use_case="PCI-DSS compliant payment processing",
    complexity="complex",
    mandatory=[_S.API_GATEWAY, _S.COMPUTE_CONTAINER, _S.RELATIONAL_DATABASE,
               _S.PAYMENT_GATEWAY, _S.IDENTITY_AUTH, _S.SECRETS_MANAGEMENT,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.LOAD_BALANCER, _S.CACHE],
    contract=[_S.KEY_MANAGEMENT, _S.AUDIT_LOGGING],
    requirements={"payments": True, "pci": True},
    required_caps=[_K.PAYMENTS, _K.PCI_COMPLIANT],
    weights={_K.PAYMENTS: 0.5, _K.PCI_COMPLIANT: 0.4, _K.DOMAIN_FINTECH: 0.3},
)

HEALTHCARE_PLATFORM = _pattern(
    _P.HEALTHCARE_PLATFORM,
    name="Healthcare Platform",
    use_case="HIPAA-compliant healthcare data",
    complexity="complex",
    mandatory=[_S.API_GATEWAY, _S.COMPUTE_CONTAINER, _S.RELATIONAL_DATABASE,
               _S.IDENTITY_AUTH, _S.SECRETS_MANAGEMENT, _S.OBJECT_STORAGE,
               _S.LOGGING, _S.MONITORING],
    contract=[_S.KEY_MANAGEMENT, _S.AUDIT_LOGGING],
    requirements={"hipaa": True, "api_backend": True},
    required_caps=[_K.HIPAA_COMPLIANT],
    weights={_K.HIPAA_COMPLIANT: 0.6, _K.DOMAIN_HEALTHCARE: 0.3, _K.SENSITIVE_DATA: 0.2},
)

E_COMMERCE_BACKEND = _pattern(
    _P.E_COMMERCE_BACKEND,
    name="E-Commerce Backend",
    use_case="Online store with payments and inventory",
    complexity="moderate",
    mandatory=[_S.CDN, _S.API_GATEWAY, _S.COMPUTE_CONTAINER, _S.RELATIONAL_DATABASE,
               _S.PAYMENT_GATEWAY, _S.IDENTITY_AUTH, _S.OBJECT_STORAGE, _S.CACHE,
               _S.LOGGING, _S.MONITORING],
    optional=[_S.SEARCH_ENGINE, _S.MESSAGE_QUEUE, _S.PUSH_NOTIFICATION],
    requirements={"payments": True, "stateful": True, "realtime": False},
    required_caps=[_K.PAYMENTS, _K.DATA_PERSISTENCE],
    weights={_K.PAYMENTS: 0.5, _K.DATA_PERSISTENCE: 0.3, _K.SEARCH: 0.2,
             _K.DOCUMENT_STORAGE: 0.1},
)


PATTERN_CATALOG: Tuple[PatternDefinition, ...] = (
    STATIC_SITE,
    STATIC_SITE_WITH_AUTH,
    SERVERLESS_API,
    SERVERLESS_WEB_APP,
    STATEFUL_WEB_PLATFORM,
    CONTAINERIZED_WEB_APP,
    HYBRID_PLATFORM,
    MOBILE_BACKEND_PLATFORM,
    DATA_PLATFORM,
    REALTIME_PLATFORM,
    ML_INFERENCE_PLATFORM,
    ML_TRAINING_PLATFORM,
    HIGH_AVAILABILITY_PLATFORM,
    IOT_PLATFORM,
    FINTECH_PAYMENT_PLATFORM,
    HEALTHCARE_PLATFORM,
    GAMING_BACKEND,
    E_COMMERCE_BACKEND,
    EVENT_DRIVEN_PLATFORM,
)
