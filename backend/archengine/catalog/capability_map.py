# backend/archengine/catalog/capability_map.py
"""
Capability tables

CAPABILITY_AXES lists, per capability, the raw axes it is read from
(first present axis wins). CAPABILITY_TO_SERVICE lists the services a
required capability suggests; only the ``required`` column is used by the
resolver, ``optional`` is kept for explain output.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from archengine.ir.identifiers import AxisId, CapabilityId, ServiceId

_A = AxisId
_K = CapabilityId
_S = ServiceId


@dataclass(frozen=True)
class CapabilityServices:
    required: Tuple[ServiceId, ...] = ()
    optional: Tuple[ServiceId, ...] = ()

    def all(self) -> Tuple[ServiceId, ...]:
        return self.required + self.optional


# Plain tri-state capabilities. Capabilities with bespoke resolution
# (observability, sensitivity, compliance tags, availability...) are
# handled in the capability mapper.
CAPABILITY_AXES: Mapping[CapabilityId, Tuple[AxisId, ...]] = MappingProxyType({
    _K.STATIC_CONTENT: (_A.STATIC_CONTENT, _A.CDN_ENABLED),
    _K.API_BACKEND: (_A.API_BACKEND,),
    _K.DOCUMENT_STORAGE: (_A.DOCUMENT_STORAGE, _A.FILE_STORAGE),
    _K.IDENTITY_ACCESS: (_A.USER_AUTHENTICATION,),
    _K.MULTI_USER_ROLES: (_A.MULTI_USER_ROLES,),
    _K.REALTIME: (_A.REALTIME_UPDATES, _A.REALTIME),
    _K.SCHEDULED_JOBS: (_A.SCHEDULED_JOBS,),
    _K.MESSAGING: (_A.MESSAGING_QUEUE,),
    _K.EVENTING: (_A.EVENT_DRIVEN,),
    _K.SEARCH: (_A.SEARCH,),
    _K.PAYMENTS: (_A.PAYMENTS,),
    _K.DEVOPS_AUTOMATION: (_A.DEVOPS_AUTOMATION,),
    _K.PRIVATE_NETWORKING: (_A.PRIVATE_NETWORKING,),
    _K.DOMAIN_IOT: (_A.DOMAIN_IOT,),
    _K.DOMAIN_ML_HEAVY: (_A.DOMAIN_ML_HEAVY, _A.ML),
    _K.DOMAIN_ANALYTICS: (_A.DOMAIN_ANALYTICS,),
    _K.DOMAIN_FINTECH: (_A.DOMAIN_FINTECH,),
    _K.DOMAIN_HEALTHCARE: (_A.DOMAIN_HEALTHCARE,),
    _K.WORKFLOW_ORCHESTRATION: (_A.WORKFLOW_ORCHESTRATION,),
    _K.CICD: (_A.CICD,),
    _K.SIEM: (_A.SIEM,),
    _K.MOBILE_CLIENTS: (_A.MOBILE_CLIENTS,),
})


def _row(required=(), optional=()):
    return CapabilityServices(tuple(required), tuple(optional))


CAPABILITY_TO_SERVICE: Mapping[CapabilityId, CapabilityServices] = MappingProxyType({
    # Data
    _K.DATA_PERSISTENCE: _row([_S.RELATIONAL_DATABASE], [_S.NOSQL_DATABASE, _S.BACKUP]),
    _K.DOCUMENT_STORAGE: _row([_S.OBJECT_STORAGE], [_S.CDN]),
    _K.STATIC_CONTENT: _row(
        [_S.OBJECT_STORAGE, _S.CDN, _S.DNS],
        [_S.WAF, _S.CERTIFICATE_MANAGEMENT],
    ),
    _K.CACHING: _row([_S.CACHE]),
    _K.SEARCH: _row([_S.SEARCH_ENGINE], [_S.CACHE]),

    # Identity & roles
    _K.IDENTITY_ACCESS: _row([_S.IDENTITY_AUTH], [_S.SECRETS_MANAGEMENT, _S.KEY_MANAGEMENT]),
    _K.MULTI_USER_ROLES: _row([_S.IDENTITY_AUTH], [_S.POLICY_GOVERNANCE]),

    # API & compute
    _K.API_BACKEND: _row(
        [_S.API_GATEWAY, _S.COMPUTE_SERVERLESS],
        [_S.LOGGING, _S.MONITORING, _S.TRACING, _S.WAF],
    ),
    _K.REALTIME: _row([_S.WEBSOCKET_GATEWAY, _S.EVENT_BUS], [_S.MESSAGE_QUEUE, _S.CACHE]),
    _K.SCHEDULED_JOBS: _row(
        [_S.WORKFLOW_ORCHESTRATION, _S.COMPUTE_SERVERLESS],
        [_S.MESSAGE_QUEUE],
    ),
    _K.MOBILE_CLIENTS: _row([_S.API_GATEWAY, _S.PUSH_NOTIFICATION]),
    _K.NOTIFICATIONS: _row([_S.PUSH_NOTIFICATION], [_S.MESSAGE_QUEUE]),

    # Messaging / events
    _K.MESSAGING: _row([_S.MESSAGE_QUEUE], [_S.EVENT_BUS]),
    _K.EVENTING: _row([_S.EVENT_BUS], [_S.MESSAGE_QUEUE]),

    # Payments
    _K.PAYMENTS: _row([_S.PAYMENT_GATEWAY], [_S.LOGGING, _S.MONITORING]),

    # Ops
    _K.OBSERVABILITY: _row([_S.LOGGING, _S.MONITORING], [_S.TRACING, _S.SIEM]),
    _K.DEVOPS_AUTOMATION: _row([_S.CICD], [_S.CONTAINER_REGISTRY, _S.ARTIFACT_REPOSITORY]),
    _K.CICD: _row([_S.CONTAINER_REGISTRY], [_S.COMPUTE_CONTAINER, _S.OBJECT_STORAGE]),
    _K.SIEM: _row([_S.LOGGING], [_S.MONITORING, _S.AUDIT_LOGGING]),
    _K.WORKFLOW_ORCHESTRATION: _row(
        [_S.COMPUTE_CONTAINER],
        [_S.MESSAGE_QUEUE, _S.COMPUTE_SERVERLESS],
    ),

    # Compliance / security hardening
    _K.PCI_COMPLIANT: _row(
        [_S.WAF, _S.KEY_MANAGEMENT, _S.LOGGING],
        [_S.SIEM, _S.POLICY_GOVERNANCE],
    ),
    _K.HIPAA_COMPLIANT: _row(
        [_S.KEY_MANAGEMENT, _S.LOGGING],
        [_S.SIEM, _S.POLICY_GOVERNANCE],
    ),
    _K.GDPR_COMPLIANT: _row([_S.KEY_MANAGEMENT, _S.AUDIT_LOGGING], [_S.POLICY_GOVERNANCE]),
    _K.SENSITIVE_DATA: _row([_S.KEY_MANAGEMENT, _S.SECRETS_MANAGEMENT]),
    _K.AUDIT_LOGGING: _row([_S.AUDIT_LOGGING], [_S.SIEM]),
    _K.KEY_MANAGEMENT: _row([_S.KEY_MANAGEMENT], [_S.SECRETS_MANAGEMENT]),
    _K.PRIVATE_NETWORKING: _row(
        [_S.VPC_NETWORKING, _S.PRIVATE_LINK],
        [_S.NAT_GATEWAY],
    ),

    # Resilience
    _K.HIGH_AVAILABILITY: _row([_S.LOAD_BALANCER, _S.BACKUP], [_S.DNS]),
    _K.HIGH_PERFORMANCE: _row([_S.CACHE], [_S.CDN]),
    _K.CONTENT_DELIVERY: _row([_S.CDN], [_S.CERTIFICATE_MANAGEMENT]),

    # Domains
    _K.DOMAIN_IOT: _row(
        [_S.IOT_CORE, _S.EVENT_STREAM, _S.TIMESERIES_DATABASE],
        [_S.STREAM_PROCESSOR, _S.OBJECT_STORAGE],
    ),
    _K.DOMAIN_ML_HEAVY: _row(
        [_S.ML_INFERENCE],
        [_S.ML_TRAINING, _S.FEATURE_STORE, _S.DATA_WAREHOUSE,
         _S.OBJECT_STORAGE, _S.VECTOR_DATABASE, _S.CACHE],
    ),
    _K.DOMAIN_ANALYTICS: _row(
        [_S.DATA_WAREHOUSE, _S.STREAM_PROCESSOR],
        [_S.OBJECT_STORAGE],
    ),
    _K.DOMAIN_FINTECH: _row([_S.AUDIT_LOGGING, _S.KEY_MANAGEMENT]),
    _K.DOMAIN_HEALTHCARE: _row([_S.AUDIT_LOGGING, _S.KEY_MANAGEMENT]),
})
