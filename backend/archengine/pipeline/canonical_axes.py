"""
Canonical Axis Projector

Requirements -> CanonicalAxes, the only view the pattern router sees.
"""

from archengine.catalog.rules import DATABASE_STORES, PERSISTENCE_EXCLUSIONS
from archengine.ir.requirements import CanonicalAxes, Requirements, TrafficTier

API_WORKLOADS = frozenset({
    "backend_api", "web_app", "mobile_backend", "realtime_app", "payment_system", "ml_service",
})
EVENT_STORES = frozenset({"messagequeue", "eventbus"})

TRAFFIC_TIERS = {
    "TINY": TrafficTier.LOW,
    "SMALL": TrafficTier.LOW,
    "MEDIUM": TrafficTier.STANDARD,
    "LARGE": TrafficTier.HIGH,
    "XL": TrafficTier.HIGH,
}


def project_axes(requirements: Requirements) -> CanonicalAxes:
    workloads = set(requirements.workload_types)
    stores = set(requirements.data_stores)
    exclusions = set(requirements.terminal_exclusions)

    return CanonicalAxes(
        static_content="static_site" in workloads,
        api_backend=bool(workloads & API_WORKLOADS),
        stateful=requirements.stateful,
        realtime=requirements.realtime,
        payments=requirements.payments,
        authentication=requirements.authentication,
        ml=requirements.ml,
        mobile=requirements.mobile,
        event_driven=bool(stores & EVENT_STORES) or "event_processing" in workloads,
        iot="iot" in workloads,
        data_analytics="data_analytics" in workloads,
        batch_processing="batch_jobs" in workloads,
        gaming="gaming" in workloads,
        high_availability=requirements.nfr.availability_value >= 99.99,
        pci="PCI" in requirements.compliance,
        hipaa="HIPAA" in requirements.compliance,
        database_requested=bool(stores & set(DATABASE_STORES)),
        persistence_excluded=bool(exclusions & PERSISTENCE_EXCLUSIONS),
        compute_excluded="compute" in exclusions,
        primary_data_model=requirements.primary_data_model,
        traffic_tier=TRAFFIC_TIERS.get(str(requirements.scale_tier).upper(), TrafficTier.STANDARD),
        compute_preference=requirements.compute_preference,
        exclusions=tuple(requirements.terminal_exclusions),
    )
