"""
Tests for the requirement extractor.

Covers source precedence (features > text), domain defaults, the
stateful downgrade and list de-duplication.
"""

from archengine.ir.requirements import ComputePreference, DataModel


class TestFeatures:
    def test_explicit_features_override_inferred(self, extract):
        requirements = extract({
            "inferred_features": {"payments": True},
            "explicit_features": {"payments": False},
        })
        assert requirements.payments is False
        assert "payment_system" not in requirements.workload_types

    def test_multi_user_roles_imply_auth_and_state(self, extract):
        requirements = extract({"explicit_features": {"multi_user_roles": True}})
        assert requirements.authentication
        assert requirements.stateful

    def test_feature_data_stores(self, extract):
        requirements = extract({"explicit_features": {
            "document_storage": True, "messagequeue": True, "cache": "true",
        }})
        assert requirements.data_stores == ("objectstorage", "messagequeue", "cache")

    def test_explicit_database_makes_the_request_stateful(self, extract):
        requirements = extract({"explicit_features": {"database": True}})
        assert requirements.stateful
        assert "relationaldatabase" in requirements.data_stores


class TestTextSignals:
    def test_negated_persistence_excludes_and_downgrades(self, extract):
        requirements = extract({"description": "Save user profile, no database needed"})

        assert requirements.stateful is False
        assert "data_persistence" in requirements.terminal_exclusions
        assert "relationaldatabase" not in requirements.data_stores
        assert any("downgraded" in a for a in requirements.adjustments)

    def test_structured_persistence_silences_text(self, extract):
        requirements = extract({
            "axes": {"stateful": True},
            "description": "no database needed",
        })

        assert requirements.stateful is True
        assert "data_persistence" not in requirements.terminal_exclusions
        assert "relationaldatabase" in requirements.data_stores

    def test_structured_none_beats_positive_text(self, extract):
        requirements = extract({"axes": {"realtime": False}, "description": "live chat for teams"})
        assert requirements.realtime is False

    def test_text_fills_gaps(self, extract):
        requirements = extract({"description": "live chat for teams"})
        assert requirements.realtime is True

    def test_text_workloads_only_without_structured_ones(self, extract):
        structured = extract({
            "explicit_features": {"api_backend": True},
            "description": "a web app",
        })
        text_only = extract({"description": "a web app"})

        assert structured.workload_types == ("backend_api",)
        assert text_only.workload_types == ("web_app",)


class TestDowngrade:
    def test_persistence_exclusion_drops_derived_store(self, extract):
        requirements = extract({
            "axes": {"stateful": True},
            "terminal_exclusions": ["persistence"],
        })

        assert requirements.stateful is False
        assert "relationaldatabase" not in requirements.data_stores
        assert any("persistence" in a for a in requirements.adjustments)

    def test_requested_database_survives_and_is_flagged(self, extract):
        requirements = extract({
            "explicit_features": {"database": True},
            "terminal_exclusions": ["persistence"],
        })

        assert requirements.stateful is False
        assert "relationaldatabase" in requirements.data_stores
        assert "requested data store relationaldatabase conflicts with exclusion 'persistence'" \
            in requirements.adjustments

    def test_other_exclusions_do_not_downgrade(self, extract):
        requirements = extract({"axes": {"stateful": True}, "terminal_exclusions": ["cache"]})
        assert requirements.stateful is True
        assert requirements.adjustments == ()


class TestDomainDefaults:
    def test_ecommerce_defaults(self, extract):
        requirements = extract({"domain": "ecommerce"})

        assert requirements.payments and requirements.stateful and requirements.authentication
        assert "backend_api" in requirements.workload_types
        assert "payment_system" in requirements.workload_types
        assert requirements.nfr.security_level == "medium"
        assert requirements.domain_id == "ecommerce"
        assert requirements.contract is not None

    def test_fintech_compliance_and_security_floor(self, extract):
        requirements = extract({"domain": "fintech"})
        assert "PCI" in requirements.compliance
        assert requirements.nfr.security_level == "high"

    def test_lists_are_deduplicated(self, extract):
        requirements = extract({
            "domain": "ecommerce",
            "explicit_features": {"payments": True, "api_backend": True},
        })
        assert requirements.workload_types.count("payment_system") == 1
        assert requirements.workload_types.count("backend_api") == 1
        assert len(set(requirements.data_stores)) == len(requirements.data_stores)


class TestRawAxes:
    def test_data_model_and_compute_preference(self, extract):
        requirements = extract({"axes": {
            "primary_data_model": "document",
            "compute_preference": {"value": "container", "confidence": 0.9},
        }})

        assert requirements.primary_data_model is DataModel.DOCUMENT
        assert requirements.compute_preference is ComputePreference.CONTAINER
        assert "nosqldatabase" in requirements.data_stores
        assert requirements.stateful

    def test_low_confidence_raw_axes_are_ignored(self, extract):
        requirements = extract({"axes": {
            "compute_preference": {"value": "container", "confidence": 0.2},
        }})
        assert requirements.compute_preference is ComputePreference.NONE

    def test_availability_and_latency(self, extract):
        requirements = extract({"axes": {
            "availability_target": "99.99",
            "latency_sensitivity": "low",
        }})
        assert requirements.nfr.availability == "99.99"
        assert requirements.nfr.latency == "low"

    def test_multi_region_raises_availability(self, extract):
        requirements = extract({"axes": {"multi_region": True}})
        assert requirements.nfr.availability_value >= 99.99

    def test_compliance_from_axes(self, extract):
        requirements = extract({"axes": {"regulatory_compliance": ["hipaa"]}})
        assert requirements.compliance == ("HIPAA",)
        assert requirements.nfr.security_level == "high"


def test_extraction_is_deterministic(extract):
    data = {
        "axes": {"payments": True, "realtime": {"value": True, "confidence": 0.7}},
        "domain": "saas",
        "description": "Teams chat and share files",
        "terminal_exclusions": ["Cache", "cache"],
    }
    first, second = extract(data), extract(data)

    assert first.to_dict() == second.to_dict()
    assert first.terminal_exclusions == ("cache",)
