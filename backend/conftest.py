import pytest

from archengine.catalog.registry import build_catalog
from archengine.pipeline.canonical_axes import project_axes
from archengine.pipeline.capability_mapper import map_capabilities
from archengine.pipeline.requirement_extractor import extract_requirements
from archengine.schemas import Intent
from archengine.utils.log import configure_logging


def pytest_configure(config):
    configure_logging(level="INFO", fmt="console")


@pytest.fixture(scope="session")
def catalog():
    return build_catalog()


@pytest.fixture
def extract(catalog):
    """Run an intent dict through mapping and extraction."""
    def _extract(data: dict):
        intent = Intent.model_validate(data)
        capabilities = map_capabilities(intent.axes, intent.domain, catalog)
        return extract_requirements(intent, capabilities, catalog)
    return _extract


@pytest.fixture
def project(extract):
    """Intent dict -> (requirements, canonical axes)."""
    def _project(data: dict):
        requirements = extract(data)
        return requirements, project_axes(requirements)
    return _project
