from archengine.validation.catalog_validator import validate_catalog

__all__ = ["validate_catalog"]
