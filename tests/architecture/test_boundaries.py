"""Package boundary tests: no cross-layer imports."""

from pytest_archon import archrule


def test_core_independence() -> None:
    """
    Core must not import filtering, services or persistence.
    It is the foundation and must remain independent.
    """
    (
        archrule("core_is_independent")
        .match("cleanbase_core*")
        .should_not_import("cleanbase_filtering*")
        .should_not_import("cleanbase_services*")
        .should_not_import("cleanbase_persistence_*")
        .check("cleanbase_core")
    )


def test_filtering_layering() -> None:
    """Filtering depends on core only; it knows no service or storage backend."""
    (
        archrule("filtering_layering")
        .match("cleanbase_filtering*")
        .should_not_import("cleanbase_services*")
        .should_not_import("cleanbase_persistence_*")
        .check("cleanbase_filtering")
    )


def test_persistence_layering() -> None:
    """Persistence adapters may use core and filtering but never services."""
    (
        archrule("persistence_layering")
        .match("cleanbase_persistence_sqlalchemy*")
        .should_not_import("cleanbase_services*")
        .check("cleanbase_persistence_sqlalchemy")
    )


def test_services_are_backend_agnostic() -> None:
    """Services talk to ports, never to a concrete persistence package."""
    (
        archrule("services_backend_agnostic")
        .match("cleanbase_services*")
        .should_not_import("cleanbase_persistence_*")
        .check("cleanbase_services")
    )


def test_domain_isolation() -> None:
    """
    Domain layer should be self-contained.
    It must not import from adapters or ports.
    """
    (
        archrule("domain_isolation")
        .match("cleanbase_core.domain*")
        .should_not_import("cleanbase_core.adapters*")
        .should_not_import("cleanbase_core.ports*")
        .check("cleanbase_core")
    )


def test_ports_layering() -> None:
    """
    Ports (interfaces) should not depend on Adapters (implementations).
    """
    (
        archrule("ports_layering")
        .match("cleanbase_core.ports*")
        .should_not_import("cleanbase_core.adapters*")
        .check("cleanbase_core")
    )
