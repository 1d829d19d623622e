"""Schema management for the relational providers behind the ordering domain."""

from protean.domain import Domain
from sqlalchemy import create_engine

RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider) -> None:
    """Touch each repository's DAO so its SQLAlchemy model joins the provider's metadata."""
    records = (
        list(domain.registry.aggregates.values())
        + list(domain.registry.entities.values())
        + list(domain.registry.projections.values())
    )
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create the tables for every relational provider."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in RELATIONAL_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider)
                provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop the tables of every relational provider."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in RELATIONAL_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider)
                provider._metadata.drop_all(engine)
