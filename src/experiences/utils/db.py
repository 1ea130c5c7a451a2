"""Schema management for the SQL-backed Experiences providers.

Memory-backed providers need no schema; only sqlite and postgresql
providers get tables for reviews, votes, contributions, tags and interviews.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [
        provider
        for provider in domain.providers.values()
        if provider.conn_info["provider"] in _SQL_PROVIDERS
    ]


def _bind_models(domain: Domain, provider) -> None:
    # Models are declared lazily when a DAO is first built
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create the experience tables on every SQL provider."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _bind_models(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain) -> None:
    """Drop the experience tables from every SQL provider."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
