"""SQLAlchemy table definitions for Stagelink.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

from stagelink.domain.value import ProviderKind

metadata = MetaData()

# Column suffixes of one flattened provider link
LINK_FIELDS = ("user_id", "username", "display_name", "avatar_url", "linked_at")


def link_column(provider: ProviderKind, field: str) -> str:
    """Name of the flattened column holding ``field`` for a provider kind."""
    return f"linked_{provider.value}_{field}"


def _link_columns() -> list[Column]:
    columns: list[Column] = []
    for provider in ProviderKind:
        columns.extend(
            [
                Column(link_column(provider, "user_id"), String(255), nullable=True),
                Column(link_column(provider, "username"), String(255), nullable=True),
                Column(
                    link_column(provider, "display_name"), String(255), nullable=True
                ),
                Column(link_column(provider, "avatar_url"), Text, nullable=True),
                Column(
                    link_column(provider, "linked_at"),
                    TIMESTAMP(timezone=True),
                    nullable=True,
                ),
            ]
        )
    return columns


# ============================================================================
# ACCOUNTS TABLE (one row per primary subject, links flattened)
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", String(255), primary_key=True),  # primary provider subject id
    Column("role", String(32), nullable=False, server_default="viewer"),
    *_link_columns(),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# A provider identity can be linked to at most one account
for _provider in ProviderKind:
    Index(
        f"uq_accounts_linked_{_provider.value}_user_id",
        accounts_table.c[link_column(_provider, "user_id")],
        unique=True,
    )

# ============================================================================
# FEATURE PERMISSIONS TABLE (catalog)
# ============================================================================
feature_permissions_table = Table(
    "feature_permissions",
    metadata,
    Column("feature_name", String(100), primary_key=True),
    Column("required_role", String(32), nullable=False),
    Column("is_enabled", Boolean, nullable=False, server_default="true"),
    Column("description", Text, nullable=True),
)

# ============================================================================
# RISK RECORDS TABLE (append-only)
# ============================================================================
risk_records_table = Table(
    "risk_records",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("identity_id", String(255), nullable=False),
    Column("ip_address", String(64), nullable=False),
    Column("user_agent", Text, nullable=True),
    Column("is_vpn", Boolean, nullable=False, server_default="false"),
    Column("is_proxy", Boolean, nullable=False, server_default="false"),
    Column("is_tor", Boolean, nullable=False, server_default="false"),
    Column("proxy_type", String(64), nullable=True),
    Column("risk_score", Integer, nullable=False, server_default="0"),
    Column("country_code", String(8), nullable=True),
    Column("country_name", String(255), nullable=True),
    Column("provider_name", String(255), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "risk_score >= 0 AND risk_score <= 100", name="risk_score_range"
    ),
)

Index("idx_risk_records_identity_id", risk_records_table.c.identity_id)
Index("idx_risk_records_created_at", risk_records_table.c.created_at.desc())

# ============================================================================
# OAUTH KV TABLE (client-context scoped attempts and secondary records)
# ============================================================================
oauth_kv_table = Table(
    "oauth_kv",
    metadata,
    Column("key", String(512), primary_key=True),
    Column("value", Text, nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
)

Index("idx_oauth_kv_expires_at", oauth_kv_table.c.expires_at)
