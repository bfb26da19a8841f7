"""initial_schema

Create the identity and access schema for Stagelink:
- Accounts (one per primary subject, provider links flattened per kind)
- Feature permissions (catalog of gated features and their minimum role)
- Risk records (append-only IP reputation log)
- OAuth KV (client-context scoped OAuth attempts and secondary sign-ins)

Revision ID: 3c1f0a9d7b21
Revises:
Create Date: 2026-10-12 19:04:11.518204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d7b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROVIDERS = ("kick", "twitter", "discord")


def _link_columns(provider: str) -> list[sa.Column]:
    return [
        sa.Column(f"linked_{provider}_user_id", sa.String(255), nullable=True),
        sa.Column(f"linked_{provider}_username", sa.String(255), nullable=True),
        sa.Column(f"linked_{provider}_display_name", sa.String(255), nullable=True),
        sa.Column(f"linked_{provider}_avatar_url", sa.Text(), nullable=True),
        sa.Column(
            f"linked_{provider}_linked_at", sa.TIMESTAMP(timezone=True), nullable=True
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(255), nullable=False),  # primary subject id
        sa.Column("role", sa.String(32), nullable=False, server_default="viewer"),
        *[column for provider in PROVIDERS for column in _link_columns(provider)],
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # One account per provider identity; NULLs (unlinked) do not collide
    for provider in PROVIDERS:
        op.create_index(
            f"uq_accounts_linked_{provider}_user_id",
            "accounts",
            [f"linked_{provider}_user_id"],
            unique=True,
        )

    # ========================================================================
    # FEATURE_PERMISSIONS table
    # ========================================================================
    op.create_table(
        "feature_permissions",
        sa.Column("feature_name", sa.String(100), nullable=False),
        sa.Column("required_role", sa.String(32), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("feature_name"),
    )

    # ========================================================================
    # RISK_RECORDS table
    # ========================================================================
    op.create_table(
        "risk_records",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("identity_id", sa.String(255), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("is_vpn", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_proxy", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_tor", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("proxy_type", sa.String(64), nullable=True),
        sa.Column("risk_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("country_code", sa.String(8), nullable=True),
        sa.Column("country_name", sa.String(255), nullable=True),
        sa.Column("provider_name", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "risk_score >= 0 AND risk_score <= 100", name="risk_score_range"
        ),
    )
    op.create_index("idx_risk_records_identity_id", "risk_records", ["identity_id"])
    op.create_index(
        "idx_risk_records_created_at",
        "risk_records",
        [sa.text("created_at DESC")],
    )

    # ========================================================================
    # OAUTH_KV table
    # ========================================================================
    op.create_table(
        "oauth_kv",
        sa.Column("key", sa.String(512), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("key"),
    )
    op.create_index("idx_oauth_kv_expires_at", "oauth_kv", ["expires_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_oauth_kv_expires_at", table_name="oauth_kv")
    op.drop_table("oauth_kv")

    op.drop_index("idx_risk_records_created_at", table_name="risk_records")
    op.drop_index("idx_risk_records_identity_id", table_name="risk_records")
    op.drop_table("risk_records")

    op.drop_table("feature_permissions")

    for provider in PROVIDERS:
        op.drop_index(f"uq_accounts_linked_{provider}_user_id", table_name="accounts")
    op.drop_table("accounts")
