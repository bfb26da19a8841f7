"""seed_feature_permissions

Revision ID: 9b47e2c5d810
Revises: 3c1f0a9d7b21
Create Date: 2026-10-12 19:20:37.902115

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "9b47e2c5d810"
down_revision: Union[str, Sequence[str], None] = "3c1f0a9d7b21"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

FEATURES = [
    # Streamer tools
    ("giveaways", "streamer", "Run giveaways for chat"),
    ("bonus_hunt", "streamer", "Track bonus hunts on stream"),
    ("chat_bot", "streamer", "Configure the chat bot"),
    # Viewer perks
    ("slot_calls", "verified_viewer", "Submit slot calls"),
    ("viewer_benefits", "verified_viewer", "Claim viewer benefits"),
    # Staff
    ("admin_tickets", "admin", "Handle support tickets"),
]


def upgrade() -> None:
    """Seed the feature catalog."""
    feature_permissions = sa.table(
        "feature_permissions",
        sa.column("feature_name", sa.String),
        sa.column("required_role", sa.String),
        sa.column("is_enabled", sa.Boolean),
        sa.column("description", sa.Text),
    )

    op.bulk_insert(
        feature_permissions,
        [
            {
                "feature_name": name,
                "required_role": role,
                "is_enabled": True,
                "description": description,
            }
            for name, role, description in FEATURES
        ],
    )


def downgrade() -> None:
    """Remove the seeded features."""
    names = ", ".join(f"'{name}'" for name, _, _ in FEATURES)
    op.execute(f"DELETE FROM feature_permissions WHERE feature_name IN ({names})")
