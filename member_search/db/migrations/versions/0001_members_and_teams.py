"""Members and teams.

- teams
- members (nullable team_id FK, ON DELETE SET NULL)
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_teams"),
    )

    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("age", sa.Integer(), server_default="0", nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"], name="fk_members_team_id_teams", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_members"),
    )
    op.create_index("ix_members_team_id", "members", ["team_id"])
    # Lookups by team name and username back the search filters
    op.create_index("ix_teams_name", "teams", ["name"])
    op.create_index("ix_members_username", "members", ["username"])


def downgrade() -> None:
    op.drop_index("ix_members_username", table_name="members")
    op.drop_index("ix_teams_name", table_name="teams")
    op.drop_index("ix_members_team_id", table_name="members")
    op.drop_table("members")
    op.drop_table("teams")
