"""add castings and applications

Revision ID: 8b42d6e1c905
Revises: 3f1c9a7d2b10
Create Date: 2026-10-19 14:03:27.905114

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '8b42d6e1c905'
down_revision: Union[str, Sequence[str], None] = '3f1c9a7d2b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CASTING_COLUMNS = (
    "description TEXT NOT NULL DEFAULT ''",
    "project_type VARCHAR(20) NOT NULL DEFAULT 'other'",
    "role_type VARCHAR(20) NOT NULL DEFAULT 'other'",
    "city VARCHAR(100) NOT NULL DEFAULT ''",
    "province VARCHAR(100) NOT NULL DEFAULT ''",
    "application_deadline TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()",
    "total_applications INTEGER NOT NULL DEFAULT 0 CHECK (total_applications >= 0)",
    "shortlisted_applications INTEGER NOT NULL DEFAULT 0 CHECK (shortlisted_applications >= 0)",
    "published_at TIMESTAMP WITH TIME ZONE",
    "updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()",
)


def upgrade() -> None:
    """Upgrade schema."""
    # Step 1: Full casting record
    for column in CASTING_COLUMNS:
        op.execute(f'ALTER TABLE castings ADD COLUMN IF NOT EXISTS {column}')
    # Existing rows got NOW(); new castings must name their deadline
    op.execute('ALTER TABLE castings ALTER COLUMN application_deadline DROP DEFAULT')
    op.execute('ALTER TABLE castings DROP CONSTRAINT IF EXISTS castings_status_check')
    op.execute("""
        ALTER TABLE castings ADD CONSTRAINT castings_status_check
            CHECK (status IN ('draft', 'active', 'paused', 'closed', 'filled'))
    """)
    op.execute('CREATE INDEX IF NOT EXISTS ix_castings_director_id ON castings(director_id)')
    op.execute('CREATE INDEX IF NOT EXISTS idx_castings_status_created ON castings(status, created_at DESC)')
    op.execute('CREATE INDEX IF NOT EXISTS idx_castings_deadline ON castings(application_deadline)')

    # Step 2: Applications
    op.execute("""
        CREATE TABLE IF NOT EXISTS applications (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            casting_id UUID NOT NULL REFERENCES castings(id),
            talent_id UUID NOT NULL REFERENCES users(id),
            cover_message TEXT NOT NULL CHECK (char_length(cover_message) <= 1000),
            status VARCHAR(20) NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'reviewed', 'shortlisted', 'rejected', 'accepted', 'withdrawn')),
            director_notes VARCHAR(500),
            director_response TEXT,
            responded_at TIMESTAMP WITH TIME ZONE,
            reviewed_at TIMESTAMP WITH TIME ZONE,
            status_updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            submitted_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            CONSTRAINT uq_applications_casting_talent UNIQUE (casting_id, talent_id)
        )
    """)
    op.execute('CREATE INDEX IF NOT EXISTS ix_applications_casting_id ON applications(casting_id)')
    op.execute('CREATE INDEX IF NOT EXISTS ix_applications_talent_id ON applications(talent_id)')

    # Step 3: Who granted auto-approval
    op.execute('ALTER TABLE writer_profiles ADD COLUMN IF NOT EXISTS auto_approval_granted_by_id UUID REFERENCES users(id)')

    # Step 4: updated_at trigger for castings
    op.execute('''
        CREATE TRIGGER update_castings_updated_at
            BEFORE UPDATE ON castings
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    ''')


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TRIGGER IF EXISTS update_castings_updated_at ON castings')
    op.execute('ALTER TABLE writer_profiles DROP COLUMN IF EXISTS auto_approval_granted_by_id')
    op.execute('DROP TABLE IF EXISTS applications CASCADE')
    for index in ('idx_castings_deadline', 'idx_castings_status_created', 'ix_castings_director_id'):
        op.execute(f'DROP INDEX IF EXISTS {index}')
    op.execute("UPDATE castings SET status = 'closed' WHERE status IN ('paused', 'filled')")
    op.execute('ALTER TABLE castings DROP CONSTRAINT IF EXISTS castings_status_check')
    op.execute("""
        ALTER TABLE castings ADD CONSTRAINT castings_status_check
            CHECK (status IN ('draft', 'active', 'closed'))
    """)
    for column in CASTING_COLUMNS:
        op.execute(f'ALTER TABLE castings DROP COLUMN IF EXISTS {column.split()[0]}')
