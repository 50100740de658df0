"""create initial schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES_WITH_UPDATED_AT = ('conversations', 'blogs', 'news')


def _content_table(name: str, extra_columns: str) -> str:
    return f"""
        CREATE TABLE IF NOT EXISTS {name} (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            title VARCHAR(200) NOT NULL,
            slug VARCHAR(255) NOT NULL UNIQUE,
            content TEXT NOT NULL CHECK (char_length(content) >= 100),
            category VARCHAR(50) NOT NULL,
            tags JSONB DEFAULT '[]'::jsonb,
            author_id UUID NOT NULL REFERENCES users(id),
            status VARCHAR(20) NOT NULL DEFAULT 'draft' CHECK (status IN ('draft', 'pending', 'published', 'rejected')),
            published_at TIMESTAMP WITH TIME ZONE,
            approved_by_id UUID REFERENCES users(id),
            approved_at TIMESTAMP WITH TIME ZONE,
            rejection_reason VARCHAR(500),
            views INTEGER NOT NULL DEFAULT 0,
            {extra_columns},
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """


def upgrade() -> None:
    """Upgrade schema."""
    # Step 1: Create the function (required before triggers)
    op.execute('''
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ language 'plpgsql'
    ''')

    # Step 2: Identity and profile tables
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            email VARCHAR(255) NOT NULL UNIQUE,
            first_name VARCHAR(100) NOT NULL,
            last_name VARCHAR(100) NOT NULL,
            role VARCHAR(20) NOT NULL CHECK (role IN ('talent', 'casting_director', 'journalist', 'admin')),
            status VARCHAR(20) NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'pending', 'suspended', 'inactive')),
            identification_status VARCHAR(20) NOT NULL DEFAULT 'not_submitted' CHECK (identification_status IN ('not_submitted', 'pending', 'approved', 'rejected')),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS talent_profiles (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL UNIQUE REFERENCES users(id),
            artistic_name VARCHAR(100),
            headshot VARCHAR(500),
            specialization VARCHAR(100),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS director_profiles (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL UNIQUE REFERENCES users(id),
            company_name VARCHAR(200),
            profile_image VARCHAR(500),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS writer_profiles (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL UNIQUE REFERENCES users(id),
            bio TEXT,
            specialization VARCHAR(100),
            profile_image VARCHAR(500),
            is_approved_writer BOOLEAN NOT NULL DEFAULT FALSE,
            auto_approval BOOLEAN NOT NULL DEFAULT FALSE,
            auto_approval_granted_at TIMESTAMP WITH TIME ZONE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS castings (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            director_id UUID NOT NULL REFERENCES users(id),
            title VARCHAR(200) NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'draft' CHECK (status IN ('draft', 'active', 'closed')),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """)

    # Step 3: Messaging tables
    op.execute("""
        CREATE TABLE IF NOT EXISTS conversations (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            conversation_type VARCHAR(20) NOT NULL CHECK (conversation_type IN ('director_talent', 'writer_user')),
            director_id UUID REFERENCES users(id),
            talent_id UUID REFERENCES users(id),
            initiator_id UUID REFERENCES users(id),
            recipient_id UUID REFERENCES users(id),
            casting_id UUID REFERENCES castings(id),
            subject VARCHAR(200) NOT NULL,
            last_message_id UUID,
            last_message_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            CHECK (
                (conversation_type = 'director_talent' AND director_id IS NOT NULL AND talent_id IS NOT NULL)
                OR (conversation_type = 'writer_user' AND initiator_id IS NOT NULL AND recipient_id IS NOT NULL)
            )
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS messages (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            conversation_id UUID NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
            sender_id UUID NOT NULL REFERENCES users(id),
            content TEXT NOT NULL CHECK (char_length(btrim(content)) > 0),
            is_read BOOLEAN NOT NULL DEFAULT FALSE,
            read_at TIMESTAMP WITH TIME ZONE,
            is_delivered BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        )
    """)

    # Step 4: Content tables
    op.execute(_content_table('blogs', """excerpt VARCHAR(300),
            read_time INTEGER NOT NULL DEFAULT 5"""))
    op.execute(_content_table('news', """summary VARCHAR(500),
            priority VARCHAR(10) NOT NULL DEFAULT 'normal' CHECK (priority IN ('low', 'normal', 'high', 'urgent')),
            is_breaking BOOLEAN NOT NULL DEFAULT FALSE,
            is_featured BOOLEAN NOT NULL DEFAULT FALSE"""))

    # Step 5: Create indexes (skip if they already exist)
    op.execute("CREATE UNIQUE INDEX IF NOT EXISTS uq_conversations_director_talent ON conversations(director_id, talent_id) WHERE conversation_type = 'director_talent'")
    op.execute("CREATE UNIQUE INDEX IF NOT EXISTS uq_conversations_writer_user ON conversations(initiator_id, recipient_id) WHERE conversation_type = 'writer_user'")
    op.execute('CREATE INDEX IF NOT EXISTS ix_conversations_last_message_at ON conversations(last_message_at DESC)')
    op.execute('CREATE INDEX IF NOT EXISTS idx_messages_conversation_created ON messages(conversation_id, created_at)')
    op.execute('CREATE INDEX IF NOT EXISTS idx_messages_unread ON messages(conversation_id, is_read)')
    for table in ('blogs', 'news'):
        op.execute(f'CREATE INDEX IF NOT EXISTS ix_{table}_author_id ON {table}(author_id)')
        op.execute(f'CREATE INDEX IF NOT EXISTS idx_{table}_status_published ON {table}(status, published_at DESC)')

    # Step 6: Create triggers (only after tables exist)
    for table in TABLES_WITH_UPDATED_AT:
        op.execute(f'''
            CREATE TRIGGER update_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
        ''')


def downgrade() -> None:
    """Downgrade schema."""
    for table in ('messages', 'conversations', 'news', 'blogs', 'castings',
                  'writer_profiles', 'director_profiles', 'talent_profiles', 'users'):
        op.execute(f'DROP TABLE IF EXISTS {table} CASCADE')
    op.execute('DROP FUNCTION IF EXISTS update_updated_at_column()')
