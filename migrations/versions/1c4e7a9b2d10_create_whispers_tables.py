"""create_whispers_tables

Revision ID: 1c4e7a9b2d10
Revises:
Create Date: 2026-10-17 10:12:44.518302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1c4e7a9b2d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, usernames, device_tokens, questions, answers and answer_likes."""
    op.create_table('profiles',
        sa.Column('uid', sa.String(length=128), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('full_name', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('premium_status', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('last_active', sa.BigInteger(), nullable=True),
        sa.Column('last_username_change', sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint('uid'),
    )
    op.create_index('ix_profiles_username', 'profiles', ['username'], unique=False)
    op.create_index('ix_profiles_created_at', 'profiles', ['created_at'], unique=False)

    # Claim table: the primary key is the uniqueness guard for usernames
    op.create_table('usernames',
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('uid', sa.String(length=128), nullable=False),
        sa.Column('claimed_at', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('username'),
    )
    op.create_index('ix_usernames_uid', 'usernames', ['uid'], unique=False)

    op.create_table('device_tokens',
        sa.Column('uid', sa.String(length=128), nullable=False),
        sa.Column('token', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(['uid'], ['profiles.uid'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('uid', 'token'),
    )

    # No foreign key on receiver_id: questions for unknown receivers are kept
    op.create_table('questions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('receiver_id', sa.String(length=128), nullable=False),
        sa.Column('sender_id', sa.String(length=128), nullable=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('theme', sa.String(length=50), nullable=False, server_default='default'),
        sa.Column('is_answered', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_questions_receiver_id', 'questions', ['receiver_id'], unique=False)

    op.create_table('answers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('question_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('answer_text', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('author_username', sa.String(length=30), nullable=False, server_default=''),
        sa.Column('author_avatar', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('author_full_name', sa.String(length=100), nullable=False, server_default=''),
        sa.CheckConstraint('likes >= 0', name='ck_answers_likes_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_answers_question_id', 'answers', ['question_id'], unique=False)
    op.create_index('ix_answers_user_id', 'answers', ['user_id'], unique=False)
    op.create_index(
        'ix_answers_public_timestamp',
        'answers',
        ['is_public', 'timestamp'],
        unique=False,
    )

    op.create_table('answer_likes',
        sa.Column('answer_id', sa.Uuid(), nullable=False),
        sa.Column('viewer_id', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(['answer_id'], ['answers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('answer_id', 'viewer_id'),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('answer_likes')
    op.drop_index('ix_answers_public_timestamp', table_name='answers')
    op.drop_index('ix_answers_user_id', table_name='answers')
    op.drop_index('ix_answers_question_id', table_name='answers')
    op.drop_table('answers')
    op.drop_index('ix_questions_receiver_id', table_name='questions')
    op.drop_table('questions')
    op.drop_table('device_tokens')
    op.drop_index('ix_usernames_uid', table_name='usernames')
    op.drop_table('usernames')
    op.drop_index('ix_profiles_created_at', table_name='profiles')
    op.drop_index('ix_profiles_username', table_name='profiles')
    op.drop_table('profiles')
