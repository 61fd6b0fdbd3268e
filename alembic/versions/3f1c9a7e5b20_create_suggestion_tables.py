"""create words and suggestion tables

Revision ID: 3f1c9a7e5b20
Revises:
Create Date: 2026-09-28 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e5b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    table_names = sa.inspect(bind).get_table_names()

    if "words" not in table_names:
        op.create_table(
            "words",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.String(length=64), nullable=False),
            sa.Column("text", sa.String(length=100), nullable=False),
            sa.Column("translation", sa.String(length=255), nullable=True),
            sa.Column("first_lang", sa.String(length=8), nullable=False),
            sa.Column("second_lang", sa.String(length=8), nullable=False),
            sa.Column("add_date", sa.DateTime(), nullable=True, server_default=sa.func.now()),
        )
        op.create_index("ix_words_user_id", "words", ["user_id"])
        op.create_index("ix_words_text", "words", ["text"])
        op.create_index("ix_words_first_lang", "words", ["first_lang"])
        op.create_index("ix_words_second_lang", "words", ["second_lang"])

    if "word_suggestions" not in table_names:
        op.create_table(
            "word_suggestions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.String(length=64), nullable=False),
            sa.Column("word", sa.String(length=100), nullable=False),
            sa.Column("translation", sa.String(length=255), nullable=False),
            sa.Column("first_lang", sa.String(length=8), nullable=False),
            sa.Column("second_lang", sa.String(length=8), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
        op.create_index("ix_word_suggestions_user_id", "word_suggestions", ["user_id"])
        op.create_index("ix_word_suggestions_word", "word_suggestions", ["word"])
        op.create_index("ix_word_suggestions_first_lang", "word_suggestions", ["first_lang"])
        op.create_index("ix_word_suggestions_second_lang", "word_suggestions", ["second_lang"])

    if "default_suggestions" not in table_names:
        op.create_table(
            "default_suggestions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("word", sa.String(length=100), nullable=False),
            sa.Column("translation", sa.String(length=255), nullable=False),
            sa.Column("first_lang", sa.String(length=8), nullable=False),
            sa.Column("second_lang", sa.String(length=8), nullable=False),
            sa.UniqueConstraint("first_lang", "second_lang", "word", name="uq_default_suggestions_pair_word"),
        )
        op.create_index("ix_default_suggestions_word", "default_suggestions", ["word"])
        op.create_index("ix_default_suggestions_first_lang", "default_suggestions", ["first_lang"])
        op.create_index("ix_default_suggestions_second_lang", "default_suggestions", ["second_lang"])

    if "prompt_reports" not in table_names:
        op.create_table(
            "prompt_reports",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.String(length=64), nullable=False),
            sa.Column("first_lang", sa.String(length=8), nullable=False),
            sa.Column("second_lang", sa.String(length=8), nullable=False),
            sa.Column("words_added", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("prompt_tokens", sa.Integer(), nullable=True),
            sa.Column("completion_tokens", sa.Integer(), nullable=True),
            sa.Column("total_tokens", sa.Integer(), nullable=True),
            sa.Column("model", sa.String(length=64), nullable=True),
            sa.Column("details", sa.JSON(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
        op.create_index("ix_prompt_reports_user_id", "prompt_reports", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_prompt_reports_user_id", table_name="prompt_reports")
    op.drop_table("prompt_reports")
    op.drop_index("ix_default_suggestions_second_lang", table_name="default_suggestions")
    op.drop_index("ix_default_suggestions_first_lang", table_name="default_suggestions")
    op.drop_index("ix_default_suggestions_word", table_name="default_suggestions")
    op.drop_table("default_suggestions")
    op.drop_index("ix_word_suggestions_second_lang", table_name="word_suggestions")
    op.drop_index("ix_word_suggestions_first_lang", table_name="word_suggestions")
    op.drop_index("ix_word_suggestions_word", table_name="word_suggestions")
    op.drop_index("ix_word_suggestions_user_id", table_name="word_suggestions")
    op.drop_table("word_suggestions")
    op.drop_index("ix_words_second_lang", table_name="words")
    op.drop_index("ix_words_first_lang", table_name="words")
    op.drop_index("ix_words_text", table_name="words")
    op.drop_index("ix_words_user_id", table_name="words")
    op.drop_table("words")
