"""create_profiles_table

Revision ID: 4b1d9e27c6a0
Revises:
Create Date: 2026-10-17 09:12:44.318202

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b1d9e27c6a0"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create profiles, the signup trigger that fills it, and its RLS policies.

    Rows are keyed by the Supabase auth user id and are created by the
    trigger, not by the API.
    """
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.execute("""
        ALTER TABLE profiles
            ADD CONSTRAINT profiles_id_fkey
            FOREIGN KEY (id) REFERENCES auth.users (id) ON DELETE CASCADE;
    """)

    # --- Signup trigger ---
    op.execute("""
        CREATE OR REPLACE FUNCTION public.handle_new_user()
        RETURNS trigger
        LANGUAGE plpgsql
        SECURITY DEFINER
        SET search_path = public
        AS $$
        BEGIN
            INSERT INTO public.profiles (id, email, first_name, avatar_url)
            VALUES (
                NEW.id,
                NEW.email,
                NEW.raw_user_meta_data ->> 'first_name',
                NEW.raw_user_meta_data ->> 'avatar_url'
            );
            RETURN NEW;
        END;
        $$;
    """)
    op.execute("""
        CREATE TRIGGER on_auth_user_created
            AFTER INSERT ON auth.users
            FOR EACH ROW EXECUTE FUNCTION public.handle_new_user();
    """)

    # --- Row level security: users see and edit only their own row ---
    op.execute("ALTER TABLE profiles ENABLE ROW LEVEL SECURITY;")
    op.execute("""
        CREATE POLICY profiles_select_own ON profiles
            FOR SELECT USING ((SELECT auth.uid()) = id);
    """)
    op.execute("""
        CREATE POLICY profiles_update_own ON profiles
            FOR UPDATE USING ((SELECT auth.uid()) = id);
    """)


def downgrade() -> None:
    """Drop policies, trigger and table."""
    op.execute("DROP POLICY IF EXISTS profiles_update_own ON profiles;")
    op.execute("DROP POLICY IF EXISTS profiles_select_own ON profiles;")
    op.execute("DROP TRIGGER IF EXISTS on_auth_user_created ON auth.users;")
    op.execute("DROP FUNCTION IF EXISTS public.handle_new_user();")
    op.drop_table("profiles")
