"""
Link jobs to bookings and enforce release idempotency at the store level

Migration to add:
- jobs.booking_id (unique, references bookings.id)
- UNIQUE (title, date_needed) on jobs
- partial unique index: one accepted claim per booking

Existing duplicate (title, date_needed) jobs must be merged before running.

Run with: python migrations/add_job_booking_link.py
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from booster_api.database import engine


def upgrade():
    """Add job → booking link and uniqueness guards"""
    with engine.connect() as conn:
        result = conn.execute(text("""
            SELECT column_name
            FROM information_schema.columns
            WHERE table_name = 'jobs'
            AND column_name = 'booking_id'
        """))
        if result.first() is None:
            conn.execute(text("""
                ALTER TABLE jobs
                ADD COLUMN booking_id VARCHAR(36) UNIQUE REFERENCES bookings(id)
            """))
            print("✅ Added jobs.booking_id column")
        else:
            print("ℹ️  jobs.booking_id column already exists")

        duplicates = conn.execute(text("""
            SELECT title, date_needed, COUNT(*)
            FROM jobs
            GROUP BY title, date_needed
            HAVING COUNT(*) > 1
        """)).fetchall()
        if duplicates:
            for title, date_needed, count in duplicates:
                print(f"❌ {count} jobs share ({title!r}, {date_needed})")
            raise SystemExit("Merge duplicate jobs before adding the unique constraint")

        conn.execute(text("""
            CREATE UNIQUE INDEX IF NOT EXISTS uq_jobs_title_date_needed
            ON jobs (title, date_needed)
        """))
        print("✅ Ensured unique (title, date_needed) on jobs")

        conn.execute(text("""
            CREATE UNIQUE INDEX IF NOT EXISTS uq_claims_one_accepted_per_booking
            ON booster_booking_requests (booking_id)
            WHERE status = 'accepted'
        """))
        print("✅ Ensured one accepted claim per booking")

        conn.commit()
        print("\n✅ Migration completed successfully!")


def downgrade():
    """Remove job → booking link and uniqueness guards"""
    with engine.connect() as conn:
        conn.execute(text("DROP INDEX IF EXISTS uq_claims_one_accepted_per_booking"))
        conn.execute(text("DROP INDEX IF EXISTS uq_jobs_title_date_needed"))
        conn.execute(text("ALTER TABLE jobs DROP COLUMN IF EXISTS booking_id"))
        conn.commit()
        print("✅ Migration rolled back successfully!")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Manage job booking link migration")
    parser.add_argument("--down", action="store_true", help="Rollback the migration")
    args = parser.parse_args()

    if args.down:
        print("Rolling back migration...")
        downgrade()
    else:
        print("Running migration...")
        upgrade()
