"""
Portfolio Database Seeder

Creates the site admin and a demo visitor with:
- One approved comment (visible on the public page)
- One pending comment (waiting in the admin panel)

Credentials can be overridden with SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD.
"""

import os
import sys
sys.path.insert(0, ".")

from app.db.session import SessionLocal, engine
from app.db.base import Base
from app.models import User, UserRole, Comment
from app.core.security import get_password_hash


def seed_database():
    """Seed the database with an admin account and demo data."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    admin_email = os.getenv("SEED_ADMIN_EMAIL", "admin@portfolio.dev").lower()
    admin_password = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

    try:
        # Check if already seeded
        existing_admin = db.query(User).filter(User.email == admin_email).first()
        if existing_admin:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        # 1. Create Admin User
        admin = User(
            name="Site Admin",
            email=admin_email,
            hashed_password=get_password_hash(admin_password),
            role=UserRole.ADMIN,
        )
        db.add(admin)

        # 2. Create Demo Visitor
        visitor = User(
            name="Jane Visitor",
            email="jane.visitor@example.com",
            hashed_password=get_password_hash("visitor123"),
            role=UserRole.USER,
        )
        db.add(visitor)
        db.flush()  # Get IDs

        # 3. Comments in both moderation states
        db.add(Comment(
            user_id=visitor.id,
            name=visitor.name,
            email=visitor.email,
            message="Really enjoyed browsing the projects section!",
            rating=5,
            is_approved=True,
        ))
        db.add(Comment(
            user_id=visitor.id,
            name=visitor.name,
            email=visitor.email,
            message="Would love to see more details on the backend work.",
            rating=4,
        ))

        # Commit all changes
        db.commit()

        print("✅ Database seeded successfully!")
        print("\n📋 Created Users:")
        print(f"   - {admin_email} [ADMIN]")
        print("   - jane.visitor@example.com (password: visitor123)")
        print("\n💬 Comments: 1 approved, 1 pending")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
