"""
SAMPLE DATA HELPER
Fill a development database with categories and posts, or wipe them again.
Users are never touched: register an account first, it becomes the author.

Usage:
    python seed_data.py --import
    python seed_data.py --destroy
    python seed_data.py --list
"""

import sys

from app.database import SessionLocal, engine, Base
from app.models.user import User
from app.models.category import Category
from app.models.post import Post
from app.models.like import PostLike
from app.models.bookmark import Bookmark
from app.models.comment import Comment
from app.services.categories import category_slug


SAMPLE_CATEGORIES = ["Technology", "Lifestyle", "Productivity", "Finance", "Travel"]

SAMPLE_POSTS = [
    {
        "title": "The Ultimate Guide to Modern JavaScript in 2025",
        "slug": "ultimate-guide-modern-javascript-2025",
        "excerpt": "Explore the latest features of ECMAScript, understand asynchronous JavaScript, and master the tools that define modern web development.",
        "image_url": "https://images.unsplash.com/photo-1579468118864-1b9ea3c0db4a?w=1600",
        "content": "<h2>JavaScript has evolved.</h2><p>Promises, async/await, modules and the newest array methods make code cleaner and faster to write.</p>",
    },
    {
        "title": "A Traveler's Diary: 10 Must-See Places in Southeast Asia",
        "slug": "travelers-diary-10-must-see-places-southeast-asia",
        "excerpt": "From the bustling streets of Bangkok to the serene temples of Angkor Wat, a journey through the region's most breathtaking destinations.",
        "image_url": "https://images.unsplash.com/photo-1508007584522-263d5ba734a1?w=1600",
        "content": "<h2>Embark on an Adventure</h2><p>Street food in Vietnam, island hopping in the Philippines and quiet rice paddies in Bali.</p>",
    },
    {
        "title": "Mastering Productivity: How to Get More Done in Less Time",
        "slug": "mastering-productivity-get-more-done",
        "excerpt": "Time blocking, the Pomodoro Technique and habits that last.",
        "image_url": "https://images.unsplash.com/photo-1484480974693-6ca0a78fb36b?w=1600",
        "content": "<h2>It's not about working harder.</h2><p>Productivity is a skill that can be learned and honed.</p>",
    },
    {
        "title": "Beginner's Guide to Investing in the Stock Market",
        "slug": "beginners-guide-to-investing",
        "excerpt": "Index funds, diversification and the long game explained without jargon.",
        "image_url": "https://images.unsplash.com/photo-1611974789855-9c2a0a7236a3?w=1600",
        "content": "<h2>Start small, start early.</h2><p>Compound growth rewards patience more than timing.</p>",
    },
    {
        "title": "Home Fitness: How to Build a Great Workout Routine Without a Gym",
        "slug": "home-fitness-workout-routine-no-gym",
        "excerpt": "Bodyweight training, a little structure and no membership fees.",
        "image_url": "https://images.unsplash.com/photo-1517836357463-d25dfeac3438?w=1600",
        "content": "<h2>Your living room is enough.</h2><p>Squats, push-ups and planks cover every major muscle group.</p>",
    },
    {
        "title": "Understanding APIs: A Guide for Non-Programmers",
        "slug": "understanding-apis-for-non-programmers",
        "excerpt": "What an API is, why every app uses them and how they talk to each other.",
        "image_url": "https://images.unsplash.com/photo-1555066931-4365d14bab8c?w=1600",
        "content": "<h2>Think of a waiter.</h2><p>An API takes your order to the kitchen and brings back exactly what you asked for.</p>",
    },
]


def _wipe(db):
    db.query(PostLike).delete(synchronize_session=False)
    db.query(Bookmark).delete(synchronize_session=False)
    db.query(Comment).delete(synchronize_session=False)
    db.query(Post).delete(synchronize_session=False)
    db.query(Category).delete(synchronize_session=False)


def import_data(session_factory=SessionLocal):
    """Replace posts and categories with the sample set"""
    db = session_factory()

    try:
        author = db.query(User).order_by(User.id).first()
        if not author:
            print("❌ No users found in the database. Please register a user first.")
            return False

        _wipe(db)

        categories = [Category(name=name, slug=category_slug(name)) for name in SAMPLE_CATEGORIES]
        db.add_all(categories)
        db.flush()
        print(f"✅ {len(categories)} sample categories created")

        for index, sample in enumerate(SAMPLE_POSTS):
            # Round-robin over the categories
            category = categories[index % len(categories)]
            db.add(Post(author_id=author.id, category_id=category.id, like_count=0, **sample))

        db.commit()
        print(f"✅ {len(SAMPLE_POSTS)} sample posts imported for {author.email}")
        return True
    except Exception as e:
        db.rollback()
        print(f"❌ Import failed: {e}")
        return False
    finally:
        db.close()


def destroy_data(session_factory=SessionLocal):
    """Delete posts, categories, comments, likes and bookmarks (users stay)"""
    db = session_factory()

    try:
        _wipe(db)
        db.commit()
        print("✅ Data destroyed")
        return True
    finally:
        db.close()


def list_counts(session_factory=SessionLocal):
    db = session_factory()

    try:
        print(f"\n{'Table':<15} {'Rows':<10}")
        print("-" * 25)
        for label, model in (
            ("users", User),
            ("categories", Category),
            ("posts", Post),
            ("comments", Comment),
            ("likes", PostLike),
            ("bookmarks", Bookmark),
        ):
            print(f"{label:<15} {db.query(model).count():<10}")
        print()
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    command = sys.argv[1]

    if command == "--import":
        sys.exit(0 if import_data() else 1)

    elif command == "--destroy":
        destroy_data()

    elif command == "--list":
        list_counts()

    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)
