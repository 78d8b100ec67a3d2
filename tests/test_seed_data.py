"""
Sample data import/destroy/list helper
"""

import seed_data
from app.models.category import Category
from app.models.post import Post
from app.models.user import User


def _add_user(db, email):
    user = User(name="Seeder", email=email, password_hash="not-a-real-hash", bio="", avatar_url="")
    db.add(user)
    db.commit()
    return user.id


class TestImport:

    def test_needs_a_registered_user(self, db, session_factory, capsys):
        assert seed_data.import_data(session_factory) is False
        assert "No users found" in capsys.readouterr().out
        assert db.query(Post).count() == 0
        assert db.query(Category).count() == 0

    def test_posts_go_to_first_user_round_robin(self, db, session_factory):
        first = _add_user(db, "first@example.com")
        _add_user(db, "second@example.com")

        assert seed_data.import_data(session_factory) is True

        db.expire_all()
        categories = db.query(Category).order_by(Category.id).all()
        assert [c.name for c in categories] == seed_data.SAMPLE_CATEGORIES

        posts = db.query(Post).order_by(Post.id).all()
        assert [p.slug for p in posts] == [s["slug"] for s in seed_data.SAMPLE_POSTS]
        for index, post in enumerate(posts):
            assert post.author_id == first
            assert post.category_id == categories[index % len(categories)].id
            assert post.like_count == 0

    def test_import_twice_replaces_the_sample_set(self, db, session_factory):
        _add_user(db, "first@example.com")
        assert seed_data.import_data(session_factory) is True
        assert seed_data.import_data(session_factory) is True

        assert db.query(Post).count() == len(seed_data.SAMPLE_POSTS)
        assert db.query(Category).count() == len(seed_data.SAMPLE_CATEGORIES)


class TestDestroyAndList:

    def test_destroy_keeps_users(self, db, session_factory):
        _add_user(db, "first@example.com")
        seed_data.import_data(session_factory)

        assert seed_data.destroy_data(session_factory) is True

        db.expire_all()
        assert db.query(Post).count() == 0
        assert db.query(Category).count() == 0
        assert db.query(User).count() == 1

    def test_list_counts(self, db, session_factory, capsys):
        _add_user(db, "first@example.com")
        seed_data.import_data(session_factory)
        capsys.readouterr()

        seed_data.list_counts(session_factory)
        rows = {
            parts[0]: int(parts[1])
            for parts in (line.split() for line in capsys.readouterr().out.splitlines())
            if len(parts) == 2 and parts[1].isdigit()
        }
        assert rows["users"] == 1
        assert rows["categories"] == len(seed_data.SAMPLE_CATEGORIES)
        assert rows["posts"] == len(seed_data.SAMPLE_POSTS)
        assert rows["comments"] == 0
