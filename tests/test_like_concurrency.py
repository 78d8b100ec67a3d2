"""
Concurrent like toggles must not lose updates
"""

from concurrent.futures import ThreadPoolExecutor

from app.models.category import Category
from app.models.post import Post
from app.models.user import User
from app.services import posts as post_service


def _seed(db, user_count):
    users = [
        User(name=f"Reader {i}", email=f"reader{i}@example.com", password_hash="not-a-real-hash")
        for i in range(user_count)
    ]
    category = Category(name="Race", slug="race")
    db.add_all(users + [category])
    db.flush()

    post = Post(
        author_id=users[0].id,
        title="Contended",
        slug="contended",
        excerpt="x",
        content="y",
        image_url="https://images.example.com/c.png",
        category_id=category.id,
        like_count=0,
    )
    db.add(post)
    db.commit()
    return post.id, [u.id for u in users]


def _toggle(session_factory, post_id, user_id):
    session = session_factory()
    try:
        post = post_service.toggle_like(session, post_id, user_id)
        return post.like_count, len(post.likes)
    finally:
        session.close()


class TestConcurrentLikes:

    def test_two_users_at_once(self, db, session_factory):
        post_id, user_ids = _seed(db, 2)

        with ThreadPoolExecutor(max_workers=2) as pool:
            list(pool.map(lambda uid: _toggle(session_factory, post_id, uid), user_ids))

        db.expire_all()
        post = db.query(Post).filter(Post.id == post_id).first()
        assert post.like_count == 2
        assert sorted(post.liker_ids) == sorted(user_ids)

    def test_many_users_end_state(self, db, session_factory):
        post_id, user_ids = _seed(db, 12)

        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(lambda uid: _toggle(session_factory, post_id, uid), user_ids))

        # every intermediate response already satisfies likeCount == |likes|
        for like_count, like_total in results:
            assert like_count == like_total

        db.expire_all()
        post = db.query(Post).filter(Post.id == post_id).first()
        assert post.like_count == len(post.likes) == 12
        assert sorted(post.liker_ids) == sorted(user_ids)

    def test_concurrent_unlike_and_like(self, db, session_factory):
        post_id, user_ids = _seed(db, 6)
        early, late = user_ids[:3], user_ids[3:]
        for uid in early:
            _toggle(session_factory, post_id, uid)

        # early users unlike while late users like
        with ThreadPoolExecutor(max_workers=6) as pool:
            list(pool.map(lambda uid: _toggle(session_factory, post_id, uid), user_ids))

        db.expire_all()
        post = db.query(Post).filter(Post.id == post_id).first()
        assert sorted(post.liker_ids) == sorted(late)
        assert post.like_count == 3
