"""ORM object -> JSON dict conversion shared by the routers."""


def _iso(value):
    return value.isoformat() if value else None


def serialize_author(user):
    return {
        "id": user.id,
        "name": user.name,
        "avatarUrl": user.avatar_url,
    }


def serialize_category(category):
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
    }


def serialize_post(post):
    """Convert Post ORM object to dict for JSON serialization"""
    return {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "content": post.content,
        "imageUrl": post.image_url,
        "likes": post.liker_ids,
        "likeCount": post.like_count,
        "author": serialize_author(post.author) if post.author else None,
        "category": serialize_category(post.category) if post.category else None,
        "createdAt": _iso(post.created_at),
        "updatedAt": _iso(post.updated_at),
    }


def serialize_comment(comment):
    return {
        "id": comment.id,
        "post": comment.post_id,
        "user": {"id": comment.user.id, "name": comment.user.name} if comment.user else None,
        "text": comment.text,
        "parent": comment.parent_id,
        "createdAt": _iso(comment.created_at),
    }


def serialize_user(user, token=None):
    """Public profile fields; the password hash never leaves the server."""
    data = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "bio": user.bio,
        "avatarUrl": user.avatar_url,
        "bookmarks": user.bookmark_ids,
        "createdAt": _iso(user.created_at),
    }
    if token is not None:
        data["token"] = token
    return data
