from typing import List, Dict, Any

from fastapi import APIRouter, Query

from dependencies import Posts, CurrentUser
from models.post import Post, PostPayload, Comment, CommentRequest, Statistics

router = APIRouter()


@router.get("")
def get_posts(store: Posts) -> List[Post]:
    """Get all posts"""
    return store.list_posts()


@router.get("/search")
def search_posts(store: Posts, term: str = Query("")) -> List[Post]:
    """
    Search posts by title or content

    Args:
        term: Case-insensitive substring; an empty term matches every post
    """
    return store.search_posts(term)


@router.get("/statistics")
def get_statistics(store: Posts) -> Statistics:
    """Aggregate statistics over all posts"""
    return store.compute_statistics()


@router.get("/statistics/most-liked")
def get_most_liked(store: Posts) -> Post:
    return store.most_liked_post()


@router.get("/statistics/most-disliked")
def get_most_disliked(store: Posts) -> Post:
    return store.most_disliked_post()


@router.get("/statistics/unique-authors")
def get_unique_authors(store: Posts) -> Dict[str, int]:
    return {"unique_authors": store.unique_author_count()}


@router.get("/author/{author}")
def get_posts_by_author(author: str, store: Posts) -> List[Post]:
    """Get all posts created by a principal"""
    return store.get_posts_by_author(author)


@router.get("/{post_id}")
def get_post(post_id: str, store: Posts) -> Post:
    return store.get_post(post_id)


@router.get("/{post_id}/comments")
def get_comments(post_id: str, store: Posts) -> List[Comment]:
    return store.get_comments(post_id)


@router.post("")
def create_post(payload: PostPayload, store: Posts, current_user: CurrentUser) -> Post:
    """Create a new post authored by the caller"""
    return store.create_post(payload, current_user)


@router.put("/{post_id}")
def update_post(
        post_id: str,
        payload: PostPayload,
        store: Posts,
        current_user: CurrentUser
) -> Post:
    """Replace title, content and image of a post; only its author may do this"""
    return store.update_post(post_id, payload, current_user)


@router.delete("/{post_id}")
def delete_post(post_id: str, store: Posts, current_user: CurrentUser) -> Post:
    """Delete a post; only its author may do this"""
    return store.delete_post(post_id, current_user)


@router.post("/{post_id}/comment")
def add_comment(
        post_id: str,
        comment: CommentRequest,
        store: Posts,
        current_user: CurrentUser
) -> Comment:
    """Add a comment to a post"""
    return store.add_comment(post_id, comment.content, current_user)


@router.post("/{post_id}/like")
def like_post(post_id: str, store: Posts, current_user: CurrentUser) -> Dict[str, Any]:
    likes = store.like_post(post_id, current_user)
    return {"post_id": post_id, "likes": likes}


@router.post("/{post_id}/unlike")
def unlike_post(post_id: str, store: Posts, current_user: CurrentUser) -> Dict[str, Any]:
    likes = store.unlike_post(post_id, current_user)
    return {"post_id": post_id, "likes": likes}


@router.post("/{post_id}/dislike")
def dislike_post(post_id: str, store: Posts, current_user: CurrentUser) -> Dict[str, Any]:
    dislikes = store.dislike_post(post_id, current_user)
    return {"post_id": post_id, "dislikes": dislikes}
