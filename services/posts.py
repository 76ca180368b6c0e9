import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

import bleach

from models.post import Comment, Post, PostPayload, Reaction, Statistics
from services.errors import NoResultsError, PostNotFoundError, ReactionConflictError, UnauthorizedError
from services.kv_map import PostMap

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_post_id() -> str:
    return str(uuid.uuid4())


def apply_payload(post: Post, payload: PostPayload, updated_at: datetime) -> Post:
    """Copy of `post` with the author-editable fields replaced"""
    return post.model_copy(update={
        "title": payload.title,
        "content": payload.content,
        "image": payload.image,
        "updated_at": updated_at,
    })


class PostStore:
    def __init__(
            self,
            posts: PostMap,
            clock: Callable[[], datetime] = utc_now,
            id_factory: Callable[[], str] = new_post_id,
            empty_results_as_error: bool = True,
    ):
        """
        Post operations over a key-value map

        Args:
            posts: Map holding the post records
            clock: Source of the current time
            id_factory: Generator for new post ids
            empty_results_as_error: Raise NoResultsError for empty author/search queries
        """
        self.posts = posts
        self.clock = clock
        self.id_factory = id_factory
        self.empty_results_as_error = empty_results_as_error

    def _require(self, post_id: str, action: Optional[str] = None) -> Post:
        post = self.posts.get(post_id)
        if post is None:
            if action is None:
                raise PostNotFoundError(f"a post with id={post_id} not found")
            raise PostNotFoundError(f"couldn't {action} a post with id={post_id}. post not found")
        return post

    def _results(self, posts: List[Post], message: str) -> List[Post]:
        if not posts and self.empty_results_as_error:
            raise NoResultsError(message)
        return posts

    def list_posts(self) -> List[Post]:
        return self.posts.values()

    def get_post(self, post_id: str) -> Post:
        return self._require(post_id)

    def create_post(self, payload: PostPayload, caller: str) -> Post:
        post = Post(
            id=self.id_factory(),
            author=caller,
            title=payload.title,
            content=payload.content,
            image=payload.image,
            created_at=self.clock(),
        )
        self.posts.insert(post.id, post)
        logger.info("Post %s created by %s", post.id, caller)
        return post

    def update_post(self, post_id: str, payload: PostPayload, caller: str) -> Post:
        post = self._require(post_id, "update")
        if post.author != caller:
            logger.warning("Rejected update of post %s by non-author %s", post_id, caller)
            raise UnauthorizedError("only post authors can update a post")

        updated = apply_payload(post, payload, self.clock())
        self.posts.insert(post_id, updated)
        logger.info("Post %s updated", post_id)
        return updated

    def delete_post(self, post_id: str, caller: str) -> Post:
        post = self._require(post_id, "delete")
        if post.author != caller:
            logger.warning("Rejected delete of post %s by non-author %s", post_id, caller)
            raise UnauthorizedError("only post authors can delete a post")

        self.posts.remove(post_id)
        logger.info("Post %s deleted", post_id)
        return post

    def add_comment(self, post_id: str, content: str, caller: str) -> Comment:
        post = self._require(post_id, "comment on")
        comment = Comment(
            author=caller,
            content=bleach.clean(content, strip=True),
            created_at=self.clock(),
        )
        post.comments.append(comment)
        self.posts.insert(post_id, post)
        return comment

    def get_comments(self, post_id: str) -> List[Comment]:
        return self._require(post_id).comments

    def like_post(self, post_id: str, caller: str) -> int:
        post = self._require(post_id, "like")
        if post.reaction_of(caller) is Reaction.LIKED:
            logger.warning("%s tried to like post %s twice", caller, post_id)
            raise ReactionConflictError("you can't like a post twice")

        # neutral -> liked, or a switch away from disliked
        post.reactions[caller] = Reaction.LIKED
        self.posts.insert(post_id, post)
        return post.likes

    def unlike_post(self, post_id: str, caller: str) -> int:
        post = self._require(post_id, "unlike")
        if post.reaction_of(caller) is not Reaction.LIKED:
            logger.warning("%s tried to unlike post %s without liking it", caller, post_id)
            raise ReactionConflictError("you haven't liked this post")

        del post.reactions[caller]
        self.posts.insert(post_id, post)
        return post.likes

    def dislike_post(self, post_id: str, caller: str) -> int:
        post = self._require(post_id, "dislike")
        if post.reaction_of(caller) is Reaction.DISLIKED:
            logger.warning("%s tried to dislike post %s twice", caller, post_id)
            raise ReactionConflictError("you can't dislike a post twice")

        post.reactions[caller] = Reaction.DISLIKED
        self.posts.insert(post_id, post)
        return post.dislikes

    def get_posts_by_author(self, author: str) -> List[Post]:
        posts = [post for post in self.posts.values() if post.author == author]
        return self._results(posts, "No posts by the user found")

    def search_posts(self, term: str) -> List[Post]:
        needle = term.lower()
        matched = [
            post for _, post in self.posts.items()
            if needle in post.title.lower() or needle in post.content.lower()
        ]
        return self._results(matched, "No posts with the specified term")

    def unique_author_count(self, posts: Optional[List[Post]] = None) -> int:
        if posts is None:
            posts = self.posts.values()
        return len({post.author for post in posts})

    @staticmethod
    def _top_by(posts: List[Post], count: Callable[[Post], int]) -> Post:
        # strictly greater wins, so the earliest post keeps a tie
        best = posts[0]
        for post in posts[1:]:
            if count(post) > count(best):
                best = post
        return best

    def _all_or_raise(self) -> List[Post]:
        posts = self.posts.values()
        if not posts:
            raise NoResultsError("No user data")
        return posts

    def most_liked_post(self) -> Post:
        return self._top_by(self._all_or_raise(), lambda post: post.likes)

    def most_disliked_post(self) -> Post:
        return self._top_by(self._all_or_raise(), lambda post: post.dislikes)

    def compute_statistics(self) -> Statistics:
        posts = self._all_or_raise()
        return Statistics(
            total_posts=len(posts),
            unique_authors=self.unique_author_count(posts),
            most_liked_post=self._top_by(posts, lambda post: post.likes),
            most_disliked_post=self._top_by(posts, lambda post: post.dislikes),
        )
