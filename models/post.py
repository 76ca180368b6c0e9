from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, computed_field


class Reaction(Enum):
    LIKED = "liked"
    DISLIKED = "disliked"


class PostPayload(BaseModel):
    title: str
    content: str
    image: str = ""


class Comment(BaseModel):
    author: str
    content: str
    created_at: datetime


class CommentRequest(BaseModel):
    content: str


class Post(BaseModel):
    id: str
    author: str
    title: str
    content: str
    image: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None
    comments: List[Comment] = []
    # principal -> reaction; a principal missing from the map is neutral
    reactions: Dict[str, Reaction] = {}

    @computed_field
    @property
    def likes(self) -> int:
        return len(self.liked)

    @computed_field
    @property
    def dislikes(self) -> int:
        return len(self.disliked)

    @computed_field
    @property
    def liked(self) -> List[str]:
        return sorted(p for p, r in self.reactions.items() if r is Reaction.LIKED)

    @computed_field
    @property
    def disliked(self) -> List[str]:
        return sorted(p for p, r in self.reactions.items() if r is Reaction.DISLIKED)

    def reaction_of(self, principal: str) -> Optional[Reaction]:
        """Current reaction of a principal, None when neutral"""
        return self.reactions.get(principal)


class Statistics(BaseModel):
    total_posts: int
    unique_authors: int
    most_liked_post: Post
    most_disliked_post: Post
