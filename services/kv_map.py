from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

import firebase_admin
from firebase_admin import firestore as fs

from models.post import Post

# derived fields are recomputed from `reactions` on load
_DERIVED_FIELDS = {"likes", "dislikes", "liked", "disliked"}


class PostMap(ABC):
    """Key-value map holding post records by id"""

    @abstractmethod
    def get(self, key: str) -> Optional[Post]:
        pass

    @abstractmethod
    def insert(self, key: str, post: Post) -> Optional[Post]:
        """Insert or overwrite a record, returning the previous one if any"""
        pass

    @abstractmethod
    def remove(self, key: str) -> Optional[Post]:
        pass

    @abstractmethod
    def values(self) -> List[Post]:
        pass

    @abstractmethod
    def items(self) -> List[Tuple[str, Post]]:
        pass

    def __len__(self) -> int:
        return len(self.values())

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryMap(PostMap):
    """Process-owned map; iteration follows insertion order"""

    def __init__(self):
        self._posts: Dict[str, Post] = {}

    def get(self, key: str) -> Optional[Post]:
        post = self._posts.get(key)
        # hand out copies so callers never mutate stored state in place
        return post.model_copy(deep=True) if post else None

    def insert(self, key: str, post: Post) -> Optional[Post]:
        previous = self._posts.get(key)
        self._posts[key] = post.model_copy(deep=True)
        return previous

    def remove(self, key: str) -> Optional[Post]:
        return self._posts.pop(key, None)

    def values(self) -> List[Post]:
        return [post.model_copy(deep=True) for post in self._posts.values()]

    def items(self) -> List[Tuple[str, Post]]:
        return [(key, post.model_copy(deep=True)) for key, post in self._posts.items()]

    def __len__(self) -> int:
        return len(self._posts)


class FirestoreMap(PostMap):
    """Map persisted as one Firestore document per post"""

    def __init__(self, app: Optional[firebase_admin.App] = None, collection: str = "posts", client=None):
        self.db = client if client is not None else fs.client(app)
        self.collection_name = collection

    def collection(self):
        return self.db.collection(self.collection_name)

    @staticmethod
    def _to_document(post: Post) -> dict:
        return post.model_dump(mode="json", exclude=_DERIVED_FIELDS)

    @staticmethod
    def _from_document(data: dict) -> Post:
        return Post.model_validate(data)

    def get(self, key: str) -> Optional[Post]:
        snapshot = self.collection().document(key).get()
        if not snapshot.exists:
            return None
        return self._from_document(snapshot.to_dict())

    def insert(self, key: str, post: Post) -> Optional[Post]:
        previous = self.get(key)
        self.collection().document(key).set(self._to_document(post))
        return previous

    def remove(self, key: str) -> Optional[Post]:
        previous = self.get(key)
        if previous is not None:
            self.collection().document(key).delete()
        return previous

    def values(self) -> List[Post]:
        return [post for _, post in self.items()]

    def items(self) -> List[Tuple[str, Post]]:
        return [(doc.id, self._from_document(doc.to_dict())) for doc in self.collection().stream()]
