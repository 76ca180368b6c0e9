from datetime import datetime, timezone

import pytest

from models.post import Comment, Post, PostPayload, Reaction
from services.kv_map import FirestoreMap, InMemoryMap
from services.posts import PostStore


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, docs, doc_id):
        self.docs = docs
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.docs.get(self.id))

    def set(self, data):
        self.docs[self.id] = data

    def delete(self):
        self.docs.pop(self.id, None)


class FakeCollection:
    def __init__(self):
        self.docs = {}

    def document(self, doc_id):
        return FakeDocument(self.docs, doc_id)

    def stream(self):
        return [FakeSnapshot(doc_id, data) for doc_id, data in self.docs.items()]


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())


def sample_post(post_id="p1"):
    created = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return Post(
        id=post_id,
        author="alice",
        title="Title",
        content="Body",
        created_at=created,
        comments=[Comment(author="bob", content="hey", created_at=created)],
        reactions={"bob": Reaction.LIKED, "carol": Reaction.DISLIKED},
    )


@pytest.fixture(params=["memory", "firestore"])
def post_map(request):
    if request.param == "memory":
        return InMemoryMap()
    return FirestoreMap(client=FakeFirestore(), collection="posts")


def test_insert_get_remove(post_map):
    post = sample_post()
    assert post_map.insert(post.id, post) is None
    assert post_map.get(post.id) == post
    assert "p1" in post_map
    assert len(post_map) == 1

    assert post_map.remove(post.id) == post
    assert post_map.get(post.id) is None
    assert post_map.remove(post.id) is None
    assert len(post_map) == 0


def test_insert_overwrites(post_map):
    post = sample_post()
    post_map.insert(post.id, post)
    edited = post.model_copy(update={"title": "Edited"})
    assert post_map.insert(post.id, edited) == post
    assert post_map.get(post.id).title == "Edited"


def test_items_and_values(post_map):
    post_map.insert("p1", sample_post("p1"))
    post_map.insert("p2", sample_post("p2"))
    assert [key for key, _ in post_map.items()] == ["p1", "p2"]
    assert [post.id for post in post_map.values()] == ["p1", "p2"]


def test_stored_copies_are_isolated():
    post_map = InMemoryMap()
    post = sample_post()
    post_map.insert(post.id, post)
    fetched = post_map.get(post.id)
    fetched.reactions["dave"] = Reaction.LIKED
    assert "dave" not in post_map.get(post.id).reactions


def test_firestore_documents_hold_reactions_not_derived_counts():
    client = FakeFirestore()
    post_map = FirestoreMap(client=client, collection="posts")
    post_map.insert("p1", sample_post())

    document = client.collection("posts").docs["p1"]
    assert document["reactions"] == {"bob": "liked", "carol": "disliked"}
    assert "likes" not in document
    assert post_map.get("p1").likes == 1


def test_store_over_firestore_map():
    store = PostStore(FirestoreMap(client=FakeFirestore()), id_factory=lambda: "p1")
    post = store.create_post(PostPayload(title="t", content="c"), "alice")
    store.like_post(post.id, "bob")
    store.dislike_post(post.id, "bob")
    stored = store.get_post(post.id)
    assert (stored.likes, stored.dislikes) == (0, 1)
