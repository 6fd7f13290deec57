import pytest

from quranpro.conversations.service import ConversationService
from quranpro.exceptions import NotFound, ValidationError


@pytest.fixture
def store(db):
    return ConversationService(db)


def test_create_uses_default_title(store, make_user):
    user = make_user()

    conversation = store.create(user.id)

    assert conversation.title == "New conversation"
    assert conversation.user_id == user.id
    assert conversation.status == 0


def test_list_is_newest_first(store, make_user):
    user = make_user()
    first = store.create(user.id, "First")
    second = store.create(user.id, "Second")

    assert [c.id for c in store.list(user.id)] == [second.id, first.id]


def test_get_owned_rejects_other_users_and_bad_ids(store, make_user):
    owner, other = make_user(), make_user()
    conversation = store.create(owner.id)

    assert store.get_owned(owner.id, conversation.id).id == conversation.id
    assert store.get_owned(owner.id, str(conversation.id)).id == conversation.id
    assert store.get_owned(other.id, conversation.id) is None
    assert store.get_owned(owner.id, "abc") is None
    assert store.get_owned(owner.id, None) is None
    assert store.get_owned(owner.id, 0) is None


def test_rename_and_delete_check_ownership(store, make_user):
    owner, other = make_user(), make_user()
    conversation = store.create(owner.id)

    assert store.rename(other.id, conversation.id, "Hijack") is False
    assert store.delete(other.id, conversation.id) is False
    assert store.rename(owner.id, conversation.id, "Renamed") is True
    assert store.get(conversation.id).title == "Renamed"

    with pytest.raises(ValidationError):
        store.rename(owner.id, conversation.id, "")


def test_update_status(store, make_user):
    user = make_user()
    conversation = store.create(user.id)

    assert store.update_status(user.id, conversation.id, 1) is True
    assert store.get(conversation.id).status == 1

    with pytest.raises(ValidationError):
        store.update_status(user.id, conversation.id, 9)


def test_delete_cascades_to_messages(store, make_user, count_rows):
    user = make_user()
    conversation = store.create(user.id)
    store.append_message(user.id, conversation.id, "user", "Salam")
    store.append_message(user.id, conversation.id, "bot", "Wa alaykum salam")

    assert store.delete(user.id, conversation.id) is True
    assert count_rows("messages", conversation_id=conversation.id) == 0
    assert store.list_messages(user.id, conversation.id) == []


def test_append_to_unowned_conversation_fails(store, make_user, count_rows):
    owner, other = make_user(), make_user()
    conversation = store.create(owner.id)

    with pytest.raises(NotFound):
        store.append_message(other.id, conversation.id, "user", "Not mine")
    with pytest.raises(NotFound):
        store.append_message(owner.id, 9999, "user", "Nowhere")

    assert count_rows("messages") == 0


def test_recent_messages_returns_last_window_oldest_first(store, make_user):
    user = make_user()
    conversation = store.create(user.id)
    for i in range(12):
        store.append_message(user.id, conversation.id, "user" if i % 2 == 0 else "bot", f"message {i}")

    recent = store.recent_messages(user.id, conversation.id, 10)

    assert [m.text for m in recent] == [f"message {i}" for i in range(2, 12)]


def test_list_messages_is_oldest_first(store, make_user):
    user = make_user()
    conversation = store.create(user.id)
    store.append_message(user.id, conversation.id, "user", "question")
    store.append_message(user.id, conversation.id, "bot", "answer")

    messages = store.list_messages(user.id, conversation.id)

    assert [(m.sender, m.text) for m in messages] == [("user", "question"), ("bot", "answer")]
    assert messages[0].to_dict()["conversationId"] == conversation.id


def test_search_is_case_insensitive(store, make_user):
    user = make_user()
    conversation = store.create(user.id)
    store.append_message(user.id, conversation.id, "user", "Tell me about PATIENCE")
    store.append_message(user.id, conversation.id, "bot", "Sabr is patience")
    store.append_message(user.id, conversation.id, "user", "Thanks")

    results = store.search(user.id, conversation.id, "patience")

    assert [m.text for m in results] == ["Tell me about PATIENCE", "Sabr is patience"]


def test_search_treats_wildcards_literally(store, make_user):
    user = make_user()
    conversation = store.create(user.id)
    store.append_message(user.id, conversation.id, "user", "100%test done")
    store.append_message(user.id, conversation.id, "user", "a test without percent")
    store.append_message(user.id, conversation.id, "user", "snake_case name")
    store.append_message(user.id, conversation.id, "user", "snakeXcase name")
    store.append_message(user.id, conversation.id, "user", "back\\slash")

    assert [m.text for m in store.search(user.id, conversation.id, "%test")] == ["100%test done"]
    assert [m.text for m in store.search(user.id, conversation.id, "e_c")] == ["snake_case name"]
    assert [m.text for m in store.search(user.id, conversation.id, "k\\s")] == ["back\\slash"]


def test_search_is_scoped_to_owner(store, make_user):
    owner, other = make_user(), make_user()
    conversation = store.create(owner.id)
    store.append_message(owner.id, conversation.id, "user", "private words")

    assert store.search(other.id, conversation.id, "private") == []

    with pytest.raises(ValidationError):
        store.search(owner.id, conversation.id, "")


def test_deleting_user_cascades_everything(db, store, make_user, count_rows):
    user = make_user()
    conversation = store.create(user.id)
    store.append_message(user.id, conversation.id, "user", "hello")
    db.increment_daily_stats(user.id, "2024-01-01", 10, 1, 30, 0)
    db.add_favorite(user.id, "verse", "2:255", "Ayat al-Kursi", None)

    assert db.delete_user(user.id) is True

    for table in ("conversations", "messages", "quran_stats", "favorites"):
        assert count_rows(table, user_id=user.id) == 0
