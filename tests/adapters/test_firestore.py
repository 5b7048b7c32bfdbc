"""Tests for the Firestore adapter.

Focus: operator spelling (silent mismatch otherwise), thread-to-loop
callback handoff (easy to get wrong), and error wrapping. The client is
mocked; tests touching the real library are skipped when it is absent.
"""

import asyncio
import importlib.util
import threading
from unittest.mock import MagicMock, patch

import pytest

from storecall.adapters import firestore as adapter
from storecall.adapters.firestore import (
    FirestoreCollection,
    FirestoreDocument,
    FirestoreQuerySnapshot,
    FirestoreStore,
    _snapshot_callback,
    _translate_operator,
)
from storecall.storage import (
    CollectionReference,
    DocumentReference,
    DocumentStore,
    QuerySnapshot,
    StoreOperationError,
)

HAS_FIRESTORE = (
    importlib.util.find_spec("google") is not None
    and importlib.util.find_spec("google.cloud") is not None
    and importlib.util.find_spec("google.cloud.firestore") is not None
)


class FakeAPIError(Exception):
    pass


@pytest.fixture
def api_error():
    """Stand in for GoogleAPIError so the client library is not needed."""
    with patch.object(adapter, "_google_api_error", return_value=FakeAPIError):
        yield FakeAPIError


@pytest.mark.parametrize(
    ("operator", "expected"),
    [
        ("==", "=="),
        (">=", ">="),
        ("array-contains", "array_contains"),
        ("array-contains-any", "array_contains_any"),
        ("not_in", "not-in"),
        ("not-in", "not-in"),
    ],
)
def test_translate_operator(operator, expected) -> None:
    assert _translate_operator(operator) == expected


def test_wrappers_implement_protocols() -> None:
    client = MagicMock()
    store = FirestoreStore.from_client(client)

    collection = store.collection("users")
    document = collection.doc("ann")

    assert isinstance(store, DocumentStore)
    assert isinstance(collection, CollectionReference)
    assert isinstance(document, DocumentReference)
    assert isinstance(FirestoreQuerySnapshot(), QuerySnapshot)
    client.collection.assert_called_once_with("users")
    client.collection.return_value.document.assert_called_once_with("ann")


def test_subcollection_path() -> None:
    ref = MagicMock()
    FirestoreDocument(ref).collection("posts").doc("p1")

    ref.collection.assert_called_once_with("posts")
    ref.collection.return_value.document.assert_called_once_with("p1")


def test_snapshot_callback_without_loop_delivers_directly() -> None:
    received = []
    callback = _snapshot_callback(len, received.append, pytest.fail)

    callback(["a", "b"], None, None)

    assert received == [2]


def test_snapshot_callback_forwards_listener_errors() -> None:
    """Why: An exception on Firestore's watch thread would otherwise vanish."""
    errors = []

    def on_next(value):
        raise RuntimeError("listener broke")

    callback = _snapshot_callback(len, on_next, errors.append)
    callback([], None, None)

    assert [str(e) for e in errors] == ["listener broke"]


@pytest.mark.asyncio
async def test_snapshot_callback_hands_off_to_loop() -> None:
    """Deliveries from the watch thread run on the registering loop."""
    delivered = asyncio.get_running_loop().create_future()

    def on_next(value):
        delivered.set_result((value, threading.current_thread()))

    callback = _snapshot_callback(list, on_next, pytest.fail)
    watch = threading.Thread(target=callback, args=(("a",), None, None))
    watch.start()
    watch.join()

    value, thread = await asyncio.wait_for(delivered, timeout=1)
    assert value == ["a"]
    assert thread is threading.current_thread()


def test_document_on_snapshot_selects_single_document() -> None:
    ref = MagicMock()
    received = []

    FirestoreDocument(ref).on_snapshot(received.append, pytest.fail)
    [callback] = ref.on_snapshot.call_args.args
    callback(["snapshot"], None, None)

    assert received == ["snapshot"]


def test_query_on_snapshot_wraps_docs() -> None:
    ref = MagicMock()
    received = []

    handle = FirestoreCollection(ref).on_snapshot(received.append, pytest.fail)
    [callback] = ref.on_snapshot.call_args.args
    callback(["a", "b"], None, None)

    assert handle is ref.on_snapshot.return_value
    assert received == [FirestoreQuerySnapshot(docs=["a", "b"])]


@pytest.mark.asyncio
async def test_collection_get_returns_query_snapshot(api_error) -> None:
    ref = MagicMock()
    ref.get.return_value = ["a", "b"]

    snapshot = await FirestoreCollection(ref).get()

    assert snapshot.docs == ["a", "b"]


@pytest.mark.asyncio
async def test_set_reads_back_written_document(api_error) -> None:
    ref = MagicMock()
    ref.get.return_value = "fresh"

    result = await FirestoreDocument(ref).set({"age": 31}, merge=True)

    ref.set.assert_called_once_with({"age": 31}, merge=True)
    assert result == "fresh"


@pytest.mark.asyncio
async def test_update_reads_back_written_document(api_error) -> None:
    ref = MagicMock()
    ref.get.return_value = "fresh"

    assert await FirestoreDocument(ref).update({"age": 32}) == "fresh"
    ref.update.assert_called_once_with({"age": 32})


@pytest.mark.asyncio
async def test_add_reads_back_created_document(api_error) -> None:
    ref = MagicMock()
    created = MagicMock()
    created.get.return_value = "created"
    ref.add.return_value = ("update_time", created)

    assert await FirestoreCollection(ref).add({"age": 31}) == "created"
    ref.add.assert_called_once_with({"age": 31})


@pytest.mark.asyncio
async def test_api_errors_become_store_errors(api_error) -> None:
    ref = MagicMock()
    ref.get.side_effect = api_error("permission denied")

    with pytest.raises(StoreOperationError, match="permission denied") as info:
        await FirestoreDocument(ref).get()
    assert isinstance(info.value.__cause__, api_error)


@pytest.mark.asyncio
async def test_other_errors_propagate_unchanged(api_error) -> None:
    ref = MagicMock()
    ref.get.side_effect = KeyError("boom")

    with pytest.raises(KeyError):
        await FirestoreDocument(ref).get()


@pytest.mark.skipif(HAS_FIRESTORE, reason="google-cloud-firestore is installed")
def test_from_project_without_library_explains_install() -> None:
    with pytest.raises(ImportError, match=r"pip install storecall\[firestore\]"):
        FirestoreStore.from_project("demo")


@pytest.mark.skipif(not HAS_FIRESTORE, reason="google-cloud-firestore not installed")
def test_where_builds_field_filter() -> None:
    from google.cloud.firestore_v1.base_query import FieldFilter

    ref = MagicMock()
    FirestoreCollection(ref).where("tags", "array-contains", "admin")

    field_filter = ref.where.call_args.kwargs["filter"]
    assert isinstance(field_filter, FieldFilter)
    assert field_filter.field_path == "tags"
    assert field_filter.op_string == "array_contains"
    assert field_filter.value == "admin"
