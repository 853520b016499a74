"""Common utilities for tests."""

from __future__ import annotations

import unittest
import unittest.mock
from collections.abc import Iterator
from typing import Any
from unittest.mock import MagicMock, patch

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference

from apkgate import create_app

# Every module that talks to Firestore through ``firebase_admin.firestore``.
FIRESTORE_MODULES = (
    "apkgate.auth.routes",
    "apkgate.auth.services",
    "apkgate.user.routes",
    "apkgate.user.services",
    "apkgate.group.routes",
    "apkgate.group.services.group_service",
    "apkgate.group.services.invitations",
    "apkgate.install_requests.routes",
    "apkgate.install_requests.services",
)

MOCK_TIMESTAMP = "2024-01-01T00:00:00Z"


class MockArrayUnion:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockArrayRemove:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockFieldFilter:
    def __init__(self, field_path: str, op_string: str, value: Any) -> None:
        self.field_path = field_path
        self.op_string = op_string
        self.value = value


class MockBatch:
    """Write batch that stages everything and applies it only on commit."""

    def __init__(self, db: Any) -> None:
        self.db = db
        self.writes: list[tuple[str, Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def update(self, ref: Any, data: Any) -> None:
        self.writes.append(("update", ref, data))

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        self.writes.append(("set", ref, data))

    def delete(self, ref: Any) -> None:
        self.writes.append(("delete", ref, None))

    def _real_commit(self) -> None:
        for op, ref, data in self.writes:
            if op == "delete":
                ref.delete()
            elif op == "set":
                ref.set(data)
            else:
                ref.update(data)


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and sentinels."""

    def collection_where(
        self: Any,
        field_path: str | None = None,
        op_string: str | None = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: str | None = None,
        op_string: str | None = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    if not hasattr(DocumentReference, "_orig_update"):
        DocumentReference._orig_update = DocumentReference.update

        def patched_update(self: Any, data: dict[str, Any]) -> Any:
            current_data = self.get().to_dict() or {}
            new_data = {}
            for k, v in data.items():
                existing = current_data.get(k, [])
                if not isinstance(existing, list):
                    existing = []
                if isinstance(v, MockArrayUnion):
                    merged = list(existing)
                    for item in v.values:
                        if item not in merged:
                            merged.append(item)
                    new_data[k] = merged
                elif isinstance(v, MockArrayRemove):
                    new_data[k] = [i for i in existing if i not in v.values]
                else:
                    new_data[k] = v
            return self._orig_update(new_data)

        DocumentReference.update = patched_update


def make_firestore_module(db: Any) -> MagicMock:
    """Build a stand-in for ``firebase_admin.firestore`` backed by ``db``."""
    module = MagicMock()
    module.client.return_value = db
    module.FieldFilter = MockFieldFilter
    module.ArrayUnion = MockArrayUnion
    module.ArrayRemove = MockArrayRemove
    module.SERVER_TIMESTAMP = MOCK_TIMESTAMP
    return module


class ApiTestCase(unittest.TestCase):
    """Base test case: a testing app whose Firestore is a MockFirestore."""

    def setUp(self) -> None:
        """Set up a test client and a mock database."""
        patch_mockfirestore()
        self.db = MockFirestore()

        self.batches: list[MockBatch] = []

        def new_batch() -> MockBatch:
            batch = MockBatch(self.db)
            self.batches.append(batch)
            return batch

        self.db.batch = MagicMock(side_effect=new_batch)
        self.firestore_module = make_firestore_module(self.db)

        patchers = [
            patch(f"{module}.firestore", new=self.firestore_module)
            for module in FIRESTORE_MODULES
        ]
        patchers.append(patch("firebase_admin.initialize_app"))
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.app = create_app({"TESTING": True})
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self) -> None:
        """Tear down the app context and reset the mock database."""
        self.app_context.pop()
        self.db.reset()

    def post(self, operation: str, payload: Any) -> Any:
        """POST a JSON payload to ``/api/<operation>``."""
        return self.client.post(f"/api/{operation}", json=payload)

    # -- fixtures -----------------------------------------------------------

    def add_user(self, user_id: str, email: str, role: str = "member", **fields: Any):
        data = {"email": email, "role": role, "groups": []}
        data.update(fields)
        self.db.collection("users").document(user_id).set(data)
        return data

    def add_group(
        self,
        group_id: str,
        leader_id: str,
        member_ids: list[str] | None = None,
        name: str = "Family",
    ):
        data = {"name": name, "leaderId": leader_id, "memberIds": member_ids or []}
        self.db.collection("groups").document(group_id).set(data)
        return data

    def add_install_request(
        self,
        request_id: str,
        user_id: str,
        group_id: str,
        apk_file_name: str = "game.apk",
        status: str = "pending",
        **fields: Any,
    ):
        data = {
            "userId": user_id,
            "groupId": group_id,
            "apkFileName": apk_file_name,
            "status": status,
        }
        data.update(fields)
        self.db.collection("installRequests").document(request_id).set(data)
        return data

    def get_doc(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        snapshot = self.db.collection(collection).document(doc_id).get()
        return snapshot.to_dict() if snapshot.exists else None

    def doc_ids(self, collection: str) -> set[str]:
        return {
            doc.id for doc in self.db.collection(collection).stream() if doc.exists
        }
