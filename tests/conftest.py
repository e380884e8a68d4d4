import os

# Settings are read at import time
os.environ["ADMIN_EMAIL"] = "admin@gymvisa.com"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"

import copy
import itertools
import json
import smtplib
from types import SimpleNamespace

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from gridfs.errors import GridFSError, NoFile
from pymongo.errors import DuplicateKeyError

from app.api.deps import get_database, get_email_service, get_push_service
from app.core.config import Settings
from app.main import app
from app.services.email_service import EmailService
from app.services.push_service import PushService

ADMIN_HEADERS = {"X-Admin-Email": "admin@gymvisa.com"}


# ============================================================
# IN-MEMORY DOCUMENT STORE
# ============================================================

def _matches(document, query):
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and any(op.startswith("$") for op in condition):
            if "$in" in condition and value not in condition["$in"]:
                return False
            if "$ne" in condition and value == condition["$ne"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents

    def sort(self, key, direction=1):
        self.documents = sorted(
            self.documents,
            key=lambda doc: (doc.get(key) is not None, doc.get(key) if doc.get(key) is not None else 0),
            reverse=direction == -1,
        )
        return self

    async def to_list(self, length=None):
        return [copy.deepcopy(doc) for doc in self.documents[:length]]


class FakeCollection:
    """Async collection holding documents in a list."""

    def __init__(self, documents=()):
        self.documents = [copy.deepcopy(doc) for doc in documents]
        self.indexes = []
        self.fail_inserts = False
        self.fail_deletes_for = set()

    async def insert_one(self, document):
        if self.fail_inserts:
            raise DuplicateKeyError("insert rejected")
        document.setdefault("_id", ObjectId())
        if any(doc["_id"] == document["_id"] for doc in self.documents):
            raise DuplicateKeyError("duplicate _id")
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one(self, query):
        for doc in self.documents:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return FakeCursor([doc for doc in self.documents if _matches(doc, query or {})])

    def _apply(self, doc, update):
        before = copy.deepcopy(doc)
        for key, value in update.get("$set", {}).items():
            doc[key] = value
        for key in update.get("$unset", {}):
            doc.pop(key, None)
        return doc != before

    async def update_one(self, query, update):
        for doc in self.documents:
            if _matches(doc, query):
                modified = self._apply(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_many(self, query, update):
        matched = modified = 0
        for doc in self.documents:
            if _matches(doc, query):
                matched += 1
                modified += int(self._apply(doc, update))
        return SimpleNamespace(matched_count=matched, modified_count=modified)

    async def delete_one(self, query):
        for index, doc in enumerate(self.documents):
            if _matches(doc, query):
                if doc["_id"] in self.fail_deletes_for:
                    raise RuntimeError("delete rejected")
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def count_documents(self, query):
        return sum(1 for doc in self.documents if _matches(doc, query))

    async def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return kwargs.get("name", str(keys))


class FakeGridOut:
    def __init__(self, stored):
        self._stored = stored
        self.metadata = stored["metadata"]

    async def read(self):
        return self._stored["data"]


class FakeFileCursor:
    def __init__(self, files):
        self.files = files

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for stored in self.files:
            yield SimpleNamespace(_id=stored["_id"], filename=stored["filename"])


class FakeBucket:
    """GridFS bucket kept in memory."""

    def __init__(self):
        self.files = []
        self.fail_uploads = False

    def find(self, query):
        return FakeFileCursor([f for f in self.files if _matches(f, query)])

    async def delete(self, file_id):
        self.files = [f for f in self.files if f["_id"] != file_id]

    async def upload_from_stream(self, filename, source, metadata=None):
        if self.fail_uploads:
            raise GridFSError("upload rejected")
        file_id = ObjectId()
        self.files.append({"_id": file_id, "filename": filename, "data": source, "metadata": metadata})
        return file_id

    async def open_download_stream(self, file_id):
        for stored in self.files:
            if stored["_id"] == file_id:
                return FakeGridOut(stored)
        raise NoFile(f"no file {file_id}")


class FakeDatabase:
    def __init__(self):
        self.users = FakeCollection()
        self.gyms = FakeCollection()
        self.scans = FakeCollection()
        self.transactions = FakeCollection()
        self.subscriptions = FakeCollection()
        self.payout_requests = FakeCollection()
        self.auth_accounts = FakeCollection()
        self.bucket = FakeBucket()

    def images_bucket(self):
        return self.bucket

    async def check_health(self):
        return True


# ============================================================
# OUTBOUND SERVICES
# ============================================================

class RecordingEmailService(EmailService):
    """Email service that records messages instead of talking to SMTP."""

    def __init__(self, failing=()):
        super().__init__(Settings(
            SMTP_HOST="smtp.test",
            SMTP_USERNAME="noreply@gymvisa.com",
            SMTP_PASSWORD="secret",
        ))
        self.failing = set(failing)
        self.messages = []

    def _deliver(self, message):
        if message["To"] in self.failing:
            raise smtplib.SMTPRecipientsRefused({message["To"]: (550, b"mailbox unavailable")})
        self.messages.append(message)


class FakePushGateway:
    """FCM v1 endpoint stand-in; tokens listed in ``unregistered`` are rejected."""

    def __init__(self, unregistered=()):
        self.unregistered = set(unregistered)
        self.requests = []
        self._ids = itertools.count(1)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body["message"])
        if body["message"]["token"] in self.unregistered:
            return httpx.Response(404, json={
                "error": {
                    "code": 404,
                    "message": "Requested entity was not found.",
                    "status": "NOT_FOUND",
                    "details": [{
                        "@type": "type.googleapis.com/google.firebase.fcm.v1.FcmError",
                        "errorCode": "UNREGISTERED",
                    }],
                }
            })
        return httpx.Response(200, json={"name": f"projects/gymvisa-test/messages/{next(self._ids)}"})


def make_push_service(gateway):
    return PushService(
        config=Settings(FCM_PROJECT_ID="gymvisa-test", FCM_ACCESS_TOKEN="test-token"),
        transport=httpx.MockTransport(gateway),
    )


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def email_sender():
    return RecordingEmailService()


@pytest.fixture
def push_gateway():
    return FakePushGateway()


@pytest.fixture
def client(database, email_sender, push_gateway):
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_email_service] = lambda: email_sender
    app.dependency_overrides[get_push_service] = lambda: make_push_service(push_gateway)
    yield TestClient(app, headers=ADMIN_HEADERS)
    app.dependency_overrides.clear()
