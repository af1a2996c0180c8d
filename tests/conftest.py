import os

# Settings are read at import time, so the test environment goes in first
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = "admin@clinicbook.io"
os.environ["ADMIN_PASSWORD"] = "admin-secret"
os.environ["USE_S3_UPLOADS"] = "false"

from types import SimpleNamespace
from unittest import mock

import pytest
from fastapi.testclient import TestClient

from clinicbook import crud
from clinicbook.api import deps
from clinicbook.db.base import Base
from clinicbook.db.session import SessionLocal, engine
from clinicbook.main import app
from clinicbook.schemas.doctor import DoctorCreate
from clinicbook.services.blob_store import BlobStore
from clinicbook.services.payments import RazorpayGateway, StripeGateway

API = "/api/v1"
PASSWORD = "s3cret-pass"


class InMemoryBlobStore(BlobStore):
    """Keeps uploaded bytes in a dict keyed by a fake URL"""

    def __init__(self):
        self.blobs = {}

    def upload(self, data, filename, folder, content_type=None):
        locator = f"https://blobs.clinicbook.io/{self.build_key('', folder, filename)}"
        self.blobs[locator] = data
        return locator

    def fetch(self, locator):
        return self.blobs[locator]

    def delete(self, locator):
        self.blobs.pop(locator, None)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blob_store():
    return mock.MagicMock(wraps=InMemoryBlobStore())


@pytest.fixture
def razorpay_client():
    client = mock.MagicMock()
    client.order.create.side_effect = lambda data: {"id": "order_123", "status": "created", **data}
    return client


@pytest.fixture
def stripe_client():
    client = mock.MagicMock()
    client.checkout.sessions.create.return_value = SimpleNamespace(
        url="https://checkout.stripe.com/c/pay/cs_test_123"
    )
    return client


@pytest.fixture
def client(blob_store, razorpay_client, stripe_client):
    app.dependency_overrides[deps.get_blob_store] = lambda: blob_store
    app.dependency_overrides[deps.get_razorpay_gateway] = lambda: RazorpayGateway(razorpay_client, currency="INR")
    app.dependency_overrides[deps.get_stripe_gateway] = lambda: StripeGateway(stripe_client, currency="INR")
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def register(client, name="Asha Rao", email="asha@clinicbook.io", password=PASSWORD):
    response = client.post(f"{API}/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def patient_token(client):
    return register(client)


@pytest.fixture
def other_patient_token(client):
    return register(client, name="Ravi Kumar", email="ravi@clinicbook.io")


@pytest.fixture
def admin_token(client):
    response = client.post(
        f"{API}/admin/login",
        json={"email": "admin@clinicbook.io", "password": "admin-secret"},
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


def make_doctor(db, email="dr.mehta@clinicbook.io", fees=500.0):
    return crud.doctor.create(
        db,
        obj_in=DoctorCreate(
            name="Dr. Mehta",
            email=email,
            password="doctor-pass",
            speciality="General physician",
            degree="MBBS",
            experience="4 Years",
            about="Primary care",
            fees=fees,
        ),
    )


@pytest.fixture
def doctor(db):
    return make_doctor(db)


@pytest.fixture
def patient(db, patient_token):
    return crud.user.get_by_email(db, email="asha@clinicbook.io")


def book(client, token, doc_id, slot_date="2024-03-10", slot_time="10:00"):
    return client.post(
        f"{API}/appointments",
        json={"doc_id": doc_id, "slot_date": slot_date, "slot_time": slot_time},
        headers=auth_headers(token),
    )
