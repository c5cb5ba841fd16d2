"""Pytest fixtures for testing"""

import json
from typing import Any, List, Optional, Union

import pytest

from rotessa_client import ClientConfig, RotessaClient, reset_client
from rotessa_client.core.transport import TransportRequest, TransportResponse

API_KEY = "test-api-key"
BASE_URL = "https://api.rotessa.test/v1"


class RecordingTransport:
    """Fake transport that records every request and replays queued answers"""

    def __init__(self) -> None:
        self.requests: List[TransportRequest] = []
        self._answers: List[Union[TransportResponse, BaseException]] = []

    def queue(self, status: int = 200, body: Any = None, text: Optional[str] = None) -> None:
        if text is None:
            text = "" if body is None else json.dumps(body)
        self._answers.append(TransportResponse(status_code=status, text=text))

    def fail_with(self, error: BaseException) -> None:
        self._answers.append(error)

    @property
    def last(self) -> TransportRequest:
        return self.requests[-1]

    async def __call__(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        if not self._answers:
            return TransportResponse(status_code=200, text="")
        answer = self._answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep real ROTESSA_* settings and any local .env file out of the tests"""
    for key in ("ROTESSA_API_KEY", "ROTESSA_API_BASE_URL", "ROTESSA_TIMEOUT_MS", "ROTESSA_ENVIRONMENT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_client()
    yield
    reset_client()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def reported() -> list:
    """Errors passed to the reporter hook, in order"""
    return []


@pytest.fixture
def config(transport: RecordingTransport, reported: list) -> ClientConfig:
    return ClientConfig(
        api_key=API_KEY,
        base_url=BASE_URL,
        timeout_ms=1000,
        transport=transport,
        reporter=reported.append,
    )


@pytest.fixture
def client(config: ClientConfig) -> RotessaClient:
    return RotessaClient(config)


@pytest.fixture
def customer_payload() -> dict:
    """Customer detail as the provider returns it"""
    return {
        "id": 123,
        "name": "Jane Borrower",
        "email": "jane@example.com",
        "active": True,
        "custom_identifier": "BRW-001",
        "customer_type": "Personal",
        "identifier": "ROT-1",
        "home_phone": None,
        "phone": "416-555-0100",
        "bank_name": "Scotiabank",
        "created_at": "2024-01-05T10:00:00.000-05:00",
        "updated_at": "2024-01-06T10:00:00.000-05:00",
        "account_number": "*****6789",
        "institution_number": "002",
        "transit_number": "12345",
        "routing_number": None,
        "bank_account_type": None,
        "authorization_type": "Online",
        "address": {
            "id": 9,
            "address_1": "1 King St W",
            "address_2": None,
            "city": "Toronto",
            "province_code": "ON",
            "postal_code": "M5H 1A1",
        },
        "transaction_schedules": [
            {
                "id": 55,
                "amount": "1250.00",
                "comment": "Mortgage payment",
                "created_at": "2024-01-06T10:00:00.000-05:00",
                "updated_at": "2024-01-06T10:00:00.000-05:00",
                "frequency": "Monthly",
                "installments": 12,
                "process_date": "2024-02-01",
                "next_process_date": "2024-03-01",
            }
        ],
        "financial_transactions": [
            {
                "id": 901,
                "amount": "1250.00",
                "process_date": "2024-02-01",
                "status": "Approved",
                "status_reason": None,
                "transaction_schedule_id": 55,
            }
        ],
    }


@pytest.fixture
def schedule_payload() -> dict:
    return {
        "id": 55,
        "amount": "1250.00",
        "comment": "Mortgage payment",
        "created_at": "2024-01-06T10:00:00.000-05:00",
        "updated_at": "2024-01-06T10:00:00.000-05:00",
        "frequency": "Monthly",
        "installments": 12,
        "process_date": "2024-02-01",
        "next_process_date": "2024-03-01",
        "financial_transactions": [],
    }


@pytest.fixture
def report_payload() -> list:
    return [
        {
            "id": 901,
            "customer_id": 123,
            "custom_identifier": "BRW-001",
            "transaction_schedule_id": 55,
            "transaction_number": "INV-9001",
            "amount": "1250.00",
            "comment": None,
            "status": "Approved",
            "status_reason": None,
            "process_date": "2024-02-01",
            "settlement_date": "2024-02-02",
            "earliest_approval_date": "2024-02-06",
            "created_at": "2024-01-06T10:00:00.000-05:00",
            "updated_at": "2024-02-06T10:00:00.000-05:00",
            "account_number": "*****6789",
            "institution_number": "002",
            "transit_number": "12345",
        }
    ]
