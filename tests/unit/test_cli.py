"""Unit tests for the rotessa command line"""

import json
from urllib.parse import parse_qs, urlsplit

import pytest

from rotessa_client.cli import build_parser, run_cli


def base_args(*extra):
    return ["--env-file", "missing.env", "--set", "ROTESSA_API_KEY=cli-key", *extra]


def test_customers_get_prints_raw_json(transport, customer_payload, capsys):
    transport.queue(body=customer_payload)

    exit_code = run_cli(base_args("customers", "get", "123"), transport=transport)

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == customer_payload
    assert transport.last.url == "https://api.rotessa.com/v1/customers/123"
    assert transport.last.headers["Authorization"] == 'Token token="cli-key"'


def test_customers_find_uses_custom_identifier(transport, customer_payload, capsys):
    transport.queue(body=customer_payload)

    assert run_cli(base_args("customers", "find", "BRW-001"), transport=transport) == 0
    assert json.loads(transport.last.content) == {"custom_identifier": "BRW-001"}


def test_report_command_builds_query(transport, report_payload, capsys):
    transport.queue(body=report_payload)

    exit_code = run_cli(
        base_args("report", "--start-date", "2024-02-01", "--status", "Approved", "--page", "3"),
        transport=transport,
    )

    assert exit_code == 0
    assert parse_qs(urlsplit(transport.last.url).query) == {
        "start_date": ["2024-02-01"],
        "status": ["Approved"],
        "page": ["3"],
    }
    assert json.loads(capsys.readouterr().out)[0]["id"] == 901


def test_schedule_delete_prints_nothing(transport, capsys):
    transport.queue(status=200, text="")

    assert run_cli(base_args("schedules", "delete", "55"), transport=transport) == 0
    assert transport.last.method == "DELETE"
    assert capsys.readouterr().out == ""


def test_sandbox_environment_override(transport, schedule_payload):
    transport.queue(body=schedule_payload)

    run_cli(
        base_args("--set", "ROTESSA_ENVIRONMENT=sandbox", "--timeout-ms", "500", "schedules", "get", "55"),
        transport=transport,
    )

    assert transport.last.url == "https://sandbox-api.rotessa.com/v1/transaction_schedules/55"
    assert transport.last.timeout_seconds == 0.5


def test_api_error_exits_non_zero(transport, capsys):
    transport.queue(status=404, body={"errors": [{"error_code": "not_found", "error_message": "Not found"}]})

    assert run_cli(base_args("customers", "get", "999"), transport=transport) == 1
    assert capsys.readouterr().out == ""


def test_network_failure_exits_non_zero(transport):
    transport.fail_with(ConnectionError("refused"))

    assert run_cli(base_args("customers", "list"), transport=transport) == 1


def test_missing_api_key_exits_before_any_request(transport):
    exit_code = run_cli(["--env-file", "missing.env", "customers", "list"], transport=transport)

    assert exit_code == 1
    assert transport.requests == []


def test_bad_override_is_rejected_by_the_parser():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--set", "no-equals-sign", "customers", "list"])
