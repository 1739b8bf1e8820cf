import json
import logging

import pytest

from zinc_sdk import cli
from zinc_sdk.client_base import ZincAPIError
from zinc_sdk.schema import ErrorData, Variant

DETAILS = {"status": "completed", "product_id": "B00TEST", "title": "Test Kettle"}
OFFERS = {"status": "completed", "offers": [{"offer_id": "O1", "price": 1999}]}


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("ZINC_CLIENT_TOKEN", "cli-token")
    monkeypatch.setenv("ZINC_BASE_URL", "https://api.example.com/v1")
    yield
    logging.getLogger("zinc_sdk").handlers.clear()
    logging.getLogger("zinc_sdk").setLevel(logging.NOTSET)


@pytest.mark.unit
def test_details_prints_json(respond, capsys):
    session = respond(DETAILS)

    code = cli.main(["details", "B00TEST", "--retailer", "walmart", "--max-age", "60"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["title"] == "Test Kettle"
    kwargs = session.request.call_args.kwargs
    assert kwargs["params"] == {"retailer": "walmart", "max_age": "60"}
    assert kwargs["timeout"] == 90.0


@pytest.mark.unit
def test_offers_with_timeout_and_newer_than(respond, capsys):
    session = respond(OFFERS)

    code = cli.main(
        [
            "offers",
            "B00TEST",
            "--newer-than",
            "2024-01-01T00:00:00+00:00",
            "--timeout",
            "7",
        ]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out)["offers"][0]["price"] == 1999
    kwargs = session.request.call_args.kwargs
    assert kwargs["params"]["newer_than"] == "1704067200"
    assert kwargs["params"]["version"] == "2"
    assert kwargs["timeout"] == 7.0


@pytest.mark.unit
def test_info_prints_both(respond, capsys):
    respond(routes={"/offers": OFFERS, "/products/B00TEST": DETAILS})

    assert cli.main(["info", "B00TEST"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["details"]["title"] == "Test Kettle"
    assert out["offers"]["offers"][0]["offer_id"] == "O1"


@pytest.mark.unit
def test_order_reads_file(respond, capsys, tmp_path):
    session = respond({"request_id": "r1", "_type": "order_response"})
    order_file = tmp_path / "order.json"
    order_file.write_text(
        json.dumps(
            {
                "retailer": "amazon",
                "products": [{"product_id": "B00TEST", "quantity": 1}],
                "max_price": 2000,
            }
        ),
        encoding="utf-8",
    )

    assert cli.main(["order", str(order_file)]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["request_id"] == "r1"
    assert out["_type"] == "order_response"
    assert session.request.call_args.args[0] == "POST"


@pytest.mark.unit
def test_missing_order_file(respond, capsys, tmp_path):
    respond({})
    assert cli.main(["order", str(tmp_path / "missing.json")]) == 1
    assert "Could not read order file" in capsys.readouterr().err


@pytest.mark.unit
def test_api_error_suggests_variants(monkeypatch, capsys):
    error = ZincAPIError(
        "failed",
        code="product_ambiguous",
        data=ErrorData(all_variants=[Variant(product_id="B1"), Variant(product_id="B2")]),
    )

    def fail(*args):
        raise error

    monkeypatch.setattr(cli.ZincClient, "get_product_details", fail)

    assert cli.main(["details", "B00PARENT"]) == 1
    err = capsys.readouterr().err
    assert "Zinc API error" in err
    assert "B1, B2" in err


@pytest.mark.unit
def test_missing_token_reports_config_error(monkeypatch, capsys):
    monkeypatch.delenv("ZINC_CLIENT_TOKEN")
    assert cli.main(["details", "B00TEST"]) == 1
    assert "Configuration error" in capsys.readouterr().err


@pytest.mark.unit
def test_negative_max_age_reported(respond, capsys):
    session = respond(DETAILS)
    assert cli.main(["details", "B00TEST", "--max-age", "-1"]) == 1
    assert "Invalid options" in capsys.readouterr().err
    session.request.assert_not_called()


@pytest.mark.unit
def test_zero_timeout_reported(respond, capsys):
    session = respond(DETAILS)
    assert cli.main(["details", "B00TEST", "--timeout", "0"]) == 1
    assert "Invalid options" in capsys.readouterr().err
    session.request.assert_not_called()


@pytest.mark.unit
def test_unknown_retailer_is_usage_error():
    with pytest.raises(SystemExit) as e:
        cli.main(["details", "B00TEST", "--retailer", "ebay"])
    assert e.value.code == 2
