"""Tests for the rates controller and the Lambda/CLI entry points."""

import base64
import json
from unittest.mock import AsyncMock, Mock, patch

import pytest

from src.main import handle_request, lambda_handler, main
from src.models.rate_quote import RateQuoteResult
from src.services import RatesController


@pytest.fixture
def quote():
    return RateQuoteResult(
        unit_type_id=-2147483637,
        unit_name="Klipspringer Camps",
        accommodation_type="Standard Rate Camping",
        full_name="Klipspringer Camps - Standard Rate Camping",
        rate=200.0,
        date_range="2026-02-01 to 2026-02-05",
        availability=True,
        occupants=2,
        location_id=-2147483644,
        rate_code="STDCAMP",
    )


@pytest.fixture
def mock_aggregator(quote):
    aggregator = Mock()
    aggregator.fetch_rates = AsyncMock(return_value=[quote])
    return aggregator


class TestRatesController:
    """Tests for RatesController.get_rates."""

    @pytest.mark.asyncio
    async def test_success(self, mock_aggregator, booking_request):
        """Test a valid request returns the serialized quotes."""
        controller = RatesController(aggregator=mock_aggregator)

        status, body = await controller.get_rates(json.dumps(booking_request))

        assert status == 200
        assert body["success"] is True
        assert body["data"] == [
            {
                "unitTypeId": -2147483637,
                "unitName": "Klipspringer Camps",
                "accommodationType": "Standard Rate Camping",
                "fullName": "Klipspringer Camps - Standard Rate Camping",
                "rate": 200.0,
                "dateRange": "2026-02-01 to 2026-02-05",
                "availability": True,
                "occupants": 2,
                "error": None,
                "locationId": -2147483644,
                "rateCode": "STDCAMP",
            }
        ]
        query = mock_aggregator.fetch_rates.await_args.args[0]
        assert query.unit_name == "Etosha Village"
        assert query.ages == [30, 25]
        assert query.selected_unit_type_id is None

    @pytest.mark.asyncio
    async def test_invalid_json(self, mock_aggregator):
        """Test a body that is not JSON."""
        controller = RatesController(aggregator=mock_aggregator)

        status, body = await controller.get_rates("{not json")

        assert status == 400
        assert body == {
            "success": False,
            "error": "Invalid JSON",
            "message": "Request body must be valid JSON",
        }
        mock_aggregator.fetch_rates.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_error(self, mock_aggregator, booking_request):
        """Test that invalid requests never reach the aggregator."""
        controller = RatesController(aggregator=mock_aggregator)

        status, body = await controller.get_rates({**booking_request, "Ages": [30]})

        assert status == 400
        assert body["error"] == "Validation Error"
        assert body["message"] == "Invalid request data"
        assert body["details"] == ["Number of ages must match number of occupants"]
        mock_aggregator.fetch_rates.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_error(self, booking_request):
        """Test that internal faults map to a 500 response."""
        aggregator = Mock()
        aggregator.fetch_rates = AsyncMock(side_effect=RuntimeError("event loop closed"))
        controller = RatesController(aggregator=aggregator)

        status, body = await controller.get_rates(booking_request)

        assert status == 500
        assert body == {
            "success": False,
            "error": "Processing Error",
            "message": "event loop closed",
        }


class TestHandleRequest:
    """Tests for request routing."""

    @pytest.mark.asyncio
    async def test_health(self):
        """Test the health endpoint."""
        status, body = await handle_request("GET", "/api/health")

        assert status == 200
        assert body["status"] == "healthy"
        assert body["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_rates_route(self, mock_aggregator, booking_request):
        """Test that POST /api/rates reaches the controller."""
        controller = RatesController(aggregator=mock_aggregator)

        status, body = await handle_request(
            "POST", "/api/rates/?debug=1", json.dumps(booking_request), controller=controller
        )

        assert status == 200
        assert body["success"] is True

    @pytest.mark.asyncio
    async def test_preflight(self):
        """Test that OPTIONS requests get an empty 200."""
        assert await handle_request("OPTIONS", "/api/rates") == (200, None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [("GET", "/api/rates"), ("POST", "/api/unknown")])
    async def test_unknown_route(self, method, path):
        """Test that unknown routes return 404."""
        status, body = await handle_request(method, path)

        assert status == 404
        assert body["error"] == "Endpoint not found"


class TestLambdaHandler:
    """Tests for the API Gateway Lambda handler."""

    def test_health_event(self):
        """Test a health check through the Lambda handler."""
        context = Mock(aws_request_id="req-123")

        response = lambda_handler({"httpMethod": "GET", "path": "/api/health"}, context)

        assert response["statusCode"] == 200
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"
        assert json.loads(response["body"])["status"] == "healthy"

    def test_preflight_event(self):
        """Test that preflight responses have an empty body."""
        response = lambda_handler({"httpMethod": "OPTIONS", "path": "/api/rates"}, Mock())

        assert response["statusCode"] == 200
        assert response["body"] == ""

    def test_base64_rates_event(self, booking_request):
        """Test that base64-encoded bodies are decoded before routing."""
        body = json.dumps(booking_request)
        event = {
            "httpMethod": "POST",
            "path": "/api/rates",
            "body": base64.b64encode(body.encode("utf-8")).decode("ascii"),
            "isBase64Encoded": True,
        }

        with patch("src.main.RatesController") as controller_cls:
            controller_cls.return_value.get_rates = AsyncMock(
                return_value=(200, {"success": True, "data": []})
            )
            response = lambda_handler(event, Mock())

        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {"success": True, "data": []}
        controller_cls.return_value.get_rates.assert_awaited_once_with(body)

    @pytest.mark.parametrize(
        "encoded_body",
        ["!!!notb64", base64.b64encode(b"\xff\xfe{}").decode("ascii")],
        ids=["bad-padding", "not-utf8"],
    )
    def test_undecodable_base64_body(self, encoded_body):
        """Test that a body that cannot be decoded still gets the error envelope."""
        event = {
            "httpMethod": "POST",
            "path": "/api/rates",
            "body": encoded_body,
            "isBase64Encoded": True,
        }

        with patch("src.main.RatesController") as controller_cls:
            response = lambda_handler(event, Mock())

        assert response["statusCode"] == 500
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"
        body = json.loads(response["body"])
        assert body["success"] is False
        assert body["error"] == "Internal Server Error"
        controller_cls.assert_not_called()

    def test_unhandled_error(self):
        """Test that routing failures become a 500 response."""
        with patch("src.main.handle_request", new=AsyncMock(side_effect=RuntimeError("boom"))):
            response = lambda_handler({"httpMethod": "POST", "path": "/api/rates"}, Mock())

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {
            "success": False,
            "error": "Internal Server Error",
            "message": "boom",
        }


class TestCli:
    """Tests for the command line entry point."""

    @pytest.mark.asyncio
    async def test_main_reads_query_file(self, tmp_path, booking_request, capsys):
        """Test that the CLI prints the controller response and exits 0."""
        query_file = tmp_path / "query.json"
        query_file.write_text(json.dumps(booking_request))

        with patch("src.main.RatesController") as controller_cls, patch("src.main.logger"):
            controller_cls.return_value.get_rates = AsyncMock(
                return_value=(200, {"success": True, "data": []})
            )
            exit_code = await main([str(query_file)])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {"success": True, "data": []}
        controller_cls.return_value.get_rates.assert_awaited_once_with(
            json.dumps(booking_request)
        )

    @pytest.mark.asyncio
    async def test_main_invalid_query_exits_1(self, tmp_path, capsys):
        """Test that a rejected query gives exit code 1."""
        query_file = tmp_path / "query.json"
        query_file.write_text("{}")

        with patch("src.main.logger"), patch("src.services.validation_service.logger"):
            exit_code = await main([str(query_file)])

        assert exit_code == 1
        assert json.loads(capsys.readouterr().out)["error"] == "Validation Error"
