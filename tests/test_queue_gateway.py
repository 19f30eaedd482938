"""
Queue gateway tests: envelope shape and relay outcome mapping.
"""

import json

import httpx

from template_builder.models.canvas_models import CanvasElement, ElementType
from template_builder.services.document_compiler import DocumentCompiler
from template_builder.services.queue_gateway import (
    ERROR_PREFIX,
    SUCCESS_MESSAGE,
    QueueSubmissionGateway,
)

RELAY = "http://relay.test/proxy-post-api"


def compiled_template():
    element = CanvasElement(id="e", type=ElementType.HEADING, content="Invoice", name="Title",
                            styles={"left": "0px"})
    return DocumentCompiler().compile([element], name="Invoice", description="Monthly invoice")


def gateway_with(handler) -> QueueSubmissionGateway:
    return QueueSubmissionGateway(relay_url=RELAY, transport=httpx.MockTransport(handler))


class TestEnvelope:

    def test_wire_shape(self):
        compiled = compiled_template()
        payload = QueueSubmissionGateway.build_envelope(compiled)

        item = payload["itemData"]
        assert item["Priority"] == "Normal"
        assert item["Name"] == "Document Template Queue"
        assert item["SpecificContent"] == {
            "tempName": "Invoice",
            "tempDescription": "Monthly invoice",
            "tempHTML": compiled.html,
            "tempJSON": compiled.json_text,
        }

    def test_json_travels_as_text(self):
        payload = QueueSubmissionGateway.build_envelope(compiled_template())
        temp_json = payload["itemData"]["SpecificContent"]["tempJSON"]

        assert isinstance(temp_json, str)
        assert json.loads(temp_json)["name"] == "Invoice"


class TestSubmit:

    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"Id": 1})

        gateway = gateway_with(handler)
        result = await gateway.submit(compiled_template())
        await gateway.close()

        assert result.success is True
        assert result.message == SUCCESS_MESSAGE
        assert result.status_code == 200
        assert seen["url"] == RELAY
        assert seen["body"]["itemData"]["SpecificContent"]["tempName"] == "Invoice"

    async def test_relay_error_status(self):
        gateway = gateway_with(lambda request: httpx.Response(500, text="queue unavailable"))
        result = await gateway.submit(compiled_template())
        await gateway.close()

        assert result.success is False
        assert result.status_code == 500
        assert result.message == f"{ERROR_PREFIX}500 Internal Server Error - queue unavailable"

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = gateway_with(handler)
        result = await gateway.submit(compiled_template())
        await gateway.close()

        assert result.success is False
        assert result.status_code is None
        assert result.message == f"{ERROR_PREFIX}ConnectError: connection refused"

    async def test_one_request_per_submit(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text="busy")

        gateway = gateway_with(handler)
        await gateway.submit(compiled_template())
        await gateway.close()

        assert len(calls) == 1
