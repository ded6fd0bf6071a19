"""Unit tests for the JSON-RPC client."""

import json

import pytest
import requests
import responses

from syndicate_deployer.exceptions import RpcError, TransportError, UnexpectedResultError
from syndicate_deployer.rpc import CasperRpcClient, parse_stored_value
from syndicate_deployer.types import StoredCLValue, StoredContract


def _ok(result):
    return {"jsonrpc": "2.0", "id": 1, "result": result}


class TestCall:
    """Test CasperRpcClient.call."""

    @responses.activate
    def test_request_format(self, rpc_url):
        """Test that the request is a JSON-RPC 2.0 object."""

        def request_callback(request):
            body = json.loads(request.body)
            assert body["jsonrpc"] == "2.0"
            assert body["method"] == "info_get_deploy"
            assert body["params"] == {"deploy_hash": "abc"}
            assert isinstance(body["id"], int)
            return (200, {}, json.dumps(_ok({"deploy": {}})))

        responses.add_callback(
            responses.POST, rpc_url, callback=request_callback, content_type="application/json"
        )

        CasperRpcClient(rpc_url).call("info_get_deploy", {"deploy_hash": "abc"})

    @responses.activate
    def test_default_params_empty_list(self, rpc_url):
        responses.add(responses.POST, rpc_url, json=_ok({}), status=200)

        CasperRpcClient(rpc_url).call("info_get_status")

        assert json.loads(responses.calls[0].request.body)["params"] == []

    @responses.activate
    def test_ids_increase(self, rpc_url):
        responses.add(responses.POST, rpc_url, json=_ok(1), status=200)
        client = CasperRpcClient(rpc_url)

        client.call("a")
        client.call("b")

        ids = [json.loads(call.request.body)["id"] for call in responses.calls]
        assert ids[1] > ids[0]

    @responses.activate
    def test_returns_result_verbatim(self, rpc_url):
        responses.add(responses.POST, rpc_url, json=_ok({"x": [1, 2]}), status=200)
        assert CasperRpcClient(rpc_url).call("m") == {"x": [1, 2]}

    @responses.activate
    def test_http_error_raises_transport_error(self, rpc_url):
        """Test that a non-2xx status raises TransportError with the code."""
        responses.add(responses.POST, rpc_url, body="Bad Gateway", status=502)

        with pytest.raises(TransportError) as exc_info:
            CasperRpcClient(rpc_url).call("info_get_status")

        assert exc_info.value.status_code == 502

    @responses.activate
    def test_rpc_error_raises_rpc_error(self, rpc_url):
        """Test that an error object raises RpcError with the node message."""
        responses.add(
            responses.POST,
            rpc_url,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "No such deploy"}},
            status=200,
        )

        with pytest.raises(RpcError) as exc_info:
            CasperRpcClient(rpc_url).call("info_get_deploy", {"deploy_hash": "abc"})

        assert str(exc_info.value) == "No such deploy"
        assert exc_info.value.code == -32000

    @responses.activate
    def test_connection_error_raises_transport_error(self, rpc_url):
        responses.add(responses.POST, rpc_url, body=requests.ConnectionError("refused"))

        with pytest.raises(TransportError) as exc_info:
            CasperRpcClient(rpc_url).call("info_get_status")

        assert exc_info.value.status_code is None

    @responses.activate
    def test_non_json_body_raises_transport_error(self, rpc_url):
        responses.add(responses.POST, rpc_url, body="<html>", status=200)

        with pytest.raises(TransportError):
            CasperRpcClient(rpc_url).call("info_get_status")


class TestTypedReaders:
    """Test the typed result readers."""

    @responses.activate
    def test_get_status(self, rpc_url, load_fixture):
        responses.add(responses.POST, rpc_url, json=_ok(load_fixture("node_status.json")))

        status = CasperRpcClient(rpc_url).get_status()

        assert status.chainspec_name == "casper-test"
        assert status.api_version == "1.5.6"
        assert status.last_block_height == 2456789

    @responses.activate
    def test_get_status_rejects_unknown_shape(self, rpc_url):
        responses.add(responses.POST, rpc_url, json=_ok({"peers": []}))

        with pytest.raises(UnexpectedResultError):
            CasperRpcClient(rpc_url).get_status()

    @responses.activate
    def test_get_status_rejects_non_object_block_info(self, rpc_url):
        responses.add(
            responses.POST,
            rpc_url,
            json=_ok({"chainspec_name": "casper-test", "last_added_block_info": "latest"}),
        )

        with pytest.raises(UnexpectedResultError):
            CasperRpcClient(rpc_url).get_status()

    @responses.activate
    def test_query_global_state_params(self, rpc_url, load_fixture):
        """Test query_global_state request params and contract parsing."""
        responses.add(responses.POST, rpc_url, json=_ok(load_fixture("stored_contract.json")))

        stored = CasperRpcClient(rpc_url).query_global_state("hash-" + "ab" * 32)

        params = json.loads(responses.calls[0].request.body)["params"]
        assert params == {"state_identifier": None, "key": "hash-" + "ab" * 32, "path": []}
        assert isinstance(stored, StoredContract)
        assert "register_dao" in stored.entry_points
        assert "dao_counter" in stored.named_keys

    @responses.activate
    def test_get_named_key(self, rpc_url, load_fixture):
        responses.add(responses.POST, rpc_url, json=_ok(load_fixture("stored_contract.json")))

        address = CasperRpcClient(rpc_url).get_named_key(
            "hash-" + "ab" * 32, "token_pkg_1700000000123"
        )

        assert str(address).startswith("hash-9824d60d")

    @responses.activate
    def test_get_named_key_missing(self, rpc_url, load_fixture):
        responses.add(responses.POST, rpc_url, json=_ok(load_fixture("stored_contract.json")))

        with pytest.raises(UnexpectedResultError):
            CasperRpcClient(rpc_url).get_named_key("hash-" + "ab" * 32, "nope")


class TestParseStoredValue:
    """Test the parse_stored_value function."""

    def test_cl_value(self):
        stored = parse_stored_value(
            {"CLValue": {"cl_type": "U64", "bytes": "0100000000000000", "parsed": 1}}
        )
        assert stored == StoredCLValue(cl_type="U64", parsed=1, bytes="0100000000000000")

    @pytest.mark.parametrize(
        "stored_value", [None, {}, {"Account": {}}, {"ContractWasm": "00"}, {"CLValue": {}}]
    )
    def test_other_shapes_rejected(self, stored_value):
        """Test that unconsumed shapes raise UnexpectedResultError."""
        with pytest.raises(UnexpectedResultError):
            parse_stored_value(stored_value)

    @pytest.mark.parametrize(
        "contract",
        [
            {"named_keys": [{"key": "hash-00"}]},
            {"named_keys": [{"name": "dao_counter"}]},
            {"named_keys": ["dao_counter"]},
            {"named_keys": {"dao_counter": "hash-00"}},
            {"entry_points": [{"args": []}]},
            {"entry_points": [{"name": 7}]},
        ],
    )
    def test_malformed_contract_entries_rejected(self, contract):
        """Test that named key and entry point entries without names are rejected."""
        with pytest.raises(UnexpectedResultError):
            parse_stored_value({"Contract": {"contract_package_hash": "x", **contract}})


class TestCheckConnection:
    """Test CasperRpcClient.check_connection."""

    @responses.activate
    def test_success(self, rpc_url, load_fixture):
        responses.add(responses.POST, rpc_url, json=_ok(load_fixture("node_status.json")))

        check = CasperRpcClient(rpc_url).check_connection()

        assert check.success
        assert check.message == "Connected to casper-test"
        assert check.latency_ms is not None

    @responses.activate
    def test_unknown_chain_name(self, rpc_url):
        responses.add(responses.POST, rpc_url, json=_ok({}))

        check = CasperRpcClient(rpc_url).check_connection()

        assert check.success
        assert check.message == "Connected to unknown"

    @responses.activate
    def test_malformed_block_info_never_raises(self, rpc_url):
        responses.add(
            responses.POST,
            rpc_url,
            json=_ok({"chainspec_name": "casper-test", "last_added_block_info": ["latest"]}),
        )

        check = CasperRpcClient(rpc_url).check_connection()

        assert check.success
        assert check.message == "Connected to unknown"

    @responses.activate
    def test_http_failure_never_raises(self, rpc_url):
        responses.add(responses.POST, rpc_url, body="nope", status=503)

        check = CasperRpcClient(rpc_url).check_connection()

        assert not check.success
        assert "503" in check.message

    @responses.activate
    def test_rpc_failure_never_raises(self, rpc_url):
        responses.add(
            responses.POST,
            rpc_url,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -1, "message": "down"}},
        )

        check = CasperRpcClient(rpc_url).check_connection()

        assert not check.success
        assert check.message == "RPC Error: down"
