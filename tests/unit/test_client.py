"""Unit tests for the StatsD client and the client factory."""

import pytest
from structlog.testing import capture_logs

from chpr_metrics.client import ClientBuilder, default_client_error_handler
from chpr_metrics.clients import MetricsClient, StatsdClient, format_value
from chpr_metrics.clients.statsd import split_address
from chpr_metrics.exceptions import MetricsClientBuildError
from chpr_metrics.resolver import ClientConfig


class TestMetricsClient:
    """Test MetricsClient abstract base class."""

    def test_is_abstract(self):
        with pytest.raises(TypeError):
            MetricsClient()  # type: ignore

    def test_increment_is_count_of_one(self, recording_client):
        recording_client.increment("hits")

        assert recording_client.calls == [("count", "hits", 1)]


class TestFormatValue:
    """Test metric value rendering."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, "3"),
            (-2, "-2"),
            (123.0, "123"),
            (0.25, "0.25"),
            (1e-07, "0.0000001"),
            (1.5e16, "15000000000000000"),
        ],
    )
    def test_format(self, value, expected):
        assert format_value(value) == expected

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            format_value(True)


class TestSplitAddress:
    """Test "host:port" parsing."""

    def test_host_and_port(self):
        assert split_address("127.0.0.1:8125") == ("127.0.0.1", 8125)

    def test_bracketed_ipv6(self):
        assert split_address("[::1]:8125") == ("::1", 8125)

    @pytest.mark.parametrize(
        "address",
        ["an ill formatted host", "127.0.0.1:", ":8125", "127.0.0.1:port", "127.0.0.1:70000"],
    )
    def test_invalid(self, address):
        with pytest.raises(ValueError):
            split_address(address)


class TestStatsdClient:
    """Test datagrams sent by StatsdClient."""

    def test_count(self, udp_server):
        client = StatsdClient(f"127.0.0.1:{udp_server.port}", prefix="prefix1.")

        client.count("test.count", 3)

        assert udp_server.receive() == "prefix1.test.count:3|c"
        client.close()

    def test_increment(self, udp_server):
        client = StatsdClient(f"127.0.0.1:{udp_server.port}", prefix="prefix1.")

        client.increment("test.increment")

        assert udp_server.receive() == "prefix1.test.increment:1|c"
        client.close()

    def test_gauge(self, udp_server):
        client = StatsdClient(f"127.0.0.1:{udp_server.port}", prefix="prefix1.")

        client.gauge("test.gauge", 123)

        assert udp_server.receive() == "prefix1.test.gauge:123|g"
        client.close()

    def test_timing(self, udp_server):
        client = StatsdClient(f"127.0.0.1:{udp_server.port}", prefix="prefix1.")

        client.timing("test.timing", 1000)

        assert udp_server.receive() == "prefix1.test.timing:1000|ms"
        client.close()

    def test_empty_prefix(self, udp_server):
        client = StatsdClient(f"127.0.0.1:{udp_server.port}")

        client.count("bare", 1)

        assert udp_server.receive() == "bare:1|c"
        client.close()

    def test_ill_formatted_address_raises(self):
        with pytest.raises(MetricsClientBuildError) as exc_info:
            StatsdClient("an ill formatted host", prefix="prefix.")

        assert exc_info.value.address == "an ill formatted host"
        assert exc_info.value.prefix == "prefix."

    def test_send_error_goes_to_handler(self, udp_server):
        errors = []
        client = StatsdClient(
            f"127.0.0.1:{udp_server.port}", prefix="p.", error_handler=errors.append
        )
        client.close()

        client.count("after.close", 1)

        assert len(errors) == 1
        assert isinstance(errors[0], OSError)

    def test_send_error_without_handler_is_ignored(self, udp_server):
        client = StatsdClient(f"127.0.0.1:{udp_server.port}")
        client.close()

        client.gauge("after.close", 1)


class TestDefaultClientErrorHandler:
    """Test the error handler wired into built clients."""

    def test_logs_error(self):
        with capture_logs() as logs:
            default_client_error_handler(OSError("This is an error"))

        assert logs == [
            {
                "event": "[METRICS] Error caught in metrics",
                "error": "This is an error",
                "log_level": "error",
            }
        ]


class TestClientBuilder:
    """Test ClientBuilder.build_client."""

    def test_build_client_success(self, udp_server):
        def fail_on_error(error):
            raise AssertionError(f"error handler should not be called: {error}")

        builder = ClientBuilder(error_handler=fail_on_error)
        config = ClientConfig(host=f"127.0.0.1:{udp_server.port}", prefix="prefix.")

        client = builder.build_client(config)

        assert isinstance(client, StatsdClient)
        assert client.address == config.host
        assert client.prefix == "prefix."
        client.count("built", 2)
        assert udp_server.receive() == "prefix.built:2|c"
        client.close()

    def test_build_client_failure(self):
        config = ClientConfig(host="an ill formatted host", prefix="prefix.")

        with capture_logs() as logs:
            with pytest.raises(MetricsClientBuildError):
                ClientBuilder().build_client(config)

        assert logs[0]["event"] == "Error creating the statsd client"
        assert logs[0]["config"] == config

    def test_default_error_handler(self):
        assert ClientBuilder().error_handler is default_client_error_handler
