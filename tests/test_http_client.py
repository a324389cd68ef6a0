import unittest
import urllib.request

from jsonrest_client.core.context import Context
from jsonrest_client.core.errors import TransportError
from jsonrest_client.transport.http_client import HttpTransport


class HttpTransportTests(unittest.TestCase):
    def test_invalid_idna_host_is_transport_error(self):
        transport = HttpTransport(timeout_s=2)
        req = urllib.request.Request("http://a..b/api", method="GET")
        with self.assertRaises(TransportError) as cm:
            transport.send(Context.background(), req)
        self.assertEqual(cm.exception.status, 0)
        self.assertIn("http://a..b/api", str(cm.exception))

    def test_cancelled_context_fails_before_sending(self):
        ctx = Context.background()
        ctx.cancel("stop")
        req = urllib.request.Request("http://a..b/api", method="GET")
        with self.assertRaises(TransportError) as cm:
            HttpTransport(timeout_s=2).send(ctx, req)
        self.assertIn("stop", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
