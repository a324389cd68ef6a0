import threading
import time
import unittest

from jsonrest_client.core.context import Context


class ContextTests(unittest.TestCase):
    def test_background_never_done(self):
        ctx = Context.background()
        self.assertFalse(ctx.done())
        self.assertIsNone(ctx.err())
        self.assertIsNone(ctx.remaining())

    def test_cancel(self):
        ctx = Context.background()
        ctx.cancel()
        ctx.cancel("second reason is ignored")
        self.assertTrue(ctx.done())
        self.assertEqual(ctx.err(), "context canceled")

    def test_deadline(self):
        ctx = Context.with_timeout(0.05)
        self.assertFalse(ctx.done())
        time.sleep(0.1)
        self.assertTrue(ctx.done())
        self.assertEqual(ctx.err(), "context deadline exceeded")

    def test_cancel_from_other_thread(self):
        ctx = Context.with_timeout(5)
        t = threading.Thread(target=ctx.cancel, args=("shutting down",))
        t.start()
        t.join(timeout=2)
        self.assertTrue(ctx.done())
        self.assertEqual(ctx.err(), "shutting down")


if __name__ == "__main__":
    unittest.main()
