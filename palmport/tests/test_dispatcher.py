"""Tests for BackgroundDispatcher."""
from __future__ import annotations

import asyncio
import unittest

from palmport.services.dispatcher import BackgroundDispatcher


class TestBackgroundDispatcher(unittest.TestCase):
    def test_runs_and_drains(self):
        results = []

        async def work(n):
            await asyncio.sleep(0)
            results.append(n)

        async def scenario():
            dispatcher = BackgroundDispatcher()
            dispatcher.submit(work(1), name="one")
            dispatcher.submit(work(2), name="two")
            await dispatcher.drain()
            return dispatcher.pending

        self.assertEqual(asyncio.run(scenario()), 0)
        self.assertEqual(sorted(results), [1, 2])

    def test_failure_is_logged_not_raised(self):
        async def boom():
            raise RuntimeError("side effect failed")

        async def scenario():
            dispatcher = BackgroundDispatcher()
            dispatcher.submit(boom(), name="boom")
            with self.assertLogs("palmport.services.dispatcher", level="WARNING") as logs:
                await dispatcher.drain()
                await asyncio.sleep(0)
            return logs.output

        output = asyncio.run(scenario())
        self.assertTrue(any("boom" in line for line in output))

    def test_drain_cancels_stragglers(self):
        async def slow():
            await asyncio.sleep(10)

        async def scenario():
            dispatcher = BackgroundDispatcher()
            task = dispatcher.submit(slow(), name="slow")
            await dispatcher.drain(timeout=0.01)
            await asyncio.sleep(0)
            return task

        self.assertTrue(asyncio.run(scenario()).cancelled())


if __name__ == "__main__":
    unittest.main()
