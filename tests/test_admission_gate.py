import threading
import time
import unittest
from concurrent.futures import ThreadPoolExecutor

from app.services.admission_gate import AdmissionGate


class AdmissionGateTest(unittest.TestCase):
    def test_peak_never_exceeds_limit(self):
        gate = AdmissionGate(2)

        def work(_):
            with gate:
                time.sleep(0.01)

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(work, range(16)))

        self.assertLessEqual(gate.peak_in_flight, 2)
        self.assertEqual(gate.in_flight, 0)

    def test_release_on_exception(self):
        gate = AdmissionGate(1)

        with self.assertRaises(RuntimeError):
            with gate:
                raise RuntimeError("boom")

        self.assertEqual(gate.in_flight, 0)
        acquired = threading.Event()

        def take():
            with gate:
                acquired.set()

        worker = threading.Thread(target=take)
        worker.start()
        worker.join(timeout=1.0)
        self.assertTrue(acquired.is_set())

    def test_release_without_acquire_fails(self):
        with self.assertRaises(RuntimeError):
            AdmissionGate(1).release()

    def test_invalid_limit_rejected(self):
        with self.assertRaises(ValueError):
            AdmissionGate(0)


if __name__ == "__main__":
    unittest.main()
