"""
Unit test file.
"""

import unittest
from concurrent.futures import ThreadPoolExecutor

from s3_multipart import FinishedPiece, UploadPhase, UploadState


class UploadStateTester(unittest.TestCase):
    """Upload phase transitions and part bookkeeping."""

    def test_happy_path(self) -> None:
        state = UploadState(total_parts=2)
        for phase in [
            UploadPhase.INITIATED,
            UploadPhase.PARTS_IN_FLIGHT,
            UploadPhase.ALL_PARTS_ACKED,
            UploadPhase.COMPLETING,
            UploadPhase.COMPLETED,
        ]:
            state.transition(phase)
        self.assertEqual(state.phase, UploadPhase.COMPLETED)
        self.assertTrue(state.is_terminal())

    def test_abort_path(self) -> None:
        state = UploadState(total_parts=2)
        state.transition(UploadPhase.INITIATED)
        state.transition(UploadPhase.PARTS_IN_FLIGHT)
        state.transition(UploadPhase.ABORTING)
        state.transition(UploadPhase.ABORTED)
        self.assertTrue(state.is_terminal())

    def test_invalid_transition(self) -> None:
        state = UploadState(total_parts=1)
        with self.assertRaises(ValueError):
            state.transition(UploadPhase.COMPLETING)
        state.transition(UploadPhase.INITIATED)
        with self.assertRaises(ValueError):
            state.transition(UploadPhase.COMPLETED)

    def test_no_transition_out_of_completed(self) -> None:
        state = UploadState(total_parts=1)
        for phase in [
            UploadPhase.INITIATED,
            UploadPhase.PARTS_IN_FLIGHT,
            UploadPhase.ALL_PARTS_ACKED,
            UploadPhase.COMPLETING,
            UploadPhase.COMPLETED,
        ]:
            state.transition(phase)
        with self.assertRaises(ValueError):
            state.transition(UploadPhase.ABORTING)

    def test_add_finished_from_threads(self) -> None:
        state = UploadState(total_parts=100)
        with ThreadPoolExecutor(max_workers=8) as executor:
            for n in range(1, 101):
                executor.submit(state.add_finished, FinishedPiece(n, f"e{n}"))
        self.assertTrue(state.is_done())
        self.assertEqual(
            sorted(p.part_number for p in state.finished_parts()), list(range(1, 101))
        )


if __name__ == "__main__":
    unittest.main()
