"""Tests for the top-level failure handler."""

import unittest

from lnos_installer.errors import ExternalOperationError, UserCancellation
from lnos_installer.recovery import ErrorRecovery, describe_failure, exit_code_for
from lnos_installer.session import InstallationSession

from tests.helpers import TempDirTestCase, complete_record, make_paths


def fail_pacstrap():
    raise ExternalOperationError(["pacstrap", "-K", "/mnt", "base"], 2)


class TestExitCodes(unittest.TestCase):
    def test_mapping(self):
        self.assertEqual(exit_code_for(None), 0)
        self.assertEqual(exit_code_for(UserCancellation("bye")), 130)
        self.assertEqual(exit_code_for(KeyboardInterrupt()), 130)
        self.assertEqual(exit_code_for(SystemExit(1)), 1)
        self.assertEqual(exit_code_for(SystemExit(None)), 0)
        self.assertEqual(exit_code_for(ExternalOperationError(["x"], 42)), 42)
        self.assertEqual(exit_code_for(ExternalOperationError(["x"], 0)), 1)
        self.assertEqual(exit_code_for(ExternalOperationError(["pacstrap"], -9)), 137)
        self.assertEqual(exit_code_for(RuntimeError("boom")), 1)

    def test_describe_failure_names_command_operation_and_location(self):
        try:
            fail_pacstrap()
        except ExternalOperationError as e:
            text = describe_failure(e, "50_install_base")
        self.assertEqual(
            text.split(" (at ")[0],
            "Command 'pacstrap -K /mnt base' failed with code 2 during 50_install_base",
        )
        self.assertIn("(at fail_pacstrap:", text)


class TestErrorRecovery(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.paths = make_paths(self.tmp)
        self.session = InstallationSession()
        self.record = complete_record()

    def recovery(self):
        return ErrorRecovery(self.session, self.record, log_path="/tmp/installer.log", paths=self.paths)

    def leftover_work_dirs(self):
        return list(self.tmp.glob(".tmp.*"))

    def test_success_cleans_up(self):
        # ErrorRecovery suppresses everything, so assert outside the block.
        with self.recovery() as recovery:
            work_dir = self.session.work_dir
            during = self.leftover_work_dirs()

        self.assertTrue(work_dir.startswith(str(self.tmp)))
        self.assertEqual(len(during), 1)

        self.assertEqual(recovery.exit_code, 0)
        self.assertEqual(self.leftover_work_dirs(), [])
        self.assertEqual(self.record.password, "")
        self.assertEqual(self.record.root_password, "")

    def test_captured_failure_is_reported(self):
        with self.assertLogs("lnos_installer.recovery", level="WARNING") as logs:
            with self.recovery() as recovery:
                self.session.current_step = "50_install_base"
                try:
                    fail_pacstrap()
                except ExternalOperationError as e:
                    recovery.capture(e, "50_install_base")
                    raise

        self.assertEqual(recovery.exit_code, 2)
        self.assertIn("failed with code 2 during 50_install_base", logs.output[0])
        self.assertIn("Full log: /tmp/installer.log", logs.output[1])
        self.assertEqual(self.leftover_work_dirs(), [])
        self.assertEqual(self.record.password, "")

    def test_first_capture_wins(self):
        with self.recovery() as recovery:
            recovery.capture(RuntimeError("first"), "20_partition")
            recovery.capture(RuntimeError("second"), "40_format")
            diagnostic = self.session.diagnostic_path.read_text()
        self.assertIn("first during 20_partition", diagnostic)
        self.assertNotIn("second", diagnostic)
        self.assertIsNone(self.session.diagnostic_path)

    def test_uncaptured_failure_still_gets_a_diagnostic(self):
        with self.assertLogs("lnos_installer.recovery", level="ERROR") as logs:
            with self.recovery() as recovery:
                raise RuntimeError("boom")
        self.assertEqual(recovery.exit_code, 1)
        self.assertIn("RuntimeError: boom during setup", logs.output[0])

    def test_cancellation(self):
        with self.assertLogs("lnos_installer.recovery", level="WARNING") as logs:
            with self.recovery() as recovery:
                raise UserCancellation("Declined to wipe /dev/sda")
        self.assertEqual(recovery.exit_code, 130)
        self.assertEqual(len(logs.output), 1)
        self.assertIn("Installation cancelled by user", logs.output[0])

    def test_cancellation_writes_no_diagnostic(self):
        with self.recovery() as recovery:
            recovery.capture(UserCancellation("bye"), "20_partition")
            written = self.session.diagnostic_path.exists()
        self.assertFalse(written)

    def test_keyboard_interrupt(self):
        with self.assertLogs("lnos_installer.recovery", level="WARNING"):
            with self.recovery() as recovery:
                raise KeyboardInterrupt
        self.assertEqual(recovery.exit_code, 130)

    def test_fatal_exit(self):
        with self.assertLogs("lnos_installer.recovery", level="ERROR") as logs:
            with self.recovery() as recovery:
                raise SystemExit(1)
        self.assertEqual(recovery.exit_code, 1)
        self.assertIn("Installation failed with code 1", logs.output[0])


if __name__ == "__main__":
    unittest.main()
