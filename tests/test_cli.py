"""Headless runner and command-line entry point."""

from __future__ import annotations

import contextlib
import io
import os
import sys
import tempfile
import unittest
from datetime import date, datetime, timezone
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from farmaguardia import cli  # noqa: E402
from farmaguardia.config import local_tz  # noqa: E402
from farmaguardia.headless import (  # noqa: E402
    EXIT_NO_DUTY,
    EXIT_ON_DUTY,
    HeadlessOptions,
    execute_headless,
)
from farmaguardia.parsing.capital import CapitalStrategy  # noqa: E402
from farmaguardia.parsing.registry import StrategyRegistry  # noqa: E402
from farmaguardia.parsing.rural import RuralStrategy  # noqa: E402

from .fixtures.synth import capital_document, rural_document  # noqa: E402


class SyntheticCapital(CapitalStrategy):
    def parse(self, document, report=None):
        return super().parse(capital_document(), report)


class SyntheticRural(RuralStrategy):
    def parse(self, document, report=None):
        return super().parse(rural_document(), report)


def _registry() -> StrategyRegistry:
    today = lambda: date(2025, 1, 1)  # noqa: E731
    return StrategyRegistry([SyntheticCapital(today=today), SyntheticRural(today=today)])


class HeadlessTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        env = mock.patch.dict(os.environ, {"FARMAGUARDIA_HOME": str(self.tmp / "home")})
        env.start()
        self.addCleanup(env.stop)
        self.pdf = self.tmp / "calendario.pdf"
        self.pdf.write_bytes(b"%PDF-1.7 synthetic")

    def _run(self, region: str, at: datetime, **kwargs):
        options = HeadlessOptions(
            input_pdf=self.pdf,
            region=region,
            at=at if at.tzinfo else at.replace(tzinfo=local_tz()),
            log_dir=self.tmp / "logs",
            **kwargs,
        )
        return execute_headless(options, registry=_registry())

    def test_night_shift_lookup(self) -> None:
        result = self._run("segovia-capital", datetime(2025, 1, 1, 23, 0))
        self.assertEqual(result.exit_code, EXIT_ON_DUTY)
        self.assertEqual([p.name for p in result.pharmacies], ["FARMACIA B"])
        self.assertTrue(result.lines[0].startswith("Segovia Capital Guardia nocturna (22:00 - 10:15)"))
        self.assertIn("921 000 002", result.lines[1])
        self.assertTrue(result.summary_line.endswith("Entries:2 OnDuty:1"))
        self.assertTrue(result.log_file.exists())

    def test_listing(self) -> None:
        result = self._run("segovia-capital", datetime(2025, 1, 1, 12, 0), list_entries=True)
        self.assertIn("01-ene-2025 capital-day: FARMACIA A", result.lines)
        self.assertIn("02-ene-2025 capital-night: FARMACIA D", result.lines)

    def test_gap_reports_no_data(self) -> None:
        result = self._run("segovia-capital", datetime(2025, 2, 1, 12, 0))
        self.assertEqual(result.exit_code, EXIT_NO_DUTY)
        self.assertTrue(result.lines[-1].endswith("no pharmacy on duty"))

    def test_zone_lookup(self) -> None:
        open_zone = self._run("segovia-rural", datetime(2025, 1, 2, 12, 0), zone="riaza-sepulveda")
        self.assertEqual(open_zone.exit_code, EXIT_ON_DUTY)
        self.assertEqual(len(open_zone.pharmacies), 2)
        self.assertIn("ZBS: Riaza / Sepúlveda", open_zone.lines[1])

        empty_zone = self._run("segovia-rural", datetime(2025, 1, 1, 12, 0), zone="carbonero")
        self.assertEqual(empty_zone.exit_code, EXIT_NO_DUTY)

        closed = self._run("segovia-rural", datetime(2025, 1, 2, 21, 0), zone="carbonero")
        self.assertEqual(closed.exit_code, EXIT_NO_DUTY)

    def test_zone_lookup_converts_foreign_offsets(self) -> None:
        # 23:30 UTC on 1 January is already 2 January in Madrid.
        at = datetime(2025, 1, 1, 23, 30, tzinfo=timezone.utc)
        result = self._run("segovia-rural", at, zone="riaza-sepulveda")
        self.assertEqual(result.exit_code, EXIT_ON_DUTY)
        self.assertEqual(len(result.pharmacies), 2)

    def test_invalid_options(self) -> None:
        with self.assertRaises(ValueError):
            self._run("segovia-capital", datetime(2025, 1, 1, 12, 0), zone="carbonero")
        with self.assertRaises(ValueError):
            self._run("madrid", datetime(2025, 1, 1, 12, 0))
        self.pdf.unlink()
        with self.assertRaises(FileNotFoundError):
            self._run("segovia-capital", datetime(2025, 1, 1, 12, 0))


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        env = mock.patch.dict(os.environ, {"FARMAGUARDIA_HOME": str(self.tmp / "home")})
        env.start()
        self.addCleanup(env.stop)

    def test_unknown_region_is_a_usage_error(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as raised:
                cli.parse_arguments(["--region", "madrid", "--input", "x.pdf"])
        self.assertEqual(raised.exception.code, 2)

    def test_bad_instant(self) -> None:
        args = cli.parse_arguments(["--region", "cuellar", "--input", "x.pdf", "--at", "mañana"])
        with self.assertRaises(ValueError):
            cli.create_headless_options(args)

    def test_naive_instant_is_local(self) -> None:
        args = cli.parse_arguments(["--region", "cuellar", "--input", "x.pdf", "--at", "2025-01-01T15:00"])
        options = cli.create_headless_options(args)
        self.assertEqual(options.at, datetime(2025, 1, 1, 15, 0, tzinfo=local_tz()))
        self.assertIsNone(options.qa_png)

    def test_qa_png_without_value_uses_data_home(self) -> None:
        args = cli.parse_arguments(["--region", "cuellar", "--input", "x.pdf", "--qa-png"])
        options = cli.create_headless_options(args)
        self.assertEqual(options.qa_png, self.tmp / "home" / "qa")

    def test_missing_input(self) -> None:
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            code = cli.main(["--region", "cuellar", "--input", str(self.tmp / "missing.pdf")])
        self.assertEqual(code, 2)
        self.assertIn("HEADLESS_MISS reason=input_missing", stderr.getvalue())

    def test_main_prints_lookup(self) -> None:
        pdf = self.tmp / "capital.pdf"
        pdf.write_bytes(b"%PDF-1.7 synthetic")
        stdout = io.StringIO()
        with mock.patch("farmaguardia.headless.default_registry", _registry), contextlib.redirect_stdout(stdout):
            code = cli.main(
                [
                    "--region",
                    "segovia-capital",
                    "--input",
                    str(pdf),
                    "--at",
                    "2025-01-02T10:15",
                    "--log-dir",
                    str(self.tmp / "logs"),
                ]
            )
        self.assertEqual(code, 0)
        output = stdout.getvalue()
        self.assertIn("FARMACIA C", output)
        self.assertIn("Region:segovia-capital Kept:2 Dropped:0", output)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
