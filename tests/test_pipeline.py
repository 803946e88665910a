from pathlib import Path

from core.pipeline import AnalysisRun, derive_registration_details_path

from conftest import read_output


def test_derive_registration_details_path():
    derived = derive_registration_details_path(Path("/cases/20250124-AuthenticationMethods.csv"))

    assert derived == Path("/cases/20250124-UserRegistrationDetails.csv")
    assert derive_registration_details_path("/cases/export.csv") is None


def test_run_writes_both_sections(auth_methods_csv, registration_csv, tmp_path):
    output_dir = tmp_path / "out"

    result = AnalysisRun(auth_methods_csv, output_dir).run()

    assert result.authentication_methods.multi_factor_count == 2
    assert result.registration_details is not None
    assert result.registration_details_path == registration_csv

    for name in ("AuthenticationMethods", "UserRegistrationDetails"):
        assert (output_dir / "CSV" / f"{name}.csv").exists()
        assert (output_dir / "XLSX" / f"{name}.xlsx").exists()
    for name in ("MFA-Status", "AuthenticationMethod", "MethodsRegistered"):
        assert (output_dir / "Stats" / "CSV" / f"{name}.csv").exists()
        assert (output_dir / "Stats" / "XLSX" / f"{name}.xlsx").exists()


def test_missing_companion_keeps_first_section(auth_methods_csv, tmp_path):
    output_dir = tmp_path / "out"

    result = AnalysisRun(auth_methods_csv, output_dir).run()

    assert result.registration_details is None
    assert len(read_output(output_dir / "CSV" / "AuthenticationMethods.csv")) == 3
    assert not (output_dir / "CSV" / "UserRegistrationDetails.csv").exists()


def test_previous_results_are_replaced(auth_methods_csv, tmp_path):
    output_dir = tmp_path / "out"
    stale = output_dir / "Stats" / "CSV" / "Stale.csv"
    stale.parent.mkdir(parents=True)
    stale.write_text("old\n")

    AnalysisRun(auth_methods_csv, output_dir).run()

    assert not stale.exists()
    assert (output_dir / "Stats" / "CSV" / "MFA-Status.csv").exists()
