# =============================================================================
# processors/authentication_methods.py - Authentication Methods processor
# =============================================================================

from pathlib import Path
from typing import List, Dict, Any

from core.base_processor import BaseExportProcessor, to_bool
from core.models import AuthenticationMethodRecord, AuthenticationMethodStats, MfaStatus, TAP_PLACEHOLDER
from core.statistics import (count_where, format_percentage, frequency_table,
                             frequency_rows_to_dicts, usage_table)


class AuthenticationMethodsProcessor(BaseExportProcessor):
    """Normalizes and aggregates the *-AuthenticationMethods.csv export"""

    EXPORT_NAME = 'AuthenticationMethods'

    # Column mappings: source column -> (output column, record attribute)
    COLUMN_MAP = {
        'user': ('userPrincipalName', 'user_principal_name'),
        'MFAstatus': ('mfaStatus', 'mfa_status'),
        'password': ('password', 'password'),
        'app': ('authenticatorApp', 'authenticator_app'),
        'phone': ('phone', 'phone'),
        'email': ('email', 'email'),
        'fido2': ('fido2', 'fido2'),
        'softwareoath': ('softwareOath', 'software_oath'),
        'hellobusiness': ('helloForBusiness', 'hello_for_business'),
        'temporaryAccessPassAuthenticationMethod': ('temporaryAccessPass', 'temporary_access_pass'),
        'certificateBasedAuthConfiguration': ('certificateBasedAuth', 'certificate_based_auth'),
    }

    BOOLEAN_COLUMNS = [
        'password', 'app', 'phone', 'email', 'fido2', 'softwareoath',
        'hellobusiness', 'certificateBasedAuthConfiguration',
    ]

    # Labels of the AuthenticationMethod.csv usage table
    METHOD_LABELS = {
        'password': 'Password',
        'authenticator_app': 'Microsoft Authenticator App',
        'phone': 'Phone',
        'email': 'Email',
        'fido2': 'FIDO2 Security Key',
        'software_oath': 'Software OATH Token',
        'hello_for_business': 'Windows Hello for Business',
        'certificate_based_auth': 'Certificate-Based Authentication',
    }

    def create_record(self, row: Dict[str, str]) -> AuthenticationMethodRecord:
        values: Dict[str, Any] = {}

        for source, (_column, attribute) in self.COLUMN_MAP.items():
            raw = row.get(source)
            if source in self.BOOLEAN_COLUMNS:
                values[attribute] = to_bool(raw)
            else:
                values[attribute] = raw.strip() if raw else ''

        if not values['user_principal_name']:
            self.logger.debug("Row without user principal name kept")
            values['user_principal_name'] = None

        if not values['temporary_access_pass']:
            values['temporary_access_pass'] = TAP_PLACEHOLDER
        else:
            values['temporary_access_pass'] = row.get('temporaryAccessPassAuthenticationMethod')

        return AuthenticationMethodRecord(**values)

    def record_to_dict(self, record: AuthenticationMethodRecord) -> Dict[str, Any]:
        output = {}
        for column, attribute in self.COLUMN_MAP.values():
            value = getattr(record, attribute)
            output[column] = '' if value is None else str(value)
        return output

    def get_output_fieldnames(self) -> List[str]:
        return [column for column, _attribute in self.COLUMN_MAP.values()]

    def calculate_stats(self, records: List[AuthenticationMethodRecord]) -> AuthenticationMethodStats:
        """Single/multi-factor counts, per-method usage and MFA status frequency"""
        stats = AuthenticationMethodStats()
        total = len(records)
        stats.total_records = total

        stats.single_factor_count = count_where(
            records, lambda r: r.mfa_status == MfaStatus.DISABLED.value and r.password
        )
        stats.single_factor_percentage = format_percentage(stats.single_factor_count, total)

        stats.multi_factor_count = count_where(records, lambda r: r.mfa_status == MfaStatus.ENABLED.value)
        stats.multi_factor_percentage = format_percentage(stats.multi_factor_count, total)

        stats.unknown_status_count = count_where(records, lambda r: r.mfa_status == MfaStatus.UNKNOWN.value)

        method_counts = [
            (label, count_where(records, lambda r, attr=attribute: getattr(r, attr)))
            for attribute, label in self.METHOD_LABELS.items()
        ]
        stats.method_usage = usage_table(method_counts, total)

        stats.mfa_status_table = frequency_table(record.mfa_status for record in records)

        return stats

    def log_statistics(self, stats: AuthenticationMethodStats) -> None:
        self.logger.info(f"{stats.total_records} users found in Authentication Methods export")
        self.logger.info(f"Single-factor authentication: {stats.single_factor_count} "
                         f"({stats.single_factor_percentage})")
        self.logger.info(f"Multi-factor authentication: {stats.multi_factor_count} "
                         f"({stats.multi_factor_percentage})")

        if stats.single_factor_count:
            self.logger.warning(f"[Alert] {stats.single_factor_count} users sign in with password only "
                                f"(MFA disabled)")

        if stats.unknown_status_count:
            self.logger.warning(f"[Alert] MFA status could not be determined for {stats.unknown_status_count} users")

        for row in stats.mfa_status_table:
            self.logger.debug(f"MFA status {row.label or '(empty)'}: {row.count} ({row.percentage})")

    def export_statistics(self, stats: AuthenticationMethodStats, output_dir: Path) -> List[Path]:
        csv_dir = output_dir / 'Stats' / 'CSV'
        xlsx_dir = output_dir / 'Stats' / 'XLSX'

        tables = [
            ('MFA-Status', 'MFAStatus', stats.mfa_status_table),
            ('AuthenticationMethod', 'AuthenticationMethod', stats.method_usage),
        ]

        created = []
        for name, label_column, rows in tables:
            path = self.export_table(frequency_rows_to_dicts(rows, label_column),
                                     [label_column, 'Count', 'PercentUse'], name, csv_dir, xlsx_dir)
            if path:
                created.append(path)
        return created
