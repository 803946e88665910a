# =============================================================================
# processors/user_registration_details.py - User Registration Details processor
# =============================================================================

from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple

from core.base_processor import BaseExportProcessor, to_bool
from core.models import RegistrationStats, UserRegistrationRecord, UserType
from core.statistics import count_where, format_percentage, frequency_table, frequency_rows_to_dicts
from utils.timestamps import detect_timestamp_format, format_timestamp, layout_name, parse_timestamp


def split_methods_registered(value: Optional[str]) -> Tuple[str, Tuple[str, ...]]:
    """
    Flatten a newline separated MethodsRegistered cell.

    Returns the display string ("Email, MicrosoftAuthenticator") and the
    individual method names.
    """
    if not value:
        return '', ()

    text = value.replace('\r', '')
    methods = tuple(method.strip() for method in text.split('\n') if method.strip())
    return ', '.join(methods), methods


def relabel_user_type(value: str) -> str:
    """member -> Member, guest -> Guest, anything else unchanged"""
    for user_type in UserType:
        if value == user_type.value.lower():
            return user_type.value
    return value


class UserRegistrationDetailsProcessor(BaseExportProcessor):
    """Normalizes and aggregates the *-UserRegistrationDetails.csv export"""

    EXPORT_NAME = 'UserRegistrationDetails'

    # Column mappings: source column -> (output column, record attribute)
    COLUMN_MAP = {
        'Id': ('id', 'id'),
        'UserDisplayName': ('displayName', 'display_name'),
        'UserPrincipalName': ('userPrincipalName', 'user_principal_name'),
        'IsAdmin': ('isAdmin', 'is_admin'),
        'IsMfaCapable': ('isMfaCapable', 'is_mfa_capable'),
        'IsMfaRegistered': ('isMfaRegistered', 'is_mfa_registered'),
        'IsPasswordlessCapable': ('isPasswordlessCapable', 'is_passwordless_capable'),
        'IsSsprCapable': ('isSsprCapable', 'is_sspr_capable'),
        'IsSsprEnabled': ('isSsprEnabled', 'is_sspr_enabled'),
        'IsSystemPreferredAuthenticationMethodEnabled': ('isSystemPreferredMethodEnabled',
                                                         'is_system_preferred_method_enabled'),
        'MethodsRegistered': ('methodsRegistered', 'methods_registered'),
        'SystemPreferredAuthenticationMethods': ('systemPreferredMethods', 'system_preferred_methods'),
        'UserPreferredMethodForSecondaryAuthentication': ('userPreferredSecondaryMethod',
                                                          'user_preferred_secondary_method'),
        'UserType': ('userType', 'user_type'),
        'LastUpdatedDateTime': ('lastUpdated', 'last_updated'),
    }

    # Alternative source spellings seen in the wild
    COLUMN_ALIASES = {
        'UserPreferredMethodForSecondaryAuthentication': ['UserPreferedMethodForSecondaryAuthentication'],
    }

    BOOLEAN_COLUMNS = [
        'IsAdmin', 'IsMfaCapable', 'IsMfaRegistered', 'IsPasswordlessCapable',
        'IsSsprCapable', 'IsSsprEnabled', 'IsSystemPreferredAuthenticationMethodEnabled',
    ]

    # Per-user predicates reported with count and percentage of all users
    PREDICATES = {
        'MFA Capable': 'is_mfa_capable',
        'MFA Registered': 'is_mfa_registered',
        'Passwordless Capable': 'is_passwordless_capable',
        'SSPR Capable': 'is_sspr_capable',
        'SSPR Enabled': 'is_sspr_enabled',
        'Admin': 'is_admin',
    }

    def __init__(self):
        super().__init__()
        self.timestamp_format: Optional[str] = None

    def get_value(self, row: Dict[str, str], source: str) -> str:
        """Stripped cell value, falling back to known alternative column names"""
        for column in [source] + self.COLUMN_ALIASES.get(source, []):
            value = row.get(column)
            if value:
                return value.strip()
        return ''

    def normalize_rows(self, csv_data: List[Dict[str, str]]) -> List[UserRegistrationRecord]:
        """Detect the LastUpdatedDateTime layout from the first row, then normalize"""
        if csv_data:
            sample = self.get_value(csv_data[0], 'LastUpdatedDateTime')
            self.timestamp_format = detect_timestamp_format(sample)
            if self.timestamp_format:
                self.logger.info(f"LastUpdatedDateTime layout detected: {layout_name(self.timestamp_format)}")
            else:
                self.logger.warning(f"Unrecognized LastUpdatedDateTime layout '{sample}' - "
                                    f"lastUpdated left empty")

        return super().normalize_rows(csv_data)

    def create_record(self, row: Dict[str, str]) -> UserRegistrationRecord:
        values: Dict[str, Any] = {}

        for source, (_column, attribute) in self.COLUMN_MAP.items():
            raw = self.get_value(row, source)
            if source in self.BOOLEAN_COLUMNS:
                values[attribute] = to_bool(raw)
            else:
                values[attribute] = raw

        values['user_principal_name'] = values['user_principal_name'] or None

        # MethodsRegistered keeps its embedded line breaks, so read it unstripped
        display, methods = split_methods_registered(row.get('MethodsRegistered'))
        values['methods_registered'] = display
        values['methods_registered_list'] = methods

        values['user_type'] = relabel_user_type(values['user_type'])

        raw_timestamp = values['last_updated']
        values['last_updated'] = parse_timestamp(raw_timestamp, self.timestamp_format)
        if raw_timestamp and self.timestamp_format and values['last_updated'] is None:
            self.logger.debug(f"LastUpdatedDateTime '{raw_timestamp}' does not match detected layout")

        return UserRegistrationRecord(**values)

    def record_to_dict(self, record: UserRegistrationRecord) -> Dict[str, Any]:
        output = {}
        for column, attribute in self.COLUMN_MAP.values():
            value = getattr(record, attribute)
            if attribute == 'last_updated':
                output[column] = format_timestamp(value)
            else:
                output[column] = '' if value is None else str(value)
        return output

    def get_output_fieldnames(self) -> List[str]:
        return [column for column, _attribute in self.COLUMN_MAP.values()]

    def calculate_stats(self, records: List[UserRegistrationRecord]) -> RegistrationStats:
        """Capability counts, registered-methods frequency and user types"""
        stats = RegistrationStats()
        total = len(records)
        stats.total_records = total

        for name, attribute in self.PREDICATES.items():
            count = count_where(records, lambda r, attr=attribute: getattr(r, attr))
            stats.predicate_counts[name] = (count, format_percentage(count, total))

        stats.no_methods_registered = count_where(records, lambda r: r.methods_registered) == 0

        stats.methods_registered_table = frequency_table(
            method for record in records for method in record.methods_registered_list
        )
        stats.user_type_table = frequency_table(record.user_type for record in records)

        return stats

    def log_statistics(self, stats: RegistrationStats) -> None:
        self.logger.info(f"{stats.total_records} users found in User Registration Details export")

        for name, (count, percentage) in stats.predicate_counts.items():
            self.logger.info(f"{name}: {count} ({percentage})")

        if stats.no_methods_registered:
            self.logger.warning("[Alert] No users with registered authentication methods found")
        else:
            self.logger.info(f"{stats.total_method_occurrences} registered methods across "
                             f"{len(stats.methods_registered_table)} method types")

        for row in stats.user_type_table:
            self.logger.debug(f"User type {row.label or '(empty)'}: {row.count} ({row.percentage})")

    def export_statistics(self, stats: RegistrationStats, output_dir: Path) -> List[Path]:
        csv_dir = output_dir / 'Stats' / 'CSV'
        xlsx_dir = output_dir / 'Stats' / 'XLSX'

        tables = [
            ('MethodsRegistered', 'MethodsRegistered', stats.methods_registered_table),
            ('UserType', 'UserType', stats.user_type_table),
        ]

        created = []
        for name, label_column, rows in tables:
            path = self.export_table(frequency_rows_to_dicts(rows, label_column),
                                     [label_column, 'Count', 'PercentUse'], name, csv_dir, xlsx_dir)
            if path:
                created.append(path)
        return created
