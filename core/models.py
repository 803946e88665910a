# =============================================================================
# core/models.py - Unified data models
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from enum import Enum


TAP_PLACEHOLDER = "-"


class MfaStatus(Enum):
    """Values of the MFAstatus column"""
    ENABLED = "Enabled"
    DISABLED = "Disabled"
    UNKNOWN = "Unknown"


class UserType(Enum):
    """Directory user types"""
    MEMBER = "Member"
    GUEST = "Guest"


@dataclass(frozen=True)
class AuthenticationMethodRecord:
    """One user of the Authentication Methods export"""
    user_principal_name: Optional[str]
    mfa_status: str = ""
    password: bool = False
    authenticator_app: bool = False
    phone: bool = False
    email: bool = False
    fido2: bool = False
    software_oath: bool = False
    hello_for_business: bool = False
    certificate_based_auth: bool = False
    temporary_access_pass: str = TAP_PLACEHOLDER


@dataclass(frozen=True)
class UserRegistrationRecord:
    """One user of the User Registration Details export"""
    id: str
    display_name: str = ""
    user_principal_name: Optional[str] = None
    is_admin: bool = False
    is_mfa_capable: bool = False
    is_mfa_registered: bool = False
    is_passwordless_capable: bool = False
    is_sspr_capable: bool = False
    is_sspr_enabled: bool = False
    is_system_preferred_method_enabled: bool = False
    methods_registered: str = ""
    methods_registered_list: Tuple[str, ...] = ()
    system_preferred_methods: str = ""
    user_preferred_secondary_method: str = ""
    user_type: str = ""
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class FrequencyRow:
    """Single row of a frequency table"""
    label: str
    count: int
    percentage: str


@dataclass
class AuthenticationMethodStats:
    """Aggregates over the Authentication Methods export"""
    total_records: int = 0
    single_factor_count: int = 0
    single_factor_percentage: str = "0.00%"
    multi_factor_count: int = 0
    multi_factor_percentage: str = "0.00%"
    unknown_status_count: int = 0
    method_usage: List[FrequencyRow] = field(default_factory=list)
    mfa_status_table: List[FrequencyRow] = field(default_factory=list)


@dataclass
class RegistrationStats:
    """Aggregates over the User Registration Details export"""
    total_records: int = 0
    predicate_counts: Dict[str, Tuple[int, str]] = field(default_factory=dict)
    no_methods_registered: bool = False
    methods_registered_table: List[FrequencyRow] = field(default_factory=list)
    user_type_table: List[FrequencyRow] = field(default_factory=list)

    @property
    def total_method_occurrences(self) -> int:
        return sum(row.count for row in self.methods_registered_table)
