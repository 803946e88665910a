import csv
from pathlib import Path

import pytest


AUTH_METHODS_HEADER = [
    "user", "MFAstatus", "password", "app", "phone", "email", "fido2", "softwareoath",
    "hellobusiness", "temporaryAccessPassAuthenticationMethod", "certificateBasedAuthConfiguration",
]

REGISTRATION_HEADER = [
    "Id", "UserPrincipalName", "UserDisplayName", "IsAdmin", "IsSsprRegistered", "IsSsprEnabled",
    "IsSsprCapable", "IsMfaRegistered", "IsMfaCapable", "IsPasswordlessCapable", "MethodsRegistered",
    "IsSystemPreferredAuthenticationMethodEnabled", "SystemPreferredAuthenticationMethods",
    "UserPreferredMethodForSecondaryAuthentication", "UserType", "LastUpdatedDateTime",
]


def auth_row(user="alice@contoso.com", status="Enabled", **overrides):
    row = {
        "user": user,
        "MFAstatus": status,
        "password": "True",
        "app": "False",
        "phone": "False",
        "email": "False",
        "fido2": "False",
        "softwareoath": "False",
        "hellobusiness": "False",
        "temporaryAccessPassAuthenticationMethod": "",
        "certificateBasedAuthConfiguration": "False",
    }
    row.update(overrides)
    return row


def registration_row(upn="alice@contoso.com", methods="email\r\nmicrosoftAuthenticatorPush\r\n",
                     last_updated="24.01.2025 13:05:00", **overrides):
    row = {
        "Id": f"id-{upn}",
        "UserPrincipalName": upn,
        "UserDisplayName": upn.split("@")[0].title(),
        "IsAdmin": "False",
        "IsSsprRegistered": "False",
        "IsSsprEnabled": "False",
        "IsSsprCapable": "False",
        "IsMfaRegistered": "True",
        "IsMfaCapable": "True",
        "IsPasswordlessCapable": "False",
        "MethodsRegistered": methods,
        "IsSystemPreferredAuthenticationMethodEnabled": "False",
        "SystemPreferredAuthenticationMethods": "",
        "UserPreferredMethodForSecondaryAuthentication": "push",
        "UserType": "member",
        "LastUpdatedDateTime": last_updated,
    }
    row.update(overrides)
    return row


def write_export(path: Path, header, rows) -> Path:
    # Extractor output is UTF-8 with a byte-order mark
    with open(path, "w", newline="", encoding="utf-8-sig") as fh:
        writer = csv.DictWriter(fh, fieldnames=header)
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def export_dir(tmp_path):
    directory = tmp_path / "exports"
    directory.mkdir()
    return directory


@pytest.fixture
def auth_methods_csv(export_dir):
    rows = [
        auth_row("alice@contoso.com", "Disabled", password="True"),
        auth_row("bob@contoso.com", "Enabled", app="True", phone="True"),
        auth_row("carol@contoso.com", "Enabled", fido2="True",
                 temporaryAccessPassAuthenticationMethod="True"),
    ]
    return write_export(export_dir / "20250124-AuthenticationMethods.csv", AUTH_METHODS_HEADER, rows)


@pytest.fixture
def registration_csv(export_dir):
    rows = [
        registration_row("alice@contoso.com", methods="email\r\nmicrosoftAuthenticatorPush\r\n"),
        registration_row("bob@contoso.com", methods="microsoftAuthenticatorPush\r\n",
                         IsSsprCapable="True", IsPasswordlessCapable="True", UserType="guest",
                         last_updated="25.01.2025 08:00:00"),
        registration_row("carol@contoso.com", methods="", IsMfaCapable="False", IsMfaRegistered="False",
                         IsAdmin="True", last_updated="26.01.2025 23:59:59"),
    ]
    return write_export(export_dir / "20250124-UserRegistrationDetails.csv", REGISTRATION_HEADER, rows)


def read_output(path: Path):
    with open(path, newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))
