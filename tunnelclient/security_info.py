"""Security product records (antivirus, antispyware, firewall) for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

# Security provider bits, as reported in the product state.
_PROVIDERS = (
    (0x1, "WSC_SECURITY_PROVIDER_FIREWALL"),
    (0x2, "WSC_SECURITY_PROVIDER_AUTOUPDATE_SETTINGS"),
    (0x4, "WSC_SECURITY_PROVIDER_ANTIVIRUS"),
    (0x8, "WSC_SECURITY_PROVIDER_ANTISPYWARE"),
    (0x10, "WSC_SECURITY_PROVIDER_INTERNET_SETTINGS"),
    (0x20, "WSC_SECURITY_PROVIDER_USER_ACCOUNT_CONTROL"),
    (0x40, "WSC_SECURITY_PROVIDER_SERVICE"),
)
_PROVIDER_NONE = "WSC_SECURITY_PROVIDER_NONE"


@dataclass
class V1Info:
    """Fields reported by the older security center namespace."""

    product_up_to_date: bool = False
    enabled: bool = False
    version_number: str = ""


@dataclass
class V2Info:
    """Fields decoded from the newer security center product state."""

    product_state: int = 0
    security_provider: str = ""
    enabled: bool = False
    definitions_up_to_date: bool = False


def decode_product_state(product_state: int) -> V2Info:
    """Decode a product state word into provider names, enabled and up-to-date flags."""
    provider_flags = (product_state >> 16) & 0xFF
    names = [name for bit, name in _PROVIDERS if provider_flags & bit]
    if provider_flags == 0:
        names.insert(0, _PROVIDER_NONE)

    scanner_flags = (product_state >> 8) & 0xFF
    return V2Info(
        product_state=product_state,
        security_provider="|".join(names),
        enabled=scanner_flags in (0x10, 0x11),
        definitions_up_to_date=(product_state & 0xFF) == 0x00,
    )


def _as_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


@dataclass
class SecurityInfo:
    """One security product; ``version`` is "v1" or "v2"."""

    display_name: str = ""
    version: str = ""
    v1: V1Info = field(default_factory=V1Info)
    v2: V2Info = field(default_factory=V2Info)

    def to_json(self) -> dict:
        return {
            "displayName": self.display_name,
            "version": self.version,
            "v1": {
                "productUpToDate": self.v1.product_up_to_date,
                "enabled": self.v1.enabled,
                "versionNumber": self.v1.version_number,
            },
            "v2": {
                "productState": _as_int32(self.v2.product_state),
                "securityProvider": self.v2.security_provider,
                "enabled": self.v2.enabled,
                "definitionsUpToDate": self.v2.definitions_up_to_date,
            },
        }


def security_info_sets_json(
    anti_virus: Iterable[SecurityInfo],
    anti_spyware: Iterable[SecurityInfo],
    firewall: Iterable[SecurityInfo],
) -> dict:
    """Build the SecurityInfo section of the diagnostic report."""
    return {
        "AntiVirusInfo": [info.to_json() for info in anti_virus],
        "AntiSpywareInfo": [info.to_json() for info in anti_spyware],
        "FirewallInfo": [info.to_json() for info in firewall],
    }