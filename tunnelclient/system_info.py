"""Operating system, network and user information for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

_INTERNET_KEYS = (
    "internetConnected",
    "internetConnectionConfigured",
    "internetConnectionLAN",
    "internetConnectionModem",
    "internetConnectionOffline",
    "internetConnectionProxy",
    "internetRASInstalled",
)

_USER_KEYS = ("inAdminsGroup", "inUsersGroup", "inGuestsGroup", "inPowerUsersGroup")


@dataclass
class UserGroupInfo:
    """Membership of the current user in the built-in groups."""

    in_admins_group: bool = False
    in_users_group: bool = False
    in_guests_group: bool = False
    in_power_users_group: bool = False

    def to_json(self) -> dict:
        return {
            "inAdminsGroup": self.in_admins_group,
            "inUsersGroup": self.in_users_group,
            "inGuestsGroup": self.in_guests_group,
            "inPowerUsersGroup": self.in_power_users_group,
        }


@dataclass
class NetworkInfo:
    """State of the system's internet connection."""

    internet_connection_configured: bool = False
    internet_connection_lan: bool = False
    internet_connection_modem: bool = False
    internet_connection_offline: bool = False
    internet_connection_proxy: bool = False
    internet_ras_installed: bool = False


def internet_info_json(network_info: NetworkInfo | None) -> dict:
    """Build an Internet section; every value is null if the info is unknown."""
    if network_info is None:
        return dict.fromkeys(_INTERNET_KEYS)
    return {
        "internetConnected": True,
        "internetConnectionConfigured": network_info.internet_connection_configured,
        "internetConnectionLAN": network_info.internet_connection_lan,
        "internetConnectionModem": network_info.internet_connection_modem,
        "internetConnectionOffline": network_info.internet_connection_offline,
        "internetConnectionProxy": network_info.internet_connection_proxy,
        "internetRASInstalled": network_info.internet_ras_installed,
    }


def user_info_json(group_info: UserGroupInfo | None) -> dict:
    """Build the UserInfo section; every value is null if the info is unknown."""
    if group_info is None:
        return dict.fromkeys(_USER_KEYS)
    return group_info.to_json()


@dataclass
class SystemInfo:
    """Facts about the operating system; None marks info that could not be read."""

    name: str = ""
    version: str = ""
    code_set: str = ""
    country_code: str = ""
    free_physical_memory_kb: int = 0
    free_virtual_memory_kb: int = 0
    current_disk_free_space_bytes: int = 0
    locale: str = ""
    architecture: str = ""
    language: int = 0
    service_pack_major: int = 0
    service_pack_minor: int = 0
    status: str = ""
    mshtml_dll_version: str = ""
    starter: bool = False
    mideast_enabled: bool = False
    slow_machine: bool = False
    network_info: NetworkInfo | None = None
    group_info: UserGroupInfo | None = None

    def os_info_json(self) -> dict:
        """Build the OSInfo section of the diagnostic report."""
        return {
            "name": self.name,
            "version": self.version,
            "codeSet": self.code_set,
            "countryCode": self.country_code,
            "freePhysicalMemoryKB": self.free_physical_memory_kb,
            "freeVirtualMemoryKB": self.free_virtual_memory_kb,
            "currentDiskFreeSpaceBytes": self.current_disk_free_space_bytes,
            "locale": self.locale,
            "architecture": self.architecture,
            "language": self.language,
            "servicePackMajor": self.service_pack_major,
            "servicePackMinor": self.service_pack_minor,
            "status": self.status,
            "starter": self.starter,
            "mshtmlDLLVersion": self.mshtml_dll_version,
        }


def client_platform(
    base_platform: str, system_info: SystemInfo | None, legacy: bool = False
) -> str:
    """Return the platform string sent to the server.

    Without system info this is ``base_platform``. Otherwise it is
    ``<base>_<os version>_<mshtml major>``, with ``_LEGACY`` appended for
    legacy systems. An unknown MSHTML version is reported as ``0``.
    """
    if system_info is None:
        return base_platform

    mshtml_version = system_info.mshtml_dll_version
    if not mshtml_version:
        mshtml_version = "0"
    else:
        mshtml_version = mshtml_version.split(".", 1)[0]

    result = f"{base_platform}_{system_info.version}_{mshtml_version}"
    if legacy:
        result += "_LEGACY"
    return result