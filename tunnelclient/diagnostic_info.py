"""Assembly of the diagnostic report and the feedback package sent to the server."""

from __future__ import annotations

import json
import secrets
from dataclasses import dataclass, field
from typing import Any

from tunnelclient.diagnostic_history import TIMESTAMP_KEY
from tunnelclient.security_info import SecurityInfo, security_info_sets_json
from tunnelclient.system_info import (
    NetworkInfo,
    SystemInfo,
    internet_info_json,
    user_info_json,
)

FEEDBACK_PLATFORM = "windows"
FEEDBACK_VERSION = 2
_FEEDBACK_ID_BYTES = 8


@dataclass
class ConnectionProxy:
    """Proxy settings of one network connection, as found before connecting."""

    name: str = ""
    flags_string: str = ""
    proxy: str = ""
    bypass: str = ""

    def to_json(self) -> dict:
        return {
            "connectionName": self.name,
            "flags": self.flags_string,
            "proxy": self.proxy,
            "bypass": self.bypass,
        }


@dataclass
class MessageHistoryEntry:
    """One status message shown to the user."""

    message: str
    debug: bool = False
    timestamp: str = ""

    def to_json(self) -> dict:
        return {
            "message": self.message,
            "debug": self.debug,
            TIMESTAMP_KEY: self.timestamp,
        }


@dataclass
class DiagnosticSnapshot:
    """Everything gathered for the DiagnosticInfo section of a feedback package.

    ``startup_network_info`` is the network state recorded before any system
    changes were made; None marks state that could not be read.
    """

    propagation_channel_id: str = ""
    sponsor_id: str = ""
    client_version: str = ""
    client_build: str = ""
    split_tunnel: bool = False
    selected_transport: str = ""
    system_info: SystemInfo = field(default_factory=SystemInfo)
    startup_network_info: NetworkInfo | None = None
    original_proxies: list[ConnectionProxy] = field(default_factory=list)
    anti_virus: list[SecurityInfo] = field(default_factory=list)
    anti_spyware: list[SecurityInfo] = field(default_factory=list)
    firewall: list[SecurityInfo] = field(default_factory=list)
    message_history: list[MessageHistoryEntry] = field(default_factory=list)
    diagnostic_history: list[dict] = field(default_factory=list)
    psicash: Any = None

    def to_json(self) -> dict:
        sys_info = self.system_info
        system_information = {
            "PsiphonInfo": {
                "PROPAGATION_CHANNEL_ID": self.propagation_channel_id,
                "SPONSOR_ID": self.sponsor_id,
                "CLIENT_VERSION": self.client_version,
                "clientBuild": self.client_build,
                "splitTunnel": self.split_tunnel,
                "selectedTransport": self.selected_transport,
            },
            "OSInfo": sys_info.os_info_json(),
            "NetworkInfo": {
                "Current": {"Internet": internet_info_json(sys_info.network_info)},
                "Original": {
                    "Proxy": [proxy.to_json() for proxy in self.original_proxies],
                    "Internet": internet_info_json(self.startup_network_info),
                },
            },
            "UserInfo": user_info_json(sys_info.group_info),
            "SecurityInfo": security_info_sets_json(
                self.anti_virus, self.anti_spyware, self.firewall
            ),
            "Misc": {
                "mideastEnabled": sys_info.mideast_enabled,
                "slowMachine": sys_info.slow_machine,
            },
        }
        return {
            "SystemInformation": system_information,
            "StatusHistory": [entry.to_json() for entry in self.message_history],
            "DiagnosticHistory": list(self.diagnostic_history),
            "PsiCash": self.psicash,
        }


def _write_compact(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False) + "\n"


def generate_feedback_json(
    feedback: str,
    email_address: str,
    survey_json: str,
    send_diagnostic_info: bool,
    snapshot: DiagnosticSnapshot | None = None,
) -> str:
    """Return the feedback package as a JSON string.

    Returns an empty string when there is no feedback text and the user did
    not opt in to diagnostics. The e-mail address is only kept when there is
    feedback text or a survey.
    """
    if not feedback and not send_diagnostic_info:
        return ""

    out: dict[str, Any] = {
        "Metadata": {
            "platform": FEEDBACK_PLATFORM,
            "version": FEEDBACK_VERSION,
            "id": secrets.token_hex(_FEEDBACK_ID_BYTES),
        }
    }

    if send_diagnostic_info:
        out["DiagnosticInfo"] = (snapshot or DiagnosticSnapshot()).to_json()

    if feedback or survey_json:
        out["Feedback"] = {
            "email": email_address,
            "Message": {"text": feedback},
            "Survey": {"json": survey_json},
        }

    return _write_compact(out)