"""Handling of the JSON notices emitted by the tunnel core helper."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Iterable, Protocol

_log = logging.getLogger(__name__)


class TransportFailed(Exception):
    """The transport could not connect.

    ``retry`` is False when reconnecting with the same configuration is
    pointless, for example when a local proxy port is already in use.
    """

    def __init__(self, message: str = "transport failed", retry: bool = True) -> None:
        super().__init__(message)
        self.retry = retry


class ReconnectStateReceiver(Protocol):
    def set_reconnecting(self) -> None: ...

    def set_reconnected(self) -> None: ...


class AuthorizationsProvider(Protocol):
    def get_authorizations(self) -> Iterable[Any]: ...

    def active_authorization_ids(self, active: list[str], inactive: list[str]) -> None: ...


def inactive_authorization_ids(provided: Iterable[str], active: Iterable[str]) -> list[str]:
    """Return the provided authorization IDs that the server did not report active."""
    active_set = set(active)
    return [auth_id for auth_id in provided if auth_id not in active_set]


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


def _styled(value: Any) -> str:
    return json.dumps(value, indent=3)


class NoticeState:
    """Tracks the tunnel core's state as reported through its notices.

    ``upgrade_handler`` is called with the downloaded upgrade's filename and
    returns True if the upgrade was validated and paved.
    """

    def __init__(
        self,
        reconnect_receiver: ReconnectStateReceiver | None = None,
        upgrade_handler: Callable[[str], bool] | None = None,
        authorizations_provider: AuthorizationsProvider | None = None,
        stop_event: threading.Event | None = None,
        url_proxy_only: bool = False,
    ) -> None:
        self.reconnect_receiver = reconnect_receiver
        self.upgrade_handler = upgrade_handler
        self.authorizations_provider = authorizations_provider
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.url_proxy_only = url_proxy_only

        self.socks_proxy_port = 0
        self.http_proxy_port = 0
        self.has_ever_connected = False
        self.is_connected = False
        self.client_upgrade_download_handled = False
        self.last_upstream_proxy_error_message = ""
        self.authorization_ids: list[str] = []
        self.homepages: list[str] = []
        self.client_region = ""
        self.egress_regions: Any = None

        self._handlers: dict[str, Callable[[dict], None]] = {
            "Tunnels": self._tunnels,
            "ClientUpgradeDownloaded": self._client_upgrade_downloaded,
            "Homepage": self._homepage,
            "ListeningSocksProxyPort": self._listening_socks_port,
            "ListeningHttpProxyPort": self._listening_http_port,
            "SocksProxyPortInUse": self._socks_port_in_use,
            "HttpProxyPortInUse": self._http_port_in_use,
            "Untunneled": self._untunneled,
            "UpstreamProxyError": self._upstream_proxy_error,
            "AvailableEgressRegions": self._egress_regions,
            "ActiveAuthorizationIDs": self._active_authorization_ids,
            "ClientRegion": self._client_region,
            "SplitTunnelRegions": self._split_tunnel_regions,
            "TrafficRateLimits": self._traffic_rate_limits,
        }

    def reset_connection(self) -> None:
        """Forget connection state, as when the core process is torn down."""
        self.has_ever_connected = False
        self.is_connected = False

    def handle(self, notice_type: str, timestamp: str, data: Any) -> None:
        """Apply one notice; unknown notice types are ignored.

        Raises TransportFailed when a local proxy port is unavailable.
        """
        handler = self._handlers.get(notice_type)
        if handler is None:
            return
        handler(data if isinstance(data, dict) else {})

    def handle_line(self, line: str) -> bool:
        """Parse one output line of the core and apply it if it is a notice.

        Returns True if the line held a notice.
        """
        try:
            notice = json.loads(line)
        except json.JSONDecodeError:
            return False
        if not isinstance(notice, dict) or not isinstance(notice.get("noticeType"), str):
            return False
        self.handle(notice["noticeType"], _as_str(notice.get("timestamp")), notice.get("data"))
        return True

    def _tunnels(self, data: dict) -> None:
        count = _as_int(data.get("count"))
        if count == 0:
            if (
                self.has_ever_connected
                and self.reconnect_receiver is not None
                and not self.stop_event.is_set()
            ):
                self.reconnect_receiver.set_reconnecting()
            self.is_connected = False
        elif count == 1:
            if self.has_ever_connected and self.reconnect_receiver is not None:
                self.reconnect_receiver.set_reconnected()
            self.is_connected = True
            self.has_ever_connected = True

    def _client_upgrade_downloaded(self, data: dict) -> None:
        if self.upgrade_handler is None or self.client_upgrade_download_handled:
            return
        self.client_upgrade_download_handled = True
        _log.info("A client upgrade has been downloaded...")
        if not self.upgrade_handler(_as_str(data.get("filename"))):
            self.client_upgrade_download_handled = False
        _log.info("The new version will launch the next time the client starts.")

    def _homepage(self, data: dict) -> None:
        self.homepages.append(_as_str(data.get("url")))

    def _listening_socks_port(self, data: dict) -> None:
        self.socks_proxy_port = _as_int(data.get("port"))

    def _listening_http_port(self, data: dict) -> None:
        self.http_proxy_port = _as_int(data.get("port"))
        # With the url proxy alone no tunnel is expected; the proxy running is enough.
        if self.url_proxy_only:
            self.is_connected = True

    def _socks_port_in_use(self, data: dict) -> None:
        port = _as_int(data.get("port"))
        _log.warning("SOCKS proxy port not available: %d", port)
        raise TransportFailed(f"SOCKS proxy port not available: {port}", retry=False)

    def _http_port_in_use(self, data: dict) -> None:
        port = _as_int(data.get("port"))
        _log.warning("HTTP proxy port not available: %d", port)
        raise TransportFailed(f"HTTP proxy port not available: {port}", retry=False)

    def _untunneled(self, data: dict) -> None:
        _log.debug("Untunneled: %s", _as_str(data.get("address")))

    def _upstream_proxy_error(self, data: dict) -> None:
        message = _as_str(data.get("message"))
        if message != self.last_upstream_proxy_error_message:
            _log.warning("Upstream Proxy Error: %s", message)
            self.last_upstream_proxy_error_message = message

    def _egress_regions(self, data: dict) -> None:
        self.egress_regions = data.get("regions")
        _log.debug("Available egress regions: %s", _styled(self.egress_regions))

    def _active_authorization_ids(self, data: dict) -> None:
        ids = data.get("IDs")
        _log.debug("Active Authorization IDs: %s", _styled(ids))
        active = [_as_str(auth_id) for auth_id in ids] if isinstance(ids, list) else []
        inactive = inactive_authorization_ids(self.authorization_ids, active)
        if self.authorizations_provider is not None:
            self.authorizations_provider.active_authorization_ids(active, inactive)

    def _client_region(self, data: dict) -> None:
        self.client_region = _as_str(data.get("region"))
        _log.debug("Client region: %s", self.client_region)

    def _split_tunnel_regions(self, data: dict) -> None:
        _log.info("Split Tunnel Regions: %s", _styled(data.get("regions")))

    def _traffic_rate_limits(self, data: dict) -> None:
        _log.debug(
            "Traffic rate downstream limit: %s", _styled(data.get("downstreamBytesPerSecond"))
        )