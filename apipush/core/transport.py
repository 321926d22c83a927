"""HTTP session construction with optional outbound proxy."""

import importlib.util
from typing import Callable
from urllib.parse import urlparse

import requests


HTTP_PROXY_SCHEMES = ("http", "https")
SOCKS_PROXY_SCHEMES = ("socks4", "socks4a", "socks5", "socks5h")

Warn = Callable[[str], None]


def _ignore(message: str) -> None:
    pass


def _socks_available() -> bool:
    return importlib.util.find_spec("socks") is not None


def create_session(proxy: str | None = None, warn: Warn | None = None) -> requests.Session:
    """Create the requests session used for every API call of a run.

    Environment proxy variables are not consulted here; the resolved
    proxy is the only one applied. A proxy that cannot be used is
    reported through ``warn`` and the session goes out directly.

    Args:
        proxy: Proxy URL (e.g., "http://127.0.0.1:3128")
        warn: Callback receiving warning messages

    Returns:
        Configured requests.Session
    """
    warn = warn or _ignore

    session = requests.Session()
    session.trust_env = False

    if not proxy:
        return session

    # host:port without a scheme is taken as an HTTP proxy
    if "://" not in proxy:
        proxy = f"http://{proxy}"

    parsed = urlparse(proxy)
    scheme = parsed.scheme.lower()

    if not parsed.hostname:
        warn(f"Invalid proxy URL '{proxy}', proceeding without proxy")
        return session

    if scheme in SOCKS_PROXY_SCHEMES and not _socks_available():
        warn(
            f"SOCKS proxy '{proxy}' requires the PySocks package "
            "(pip install requests[socks]), proceeding without proxy"
        )
        return session

    if scheme not in HTTP_PROXY_SCHEMES + SOCKS_PROXY_SCHEMES:
        warn(f"Unsupported proxy scheme '{scheme}', proceeding without proxy")
        return session

    session.proxies = {"http": proxy, "https": proxy}
    return session
