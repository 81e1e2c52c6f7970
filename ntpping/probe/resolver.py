"""
Address resolution for the initial target
"""

import ipaddress
import logging
import socket

from ..errors import ResolutionError
from ..models import NTP_PORT, Target


logger = logging.getLogger(__name__)


def is_ip_literal(text: str) -> bool:
    """True if text is a literal IPv4 or IPv6 address"""
    if not text:
        return False
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def resolve_to_ip(host: str, ipv6: bool = False) -> str:
    """
    Resolve a host name to a single IP address.
    
    Literal addresses are returned unchanged whatever the family
    preference. Names are looked up in the IPv4 family unless ipv6
    is set, and the first address found is returned.
    
    Raises:
        ResolutionError: lookup failed or returned no address of the family
    """
    if is_ip_literal(host):
        return host
    
    family = socket.AF_INET6 if ipv6 else socket.AF_INET
    try:
        infos = socket.getaddrinfo(host, None, family, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(host, str(e)) from e
    
    for info in infos:
        sockaddr = info[4]
        if sockaddr:
            logger.debug("resolved %s to %s", host, sockaddr[0])
            return sockaddr[0]
    
    raise ResolutionError(host, "no suitable address found")


def initial_target(address: str, resolved_ip: str, port: int = NTP_PORT) -> Target:
    """
    Build the first target of a run.
    
    On the standard port the resolved IP is used. On any other port the
    address is kept as the user typed it, so it shows as ``host:port``.
    """
    if port == NTP_PORT:
        return Target(host=resolved_ip)
    return Target(host=address, port=port)
