# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""PBX hostname resolution.

The Nexus endpoint is reached by IPv4 address when one can be resolved.
httpx connects by name just as well, so a failed lookup degrades to the
original hostname instead of failing the fetch.
"""

import asyncio
import logging
import socket

log = logging.getLogger(__name__)


async def resolve_hostname(hostname: str) -> str:
    """Resolve ``hostname`` to its first IPv4 address.

    Looks up all address families but only accepts an ``AF_INET`` result,
    since the address is placed in a URL authority as-is.

    Returns:
        The dotted-quad address, or ``hostname`` unchanged if the lookup
        fails or yields no IPv4 address.
    """
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(
            hostname, None, family=socket.AF_UNSPEC, type=socket.SOCK_STREAM
        )
    except (OSError, UnicodeError) as e:
        log.debug("Could not resolve %s, using hostname as-is: %s", hostname, e)
        return hostname

    for family, _type, _proto, _canonname, sockaddr in infos:
        if family == socket.AF_INET:
            address = sockaddr[0]
            log.debug("Resolved %s to %s", hostname, address)
            return address

    log.debug("No IPv4 address for %s, using hostname as-is", hostname)
    return hostname
