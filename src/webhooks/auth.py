import hashlib
import hmac
from collections.abc import Iterable
from ipaddress import IPv4Network, IPv6Address, IPv6Network, ip_address, ip_network

import structlog
from fastapi import Request

from src.core.config.github_config import GitHubConfig
from src.core.errors import SignatureError, SourceNotAllowedError

logger = structlog.get_logger()

SIGNATURE_HEADER = "X-Hub-Signature"

Network = IPv4Network | IPv6Network


def compile_networks(blocks: Iterable[str]) -> tuple[Network, ...]:
    """Parse CIDR strings once at startup, skipping (and logging) invalid entries."""
    networks: list[Network] = []
    for block in blocks:
        try:
            networks.append(ip_network(block, strict=False))
        except ValueError as e:
            logger.warning("invalid_ip_block", block=block, error=str(e))
    return tuple(networks)


def is_allowed_source(host: str | None, networks: Iterable[Network]) -> bool:
    """
    Check a client address against the allowed networks.

    Anything that does not parse as an IP address is denied.
    """
    if not host:
        return False
    try:
        address = ip_address(host)
    except ValueError:
        return False
    # Dual-stack servers report IPv4 clients as ::ffff:a.b.c.d
    if isinstance(address, IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped
    return any(address in network for network in networks)


def compute_signature(secret: str, body: bytes) -> str:
    """Return the X-Hub-Signature value GitHub sends for this body: ``sha1=<hex digest>``."""
    mac = hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha1)
    return f"sha1={mac.hexdigest()}"


def signature_matches(signature: str, secret: str, body: bytes) -> bool:
    """
    Compare a signature header with the signature of the raw body.

    Both sides are compared as byte buffers with ``==``. This is not a
    constant-time comparison and leaks timing information about how many
    leading bytes match.
    """
    return signature.encode() == compute_signature(secret, body).encode()


async def verify_source_ip(request: Request) -> None:
    """
    FastAPI dependency that rejects requests from outside GitHub's hook ranges.

    Raises:
        SourceNotAllowedError: If the client address is not allow-listed.
    """
    github_config: GitHubConfig = request.app.state.github_config
    if not github_config.ip_check_enabled:
        return

    host = request.client.host if request.client else None
    if not is_allowed_source(host, request.app.state.allowed_networks):
        logger.warning("source_ip_denied", client_ip=host)
        raise SourceNotAllowedError()


async def verify_github_signature(request: Request) -> bool:
    """
    FastAPI dependency that verifies the GitHub webhook signature.

    This function reads the 'X-Hub-Signature' header and compares it with an
    HMAC-SHA1 of the raw request body, using our configured webhook secret.
    The body is hashed exactly as received, before any JSON parsing.

    Raises:
        SignatureError: If the signature is missing or invalid.

    Returns:
        True if the signature is valid.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    if signature is None:
        logger.warning("signature_missing")
        raise SignatureError("Invalid or missing GitHub signature")

    payload = await request.body()
    github_config: GitHubConfig = request.app.state.github_config

    if not signature_matches(signature, github_config.webhook_secret, payload):
        logger.warning("signature_invalid", github_event=request.headers.get("X-GitHub-Event"))
        raise SignatureError("Invalid GitHub signature")

    logger.debug("signature_verified")
    return True
