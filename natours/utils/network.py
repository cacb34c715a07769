"""Request network helpers."""

from starlette.requests import HTTPConnection


def get_client_ip(request: HTTPConnection, trust_proxy: bool = True) -> str:
    """Get the client IP address from the request."""
    if trust_proxy:
        # Check for forwarded headers (behind proxy/load balancer)
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # X-Forwarded-For can contain multiple IPs, take the first one
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()

    # Fall back to direct client IP
    if request.client:
        return request.client.host

    return "unknown"
