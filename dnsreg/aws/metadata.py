"""EC2 instance metadata lookups.

See http://docs.aws.amazon.com/AWSEC2/latest/UserGuide/ec2-instance-metadata.html
"""

from __future__ import annotations

import requests

from dnsreg.base.exceptions import IdentityResolutionError

METADATA_URL = "http://169.254.169.254/latest/meta-data/"


def ec2_meta(key: str, timeout: float = 2.0) -> str:
    """Fetch one metadata value (e.g. ``hostname``, ``local-ipv4``).

    Raises:
        IdentityResolutionError: If the endpoint is unreachable, answers
            with an error status or returns an empty value.
    """
    try:
        resp = requests.get(METADATA_URL + key, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise IdentityResolutionError(f"Error getting meta-data {key}") from e
    value = resp.text.strip()
    if not value:
        raise IdentityResolutionError(f"Empty meta-data value for {key}")
    return value
