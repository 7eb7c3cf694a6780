"""
Slack bot token verification via auth.test.
Setup: api.slack.com/apps → create app → Bot Token Scopes: chat:write, im:write, users:read
→ install to workspace → copy the xoxb- bot token into config.secret.yaml.
"""

import logging

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

log = logging.getLogger(__name__)

# Direct messaging only: open a DM, post into it, look up members.
REQUIRED_SCOPES = (
    "chat:write",
    "im:write",
    "users:read",
)

SCOPES_HEADER = "x-oauth-scopes"


class AuthenticationError(RuntimeError):
    pass


def _granted_scopes(response):
    """Scopes from the auth.test response headers, or None if Slack didn't send them."""
    headers = getattr(response, "headers", None) or {}
    for key, value in headers.items():
        if key.lower() == SCOPES_HEADER:
            if isinstance(value, list):
                value = ",".join(value)
            return {s.strip() for s in value.split(",") if s.strip()}
    return None


def verify_token(client: WebClient) -> dict:
    """Check the token is valid and carries the DM scopes. Returns the bot identity."""
    try:
        response = client.auth_test()
    except SlackApiError as e:
        raise AuthenticationError(f"Slack auth failed: {e.response['error']}") from e

    granted = _granted_scopes(response)
    if granted is None:
        log.warning("Slack did not report granted scopes; skipping scope check.")
    else:
        missing = [s for s in REQUIRED_SCOPES if s not in granted]
        if missing:
            raise AuthenticationError(f"Bot token is missing scopes: {', '.join(missing)}")

    identity = {"user_id": response.get("user_id"), "team": response.get("team")}
    log.info(f"Authenticated as {identity['user_id']} in {identity['team']}.")
    return identity
