"""
Resolves Slack member IDs and sends the Secret Santa DM via Slack SDK.
Member ID: click a name in Slack → Profile → copy Member ID (starts with U).
"""

from dataclasses import dataclass

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError


class LookupFailed(RuntimeError):
    pass


class DeliveryError(RuntimeError):
    pass


@dataclass(frozen=True)
class SlackUser:
    id: str
    name: str


def fetch_user(client: WebClient, user_id: str) -> SlackUser:
    try:
        info = client.users_info(user=user_id)
    except SlackApiError as e:
        raise LookupFailed(f"Slack lookup of {user_id} failed: {e.response['error']}") from e
    user = info["user"]
    name = user.get("real_name") or user.get("name") or user_id
    return SlackUser(id=user["id"], name=name)


def send_direct_message(client: WebClient, user: SlackUser, text: str) -> None:
    try:
        dm = client.conversations_open(users=[user.id])
        channel_id = dm["channel"]["id"]
        client.chat_postMessage(
            channel=channel_id,
            text=text,
            mrkdwn=True,
        )
    except SlackApiError as e:
        raise DeliveryError(f"Slack post to {user.id} failed: {e.response['error']}") from e
