from __future__ import annotations


def encode_reset_confirmation(chat_id: str, accepted: bool) -> str:
    """
    Encode the answer to a "reset the match?" prompt.

    Format:
      reset:yes:{chat_id}
      reset:no:{chat_id}
    """

    answer = "yes" if accepted else "no"
    return f"reset:{answer}:{chat_id}"


def parse_reset_confirmation(data: str) -> tuple[bool, str]:
    parts = data.split(":")
    if len(parts) != 3 or parts[0] != "reset" or parts[1] not in ("yes", "no"):
        raise ValueError(f"Invalid reset confirmation callback data: {data}")
    if not parts[2]:
        raise ValueError(f"Missing chat id in reset confirmation callback data: {data}")

    accepted = parts[1] == "yes"
    return accepted, parts[2]


def parse_reset_confirmation_for_chat(data: str, chat_id) -> bool:
    """
    Parse a reset answer pressed in `chat_id` and return whether it was "yes".

    The chat id inside the callback data comes from the client, so it has to
    match the chat the button was actually pressed in.
    """

    accepted, encoded_chat_id = parse_reset_confirmation(data)
    if encoded_chat_id != str(chat_id):
        raise ValueError(
            f"Reset confirmation for chat {encoded_chat_id} pressed in chat {chat_id}"
        )
    return accepted
