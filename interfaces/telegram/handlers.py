from __future__ import annotations

import logging

import telebot
from telebot.types import InlineKeyboardButton, InlineKeyboardMarkup

from application.formatting import (
    format_history,
    format_leaderboard,
    format_recorded_round,
    format_roster,
    split_message,
)
from application.services import (
    TableContext,
    get_history,
    get_leaderboard,
    record_round,
    reset_current_match,
    start_new_match,
)
from domain.repositories import MatchRepository
from interfaces.command_args import parse_round_text, split_names
from interfaces.telegram.callback_data import (
    encode_reset_confirmation,
    parse_reset_confirmation_for_chat,
)


logger = logging.getLogger(__name__)

TELEGRAM_MESSAGE_LIMIT = 4096


def _build_table_context(chat_id) -> TableContext:
    """Extract a channel-agnostic context object from a Telegram chat id."""

    return TableContext(provider="telegram", channel_id=str(chat_id))


def _command_args(message) -> str:
    """Everything after the command word, e.g. `alice bob=3` for `/round alice bob=3`."""

    parts = (message.text or "").split(maxsplit=1)
    return parts[1] if len(parts) > 1 else ""


def answer_reset_prompt(bot, call, match_repo: MatchRepository) -> None:
    """
    Handle a yes/no press on a reset prompt.

    The match reset is always the one of the chat the button was pressed
    in. Every press is answered so the client stops its spinner.
    """

    chat_id = call.message.chat.id
    try:
        accepted = parse_reset_confirmation_for_chat(call.data, chat_id)
    except ValueError:
        logger.warning("Rejected reset callback %r in chat %s", call.data, chat_id)
        bot.answer_callback_query(call.id, "Invalid confirmation.")
        return

    try:
        bot.answer_callback_query(call.id)
        if accepted:
            reset_current_match(_build_table_context(chat_id), match_repo)
            bot.send_message(chat_id, "Match reset. Use /newmatch to start again.")
        else:
            bot.send_message(chat_id, "Reset cancelled.")
    finally:
        bot.delete_message(chat_id, call.message.id)


def create_telegram_bot(
    bot_token: str,
    match_repo: MatchRepository,
) -> telebot.TeleBot:
    """
    Configure and return a TeleBot instance wired to the application layer.

    This module contains only Telegram-specific concerns: parsing Telegram
    messages/callbacks and mapping them to/from application services.
    """

    bot = telebot.TeleBot(bot_token)

    def send_long(chat_id, text: str) -> None:
        for chunk in split_message(text, TELEGRAM_MESSAGE_LIMIT):
            bot.send_message(chat_id, chunk)

    @bot.message_handler(commands=["start", "hello"])
    def handle_start(message):
        bot.send_message(
            message.chat.id,
            "Welcome to the tile game score keeper!\n"
            "Use /newmatch to seat players and /round after every hand.\n"
            "Type /help to see available commands.",
        )

    @bot.message_handler(commands=["help"])
    def handle_help(message):
        bot.send_message(
            message.chat.id,
            "/newmatch <name> <name> ...          - start a match with 2-6 players\n"
            "/round <winner> <player>=<tiles> ... - record a round\n"
            "/board                               - show the leaderboard\n"
            "/history                             - list rounds, newest first\n"
            "/reset                               - discard the current match\n"
            "Players can be named or given by seat number.",
        )

    @bot.message_handler(commands=["newmatch"])
    def handle_newmatch(message):
        try:
            names = split_names(_command_args(message))
        except ValueError as exc:
            bot.send_message(message.chat.id, str(exc))
            return

        result = start_new_match(_build_table_context(message.chat.id), names, match_repo)
        if not result.success:
            bot.send_message(message.chat.id, result.error_message)
            return

        bot.send_message(message.chat.id, format_roster(result.state))

    @bot.message_handler(commands=["round"])
    def handle_round(message):
        try:
            winner, tiles = parse_round_text(_command_args(message))
        except ValueError as exc:
            bot.send_message(message.chat.id, str(exc))
            return

        try:
            result = record_round(
                _build_table_context(message.chat.id), winner, tiles, match_repo
            )
        except Exception:
            logger.exception("Recording a round failed in chat %s", message.chat.id)
            bot.send_message(message.chat.id, "Something went wrong, please try again.")
            return

        if not result.success:
            bot.send_message(message.chat.id, result.error_message)
            return

        bot.send_message(message.chat.id, format_recorded_round(result.state, result.round))

    @bot.message_handler(commands=["board"])
    def handle_board(message):
        entries = get_leaderboard(_build_table_context(message.chat.id), match_repo)
        send_long(message.chat.id, format_leaderboard(entries))

    @bot.message_handler(commands=["history"])
    def handle_history(message):
        views = get_history(_build_table_context(message.chat.id), match_repo)
        send_long(message.chat.id, format_history(views))

    @bot.message_handler(commands=["reset"])
    def handle_reset(message):
        chat_id = str(message.chat.id)
        markup = InlineKeyboardMarkup(row_width=2)
        markup.add(
            InlineKeyboardButton(
                "yes",
                callback_data=encode_reset_confirmation(chat_id, accepted=True),
            ),
            InlineKeyboardButton(
                "no",
                callback_data=encode_reset_confirmation(chat_id, accepted=False),
            ),
        )
        bot.send_message(
            message.chat.id,
            "Reset the whole match? All rounds will be lost.",
            reply_markup=markup,
        )

    @bot.callback_query_handler(func=lambda call: call.data.startswith("reset:"))
    def handle_reset_confirmation(call):
        answer_reset_prompt(bot, call, match_repo)

    return bot
