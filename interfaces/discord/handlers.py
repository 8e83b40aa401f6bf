from __future__ import annotations

import logging
import discord
from discord.ext import commands

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
from interfaces.discord.pending_resets import PendingResets


logger = logging.getLogger(__name__)

DISCORD_MESSAGE_LIMIT = 2000

CONFIRM_EMOJI = "✅"
DECLINE_EMOJI = "❌"


def _build_table_context(channel: discord.abc.Messageable) -> TableContext:
    """Create a `TableContext` from a Discord channel."""

    return TableContext(provider="discord", channel_id=str(channel.id))


async def _send_long(ctx: commands.Context, text: str) -> None:
    for chunk in split_message(text, DISCORD_MESSAGE_LIMIT):
        await ctx.send(chunk)


def create_discord_bot(match_repo: MatchRepository) -> commands.Bot:
    """
    Configure and return a Discord bot that keeps score for the match
    played in each channel: !newmatch, !round, !board, !history, !reset.
    """

    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.reactions = True

    # Disable the default help command so we can provide our own `!help`.
    bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

    pending_resets = PendingResets()

    @bot.event
    async def on_ready():
        logger.info("Discord bot logged in as %s (id=%s)", bot.user, bot.user.id)

    @bot.event
    async def on_command_error(ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.UserInputError):
            await ctx.send(str(error))
            return
        logger.exception("Command %s failed", ctx.command, exc_info=error)
        await ctx.send("Something went wrong, please try again.")

    @bot.command(name="start")
    async def start_cmd(ctx: commands.Context):
        await ctx.send(
            "Welcome to the tile game score keeper!\n"
            "Use !newmatch to seat players and !round after every hand.\n"
            "Type !help to see available commands."
        )

    @bot.command(name="help")
    async def help_cmd(ctx: commands.Context):
        await ctx.send(
            "!newmatch <name> <name> ...          - start a match with 2-6 players\n"
            "!round <winner> <player>=<tiles> ... - record a round\n"
            "!board                               - show the leaderboard\n"
            "!history                             - list rounds, newest first\n"
            "!reset                               - discard the current match\n"
            "Players can be named or given by seat number."
        )

    @bot.command(name="newmatch")
    async def newmatch_cmd(ctx: commands.Context, *, names: str = ""):
        try:
            parsed = split_names(names)
        except ValueError as exc:
            await ctx.send(str(exc))
            return

        result = start_new_match(_build_table_context(ctx.channel), parsed, match_repo)
        if not result.success:
            await ctx.send(result.error_message or "Could not start the match.")
            return

        await ctx.send(format_roster(result.state))

    @bot.command(name="round")
    async def round_cmd(ctx: commands.Context, *, text: str = ""):
        """
        !round alice bob=10 cara=5   -> alice wins, bob and cara pay their tiles
        """

        try:
            winner, tiles = parse_round_text(text)
        except ValueError as exc:
            await ctx.send(str(exc))
            return

        result = record_round(_build_table_context(ctx.channel), winner, tiles, match_repo)
        if not result.success:
            await ctx.send(result.error_message or "Could not record the round.")
            return

        await ctx.send(format_recorded_round(result.state, result.round))

    @bot.command(name="board")
    async def board_cmd(ctx: commands.Context):
        entries = get_leaderboard(_build_table_context(ctx.channel), match_repo)
        await _send_long(ctx, format_leaderboard(entries))

    @bot.command(name="history")
    async def history_cmd(ctx: commands.Context):
        views = get_history(_build_table_context(ctx.channel), match_repo)
        await _send_long(ctx, format_history(views))

    @bot.command(name="reset")
    async def reset_cmd(ctx: commands.Context):
        prompt = await ctx.send(
            f"{ctx.author.mention}, reset the whole match? All rounds will be lost.\n"
            f"React with {CONFIRM_EMOJI} to confirm or {DECLINE_EMOJI} to cancel."
        )
        await prompt.add_reaction(CONFIRM_EMOJI)
        await prompt.add_reaction(DECLINE_EMOJI)

        pending_resets.add(prompt.id, ctx.channel.id, ctx.author.id)

    @bot.event
    async def on_reaction_add(reaction: discord.Reaction, user: discord.abc.User):
        # Ignore bot reactions and reactions not on tracked messages.
        if user.bot:
            return

        message_id = reaction.message.id
        requester_id = pending_resets.requester_for(message_id)
        if requester_id is None:
            return

        # Only whoever asked for the reset can answer the prompt.
        if user.id != requester_id:
            return

        emoji = str(reaction.emoji)
        channel = reaction.message.channel

        if emoji == CONFIRM_EMOJI:
            reset_current_match(_build_table_context(channel), match_repo)
            text = "Match reset. Use !newmatch to start again."
        elif emoji == DECLINE_EMOJI:
            text = "Reset cancelled."
        else:
            return

        pending_resets.discard(message_id)
        await channel.send(text)

    return bot
