import unittest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import Mock

from application.formatting import (
    format_history,
    format_leaderboard,
    format_recorded_round,
    format_roster,
    split_message,
)
from application.services import TableContext, start_new_match
from domain.match import apply_round, start_match
from domain.models import MatchStatus
from domain.projections import history, rank
from infrastructure.memory.match_repository import InMemoryMatchRepository
from interfaces.command_args import parse_round_args, parse_round_text, split_names
from interfaces.discord.pending_resets import PendingResets
from interfaces.telegram.callback_data import (
    encode_reset_confirmation,
    parse_reset_confirmation,
    parse_reset_confirmation_for_chat,
)
from interfaces.telegram.handlers import answer_reset_prompt


class CommandArgsTests(unittest.TestCase):
    def test_split_names_honours_quotes(self):
        self.assertEqual(
            split_names('Alice "Mary Ann"  Bob'), ["Alice", "Mary Ann", "Bob"]
        )

    def test_split_names_unbalanced_quote(self):
        with self.assertRaises(ValueError):
            split_names('Alice "Mary')

    def test_parse_round(self):
        winner, tiles = parse_round_text("alice bob=10 3=5")
        self.assertEqual(winner, "alice")
        self.assertEqual(tiles, {"bob": "10", "3": "5"})

    def test_parse_round_keeps_raw_values(self):
        _, tiles = parse_round_args(["1", "bob=", "cara=x"])
        self.assertEqual(tiles, {"bob": "", "cara": "x"})

    def test_parse_round_quoted_name(self):
        winner, tiles = parse_round_text('"Mary Ann" "Big Bob=4"')
        self.assertEqual(winner, "Mary Ann")
        self.assertEqual(tiles, {"Big Bob": "4"})

    def test_parse_round_errors(self):
        for text in ("", "alice bob", "alice =4"):
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_round_text(text)


class ResetCallbackDataTests(unittest.TestCase):
    def test_encode(self):
        self.assertEqual(encode_reset_confirmation("-1001", True), "reset:yes:-1001")
        self.assertEqual(encode_reset_confirmation("42", False), "reset:no:42")

    def test_parse(self):
        self.assertEqual(parse_reset_confirmation("reset:yes:-1001"), (True, "-1001"))
        self.assertEqual(parse_reset_confirmation("reset:no:42"), (False, "42"))

    def test_parse_rejects_garbage(self):
        for data in ("reset:maybe:1", "yes:1:2", "reset:yes", "reset:yes:"):
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    parse_reset_confirmation(data)

    def test_parse_for_matching_chat(self):
        self.assertTrue(parse_reset_confirmation_for_chat("reset:yes:-1001", -1001))
        self.assertFalse(parse_reset_confirmation_for_chat("reset:no:42", "42"))

    def test_parse_for_other_chat_is_rejected(self):
        with self.assertRaises(ValueError):
            parse_reset_confirmation_for_chat("reset:yes:999", 42)


class TelegramResetPromptTests(unittest.TestCase):
    def setUp(self) -> None:
        self.bot = Mock()
        self.match_repo = InMemoryMatchRepository()
        for chat_id in ("42", "999"):
            ctx = TableContext(provider="telegram", channel_id=chat_id)
            self.assertTrue(start_new_match(ctx, ["Alice", "Bob"], self.match_repo).success)

    def press(self, data, chat_id=42):
        call = SimpleNamespace(
            id="cb-1",
            data=data,
            message=SimpleNamespace(id=7, chat=SimpleNamespace(id=chat_id)),
        )
        answer_reset_prompt(self.bot, call, self.match_repo)

    def status(self, chat_id):
        return self.match_repo.get_match(f"telegram:{chat_id}").status

    def test_yes_resets_the_chat_it_was_pressed_in(self):
        self.press("reset:yes:42")

        self.bot.answer_callback_query.assert_called_once_with("cb-1")
        self.assertEqual(self.status(42), MatchStatus.SETUP)
        self.assertEqual(self.status(999), MatchStatus.PLAYING)
        self.bot.send_message.assert_called_once_with(
            42, "Match reset. Use /newmatch to start again."
        )
        self.bot.delete_message.assert_called_once_with(42, 7)

    def test_no_answers_without_resetting(self):
        self.press("reset:no:42")

        self.bot.answer_callback_query.assert_called_once_with("cb-1")
        self.assertEqual(self.status(42), MatchStatus.PLAYING)
        self.bot.send_message.assert_called_once_with(42, "Reset cancelled.")

    def test_forged_chat_id_leaves_both_matches_alone(self):
        self.press("reset:yes:999")

        self.bot.answer_callback_query.assert_called_once_with(
            "cb-1", "Invalid confirmation."
        )
        self.assertEqual(self.status(42), MatchStatus.PLAYING)
        self.assertEqual(self.status(999), MatchStatus.PLAYING)
        self.bot.send_message.assert_not_called()


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class PendingResetsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.pending = PendingResets(ttl=60, clock=self.clock)

    def test_requester_is_remembered_until_discarded(self):
        self.pending.add(1, channel_id=10, requester_id=100)

        self.assertEqual(self.pending.requester_for(1), 100)
        self.pending.discard(1)
        self.assertIsNone(self.pending.requester_for(1))
        self.assertEqual(len(self.pending), 0)

    def test_unknown_prompt(self):
        self.assertIsNone(self.pending.requester_for(5))
        self.pending.discard(5)

    def test_prompts_expire(self):
        self.pending.add(1, channel_id=10, requester_id=100)
        self.clock.now = 59
        self.assertEqual(self.pending.requester_for(1), 100)

        self.clock.now = 60
        self.assertIsNone(self.pending.requester_for(1))
        self.assertEqual(len(self.pending), 0)

    def test_newer_prompt_replaces_older_one_in_same_channel(self):
        self.pending.add(1, channel_id=10, requester_id=100)
        self.pending.add(2, channel_id=20, requester_id=200)
        self.pending.add(3, channel_id=10, requester_id=300)

        self.assertIsNone(self.pending.requester_for(1))
        self.assertEqual(self.pending.requester_for(2), 200)
        self.assertEqual(self.pending.requester_for(3), 300)
        self.assertEqual(len(self.pending), 2)

    def test_unanswered_prompts_do_not_pile_up(self):
        for message_id in range(50):
            self.clock.now = message_id * 61
            self.pending.add(message_id, channel_id=message_id, requester_id=1)

        self.assertEqual(len(self.pending), 1)


class FormattingTests(unittest.TestCase):
    def setUp(self) -> None:
        state = start_match(["Alice", "Bob", "Cara"])
        a, b, c = (p.id for p in state.players)
        moment = datetime(2024, 5, 1, 20, 15, tzinfo=timezone.utc)
        self.state = apply_round(state, a, {b: 10, c: 5}, timestamp=moment)

    def test_leaderboard(self):
        text = format_leaderboard(rank(self.state))

        lines = text.split("\n")
        self.assertEqual(lines[0], "#1 Alice 🏆: 15  ([+15])")
        self.assertEqual(lines[1], "#2 Cara: -5  (-5)")
        self.assertEqual(lines[2], "#3 Bob: -10  (-10)")

    def test_empty_leaderboard(self):
        self.assertEqual(format_leaderboard([]), "No match in progress.")

    def test_history(self):
        text = format_history(history(self.state))

        self.assertIn("Round 1 (20:15 UTC)", text)
        self.assertIn("Alice 👑: +15", text)
        self.assertIn("Bob: -10 (10 tiles)", text)
        self.assertEqual(format_history([]), "No rounds played yet.")

    def test_recorded_round(self):
        text = format_recorded_round(self.state, self.state.rounds[0])
        self.assertEqual(text, "Round 1: Alice wins +15 (Bob -10, Cara -5)")

    def test_roster(self):
        self.assertEqual(
            format_roster(self.state),
            "Match started! Seats:\n1. Alice\n2. Bob\n3. Cara",
        )

    def test_split_message(self):
        text = "\n".join(["x" * 8] * 5)
        chunks = split_message(text, 20)

        self.assertTrue(all(len(chunk) <= 20 for chunk in chunks))
        self.assertEqual("\n".join(chunks), text)

    def test_split_message_cuts_long_lines(self):
        chunks = split_message("y" * 25, 10)
        self.assertEqual(chunks, ["y" * 10, "y" * 10, "y" * 5])


if __name__ == "__main__":
    unittest.main()
