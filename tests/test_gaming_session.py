# tests/test_gaming_session.py
import json
import os
import shutil
import sys
import tempfile
import unittest

import yaml

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slotsim.domain.events.event_dispatcher import EventDispatcher
from slotsim.domain.events.session_events import AutoPlayStopReason, SessionEventType, SessionEvent
from slotsim.domain.exceptions import ConfigurationError, InsufficientCreditsError
from slotsim.domain.machine.entities.machine_config import MachineConfig
from slotsim.domain.machine.entities.slot_machine import SlotMachine
from slotsim.domain.machine.factories.machine_factory import MachineFactory
from slotsim.domain.session.entities.gaming_session import GamingSession
from slotsim.domain.session.entities.session_stats import GameStatistics
from slotsim.domain.session.factories.session_factory import SessionFactory
from slotsim.infrastructure.config.loaders.yaml_loader import YamlConfigLoader
from slotsim.infrastructure.config.validators.schema_validator import SchemaValidator
from slotsim.infrastructure.persistence.save_service import JsonSaveService
from slotsim.infrastructure.rng.rng_provider import RNGProvider

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SWEET_SPIN = os.path.join(ROOT, 'slotsim', 'application', 'config', 'machines', 'sweet_spin.yaml')


class TestGamingSession(unittest.TestCase):
    """Live play on the sweet_spin machine."""

    @classmethod
    def setUpClass(cls):
        cls.config = MachineFactory().load_config(YamlConfigLoader(SchemaValidator()), SWEET_SPIN)

    def setUp(self):
        self.factory = MachineFactory(RNGProvider())
        self.machine = self.factory.create_machine(self.config, "mersenne", seed=42)
        self.dispatcher = EventDispatcher()
        self.session = SessionFactory(self.dispatcher).create_session(self.machine, "player_1")

    def test_initial_state(self):
        self.assertEqual(self.session.id, "player_1")
        self.assertEqual(self.session.credits, 1000)
        self.assertEqual(self.session.bet_per_line, 1)
        self.assertEqual(self.session.line_count, 25)
        self.assertEqual(self.session.current_bet, 25)
        self.assertTrue(self.session.can_spin())

    def test_generated_session_id(self):
        session = SessionFactory().create_session(self.machine)

        self.assertTrue(session.id.startswith("sweet_spin_"))

    def test_spin_settles_credits(self):
        for _ in range(20):
            before = self.session.credits
            outcome = self.session.execute_spin()
            self.assertEqual(self.session.credits, before - 25 + outcome.total_win)

        stats = self.session.stats
        self.assertEqual(stats.total_spins, 20)
        self.assertEqual(stats.total_wagered, 500)
        self.assertEqual(len(self.session.history), 20)
        self.assertEqual(stats.total_won, sum(o.total_win for o in self.session.history))

    def test_same_seed_same_spins(self):
        other_machine = self.factory.create_machine(self.config, "mersenne", seed=42)
        other = SessionFactory().create_session(other_machine, "player_2")

        for _ in range(10):
            self.assertEqual(self.session.execute_spin().total_win, other.execute_spin().total_win)
        self.assertEqual(self.session.credits, other.credits)

    def test_insufficient_credits(self):
        self.session.set_credits(10)

        with self.assertRaises(InsufficientCreditsError) as context:
            self.session.execute_spin()

        self.assertEqual(self.session.credits, 10)
        self.assertEqual(context.exception.bet, 25)
        self.assertEqual(self.session.stats.total_spins, 0)

    def test_set_credits_never_negative(self):
        self.session.set_credits(-50)
        self.assertEqual(self.session.credits, 0)

        self.session.add_credits(75)
        self.assertEqual(self.session.credits, 75)

    def test_bet_changes_are_clamped(self):
        self.assertEqual(self.session.change_bet_per_line(1), 2)
        self.assertEqual(self.session.current_bet, 50)
        self.assertEqual(self.session.change_bet_per_line(-5), 1)
        self.assertEqual(self.session.set_bet_per_line(50), 10)
        self.assertEqual(self.session.change_bet_per_line(1), 10)

    def test_events(self):
        spins = []
        bets = []
        self.dispatcher.register(SessionEventType.SPIN_COMPLETED, spins.append)
        self.dispatcher.register(SessionEventType.BET_CHANGED, bets.append)

        self.session.change_bet_per_line(1)
        self.session.change_bet_per_line(-10)
        self.session.change_bet_per_line(-1)
        self.session.execute_spin()

        self.assertEqual(len(bets), 2)
        self.assertEqual(bets[0].data["bet_per_line"], 2)
        self.assertEqual(len(spins), 1)
        self.assertEqual(spins[0].session_id, "player_1")
        self.assertEqual(spins[0].data["credits"], self.session.credits)

    def test_credits_depleted_event(self):
        depleted = []
        self.dispatcher.register(SessionEventType.CREDITS_DEPLETED, depleted.append)
        self.session.set_credits(25)

        outcome = self.session.execute_spin()

        if outcome.total_win < 25:
            self.assertEqual(len(depleted), 1)
        else:
            self.assertEqual(depleted, [])

    def test_machine_without_rng(self):
        machine = SlotMachine(self.config)

        with self.assertRaises(ConfigurationError):
            GamingSession("no_rng", machine)

    def test_failed_spin_keeps_the_stake(self):
        self.machine.set_rng(None)

        with self.assertRaises(ConfigurationError):
            self.session.execute_spin()

        self.assertEqual(self.session.credits, 1000)
        self.assertEqual(self.session.stats.total_spins, 0)

    def test_summary(self):
        self.session.execute_spin()

        summary = self.session.get_session_summary()

        self.assertEqual(summary["session_id"], "player_1")
        self.assertEqual(summary["machine_id"], "sweet_spin")
        self.assertEqual(summary["total_spins"], 1)
        self.assertEqual(summary["current_bet"], 25)


class TestAutoPlay(unittest.TestCase):
    """Unattended spin runs on a live session."""

    @classmethod
    def setUpClass(cls):
        cls.config = MachineFactory().load_config(YamlConfigLoader(SchemaValidator()), SWEET_SPIN)

    def setUp(self):
        self.machine = MachineFactory(RNGProvider()).create_machine(self.config, "mersenne", seed=42)
        self.dispatcher = EventDispatcher()
        self.session = SessionFactory(self.dispatcher).create_session(self.machine, "auto")
        self.events = []
        self.dispatcher.register_for_class(SessionEvent, self.events.append)

    def _events_of(self, event_type):
        return [e for e in self.events if e.type == event_type]

    def test_runs_requested_spins(self):
        outcomes = self.session.auto_play(5)

        self.assertEqual(len(outcomes), 5)
        self.assertEqual(self.session.history, outcomes)
        self.assertEqual(self.session.stats.total_spins, 5)
        self.assertFalse(self.session.auto_play_active)
        self.assertEqual(self.session.auto_play_remaining, 0)

        started = self._events_of(SessionEventType.AUTO_PLAY_STARTED)
        self.assertEqual(started[0].data["spin_count"], 5)
        remaining = [e.data["remaining"] for e in self._events_of(SessionEventType.AUTO_PLAY_REMAINING_CHANGED)]
        self.assertEqual(remaining, [4, 3, 2, 1, 0])
        stopped = self._events_of(SessionEventType.AUTO_PLAY_STOPPED)
        self.assertEqual(len(stopped), 1)
        self.assertEqual(stopped[0].data["reason"], AutoPlayStopReason.COMPLETED.name)
        self.assertEqual(stopped[0].data["spins_played"], 5)

    def test_same_spins_as_manual_play(self):
        other_machine = MachineFactory(RNGProvider()).create_machine(self.config, "mersenne", seed=42)
        manual = SessionFactory().create_session(other_machine, "manual")

        outcomes = self.session.auto_play(8)

        self.assertEqual([o.total_win for o in outcomes], [manual.execute_spin().total_win for _ in range(8)])
        self.assertEqual(self.session.credits, manual.credits)

    def test_stop_predicate(self):
        outcomes = self.session.auto_play(10, stop_on=lambda outcome: True)

        self.assertEqual(len(outcomes), 1)
        stopped = self._events_of(SessionEventType.AUTO_PLAY_STOPPED)
        self.assertEqual(stopped[0].data["reason"], AutoPlayStopReason.USER_STOPPED.name)

    def test_stop_request_from_handler(self):
        spins = []

        def stop_after_three(event):
            spins.append(event)
            if len(spins) == 3:
                self.session.request_stop()

        self.dispatcher.register(SessionEventType.SPIN_COMPLETED, stop_after_three)

        outcomes = self.session.auto_play(10)

        self.assertEqual(len(outcomes), 3)
        self.assertEqual(self._events_of(SessionEventType.AUTO_PLAY_STOPPED)[0].data["reason"],
                         AutoPlayStopReason.USER_STOPPED.name)

    def test_stop_request_when_idle_is_ignored(self):
        self.session.request_stop()

        self.assertEqual(len(self.session.auto_play(2)), 2)

    def test_no_credits_no_spins(self):
        self.session.set_credits(10)

        self.assertEqual(self.session.auto_play(5), [])
        stopped = self._events_of(SessionEventType.AUTO_PLAY_STOPPED)
        self.assertEqual(stopped[0].data["reason"], AutoPlayStopReason.INSUFFICIENT_CREDITS.name)
        self.assertEqual(stopped[0].data["spins_played"], 0)

    def test_stops_when_credits_run_out(self):
        self.session.set_credits(60)

        outcomes = self.session.auto_play(1000)

        reason = self._events_of(SessionEventType.AUTO_PLAY_STOPPED)[0].data["reason"]
        if len(outcomes) < 1000:
            self.assertEqual(reason, AutoPlayStopReason.INSUFFICIENT_CREDITS.name)
            self.assertFalse(self.session.can_spin())
        else:
            self.assertEqual(reason, AutoPlayStopReason.COMPLETED.name)

    def test_invalid_spin_count(self):
        with self.assertRaises(ValueError):
            self.session.auto_play(0)

    def test_failure_ends_auto_play(self):
        self.machine.set_rng(None)

        with self.assertRaises(ConfigurationError):
            self.session.auto_play(3)

        self.assertFalse(self.session.auto_play_active)
        self.assertEqual(self.session.credits, 1000)
        self.assertEqual(self._events_of(SessionEventType.AUTO_PLAY_STOPPED)[0].data["reason"],
                         AutoPlayStopReason.ERROR.name)


class TestJsonSaveService(unittest.TestCase):
    """Credits and statistics survive between sessions."""

    @classmethod
    def setUpClass(cls):
        cls.config = MachineFactory().load_config(YamlConfigLoader(SchemaValidator()), SWEET_SPIN)

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.save_path = os.path.join(self.temp_dir, "player", "save.json")
        self.factory = MachineFactory(RNGProvider())

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_fresh_player(self):
        service = JsonSaveService(self.save_path)

        self.assertEqual(service.load_credits(), 1000)
        self.assertEqual(service.load_statistics(), GameStatistics())

    def test_session_state_persists(self):
        machine = self.factory.create_machine(self.config, "mersenne", seed=3)
        session = SessionFactory(save_service=JsonSaveService(self.save_path)).create_session(machine)
        for _ in range(5):
            session.execute_spin()

        reloaded = JsonSaveService(self.save_path)
        self.assertEqual(reloaded.load_credits(), session.credits)
        self.assertEqual(reloaded.load_statistics(), session.stats)

        # A new session picks up where the last one stopped
        next_session = SessionFactory(save_service=reloaded).create_session(
            self.factory.create_machine(self.config, "mersenne", seed=4)
        )
        self.assertEqual(next_session.credits, session.credits)
        self.assertEqual(next_session.stats.total_spins, 5)

    def test_fractional_credits_round_trip(self):
        service = JsonSaveService(self.save_path)
        service.save_credits(1002.5)

        self.assertEqual(JsonSaveService(self.save_path).load_credits(), 1002.5)

    def test_fractional_payout_session_persists(self):
        with open(SWEET_SPIN, 'r', encoding='utf-8') as f:
            document = yaml.safe_load(f)
        for symbol in document["symbols"]:
            symbol["payouts"] = [p + 0.5 for p in symbol["payouts"]]
        config = MachineConfig.from_dict(document)

        machine = self.factory.create_machine(config, "mersenne", seed=11)
        session = SessionFactory(save_service=JsonSaveService(self.save_path)).create_session(machine)
        for _ in range(30):
            session.execute_spin()

        self.assertEqual(JsonSaveService(self.save_path).load_credits(), session.credits)
        self.assertEqual(session.credits, 1000 - 30 * 25 + sum(o.total_win for o in session.history))

    def test_corrupt_file_starts_fresh(self):
        os.makedirs(os.path.dirname(self.save_path))
        with open(self.save_path, 'w', encoding='utf-8') as f:
            f.write("{not json")

        service = JsonSaveService(self.save_path, default_credits=200)
        with self.assertLogs("infrastructure.persistence.save", level="ERROR"):
            self.assertEqual(service.load_credits(), 200)

    def test_file_layout(self):
        service = JsonSaveService(self.save_path)
        service.save_credits(640)
        service.save_statistics(GameStatistics(total_spins=2, total_wins=1, biggest_win=30,
                                               total_wagered=50, total_won=30))

        with open(self.save_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self.assertEqual(data["credits"], 640)
        self.assertEqual(data["statistics"]["total_spins"], 2)
        self.assertFalse(os.path.exists(self.save_path + ".tmp"))


class TestEventDispatcher(unittest.TestCase):
    """Handler registration and isolation."""

    def setUp(self):
        self.dispatcher = EventDispatcher()

    def test_failing_handler_does_not_stop_others(self):
        received = []

        def failing(event):
            raise RuntimeError("handler bug")

        self.dispatcher.register(SessionEventType.BIG_WIN, failing)
        self.dispatcher.register(SessionEventType.BIG_WIN, received.append)

        with self.assertLogs("domain.events.dispatcher", level="ERROR"):
            self.dispatcher.dispatch(SessionEvent(type=SessionEventType.BIG_WIN, session_id="s"))

        self.assertEqual(len(received), 1)

    def test_event_type_handlers_run_before_class_handlers(self):
        order = []
        self.dispatcher.register_for_class(SessionEvent, lambda event: order.append("class"))
        self.dispatcher.register(SessionEventType.BIG_WIN, lambda event: order.append("type"))

        self.dispatcher.dispatch(SessionEvent(type=SessionEventType.BIG_WIN))

        self.assertEqual(order, ["type", "class"])

    def test_class_handlers_and_unregister(self):
        received = []
        self.dispatcher.register_for_class(SessionEvent, received.append)

        self.dispatcher.dispatch(SessionEvent(type=SessionEventType.MEGA_WIN))
        self.assertTrue(self.dispatcher.unregister_for_class(SessionEvent, received.append))
        self.dispatcher.dispatch(SessionEvent(type=SessionEventType.MEGA_WIN))

        self.assertEqual(len(received), 1)
        self.assertFalse(self.dispatcher.unregister(SessionEventType.MEGA_WIN, received.append))


if __name__ == '__main__':
    unittest.main()
