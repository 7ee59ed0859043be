"""Tests for the message bus and the unit of work."""

from __future__ import annotations

from dataclasses import dataclass
from unittest import mock

from django.test import SimpleTestCase, TestCase

from shared.application.message_bus import MessageBus, message_bus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import DomainEvent, EventRecorder
from shared.domain.exceptions import DomainError


@dataclass
class SomethingHappened(DomainEvent):
    what: str = ''


@dataclass
class DoSomething:
    value: int


class Recorder(EventRecorder):
    pk = 'recorder-1'


class MessageBusTests(SimpleTestCase):
    def setUp(self) -> None:
        self.bus = MessageBus()

    def test_command_is_routed_to_its_single_handler(self) -> None:
        self.bus.register_command_handler(DoSomething, lambda command: command.value * 2)

        self.assertTrue(self.bus.has_command_handler(DoSomething))
        self.assertEqual(self.bus.handle_command(DoSomething(21)), 42)

    def test_second_command_handler_is_refused(self) -> None:
        self.bus.register_command_handler(DoSomething, lambda command: None)

        with self.assertRaises(ValueError):
            self.bus.register_command_handler(DoSomething, lambda command: None)

    def test_unknown_command_is_refused(self) -> None:
        with self.assertRaises(ValueError):
            self.bus.handle_command(DoSomething(1))

    def test_domain_errors_propagate_to_caller(self) -> None:
        def handler(command):
            raise DomainError('nope', value=command.value)

        self.bus.register_command_handler(DoSomething, handler)

        with self.assertRaises(DomainError) as ctx:
            self.bus.handle_command(DoSomething(1))
        self.assertEqual(ctx.exception.to_dict()['details'], {'value': '1'})

    def test_failing_event_handler_does_not_stop_others(self) -> None:
        seen = []
        failing = mock.Mock(side_effect=RuntimeError('boom'))
        self.bus.register_event_handler(SomethingHappened, failing)
        self.bus.register_event_handler(SomethingHappened, seen.append)
        self.bus.register_event_handler(SomethingHappened, seen.append)

        event = SomethingHappened(what='x')
        with self.assertLogs('shared.application.message_bus', level='ERROR'):
            self.bus.publish_events([event])

        failing.assert_called_once_with(event)
        self.assertEqual(seen, [event])


class UnitOfWorkTests(TestCase):
    def test_events_are_published_only_after_commit(self) -> None:
        recorder = Recorder()
        recorder.add_event(SomethingHappened(what='committed'))

        with mock.patch.object(message_bus, 'publish_events') as publish:
            with self.captureOnCommitCallbacks(execute=True):
                with DjangoUnitOfWork(timeout=5) as uow:
                    uow.collect_events(recorder)
                    self.assertEqual(recorder.events, [])
                    publish.assert_not_called()

        (events,), _ = publish.call_args
        self.assertEqual([event.what for event in events], ['committed'])

    def test_events_are_discarded_on_rollback(self) -> None:
        recorder = Recorder()
        recorder.add_event(SomethingHappened(what='rolled back'))

        with mock.patch.object(message_bus, 'publish_events') as publish:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                with self.assertRaises(RuntimeError):
                    with DjangoUnitOfWork() as uow:
                        uow.collect_events(recorder)
                        uow.add_event(SomethingHappened(what='bulk'))
                        raise RuntimeError('abort')

        self.assertEqual(callbacks, [])
        publish.assert_not_called()
