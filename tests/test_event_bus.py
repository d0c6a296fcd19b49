"""Tests for the event bus system."""

import asyncio
import threading

import pytest

from bus_system.event_bus import EventBus, EventHandler, IntegrationEvent, get_event_bus
from bus_system.event_bus.core import EventEmissionError, HandlerRegistrationError
from bus_system.services.registry import ServiceRegistry


# Test event models (don't start with "Test" to avoid pytest collection)
class SampleEvent(IntegrationEvent):
    """Simple test event."""

    message: str
    value: int = 42


class OtherSampleEvent(IntegrationEvent):
    """Event with no handlers in most tests."""

    note: str = "other"


class Recorder:
    """Shared call log handed to handlers through their factories."""

    def __init__(self):
        self.calls: list[str] = []


class FirstHandler(EventHandler[SampleEvent]):
    def __init__(self, recorder: Recorder):
        self.recorder = recorder

    async def handle(self, event: SampleEvent) -> None:
        self.recorder.calls.append("first:start")
        await asyncio.sleep(0.01)
        self.recorder.calls.append("first:end")


class SecondHandler(EventHandler[SampleEvent]):
    def __init__(self, recorder: Recorder):
        self.recorder = recorder

    async def handle(self, event: SampleEvent) -> None:
        self.recorder.calls.append("second:start")
        self.recorder.calls.append("second:end")


class FailingSampleHandler(EventHandler[SampleEvent]):
    """Handler that always fails."""

    def __init__(self, recorder: Recorder):
        self.recorder = recorder

    async def handle(self, event: SampleEvent) -> None:
        self.recorder.calls.append("failing")
        raise ValueError("Test handler failure")


class UnresolvableHandler(EventHandler[SampleEvent]):
    """Handler type never registered in the service registry."""

    async def handle(self, event: SampleEvent) -> None:
        raise AssertionError("should never be invoked")


def _register(registry: ServiceRegistry, recorder: Recorder, *handler_types: type) -> None:
    for handler_type in handler_types:
        registry.register_scoped(handler_type, lambda scope, handler_type=handler_type: handler_type(recorder))


class TestSubscribe:
    """Test cases for handler registration."""

    def test_event_bus_initialization(self, event_bus: EventBus):
        assert event_bus.get_handler_count(SampleEvent) == 0
        assert event_bus.get_registered_events() == []

    def test_get_event_bus_singleton(self):
        assert get_event_bus() is get_event_bus()

    def test_subscribe_registers_under_event_name(self, event_bus: EventBus):
        event_bus.subscribe(SampleEvent, FirstHandler)

        assert event_bus.get_handler_types(SampleEvent) == [FirstHandler]
        assert event_bus.get_registered_events() == ["SampleEvent"]

    def test_subscribe_preserves_registration_order(self, event_bus: EventBus):
        event_bus.subscribe(SampleEvent, SecondHandler)
        event_bus.subscribe(SampleEvent, FirstHandler)

        assert event_bus.get_handler_types(SampleEvent) == [SecondHandler, FirstHandler]

    def test_duplicate_subscription_is_noop(self, event_bus: EventBus):
        event_bus.subscribe(SampleEvent, FirstHandler)
        event_bus.subscribe(SampleEvent, FirstHandler)

        assert event_bus.get_handler_count(SampleEvent) == 1

    def test_subscribe_invalid_event_type(self, event_bus: EventBus):
        with pytest.raises(HandlerRegistrationError):
            event_bus.subscribe(str, FirstHandler)  # type: ignore[arg-type]

    def test_subscribe_invalid_handler_type(self, event_bus: EventBus):
        with pytest.raises(HandlerRegistrationError):
            event_bus.subscribe(SampleEvent, object)  # type: ignore[arg-type]

    def test_subscribe_logs_registration(self, event_bus: EventBus, log_records):
        event_bus.subscribe(SampleEvent, FirstHandler)

        assert any("Subscribed FirstHandler to event SampleEvent" in r["message"] for r in log_records)

    def test_concurrent_subscription_keeps_single_entry(self, event_bus: EventBus):
        threads = [threading.Thread(target=event_bus.subscribe, args=(SampleEvent, FirstHandler)) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert event_bus.get_handler_count(SampleEvent) == 1


class TestPublish:
    """Test cases for event publication."""

    @pytest.mark.asyncio
    async def test_publish_without_handlers_completes(self, event_bus: EventBus, log_records):
        await event_bus.publish(OtherSampleEvent())

        assert any(r["level"].name == "DEBUG" and "No handlers registered for event OtherSampleEvent" in r["message"] for r in log_records)

    @pytest.mark.asyncio
    async def test_publish_invalid_event_type(self, event_bus: EventBus):
        with pytest.raises(EventEmissionError):
            await event_bus.publish("not_an_event")  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_handlers_run_sequentially_in_registration_order(self, registry, event_bus: EventBus):
        recorder = Recorder()
        _register(registry, recorder, FirstHandler, SecondHandler)
        event_bus.subscribe(SampleEvent, FirstHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="test"))

        # The first handler completes before the second one starts
        assert recorder.calls == ["first:start", "first:end", "second:start", "second:end"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_block_siblings(self, registry, event_bus: EventBus, log_records):
        recorder = Recorder()
        _register(registry, recorder, FailingSampleHandler, SecondHandler)
        event_bus.subscribe(SampleEvent, FailingSampleHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="test"))

        assert recorder.calls == ["failing", "second:start", "second:end"]
        errors = [r for r in log_records if r["level"].name == "ERROR"]
        assert len(errors) == 1
        assert "SampleEvent" in errors[0]["message"]
        assert "FailingSampleHandler" in errors[0]["message"]
        assert errors[0]["exception"] is not None

    @pytest.mark.asyncio
    async def test_duplicate_subscription_invokes_handler_once(self, registry, event_bus: EventBus):
        recorder = Recorder()
        _register(registry, recorder, SecondHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="test"))

        assert recorder.calls == ["second:start", "second:end"]

    @pytest.mark.asyncio
    async def test_unresolvable_handler_is_skipped(self, registry, event_bus: EventBus):
        recorder = Recorder()
        _register(registry, recorder, SecondHandler)
        event_bus.subscribe(SampleEvent, UnresolvableHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="test"))

        assert recorder.calls == ["second:start", "second:end"]

    @pytest.mark.asyncio
    async def test_failing_resolution_is_logged_and_skipped(self, registry, event_bus: EventBus, log_records):
        recorder = Recorder()

        def broken_factory(scope):
            raise RuntimeError("cannot build handler")

        registry.register_scoped(FirstHandler, broken_factory)
        _register(registry, recorder, SecondHandler)
        event_bus.subscribe(SampleEvent, FirstHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="test"))

        assert recorder.calls == ["second:start", "second:end"]
        assert any(r["level"].name == "ERROR" and "FirstHandler" in r["message"] for r in log_records)

    @pytest.mark.asyncio
    async def test_handlers_are_resolved_fresh_per_publish(self, registry, event_bus: EventBus):
        instances: list[SecondHandler] = []

        def factory(scope):
            handler = SecondHandler(Recorder())
            instances.append(handler)
            return handler

        registry.register_scoped(SecondHandler, factory)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="one"))
        await event_bus.publish(SampleEvent(message="two"))

        assert len(instances) == 2
        assert instances[0] is not instances[1]

    @pytest.mark.asyncio
    async def test_handlers_of_one_publish_share_a_scope(self, registry, event_bus: EventBus):
        class Shared:
            closed = False

            def close(self):
                self.closed = True

        seen: list[Shared] = []

        registry.register_scoped(Shared, lambda scope: Shared())

        def factory(handler_type):
            def build(scope):
                seen.append(scope.get(Shared))
                return handler_type(Recorder())

            return build

        registry.register_scoped(FirstHandler, factory(FirstHandler))
        registry.register_scoped(SecondHandler, factory(SecondHandler))
        event_bus.subscribe(SampleEvent, FirstHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        await event_bus.publish(SampleEvent(message="test"))

        assert len(seen) == 2
        assert seen[0] is seen[1]
        # The scope is closed once dispatch is done
        assert seen[0].closed

    @pytest.mark.asyncio
    async def test_handler_receives_the_published_event(self, registry, event_bus: EventBus):
        received: list[SampleEvent] = []

        class CapturingHandler(EventHandler[SampleEvent]):
            async def handle(self, event: SampleEvent) -> None:
                received.append(event)

        registry.register_scoped(CapturingHandler, lambda scope: CapturingHandler())
        event_bus.subscribe(SampleEvent, CapturingHandler)

        event = SampleEvent(message="payload", value=7)
        await event_bus.publish(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_explicit_logger_is_used(self, registry, log_records):
        from loguru import logger

        bus = EventBus(registry, log=logger.bind(component="custom_bus"))
        await bus.publish(OtherSampleEvent())

        assert any(r["extra"].get("component") == "custom_bus" for r in log_records)


class TestPublishSync:
    """Test cases for publishing from synchronous code."""

    def test_publish_sync_without_running_loop(self, registry, event_bus: EventBus):
        recorder = Recorder()
        _register(registry, recorder, SecondHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        event_bus.publish_sync(SampleEvent(message="sync"))

        assert recorder.calls == ["second:start", "second:end"]

    @pytest.mark.asyncio
    async def test_publish_sync_inside_running_loop(self, registry, event_bus: EventBus):
        recorder = Recorder()
        _register(registry, recorder, SecondHandler)
        event_bus.subscribe(SampleEvent, SecondHandler)

        event_bus.publish_sync(SampleEvent(message="sync"))
        event_bus.shutdown()

        assert recorder.calls == ["second:start", "second:end"]

    def test_publish_sync_swallows_handler_failures(self, registry, event_bus: EventBus):
        recorder = Recorder()
        _register(registry, recorder, FailingSampleHandler)
        event_bus.subscribe(SampleEvent, FailingSampleHandler)

        event_bus.publish_sync(SampleEvent(message="sync"))

        assert recorder.calls == ["failing"]
