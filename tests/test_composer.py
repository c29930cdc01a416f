"""Tests for hook layer composition on plain callables."""

import pytest

from tinyhooks.composer import HookKind, compose, late_bound, resolve_guard
from tinyhooks.errors import ConfigurationError, MissingOperationError
from tinyhooks.terminators import Terminator, abort


def recorder(calls, label, result=None):
    def record(receiver, *args, **kwargs):
        calls.append(label)
        return result

    return record


class TestHookKind:
    @pytest.mark.parametrize("value", ["before", "after", "around", HookKind.AROUND])
    def test_parse_valid(self, value):
        assert HookKind.parse(value) is HookKind(value)

    def test_parse_invalid(self):
        with pytest.raises(ConfigurationError, match="during is not supported"):
            HookKind.parse("during")


class TestCompose:
    def test_before_layers_run_newest_first(self):
        calls = []
        chain = recorder(calls, "original", "done")
        for n in range(1, 4):
            chain = compose(HookKind.BEFORE, chain, recorder(calls, f"before {n}"))

        assert chain(None) == "done"
        assert calls == ["before 3", "before 2", "before 1", "original"]

    def test_after_layers_run_oldest_first(self):
        calls = []
        chain = recorder(calls, "original", "done")
        for n in range(1, 4):
            chain = compose(HookKind.AFTER, chain, recorder(calls, f"after {n}", "ignored"))

        assert chain(None) == "done"
        assert calls == ["original", "after 1", "after 2", "after 3"]

    def test_around_layers_nest_newest_outermost(self):
        calls = []

        def layer(n):
            def wrap(receiver, proceed):
                calls.append(f"enter {n}")
                result = proceed()
                calls.append(f"exit {n}")
                return result

            return wrap

        chain = recorder(calls, "original", "done")
        chain = compose(HookKind.AROUND, chain, layer(1))
        chain = compose(HookKind.AROUND, chain, layer(2))

        assert chain(None) == "done"
        assert calls == ["enter 2", "enter 1", "original", "exit 1", "exit 2"]

    def test_arguments_are_forwarded(self):
        seen = []

        def original(receiver, *args, **kwargs):
            seen.append(("original", receiver, args, kwargs))

        def hook(receiver, *args, **kwargs):
            seen.append(("hook", receiver, args, kwargs))

        chain = compose(HookKind.BEFORE, original, hook)
        chain("me", 1, 2, key="value")

        assert seen == [
            ("hook", "me", (1, 2), {"key": "value"}),
            ("original", "me", (1, 2), {"key": "value"}),
        ]

    def test_callable_arguments_pass_through_unchanged(self):
        def original(receiver, callback):
            return callback(2)

        chain = compose(HookKind.AFTER, original, lambda receiver, callback: None)

        assert chain(None, lambda x: x * 21) == 42

    def test_before_abort_returns_none(self):
        calls = []
        chain = compose(HookKind.BEFORE, recorder(calls, "original", "done"), lambda receiver: abort())

        assert chain(None) is None
        assert calls == []

    def test_before_return_false_policy(self):
        calls = []
        chain = compose(
            HookKind.BEFORE,
            recorder(calls, "original", "done"),
            lambda receiver: False,
            terminator=Terminator.RETURN_FALSE,
        )

        assert chain(None) is None
        assert calls == []

    def test_guard_receives_receiver(self):
        calls = []
        chain = compose(
            HookKind.BEFORE,
            recorder(calls, "original"),
            recorder(calls, "hook"),
            guard=lambda receiver: receiver == "yes",
        )

        chain("no")
        chain("yes")

        assert calls == ["original", "hook", "original"]

    def test_wrapper_keeps_name(self):
        def save(receiver):
            pass

        chain = compose(HookKind.AROUND, save, lambda receiver, proceed: proceed())

        assert chain.__name__ == "save"
        assert chain.__wrapped__ is save


class TestLateBound:
    def test_resolves_on_each_call(self):
        class Receiver:
            def hook(self, value):
                return f"first {value}"

        body = late_bound("hook")
        receiver = Receiver()
        assert body(receiver, 1) == "first 1"

        Receiver.hook = lambda self, value: f"second {value}"
        assert body(receiver, 2) == "second 2"

    def test_missing_method_raises(self):
        class Receiver:
            pass

        with pytest.raises(MissingOperationError, match=r"undefined method 'nope' for .*Receiver"):
            late_bound("nope")(Receiver())

    def test_class_receiver(self):
        class Factory:
            @classmethod
            def label(cls):
                return cls.__name__

        assert late_bound("label")(Factory) == "Factory"


class TestResolveGuard:
    def test_none_stays_none(self):
        assert resolve_guard(None) is None

    def test_callable_is_returned_as_is(self):
        def guard(receiver):
            return True

        assert resolve_guard(guard) is guard

    def test_name_calls_method(self):
        class Receiver:
            def ready(self):
                return "ready"

        assert resolve_guard("ready")(Receiver()) == "ready"
