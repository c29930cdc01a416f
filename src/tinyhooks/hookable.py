"""Hookable classes: hook definition, restore, and per-subclass hook state.

Usage:
    from tinyhooks import Hookable, abort, before

    class Record(Hookable):
        def save(self):
            print("- save")

    class PersonRecord(Record):
        @before("save")
        def saving_message(self):
            print("saving...")

    PersonRecord.define_hook("after", "save", lambda self: print("saved"))

Every subclass gets its own copy of its parent's hook state when it is
created, so hooks defined on a subclass never affect the parent or its
siblings, and hooks defined on the parent later never reach existing
subclasses' registries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

from tinyhooks import operations
from tinyhooks.composer import GuardFn, HookBody, HookKind, compose, late_bound, resolve_guard
from tinyhooks.config import get_config
from tinyhooks.errors import ConfigurationError, TargetError
from tinyhooks.registry import OriginalRegistry
from tinyhooks.targets import Pattern, TargetFilter
from tinyhooks.terminators import Terminator
from tinyhooks.visibility import check_visibility, is_public

logger = logging.getLogger(__name__)

H = TypeVar("H", bound="type[Hookable]")

# Attribute holding decorator-declared hooks on a method's function object
PENDING_ATTR = "_tinyhooks_pending"


@dataclass
class HookState:
    """Hook bookkeeping owned by one hookable class.

    Attributes:
        originals: Pristine instance methods, keyed by name
        class_originals: Pristine class/static methods, keyed by name
        targets: Allow-list of hookable names
        public_only: Whether non-public operations are refused
        declared: Decorator hooks already installed, as (method name, hook) pairs
    """

    originals: OriginalRegistry = field(default_factory=OriginalRegistry)
    class_originals: OriginalRegistry = field(default_factory=OriginalRegistry)
    targets: TargetFilter = field(default_factory=TargetFilter)
    public_only: bool = False
    declared: set[tuple[str, PendingHook]] = field(default_factory=set)

    def copy(self) -> HookState:
        return HookState(
            originals=self.originals.copy(),
            class_originals=self.class_originals.copy(),
            targets=self.targets.copy(),
            public_only=self.public_only,
            declared=set(self.declared),
        )

    def registry_for(self, static: bool) -> OriginalRegistry:
        return self.class_originals if static else self.originals


@dataclass(frozen=True)
class PendingHook:
    """A hook declared with :func:`before`, :func:`after` or :func:`around` in a class body."""

    kind: HookKind
    target: str
    terminator: Terminator | str | None = None
    guard: GuardFn | str | None = None
    static: bool = False


class Hookable:
    """Base class for classes whose methods can receive hooks."""

    _hook_state: ClassVar[HookState] = HookState()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        parent = _parent_unit(cls)
        if parent is None:
            cls._hook_state = HookState(public_only=get_config().public_only)
        else:
            cls._hook_state = parent._hook_state.copy()

        for name, value in list(vars(cls).items()):
            func = getattr(value, "__func__", value)
            for pending in getattr(func, PENDING_ATTR, ()):
                # A base already calls this method by name for the same hook
                if (name, pending) in cls._hook_state.declared:
                    continue
                cls.define_hook(
                    pending.kind,
                    pending.target,
                    name,
                    terminator=pending.terminator,
                    guard=pending.guard,
                    static=pending.static,
                )
                cls._hook_state.declared.add((name, pending))

    @classmethod
    def define_hook(
        cls,
        kind: HookKind | str,
        target: str,
        hook_method: str | HookBody | None = None,
        *,
        body: HookBody | None = None,
        terminator: Terminator | str | None = None,
        guard: GuardFn | str | None = None,
        static: bool = False,
    ) -> None:
        """Define a hook on one of this class's operations.

        Args:
            kind: "before", "after" or "around"
            target: Name of the operation to hook
            hook_method: Name of a method to call as the hook body (resolved on
                the receiver at call time), or the body itself
            body: Hook body, called as ``body(receiver, *args, **kwargs)``;
                around bodies get ``proceed`` right after the receiver
            terminator: "abort" or "return_false" (before hooks only);
                defaults to the configured default terminator
            guard: Predicate ``guard(receiver)`` or a method name; a falsy
                result skips this hook's body but never the wrapped call
            static: Hook a classmethod/staticmethod instead of an instance method

        Raises:
            TargetError: If ``target`` is not in the allow-list
            ConfigurationError: If no body is given or kind/terminator is invalid
            MissingOperationError: If ``target`` does not exist
            PrivateError: If ``target`` is non-public and public-only mode is on
        """
        state = cls._hook_state
        if not state.targets.allow(target):
            raise TargetError(cls.__qualname__, target)

        hook_kind = HookKind.parse(kind)
        if callable(hook_method):
            if body is not None:
                raise ConfigurationError("Give either a hook method or a body, not both")
            hook_method, body = None, hook_method
        if body is None and hook_method is None:
            raise ConfigurationError("You must provide a hook body or a hook method name")
        if body is not None and hook_method is not None:
            raise ConfigurationError("Give either a hook method or a body, not both")
        policy = Terminator.parse(terminator if terminator is not None else get_config().default_terminator)

        raw = operations.resolve(cls, target, static=static)
        check_visibility(cls.__qualname__, target, state.public_only)

        hook_body = body if body is not None else late_bound(hook_method)
        layer = compose(hook_kind, operations.unwrap(raw), hook_body, policy, resolve_guard(guard))

        state.registry_for(static).record(target, raw)
        setattr(cls, target, operations.rewrap(layer, operations.kind_of(raw), cls))
        logger.debug(
            "Defined %s hook on %s.%s (terminator=%s, guarded=%s)",
            hook_kind.value,
            cls.__qualname__,
            target,
            policy.value,
            guard is not None,
        )

    @classmethod
    def restore_original(cls, target: str, *, static: bool = False) -> None:
        """Rebind ``target`` to the implementation it had before any hook.

        Restoring an operation that was never hooked does nothing.

        Raises:
            MissingOperationError: If ``target`` does not exist
        """
        operations.resolve(cls, target, static=static)
        registry = cls._hook_state.registry_for(static)
        if target not in registry:
            logger.debug("%s.%s has no hooks to remove", cls.__qualname__, target)
            return

        setattr(cls, target, registry.lookup(target))
        cls._hook_state.declared = {
            (name, pending)
            for name, pending in cls._hook_state.declared
            if (pending.target, pending.static) != (target, static)
        }
        logger.debug("Restored original %s.%s", cls.__qualname__, target)

    @classmethod
    def target(cls, include: Pattern | None = None, exclude: Pattern | None = None) -> tuple[str, ...]:
        """Restrict which operations may receive hooks from now on.

        Candidates are this class's public operations, plus non-public ones
        unless public-only mode is on, as they exist at the time of the call.

        Returns:
            The resulting allow-list

        Raises:
            ConfigurationError: If neither pattern is given
        """
        state = cls._hook_state
        candidates = [name for name in cls.operation_names() if not state.public_only or is_public(name)]
        return state.targets.configure(candidates, include=include, exclude=exclude)

    @classmethod
    def public_only(cls) -> None:
        """Refuse hooks on non-public operations defined after this call."""
        cls._hook_state.public_only = True

    @classmethod
    def include_private(cls) -> None:
        """Allow hooks on non-public operations again."""
        cls._hook_state.public_only = False

    @classmethod
    def hook_state(cls) -> HookState:
        return cls._hook_state

    @classmethod
    def operation_names(cls) -> list[str]:
        """Names of the operations defined by this class and its bases."""
        return list(operations.operations(cls, skip=(object, Hookable)))


def _parent_unit(cls: type) -> type[Hookable] | None:
    for base in cls.__mro__[1:]:
        if base is not Hookable and issubclass(base, Hookable):
            return base
    return None


def derive(parent: H, name: str | None = None, namespace: dict[str, Any] | None = None) -> H:
    """Create a derived unit of ``parent`` with its own copy of the hook state.

    Args:
        parent: Hookable class to derive from
        name: Name of the new class (defaults to ``<Parent>Derived``)
        namespace: Extra class attributes, e.g. new or overriding methods

    Returns:
        New subclass of ``parent``
    """
    if not (isinstance(parent, type) and issubclass(parent, Hookable)):
        raise TypeError(f"derive() needs a Hookable subclass, got {parent!r}")

    attrs = dict(namespace or {})
    attrs.setdefault("__module__", parent.__module__)
    return type(name or f"{parent.__name__}Derived", (parent,), attrs)


def _declare(
    kind: HookKind,
    target: str,
    terminator: Terminator | str | None,
    guard: GuardFn | str | None,
    static: bool,
) -> Callable[[Any], Any]:
    pending = PendingHook(kind=kind, target=target, terminator=terminator, guard=guard, static=static)

    def decorator(method: Any) -> Any:
        func = getattr(method, "__func__", method)
        declared = getattr(func, PENDING_ATTR, ())
        setattr(func, PENDING_ATTR, (*declared, pending))
        return method

    return decorator


def before(
    target: str,
    *,
    terminator: Terminator | str | None = None,
    guard: GuardFn | str | None = None,
    static: bool = False,
) -> Callable[[Any], Any]:
    """Declare the decorated method as a before hook on ``target``.

    The hook is installed when the class is created and calls the method by
    name, so subclasses may override it. An override that repeats the same
    decorator reuses the inherited hook instead of installing a second one.

    Example:
        class Guarded(Record):
            @before("save", terminator="return_false")
            def validate(self):
                return self.valid
    """
    return _declare(HookKind.BEFORE, target, terminator, guard, static)


def after(target: str, *, guard: GuardFn | str | None = None, static: bool = False) -> Callable[[Any], Any]:
    """Declare the decorated method as an after hook on ``target``."""
    return _declare(HookKind.AFTER, target, None, guard, static)


def around(target: str, *, guard: GuardFn | str | None = None, static: bool = False) -> Callable[[Any], Any]:
    """Declare the decorated method as an around hook on ``target``.

    The method receives ``proceed`` followed by the original arguments.
    """
    return _declare(HookKind.AROUND, target, None, guard, static)
