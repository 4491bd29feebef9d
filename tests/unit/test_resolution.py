"""
Resolution procedure tests

Covers candidate classification, the once-guard and foreign thenables
"""

import pytest

from thenable import CyclicResolutionError, Future, Rejection
from thenable.core import (
    CandidateKind,
    OnceGuard,
    classify,
    drive_thenable,
    resolve_candidate,
    unwrap_reason,
)


class Thenable:
    """Foreign thenable calling back with a fixed script"""

    def __init__(self, script):
        self.script = script
        self.calls = 0

    def then(self, on_fulfilled, on_rejected):
        self.calls += 1
        self.script(on_fulfilled, on_rejected)


class Chain:
    """Thenable handing back a shallower Chain synchronously until depth 0"""

    def __init__(self, depth):
        self.depth = depth

    def then(self, on_fulfilled, on_rejected):
        on_fulfilled(Chain(self.depth - 1) if self.depth else "done")


class Recorder:
    """Collects what the procedure settles with"""

    def __init__(self):
        self.values = []
        self.reasons = []

    def on_value(self, value):
        self.values.append(value)

    def on_reason(self, reason):
        self.reasons.append(reason)


class TestClassify:
    """Tests for candidate classification"""

    @pytest.mark.parametrize("value", [None, True, 3, 2.5, "then", b"then", 1j])
    def test_scalars_are_plain(self, value):
        """Test scalars never look up then"""
        assert classify(value) == (CandidateKind.PLAIN, None)

    def test_future(self):
        """Test native futures are recognised"""
        assert classify(Future())[0] is CandidateKind.FUTURE

    def test_thenable(self):
        """Test an object with a callable then is a thenable"""
        thenable = Thenable(lambda ok, err: None)
        kind, then = classify(thenable)
        assert kind is CandidateKind.THENABLE
        assert then == thenable.then

    def test_non_callable_then(self):
        """Test a non-callable then attribute is plain"""

        class Holder:
            then = 5

        assert classify(Holder())[0] is CandidateKind.PLAIN

    def test_class_with_then_method(self):
        """Test classes are plain even when they define then"""
        assert classify(Thenable)[0] is CandidateKind.PLAIN

    def test_plain_object(self):
        """Test objects without then are plain"""
        assert classify({"then": lambda a, b: None})[0] is CandidateKind.PLAIN
        assert classify([1, 2])[0] is CandidateKind.PLAIN

    def test_then_retrieval_error(self):
        """Test errors raised while reading then propagate"""

        class Hostile:
            @property
            def then(self):
                raise ValueError("no peeking")

        with pytest.raises(ValueError):
            classify(Hostile())

    def test_then_retrieved_once(self):
        """Test the then member is read exactly once"""

        class Counting:
            reads = 0

            @property
            def then(self):
                Counting.reads += 1
                return lambda ok, err: ok("v")

        recorder = Recorder()
        target = Future()
        resolve_candidate(target, Counting(), recorder.on_value, recorder.on_reason)

        assert Counting.reads == 1
        assert recorder.values == ["v"]


class TestOnceGuard:
    """Tests for the first-call-wins guard"""

    def test_first_call_wins(self):
        """Test only the first wrapped call runs"""
        guard = OnceGuard()
        calls = []
        first = guard.wrap(lambda v: calls.append(("first", v)))
        second = guard.wrap(lambda v: calls.append(("second", v)))

        second(1)
        first(2)
        second(3)

        assert calls == [("second", 1)]
        assert guard.called

    def test_claim(self):
        """Test claim succeeds once"""
        guard = OnceGuard()
        assert guard.claim() is True
        assert guard.claim() is False

    def test_wrapped_accepts_missing_argument(self):
        """Test callbacks invoked without arguments receive None"""
        guard = OnceGuard()
        calls = []
        guard.wrap(calls.append)()
        assert calls == [None]


class TestResolveCandidate:
    """Tests for the resolution procedure"""

    def test_plain_value(self):
        """Test plain values fulfil immediately"""
        recorder = Recorder()
        resolve_candidate(Future(), 7, recorder.on_value, recorder.on_reason)
        assert recorder.values == [7]

    def test_self_reference(self):
        """Test resolving a future with itself is a cyclic resolution"""
        recorder = Recorder()
        target = Future()
        resolve_candidate(target, target, recorder.on_value, recorder.on_reason)

        assert recorder.values == []
        assert isinstance(recorder.reasons[0], CyclicResolutionError)

    def test_native_future_adopted(self, drain):
        """Test native futures are followed through then"""
        recorder = Recorder()
        resolve_candidate(
            Future(), Future.resolve("x"), recorder.on_value, recorder.on_reason
        )
        assert recorder.values == []

        drain()
        assert recorder.values == ["x"]

    def test_native_future_rejection(self, drain):
        """Test a rejected native future rejects the target"""
        recorder = Recorder()
        resolve_candidate(
            Future(), Future.reject("r"), recorder.on_value, recorder.on_reason
        )
        drain()
        assert recorder.reasons == ["r"]

    def test_thenable_fulfils(self):
        """Test a synchronous thenable settles the target"""
        recorder = Recorder()
        thenable = Thenable(lambda ok, err: ok(42))
        resolve_candidate(Future(), thenable, recorder.on_value, recorder.on_reason)

        assert recorder.values == [42]
        assert thenable.calls == 1

    def test_thenable_rejects(self):
        """Test the reject callback rejects the target"""
        recorder = Recorder()
        thenable = Thenable(lambda ok, err: err("nope"))
        resolve_candidate(Future(), thenable, recorder.on_value, recorder.on_reason)
        assert recorder.reasons == ["nope"]

    def test_thenable_calls_both(self):
        """Test only the first of both callbacks counts"""
        recorder = Recorder()

        def script(ok, err):
            ok("first")
            err("second")
            ok("third")

        resolve_candidate(
            Future(), Thenable(script), recorder.on_value, recorder.on_reason
        )
        assert recorder.values == ["first"]
        assert recorder.reasons == []

    def test_thenable_rejects_twice(self):
        """Test repeated reject calls settle once"""
        recorder = Recorder()

        def script(ok, err):
            err("a")
            err("b")

        resolve_candidate(
            Future(), Thenable(script), recorder.on_value, recorder.on_reason
        )
        assert recorder.reasons == ["a"]

    def test_thenable_raises_before_callback(self):
        """Test an exception from then rejects the target"""
        recorder = Recorder()
        error = RuntimeError("then failed")

        def script(ok, err):
            raise error

        resolve_candidate(
            Future(), Thenable(script), recorder.on_value, recorder.on_reason
        )
        assert recorder.reasons == [error]

    def test_thenable_raises_after_callback(self):
        """Test an exception after a callback fired is ignored"""
        recorder = Recorder()

        def script(ok, err):
            ok("done")
            raise RuntimeError("ignored")

        resolve_candidate(
            Future(), Thenable(script), recorder.on_value, recorder.on_reason
        )
        assert recorder.values == ["done"]
        assert recorder.reasons == []

    def test_thenable_calls_later(self):
        """Test a thenable may call back after then returned"""
        recorder = Recorder()
        saved = {}

        def script(ok, err):
            saved["ok"] = ok
            saved["err"] = err

        resolve_candidate(
            Future(), Thenable(script), recorder.on_value, recorder.on_reason
        )
        assert recorder.values == []

        saved["err"]("late reject")
        saved["ok"]("too late")
        assert recorder.reasons == ["late reject"]
        assert recorder.values == []

    def test_thenable_never_calls(self):
        """Test a silent thenable leaves the target untouched"""
        recorder = Recorder()
        resolve_candidate(
            Future(),
            Thenable(lambda ok, err: None),
            recorder.on_value,
            recorder.on_reason,
        )
        assert recorder.values == []
        assert recorder.reasons == []

    def test_thenable_resolving_with_thenable(self):
        """Test values from a thenable are resolved recursively"""
        recorder = Recorder()
        inner = Thenable(lambda ok, err: ok("innermost"))
        outer = Thenable(lambda ok, err: ok(inner))
        resolve_candidate(Future(), outer, recorder.on_value, recorder.on_reason)

        assert recorder.values == ["innermost"]

    def test_deep_synchronous_chain(self):
        """Test deeply nested synchronous thenables do not exhaust the stack"""
        recorder = Recorder()
        resolve_candidate(Future(), Chain(5000), recorder.on_value, recorder.on_reason)

        assert recorder.values == ["done"]
        assert recorder.reasons == []

    def test_deep_chain_through_future(self, drain):
        """Test Future.resolve settles a deep thenable chain"""
        future = Future.resolve(Chain(5000))
        drain()
        assert future.value == "done"

    def test_raise_after_nested_thenable(self):
        """Test an exception after handing back a thenable does not block it"""
        recorder = Recorder()

        def script(ok, err):
            ok(Chain(3))
            raise RuntimeError("ignored")

        resolve_candidate(
            Future(), Thenable(script), recorder.on_value, recorder.on_reason
        )
        assert recorder.values == ["done"]
        assert recorder.reasons == []

    def test_nested_retrieval_error_rejects(self):
        """Test a nested candidate whose then getter raises rejects the target"""
        error = LookupError("hidden")

        class Hostile:
            @property
            def then(self):
                raise error

        recorder = Recorder()
        outer = Thenable(lambda ok, err: ok(Hostile()))
        resolve_candidate(Future(), outer, recorder.on_value, recorder.on_reason)

        assert recorder.reasons == [error]
        assert recorder.values == []

    def test_retrieval_error_rejects(self):
        """Test a then property that raises rejects the target"""

        class Hostile:
            @property
            def then(self):
                raise LookupError("hidden")

        recorder = Recorder()
        resolve_candidate(Future(), Hostile(), recorder.on_value, recorder.on_reason)
        assert isinstance(recorder.reasons[0], LookupError)

    def test_drive_thenable_directly(self):
        """Test drive_thenable with an already retrieved then"""
        recorder = Recorder()
        thenable = Thenable(lambda ok, err: ok("direct"))
        drive_thenable(
            Future(), thenable, thenable.then, recorder.on_value, recorder.on_reason
        )
        assert recorder.values == ["direct"]


class TestUnwrapReason:
    """Tests for reasons carried by exceptions"""

    def test_rejection_carrier(self):
        """Test Rejection exposes the carried reason"""
        assert unwrap_reason(Rejection("plain")) == "plain"

    def test_other_exception(self):
        """Test other exceptions are their own reason"""
        error = ValueError()
        assert unwrap_reason(error) is error
