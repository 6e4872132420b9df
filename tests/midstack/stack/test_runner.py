import pytest

from fixtures.stacks import Configured
from fixtures.stacks import Halt
from fixtures.stacks import Recorder
from fixtures.stacks import Recover
from fixtures.stacks import Tag
from fixtures.stacks import appender
from fixtures.stacks import boom
from midstack import Builder
from midstack.exceptions import MiddlewareConfigurationError
from midstack.stack.entry import MiddlewareEntry
from midstack.stack.runner import EMPTY_MIDDLEWARE
from midstack.stack.runner import Runner


def test_runner_with_empty_stack_uses_the_empty_middleware():
    runner = Runner([])

    assert runner.kickoff is EMPTY_MIDDLEWARE
    assert runner({"data": []}) is None
    assert runner() is None


def test_runner_runs_plain_callables_in_order(env):
    runner = Runner([(appender(1),), (appender(2),), (appender(3),)])

    runner(env)

    assert env["data"] == [1, 2, 3]


def test_runner_nests_classes_like_an_onion(env):
    runner = Runner([(Recorder, ["A"]), (Recorder, ["B"])])

    runner(env)

    assert env["result"] == ["A", "B", "B", "A"]


def test_runner_passes_next_callable_args_kwargs_and_block(env, configured_instances):
    def block(env):
        env["data"].append("block")

    entry = MiddlewareEntry(
        target=Configured, args=(1, 2), kwargs={"name": "x"}, block=block
    )
    runner = Runner([entry, (appender("after"),)])

    runner(env)

    [instance] = configured_instances
    assert instance.args == (1, 2)
    assert instance.kwargs == {"name": "x"}
    assert instance.block is block
    assert callable(instance.app)
    assert env["data"] == ["block", "after"]


def test_runner_omits_block_keyword_when_no_block_given(configured_instances):
    Runner([(Configured, [1])])

    [instance] = configured_instances
    assert instance.block is None
    assert instance.kwargs == {}


def test_runner_instantiates_classes_once_per_compilation(env, configured_instances):
    runner = Runner([(Configured,)])

    runner(env)
    runner(env)

    assert len(configured_instances) == 1


def test_runner_class_that_does_not_call_next_halts_the_chain(env):
    runner = Runner([(Tag, [1]), (Halt,), (Tag, [2]), (appender(3),)])

    result = runner(env)

    assert env["data"] == [1, "halt"]
    assert result == "halted"


def test_runner_returns_value_of_outermost_step():
    runner = Runner([(appender("ignored", key="data"),), (Halt, ["inner"])])

    assert runner({"data": []}) == "inner"


def test_runner_fault_is_seen_by_enclosing_steps_only(env):
    runner = Runner(
        [
            (Recover, ["outer"]),
            (Recorder, ["A"]),
            (boom,),
            (appender("never"),),
        ]
    )

    result = runner(env)

    assert result == "recovered"
    assert env["errors"] == [("outer", "boom")]
    # Recorder A ran its "before" part only, the fault unwound through it
    assert env["result"] == ["A"]
    assert env["data"] == []


def test_runner_does_not_catch_faults(env):
    runner = Runner([(Tag, [1]), (boom,)])

    with pytest.raises(RuntimeError, match="boom"):
        runner(env)


def test_runner_rejects_targets_that_are_not_callable():
    target = object()

    with pytest.raises(MiddlewareConfigurationError, match="doesn't respond to `__call__`") as exc:
        Runner([(target,)])

    assert exc.value.target is target


def test_runner_rejects_builders_that_were_not_merged():
    nested = Builder().use(appender(1))

    with pytest.raises(MiddlewareConfigurationError, match="must be merged") as exc:
        Runner([(nested,)])

    assert exc.value.target is nested


def test_runner_rejects_classes_whose_instances_are_not_callable():
    class NotCallable:
        def __init__(self, app):
            self.app = app

    with pytest.raises(MiddlewareConfigurationError, match="NotCallable"):
        Runner([(NotCallable,)])


@pytest.mark.parametrize("item", [(), (print, [], None, "extra"), "print", None])
def test_runner_rejects_malformed_stack_items(item):
    with pytest.raises(MiddlewareConfigurationError, match="Invalid middleware stack item"):
        Runner([item])


def test_runner_accepts_none_args_in_stack_items(env):
    runner = Runner([(appender(1), None, None)])

    runner(env)

    assert env["data"] == [1]


def test_runner_repr_lists_middleware():
    assert repr(Runner([(Tag, [1]), (Halt,)])) == "Runner(Tag → Halt)"
