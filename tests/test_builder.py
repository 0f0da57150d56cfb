import io

import pytest

import sample_actions
from tasktree.actions import ActionError, ActionRegistry, LogAction
from tasktree.builder import TreeBuilder, build_tree
from tasktree.config import ConfigError, ProjectConfig
from tasktree.tasks import OutputSink


def _build(text, **kwargs):
    return build_tree(ProjectConfig.from_yaml(text), **kwargs)


def test_build_tree_from_config():
    sample_actions.CALLS.clear()
    text = """
name: build
tasks:
  - name: compile
    tasks:
      - name: lib
        action: sample_actions:record
      - name: app
        action: sample_actions:record
        args: {target: app}
  - name: notify
    action: sample_actions:RecordingAction
    args: {channel: ops}
"""
    stream = io.StringIO()
    tree = _build(text, output=OutputSink(stream))

    assert tree.name == "build"
    assert [task.name for task in tree.tasks()] == ["build", "compile", "lib", "app", "notify"]
    assert tree.length() == 3

    tree.execute()

    assert sample_actions.CALLS == [("lib", {}), ("app", {"target": "app"}), ("notify", {"channel": "ops"})]
    assert stream.getvalue() == "build\n  compile\n    lib... [OK]\n    app... [OK]\n  notify... [OK]\n"


def test_header_false_builds_anonymous_root():
    stream = io.StringIO()
    tree = _build("output: {header: false}\ntasks: [{name: a, action: log}]", output=OutputSink(stream))

    tree.execute()

    assert tree.name is None
    assert stream.getvalue() == "a... [OK]\n"


def test_project_actions_and_builtins():
    text = """
actions:
  blocked:
    type: fail
    args: {message: "{task} is blocked"}
tasks:
  - name: say
    action: log
    args: {message: hello}
  - name: release
    action: blocked
"""
    tree = _build(text)

    assert isinstance(tree["say"].action, LogAction)
    assert tree["say"].action.config == {"message": "hello"}
    with pytest.raises(ActionError, match="release is blocked"):
        tree.execute(OutputSink.disabled())


def test_anonymous_nested_group():
    tree = _build("tasks:\n  - tasks:\n      - {name: inner, action: log}\n")

    group = tree.sub_tasks[0]
    assert group.name is None
    assert group.sub_tasks[0].name == "inner"


def test_custom_registry_is_used():
    registry = ActionRegistry()
    registry.register_factory("custom", lambda **args: LogAction(name="custom", **args))

    tree = _build("tasks: [{name: a, action: custom}]", registry=registry)

    assert tree["a"].action.name == "custom"


def test_placeholder_node_fails_only_when_executed():
    tree = _build("tasks: [{name: placeholder}]")

    assert tree.is_empty
    with pytest.raises(RuntimeError, match="placeholder"):
        tree.execute(OutputSink.disabled())


@pytest.mark.parametrize(
    "reference, message",
    [
        ("nope", "unknown action 'nope'"),
        ("sample_actions:CONSTANT", "is not callable"),
        ("sample_actions:NotAnAction", "must inherit Action"),
        ("sample_actions:missing", "has no attribute"),
    ],
)
def test_unresolvable_actions(reference, message):
    config = ProjectConfig.from_yaml(f"tasks: [{{name: a, action: '{reference}'}}]")

    with pytest.raises(ConfigError, match=message):
        TreeBuilder(config).build()


def test_misconfigured_builtin_action():
    with pytest.raises(ConfigError, match="requires a command"):
        _build("tasks: [{name: a, action: shell}]")


def test_misconfigured_action_class():
    config = ProjectConfig.from_yaml("tasks: [{name: a, action: 'tasktree.actions.builtin:ShellAction'}]")

    with pytest.raises(ConfigError, match="requires a command"):
        TreeBuilder(config).build()


def test_project_actions_may_reference_later_entries():
    text = """
actions:
  deploy:
    type: announce
    args: {level: warning}
  announce:
    type: log
    args: {message: "{task} shipped"}
tasks:
  - name: ship
    action: deploy
"""
    tree = _build(text)

    action = tree["ship"].action
    assert isinstance(action, LogAction)
    assert action.config == {"message": "{task} shipped", "level": "warning"}
