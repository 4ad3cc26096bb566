from typing import Final

import pytest

from statechart.scripting_engine.binding_errors import DuplicateBindingError
from statechart.scripting_engine.binding_errors import InvalidPredicateArgument
from statechart.scripting_engine.binding_errors import ProtectedVariableViolation
from statechart.scripting_engine.protected_variable import ReadOnlyMapping
from statechart.scripting_engine.script_namespace import ScriptNamespace
from statechart.scripting_engine.system_context import SystemContext
from statechart.scripting_engine.system_context_binding import SystemContextBinding
from statechart.scripting_engine.system_context_binding import install
from statechart.scripting_engine.system_variables import PROTECTED_NAMES
from statechart.scripting_engine.types.event import EventRecord
from statechart.scripting_engine.types.event import EventType
from statechart.scripting_engine.types.event_snapshot import EventSnapshot


def _snapshot_of(namespace: ScriptNamespace) -> EventSnapshot:
    snapshot: Final = namespace["_event"]
    assert isinstance(snapshot, EventSnapshot)
    return snapshot


def test_install_defines_all_system_variables(namespace: ScriptNamespace, binding: SystemContextBinding) -> None:
    assert set(namespace) == {"_name", "_sessionid", "_ioprocessors", "_event", "_x", "In"}
    for name in PROTECTED_NAMES:
        assert namespace.is_accessor(name)


def test_scenario_without_current_event(namespace: ScriptNamespace, binding: SystemContextBinding) -> None:
    assert namespace["_sessionid"] == "s1"
    assert namespace["_name"] == "traffic-light"
    assert namespace["_event"] is None
    assert namespace["In"]("idle") is True
    assert namespace["In"]("running") is False


def test_scenario_with_current_event(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    system_context.dispatch_event(EventRecord(name="go", type=EventType.INTERNAL))
    first: Final = _snapshot_of(namespace)
    assert first.name == "go"
    assert first.type == "internal"
    assert first.sendid is None
    assert namespace["_event"] is first


@pytest.mark.parametrize("name", sorted(PROTECTED_NAMES))
def test_writing_protected_variable_raises(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
    name: str,
) -> None:
    system_context.dispatch_event(EventRecord(name="go"))
    before: Final = namespace[name]
    with pytest.raises(ProtectedVariableViolation, match=f"'{name}' is a protected system variable") as exc_info:
        namespace[name] = "overwritten"
    assert exc_info.value.name == name
    after: Final = namespace[name]
    if name == "In":
        assert after("idle") is True
    else:
        assert after == before


@pytest.mark.parametrize("name", sorted(PROTECTED_NAMES))
def test_deleting_protected_variable_raises(namespace: ScriptNamespace, binding: SystemContextBinding, name: str) -> None:
    with pytest.raises(ProtectedVariableViolation) as exc_info:
        del namespace[name]
    assert exc_info.value.name == name
    assert name in namespace


def test_reads_reflect_live_context(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    assert dict(namespace["_ioprocessors"]) == {}
    system_context.register_io_processor("scxml", {"location": "#_scxml_s1"})
    assert namespace["_ioprocessors"] == {"scxml": {"location": "#_scxml_s1"}}
    system_context.unregister_io_processor("scxml")
    assert namespace["_ioprocessors"] == {}

    system_context.extended_state["counter"] = 1
    assert namespace["_x"]["counter"] == 1
    system_context.extended_state["counter"] = 2
    assert namespace["_x"]["counter"] == 2


def test_mappings_are_read_only_views(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    system_context.extended_state["counter"] = 1
    system_context.extended_state["status"] = {"phase": "green"}
    system_context.register_io_processor("scxml", {"location": "#_scxml_s1"})
    extended_state: Final = namespace["_x"]
    assert isinstance(extended_state, ReadOnlyMapping)
    assert extended_state == {"counter": 1, "status": {"phase": "green"}}

    with pytest.raises(ProtectedVariableViolation) as exc_info:
        extended_state["counter"] = 42
    assert exc_info.value.name == "_x['counter']"
    with pytest.raises(ProtectedVariableViolation, match=r"_x\['status'\]\['phase'\]"):
        extended_state["status"]["phase"] = "red"
    with pytest.raises(ProtectedVariableViolation, match=r"_ioprocessors\['scxml'\]"):
        del namespace["_ioprocessors"]["scxml"]

    assert system_context.extended_state == {"counter": 1, "status": {"phase": "green"}}
    assert "scxml" in system_context.io_processors


def test_in_predicate_tracks_active_configuration(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    in_state: Final = namespace["In"]
    assert in_state("running") is False
    system_context.state_configuration.exit_state("idle")
    system_context.state_configuration.enter_state("running")
    assert in_state("running") is True
    assert in_state("idle") is False


@pytest.mark.parametrize("state_id", ["", "never.declared", "not a state id", "idle "])
def test_in_predicate_returns_false_for_unknown_states(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    state_id: str,
) -> None:
    assert namespace["In"](state_id) is False


@pytest.mark.parametrize("argument", [None, 42, ["idle"], b"idle"])
def test_in_predicate_rejects_non_string_arguments(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    argument: object,
) -> None:
    with pytest.raises(InvalidPredicateArgument, match="'In' expects a state id"):
        namespace["In"](argument)


def test_snapshot_is_replaced_when_event_changes(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    system_context.dispatch_event(EventRecord(name="go", type=EventType.INTERNAL))
    first: Final = _snapshot_of(namespace)

    system_context.dispatch_event(
        EventRecord(
            name="done.invoke.child",
            type=EventType.EXTERNAL,
            send_id="send-1",
            origin="#_scxml_child",
            origin_type="http://www.w3.org/TR/scxml/#SCXMLEventProcessor",
            invoke_id="child",
            data={"result": 42},
        )
    )
    second: Final = _snapshot_of(namespace)
    assert second is not first
    assert second.name == "done.invoke.child"
    assert second.type == "external"
    assert second.sendid == "send-1"
    assert second.origin == "#_scxml_child"
    assert second.origintype == "http://www.w3.org/TR/scxml/#SCXMLEventProcessor"
    assert second.invokeid == "child"
    assert second.data == {"result": 42}
    assert first.name == "go"


def test_equal_events_dispatched_twice_get_separate_snapshots(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    system_context.dispatch_event(EventRecord(name="tick"))
    first: Final = _snapshot_of(namespace)
    system_context.dispatch_event(EventRecord(name="tick"))
    second: Final = _snapshot_of(namespace)
    assert second is not first
    assert second == first


def test_event_becomes_absent_after_clearing(
    namespace: ScriptNamespace,
    binding: SystemContextBinding,
    system_context: SystemContext,
) -> None:
    system_context.dispatch_event(EventRecord(name="go"))
    assert namespace["_event"] is not None
    system_context.clear_event()
    assert namespace["_event"] is None


def test_installing_twice_raises(namespace: ScriptNamespace, binding: SystemContextBinding) -> None:
    with pytest.raises(DuplicateBindingError, match="'_name' is already bound"):
        binding.install(namespace)


def test_installing_over_existing_variable_raises(system_context: SystemContext) -> None:
    namespace: Final = ScriptNamespace({"In": "shadowed"})
    with pytest.raises(DuplicateBindingError, match="'In' is already bound"):
        install(namespace, system_context)
    # Nothing is installed if any of the names is taken.
    assert not any(namespace.is_accessor(name) for name in PROTECTED_NAMES)
    assert namespace["In"] == "shadowed"


def test_same_context_can_back_several_namespaces(system_context: SystemContext) -> None:
    first: Final = ScriptNamespace()
    second: Final = ScriptNamespace()
    install(first, system_context)
    install(second, system_context)
    assert first["_sessionid"] == second["_sessionid"] == "s1"


def test_install_does_not_mutate_context(system_context: SystemContext) -> None:
    install(ScriptNamespace(), system_context)
    assert system_context.event is None
    assert dict(system_context.io_processors) == {}
    assert system_context.extended_state == {}
