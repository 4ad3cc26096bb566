from typing import Final

import pytest

from statechart.scripting_engine.script_evaluator import ScriptEvaluator
from statechart.scripting_engine.script_namespace import ScriptNamespace
from statechart.scripting_engine.system_context import SystemContext
from statechart.scripting_engine.system_context_binding import SystemContextBinding
from statechart.scripting_engine.system_context_binding import install


@pytest.fixture
def system_context() -> SystemContext:
    context: Final = SystemContext(name="traffic-light", session_id="s1")
    context.state_configuration.enter_state("idle")
    return context


@pytest.fixture
def namespace() -> ScriptNamespace:
    return ScriptNamespace()


@pytest.fixture
def binding(namespace: ScriptNamespace, system_context: SystemContext) -> SystemContextBinding:
    return install(namespace, system_context)


@pytest.fixture
def evaluator(namespace: ScriptNamespace, binding: SystemContextBinding) -> ScriptEvaluator:
    return ScriptEvaluator(namespace)
