import ast
import builtins
import logging
from types import CodeType
from typing import Any
from typing import Final
from typing import Literal
from typing import Optional
from typing import final
from uuid import uuid4

from statechart.scripting_engine.binding_errors import BindingError
from statechart.scripting_engine.protected_variable import reject_write
from statechart.scripting_engine.script_namespace import BUILTINS_KEY
from statechart.scripting_engine.script_namespace import ScriptNamespace
from statechart.scripting_engine.script_namespace import ScriptScope
from statechart.scripting_engine.system_variables import PROTECTED_NAMES

logger: Final = logging.getLogger(__name__)

# Temporary namespace entry holding the right-hand side of an assignment.
_ASSIGN_VARIABLE_NAME: Final = f"_assign_{uuid4().hex}"


@final
class ExpressionError(RuntimeError):
    def __init__(self, message: str, expression: str) -> None:
        super().__init__(message)
        self.expression: Final = expression


def _reject_protected_rebinding(tree: ast.AST) -> None:
    # `global` and `del` bypass the namespace's mapping interface, so they are checked before execution.
    for node in ast.walk(tree):
        match node:
            case ast.Global(names=names) | ast.Nonlocal(names=names):
                for name in names:
                    if name in PROTECTED_NAMES:
                        reject_write(name)
            case ast.Name(id=name, ctx=ast.Del()) if name in PROTECTED_NAMES:
                reject_write(name)
            case _:
                pass


@final
class ScriptEvaluator:
    """Evaluates Python expressions and scripts against a single script namespace.

    The namespace serves as the locals of the evaluated code and its scope as the globals, so
    functions, lambdas and comprehensions written by scripts see the same system variables as
    top-level code. Violations of the system variable protection (`BindingError`) propagate
    unchanged; every other failure is reported as an `ExpressionError` chained to the original
    exception.
    """

    def __init__(self, namespace: ScriptNamespace) -> None:
        self._namespace: Final = namespace

    @property
    def namespace(self) -> ScriptNamespace:
        return self._namespace

    def evaluate(self, expression: Optional[str]) -> Any:
        if expression is None:
            return None
        logger.debug(f"Evaluating expression: {expression}")
        try:
            code: Final = self._compile(expression, "eval")
            return eval(code, self._scope(), self._namespace)
        except BindingError:
            raise
        except Exception as e:
            msg: Final = f"eval('{expression}'): {e}"
            raise ExpressionError(msg, expression) from e

    def evaluate_condition(self, expression: Optional[str]) -> bool:
        return bool(self.evaluate(expression))

    def evaluate_assignment(self, location: str, data: Any) -> None:
        self._namespace[_ASSIGN_VARIABLE_NAME] = data
        try:
            code: Final = self._compile(f"{location} = {_ASSIGN_VARIABLE_NAME}", "exec")
            exec(code, self._scope(), self._namespace)
        except BindingError:
            raise
        except Exception as e:
            msg: Final = f'Error evaluating assign to location="{location}": {e}'
            raise ExpressionError(msg, location) from e
        finally:
            del self._namespace[_ASSIGN_VARIABLE_NAME]

    def evaluate_script(self, script: Optional[str]) -> None:
        if script is None:
            return
        logger.debug(f"Executing script:\n{script}")
        try:
            code: Final = self._compile(script, "exec")
            exec(code, self._scope(), self._namespace)
        except BindingError:
            raise
        except Exception as e:
            msg: Final = f"exec('{script}'): {e}"
            raise ExpressionError(msg, script) from e

    def _scope(self) -> ScriptScope:
        scope: Final = self._namespace.scope
        if BUILTINS_KEY not in scope:
            scope[BUILTINS_KEY] = builtins
        return scope

    @staticmethod
    def _compile(source: str, mode: Literal["eval", "exec"]) -> CodeType:
        tree: Final = ast.parse(source, mode=mode)
        _reject_protected_rebinding(tree)
        return compile(tree, "<script>", mode)
