"""Emitting the source of logging fragments."""

from __future__ import annotations

import keyword
from pathlib import Path

from ..core.fragments import FRAGMENT_ATTR, MEMBERS_ATTR, fragment_file_name, fragment_module_name
from ..models import (
    WRAPPER_SKIPPED,
    Diagnostic,
    DiagnosticSeverity,
    GeneratedSource,
    LogLevel,
    ParameterKind,
    ParameterSpec,
    ResolvedMethod,
    SensitiveData,
    SourceLocation,
)
from .compilation import GENERATED_MARKER
from .discovery import CandidateType
from .escaping import escape_string_literal
from .validation import LOGGER_FIELD, LOGGER_SETTER, RESERVED_MEMBERS, member_names

CORE_SUFFIXES = ("_core", "Core")
RUNTIME = "_aoplog"
RESERVED_PREFIX = "_aoplog"
INDENT = "    "

_LOGGER = f"{RESERVED_PREFIX}_logger"
_STARTED = f"{RESERVED_PREFIX}_started"
_RESULT = f"{RESERVED_PREFIX}_result"
_ERROR = f"{RESERVED_PREFIX}_error"


def wrapper_name(name: str) -> str:
    """``process_data_core -> process_data``, ``ProcessDataCore -> ProcessData``,
    ``validate -> validate_logged``, ``Validate -> ValidateLogged``."""
    for suffix in CORE_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    if "_" not in name.strip("_") and any(char.isupper() for char in name):
        return f"{name}Logged"
    return f"{name}_logged"


def emit_fragment(
    candidate: CandidateType,
    methods: list[ResolvedMethod],
    diagnostics: list[Diagnostic],
) -> GeneratedSource:
    """Generate the logging module for one validated class.

    Methods whose wrapper name collides with an existing member are skipped
    with an ``AOPLOG002`` warning; the rest of the class is still generated.
    """
    module = candidate.module
    existing = member_names(candidate.node)
    emitted: list[tuple[str, ResolvedMethod]] = []
    taken = set(RESERVED_MEMBERS)
    for method in methods:
        name = wrapper_name(method.name)
        reason = None
        if keyword.iskeyword(name):
            reason = f"wrapper name '{name}' is a Python keyword"
        elif name in (existing - {method.name}) or name in taken:
            reason = f"wrapper name '{name}' is already taken"
        elif any(p.name.startswith(RESERVED_PREFIX) for p in method.parameters):
            reason = f"parameter names starting with '{RESERVED_PREFIX}' are reserved"
        if reason is not None:
            diagnostics.append(
                Diagnostic(
                    id=WRAPPER_SKIPPED,
                    severity=DiagnosticSeverity.WARNING,
                    message=(
                        f"No logging wrapper generated for {candidate.name}.{method.name}: "
                        f"{reason}."
                    ),
                    location=SourceLocation(path=module.path, line=method.line),
                )
            )
            continue
        taken.add(name)
        emitted.append((name, method))

    writer = _Writer()
    fragment_class = f"_{candidate.qualname.replace('.', '_')}Logging"
    members = (LOGGER_FIELD, LOGGER_SETTER, *(name for name, _ in emitted))
    writer.line(GENERATED_MARKER)
    writer.line(
        f"# Logging fragment for {module.name}.{candidate.qualname}, generated by aoplog "
        f"from {escape_string_literal(module.path)}."
    )
    writer.line("# Do not edit. Run `aoplog generate` again after changing the class.")
    writer.line("from __future__ import annotations")
    writer.blank()
    writer.line(f"import aoplog.runtime as {RUNTIME}")
    writer.blank(2)
    writer.line(f"class {fragment_class}({RUNTIME}.MethodLoggerAware):")
    with writer.indented():
        writer.line(f'"""Logging members merged into {candidate.qualname} by @partial."""')
        writer.blank()
        writer.line(f"{MEMBERS_ATTR} = ({', '.join(escape_string_literal(m) for m in members)},)")
        writer.blank()
        writer.line(f"{LOGGER_FIELD}: {RUNTIME}.MethodLogger | None = None")
        writer.blank()
        writer.line(f"def {LOGGER_SETTER}(self, method_logger: {RUNTIME}.MethodLogger) -> None:")
        with writer.indented():
            writer.line(f"self.{LOGGER_FIELD} = method_logger")
        for name, method in emitted:
            writer.blank()
            _emit_wrapper(writer, candidate.name, name, method)
    writer.blank(2)
    writer.line(f"{FRAGMENT_ATTR} = {fragment_class}")

    source_path = Path(module.path)
    output_dir = source_path.parent.parent if source_path.stem == "__init__" else source_path.parent
    hint_name = fragment_file_name(module.name, candidate.qualname)
    return GeneratedSource(
        hint_name=hint_name,
        module_name=fragment_module_name(module.name, candidate.qualname),
        target=candidate.qualname,
        source_path=module.path,
        output_path=str(output_dir / hint_name),
        wrappers=tuple(name for name, _ in emitted),
        text=writer.text(),
    )


def _emit_wrapper(writer: _Writer, class_name: str, name: str, method: ResolvedMethod) -> None:
    config = method.config
    self_name = method.self_name
    class_literal = escape_string_literal(class_name)
    method_literal = escape_string_literal(name)
    level = _level(config.level)
    returns = f" -> {method.returns}" if method.returns is not None else ""
    def_keyword = "async def" if method.is_async else "def"

    writer.line(f"{def_keyword} {name}({_signature(self_name, method.parameters)}){returns}:")
    with writer.indented():
        for parameter in method.parameters:
            if not parameter.default_is_literal:
                writer.line(f"if {parameter.name} is {RUNTIME}.MISSING:")
                with writer.indented():
                    writer.line(
                        f"{parameter.name} = {RUNTIME}.default_of({self_name}.{method.name}, "
                        f"{escape_string_literal(parameter.name)})"
                    )
        writer.line(f"{_LOGGER} = {self_name}.{LOGGER_FIELD}")
        writer.line(f"if {_LOGGER} is not None:")
        with writer.indented():
            writer.line(f"{_LOGGER}.log_entry(")
            with writer.indented():
                writer.line(f"{class_literal},")
                writer.line(f"{method_literal},")
                writer.line(f"{_parameter_map(method.parameters) if config.log_parameters else '{}'},")
                writer.line(f"{level},")
            writer.line(")")
        if config.log_execution_time:
            writer.line(f"{_STARTED} = {RUNTIME}.start_timer()")
            elapsed = f"{RUNTIME}.elapsed_ms({_STARTED})"
        else:
            elapsed = "0"
        call = f"{self_name}.{method.name}({_call_arguments(method.parameters)})"
        if method.is_async:
            call = f"await {call}"
        if config.log_exceptions:
            writer.line("try:")
            with writer.indented():
                writer.line(f"{_RESULT} = {call}")
            writer.line(f"except Exception as {_ERROR}:")
            with writer.indented():
                writer.line(f"if {_LOGGER} is not None:")
                with writer.indented():
                    writer.line(f"{_LOGGER}.log_exception(")
                    with writer.indented():
                        writer.line(f"{class_literal},")
                        writer.line(f"{method_literal},")
                        writer.line(f"{_ERROR},")
                        writer.line(f"{elapsed},")
                        writer.line(f"{_level(config.effective_exception_level)},")
                    writer.line(")")
                writer.line("raise")
        else:
            writer.line(f"{_RESULT} = {call}")
        writer.line(f"if {_LOGGER} is not None:")
        with writer.indented():
            writer.line(f"{_LOGGER}.log_exit(")
            with writer.indented():
                writer.line(f"{class_literal},")
                writer.line(f"{method_literal},")
                writer.line(f"{_return_value(method)},")
                writer.line(f"{elapsed},")
                writer.line(f"{level},")
            writer.line(")")
        writer.line(f"return {_RESULT}")


def _signature(self_name: str, parameters: tuple[ParameterSpec, ...]) -> str:
    parts = [self_name]
    has_positional_only = any(p.kind == ParameterKind.POSITIONAL_ONLY for p in parameters)
    star_written = False
    for parameter in parameters:
        if has_positional_only and parameter.kind != ParameterKind.POSITIONAL_ONLY:
            parts.append("/")
            has_positional_only = False
        if parameter.kind == ParameterKind.KEYWORD_ONLY and not star_written:
            parts.append("*")
            star_written = True
        prefix = ""
        if parameter.kind == ParameterKind.VAR_POSITIONAL:
            prefix = "*"
            star_written = True
        elif parameter.kind == ParameterKind.VAR_KEYWORD:
            prefix = "**"
        text = f"{prefix}{parameter.name}"
        if parameter.annotation is not None:
            text += f": {parameter.annotation}"
        if parameter.default is not None:
            default = parameter.default if parameter.default_is_literal else f"{RUNTIME}.MISSING"
            text += f" = {default}" if parameter.annotation is not None else f"={default}"
        parts.append(text)
    if has_positional_only:
        parts.append("/")
    return ", ".join(parts)


def _call_arguments(parameters: tuple[ParameterSpec, ...]) -> str:
    arguments = []
    for parameter in parameters:
        if parameter.kind == ParameterKind.VAR_POSITIONAL:
            arguments.append(f"*{parameter.name}")
        elif parameter.kind == ParameterKind.VAR_KEYWORD:
            arguments.append(f"**{parameter.name}")
        elif parameter.kind == ParameterKind.KEYWORD_ONLY:
            arguments.append(f"{parameter.name}={parameter.name}")
        else:
            arguments.append(parameter.name)
    return ", ".join(arguments)


def _parameter_map(parameters: tuple[ParameterSpec, ...]) -> str:
    entries = []
    for parameter in parameters:
        if parameter.skip:
            continue
        key = escape_string_literal(parameter.log_name)
        value = _logged_value(parameter.name, parameter.sensitive, parameter.max_length)
        entries.append(f"{key}: {value}")
    return "{" + ", ".join(entries) + "}"


def _return_value(method: ResolvedMethod) -> str:
    config = method.config
    if not config.log_return_value:
        return "None"
    return _logged_value(_RESULT, config.result_sensitive, config.result_max_length)


def _logged_value(expression: str, sensitive: SensitiveData | None, max_length: int) -> str:
    """Expression logged in place of ``expression``; a sensitive value is never referenced
    except to measure its length."""
    if sensitive is not None:
        mask = escape_string_literal(sensitive.mask_value)
        if sensitive.show_length:
            return f"{RUNTIME}.mask_with_length({mask}, {expression})"
        return mask
    if max_length >= 0:
        return f"{RUNTIME}.truncate({expression}, {max_length})"
    return expression


def _level(level: LogLevel) -> str:
    return f"{RUNTIME}.LogLevel.{level.name}"


class _Writer:
    def __init__(self) -> None:
        self._lines: list[str] = []
        self._depth = 0

    def line(self, text: str) -> None:
        self._lines.append(f"{INDENT * self._depth}{text}")

    def blank(self, count: int = 1) -> None:
        self._lines.extend([""] * count)

    def indented(self) -> _Indent:
        return _Indent(self)

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"


class _Indent:
    def __init__(self, writer: _Writer) -> None:
        self._writer = writer

    def __enter__(self) -> None:
        self._writer._depth += 1

    def __exit__(self, *exc_info: object) -> None:
        self._writer._depth -= 1
