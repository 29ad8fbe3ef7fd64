"""In-process execution of functions, sources and sinks.

A local run needs no admin client. The function definition comes from a
YAML file (the same layout the cluster accepts) with CLI overrides on top,
and ``className`` names a Python callable as ``module:attr`` or
``module.attr``:

- functions are called once per input record; non-None results are emitted
- sinks are called once per input record; results are ignored
- sources are called once with no arguments and every yielded record is emitted
"""

import importlib
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, Literal, TextIO

import yaml
from pydantic import ValidationError

from admintool.errors import LocalRunError
from admintool.logging import get_logger
from admintool.models import FunctionConfig

logger = get_logger(__name__)

ComponentKind = Literal['function', 'source', 'sink']


def load_function_config(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> FunctionConfig:
    """Load a function definition from YAML and apply non-None overrides."""
    data: dict[str, Any] = {}
    if config_path is not None:
        logger.debug('loading_function_config', config=str(config_path))
        try:
            with config_path.open() as fh:
                loaded = yaml.safe_load(fh) or {}
        except OSError as exc:
            msg = f'cannot read function config {config_path}: {exc.strerror or exc}'
            raise LocalRunError(msg) from exc
        except yaml.YAMLError as exc:
            msg = f'failed to parse YAML: {exc}'
            raise LocalRunError(msg) from exc
        if not isinstance(loaded, dict):
            msg = f'function config root must be a mapping in {config_path}'
            raise LocalRunError(msg)
        data.update(loaded)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return FunctionConfig.model_validate(data)
    except ValidationError as exc:
        fields = ', '.join('.'.join(str(part) for part in error['loc']) for error in exc.errors())
        msg = f'invalid function config ({fields})'
        raise LocalRunError(msg) from exc


def load_callable(class_name: str) -> Callable[..., Any]:
    """Import ``module:attr`` or ``module.attr`` and return the callable."""
    if ':' in class_name:
        module_name, _, attr_path = class_name.partition(':')
    else:
        module_name, _, attr_path = class_name.rpartition('.')
    if not module_name or not attr_path:
        msg = f'class name must be "module:attr" or "module.attr": {class_name}'
        raise LocalRunError(msg)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f'cannot import {module_name}: {exc}'
        raise LocalRunError(msg) from exc

    for attr in attr_path.split('.'):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            msg = f'{module_name} has no attribute {attr_path}'
            raise LocalRunError(msg) from exc

    if isinstance(target, type):
        target = target()
    if not callable(target):
        msg = f'{class_name} is not callable'
        raise LocalRunError(msg)
    return target


class LocalRunner:
    """Runs one component against text records."""

    def __init__(self, config: FunctionConfig, kind: ComponentKind, handler: Callable[..., Any] | None = None) -> None:
        self.config = config
        self.kind = kind
        self.handler = handler or load_callable(config.class_name)

    def _call(self, *args: str) -> Any:
        try:
            return self.handler(*args)
        except Exception as exc:  # noqa: BLE001 - user code boundary
            msg = f'{self.kind} {self.config.fully_qualified_name} failed: {type(exc).__name__}: {exc}'
            raise LocalRunError(msg) from exc

    def run(self, records: Iterable[str], output: TextIO) -> int:
        """Process records, returning how many were emitted or consumed."""
        logger.info(
            'local_run_started',
            kind=self.kind,
            name=self.config.fully_qualified_name,
            _verbose_inputs=self.config.inputs,
        )
        if self.kind == 'source':
            count = 0
            for record in self._call():
                output.write(f'{record}\n')
                count += 1
            logger.info('local_run_finished', kind=self.kind, records=count)
            return count

        count = 0
        for raw in records:
            record = raw.rstrip('\n')
            if not record:
                continue
            result = self._call(record)
            count += 1
            if self.kind == 'function' and result is not None:
                output.write(f'{result}\n')
        logger.info('local_run_finished', kind=self.kind, records=count)
        return count
