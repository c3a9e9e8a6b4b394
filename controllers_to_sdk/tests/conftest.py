from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from controllers_to_sdk.pipeline import SdkGeneratorConfig
from controllers_to_sdk.pipeline.source_ast import PythonSourceAst

TEST_DATA = Path(__file__).parent / "test_data"

DECORATORS = """
def Module(controllers=()): ...
def Controller(name=None): ...
def Get(path=""): ...
def Post(path=""): ...
def Put(path=""): ...
def Patch(path=""): ...
def Delete(path=""): ...
def Param(key=None): ...
def Query(key=None): ...
def Body(key=None): ...
"""


@pytest.fixture
def sample_api() -> Path:
    return TEST_DATA / "sample_api"


@pytest.fixture
def sample_source(sample_api) -> PythonSourceAst:
    return PythonSourceAst(sample_api)


@pytest.fixture
def make_api(tmp_path):
    """Write an API source tree and return a source reader over it."""

    def _make_api(files: dict[str, str], **kwargs) -> PythonSourceAst:
        root = tmp_path / "api"
        root.mkdir(exist_ok=True)
        (root / "decorators.py").write_text(DECORATORS)
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content))
        return PythonSourceAst(root, **kwargs)

    return _make_api


@pytest.fixture
def make_config(tmp_path):
    """Build a generator config writing under tmp_path."""

    def _make_config(api_path: Path, **overrides) -> SdkGeneratorConfig:
        data = {
            "api_input_path": str(api_path),
            "sdk_output_path": str(tmp_path / "sdk"),
            "sdk_interface_path": str(tmp_path / "sdk-interface.ts"),
            "generate_timestamps": False,
            "formatter": {"enabled": False},
        }
        data.update(overrides)
        return SdkGeneratorConfig.from_dict(data)

    return _make_config
