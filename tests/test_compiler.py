"""
Тесты компиляции под основную и дополнительную среду
"""

from pathlib import Path

import pytest

from swagger_packager.config import PackagerConfig
from swagger_packager.internal.generator import compiler
from swagger_packager.internal.generator.compiler import (
    CORE_TOOLCHAIN_NAME,
    DualRuntimeCompiler,
    artifact_path,
    is_compilation_successful,
    resolve_core_toolchain,
)
from swagger_packager.internal.types.errors import CompilationError, NotFoundError
from swagger_packager.internal.types.models import (
    GenerationRequest,
    GeneratorVariant,
    RuntimeTarget,
    SwaggerInfo,
    SwaggerMetaDict,
)

from conftest import FakeRunner


def make_meta(output_dir: Path, variant=GeneratorVariant.STANDARD) -> SwaggerMetaDict:
    info = SwaggerInfo(name="PetStore", version="1.0.0", namespace="Contoso.Pets")
    return SwaggerMetaDict(
        info=info,
        namespace="Contoso.Pets",
        output_directory=output_dir,
        generator_variant=variant,
    )


def make_request(output_dir: Path, **kwargs) -> GenerationRequest:
    return GenerationRequest(
        spec_path="spec.json", output_directory=output_dir, name="PetStore", **kwargs
    )


class TestSuccessMarker:
    """Тесты разбора вывода компилятора"""

    @pytest.mark.parametrize(
        "output",
        ["True", "Compiling\nTrue", "done\t  True\n", "warning CS0168\r\nTrue\r\n", "xTrue"],
    )
    def test_success(self, output):
        """Тест успешного маркера"""
        assert is_compilation_successful(output) is True

    @pytest.mark.parametrize(
        "output", ["", "   \n", "False", "True\nFalse", "true", "True error"]
    )
    def test_failure(self, output):
        """Тест отсутствия маркера успеха"""
        assert is_compilation_successful(output) is False


class TestArtifactPath:
    def test_layout(self):
        """Тест расположения сборки ref/<tag>/<namespace>.dll"""
        assert artifact_path(Path("/out"), RuntimeTarget.CORE, "Contoso.Pets") == Path(
            "/out/ref/coreclr/Contoso.Pets.dll"
        )


class TestResolveCoreToolchain:
    """Тесты поиска компилятора дополнительной среды"""

    def test_directory_appends_executable(self, tmp_path):
        """Тест: для директории добавляется имя исполняемого файла"""
        executable = tmp_path / CORE_TOOLCHAIN_NAME
        executable.write_text("")

        assert resolve_core_toolchain(tmp_path) == executable

    def test_missing_executable(self, tmp_path):
        """Тест отсутствующего компилятора"""
        with pytest.raises(NotFoundError) as exc_info:
            resolve_core_toolchain(tmp_path)

        assert exc_info.value.message_id == "toolchain_not_found"


class TestDualRuntimeCompiler:
    """Тесты компилятора"""

    def test_skipped_with_no_assembly(self, output_dir):
        """Тест: компиляция пропускается при no_assembly"""
        runner = FakeRunner()
        artifacts = DualRuntimeCompiler(runner).compile(
            [], make_meta(output_dir), make_request(output_dir, no_assembly=True)
        )

        assert artifacts == []
        assert runner.calls == []

    def test_primary_arguments(self, output_dir):
        """Тест аргументов основной компиляции"""
        runner = FakeRunner()
        config = PackagerConfig(primary_toolchain="powershell", compile_script="compile.ps1")
        files = [Path("/gen/a.cs"), Path("/gen/b.cs")]

        artifacts = DualRuntimeCompiler(runner, config).compile(
            files,
            make_meta(output_dir, GeneratorVariant.AZURE),
            make_request(output_dir, disable_optimization=True),
        )

        expected_path = output_dir / "ref" / "fullclr" / "Contoso.Pets.dll"
        assert runner.compiler_calls == [
            [
                "powershell",
                "-NoProfile",
                "-NonInteractive",
                "-File",
                "compile.ps1",
                "-OutputAssemblyPath",
                str(expected_path),
                "-SourceFilePaths",
                f"{Path('/gen/a.cs')},{Path('/gen/b.cs')}",
                "-CodeCreatedByAzureGenerator",
                "-ClientRuntimeVersion",
                "3.3.4",
                "-DisableOptimization",
            ]
        ]
        assert [a.target for a in artifacts] == [RuntimeTarget.FULL]
        assert artifacts[0].path == expected_path

    def test_existing_artifact_removed(self, output_dir):
        """Тест: старая сборка удаляется перед компиляцией"""
        stale = artifact_path(output_dir, RuntimeTarget.FULL, "Contoso.Pets")
        stale.parent.mkdir(parents=True)
        stale.write_bytes(b"stale")
        runner = FakeRunner(compiler_output="False")

        with pytest.raises(CompilationError):
            DualRuntimeCompiler(runner).compile([], make_meta(output_dir), make_request(output_dir))

        assert not stale.exists()

    def test_failure_names_artifact(self, output_dir):
        """Тест: ошибка компиляции содержит путь к сборке"""
        runner = FakeRunner(compiler_output="error CS1002\nFalse")

        with pytest.raises(CompilationError) as exc_info:
            DualRuntimeCompiler(runner).compile([], make_meta(output_dir), make_request(output_dir))

        expected_path = artifact_path(output_dir, RuntimeTarget.FULL, "Contoso.Pets")
        assert exc_info.value.path == expected_path
        assert str(expected_path) in str(exc_info.value)

    def test_secondary_runtime(self, output_dir, tmp_path):
        """Тест: дополнительная среда без версии зависимости и без отключения оптимизаций"""
        toolchain_dir = tmp_path / "pwsh-install"
        toolchain_dir.mkdir()
        (toolchain_dir / CORE_TOOLCHAIN_NAME).write_text("")
        runner = FakeRunner()

        artifacts = DualRuntimeCompiler(runner).compile(
            [Path("/gen/a.cs")],
            make_meta(output_dir),
            make_request(
                output_dir, core_toolchain_path=toolchain_dir, disable_optimization=True
            ),
        )

        assert [a.target for a in artifacts] == [RuntimeTarget.FULL, RuntimeTarget.CORE]
        primary, secondary = runner.compiler_calls
        assert "-ClientRuntimeVersion" in primary
        assert "-DisableOptimization" in primary
        assert secondary[0] == str(toolchain_dir / CORE_TOOLCHAIN_NAME)
        assert "-ClientRuntimeVersion" not in secondary
        assert "-DisableOptimization" not in secondary
        assert secondary[secondary.index("-OutputAssemblyPath") + 1] == str(
            output_dir / "ref" / "coreclr" / "Contoso.Pets.dll"
        )

    def test_secondary_failure(self, output_dir, tmp_path):
        """Тест: отсутствующий компилятор дополнительной среды"""
        runner = FakeRunner()

        with pytest.raises(NotFoundError):
            DualRuntimeCompiler(runner).compile(
                [],
                make_meta(output_dir),
                make_request(output_dir, core_toolchain_path=tmp_path / "missing"),
            )

        # Основная сборка уже скомпилирована
        assert len(runner.compiler_calls) == 1

    def test_core_runtime_from_search_path(self, output_dir, tmp_path, monkeypatch):
        """Тест: компилятор дополнительной среды ищется в PATH"""
        executable = tmp_path / CORE_TOOLCHAIN_NAME
        executable.write_text("")
        monkeypatch.setattr(
            compiler.shutil,
            "which",
            lambda name: str(executable) if name == CORE_TOOLCHAIN_NAME else None,
        )
        runner = FakeRunner()

        artifacts = DualRuntimeCompiler(runner).compile(
            [Path("/gen/a.cs")],
            make_meta(output_dir),
            make_request(output_dir, include_core_runtime=True),
        )

        assert [a.target for a in artifacts] == [RuntimeTarget.FULL, RuntimeTarget.CORE]
        assert artifacts[1].toolchain == str(executable)
        assert runner.compiler_calls[1][0] == str(executable)

    def test_core_runtime_missing_from_search_path(self, output_dir, monkeypatch):
        """Тест: компилятор дополнительной среды не найден в PATH"""
        monkeypatch.setattr(compiler.shutil, "which", lambda name: None)
        runner = FakeRunner()

        with pytest.raises(NotFoundError) as exc_info:
            DualRuntimeCompiler(runner).compile(
                [Path("/gen/a.cs")],
                make_meta(output_dir),
                make_request(output_dir, include_core_runtime=True),
            )

        assert exc_info.value.message_id == "toolchain_not_found"
        assert CORE_TOOLCHAIN_NAME in str(exc_info.value)
        assert len(runner.compiler_calls) == 1

    def test_disable_optimization_reaches_compiler(self):
        """Тест: скрипт компиляции передает компилятору опции без оптимизаций"""
        script = PackagerConfig().compile_script_path.read_text(encoding="utf-8")

        assert "$DisableOptimization" in script
        assert "/optimize-" in script
        assert "CompilerParameters" in script
        assert "CompilerOptions" in script
