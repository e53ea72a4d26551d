"""
Schema canônico: Pipeline Document v1 (`.shipinator.yaml`).

O documento declara até três seções (`build`, `test`, `deploy`). Este módulo
materializa o YAML já desserializado em dataclasses imutáveis e aplica as
regras estruturais e condicionais antes que qualquer consumidor confie no
documento.

Fases:
    - parse_pipeline    → decodificação estrita (campos desconhecidos e tipos
                          incorretos geram PipelineParseError)
    - validate_pipeline → regras estruturais e de discriminador
                          (PipelineValidationError com o caminho do campo)

Regras de discriminador são dirigidas por tabela: o valor de `type`
(ou `artifact`) seleciona o conjunto de campos irmãos obrigatórios. Campos
não listados para o discriminador são mantidos, mas ignorados.

Limites explícitos:
    - Não executa steps
    - Não armazena artefatos
    - Não interpreta `target`/`namespace` (identificadores opacos)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import PipelineParseError, PipelineValidationError


BUILD_OUTPUT_REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "binary": ("path",),
    "oci_image": ("ref",),
    "helm_chart": ("path",),
}

TEST_ARTIFACT_REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "coverage": ("path",),
    "test_report": ("path",),
}

# deploy consome um output de build: mesmo domínio de tipos
DEPLOY_REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    kind: ("target", "namespace") for kind in BUILD_OUTPUT_REQUIRED_FIELDS
}

DEPLOY_ARTIFACT_KINDS = frozenset(DEPLOY_REQUIRED_FIELDS)

_SECTIONS = ("build", "test", "deploy")

# O loader entrega escalares como texto; apenas as formas YAML 1.2 contam.
_BOOL_WORDS = {
    "true": True, "True": True, "TRUE": True,
    "false": False, "False": False, "FALSE": False,
}


# ---------------------------------------------------------------------------
# Tipos
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildOutput:
    type: str
    path: str = ""
    ref: str = ""

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type}
        if self.path:
            out["path"] = self.path
        if self.ref:
            out["ref"] = self.ref
        return out


@dataclass(frozen=True)
class BuildStep:
    name: str
    run: str
    outputs: Tuple[BuildOutput, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "run": self.run,
            "outputs": [o.to_dict() for o in self.outputs],
        }


@dataclass(frozen=True)
class BuildSpec:
    """Sequência ordenada de steps de build (a ordem é a ordem de execução)."""

    steps: Tuple[BuildStep, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"steps": [s.to_dict() for s in self.steps]}


@dataclass(frozen=True)
class TestArtifact:
    __test__ = False

    type: str
    path: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "path": self.path}


@dataclass(frozen=True)
class TestStep:
    """Step de teste. `parallel` é apenas consultivo para o executor."""

    __test__ = False

    name: str
    run: str
    parallel: bool = False
    artifacts: Tuple[TestArtifact, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "run": self.run,
            "parallel": self.parallel,
            "artifacts": [a.to_dict() for a in self.artifacts],
        }


@dataclass(frozen=True)
class TestSpec:
    __test__ = False

    steps: Tuple[TestStep, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"steps": [s.to_dict() for s in self.steps]}


@dataclass(frozen=True)
class DeploySpec:
    artifact: str
    target: str
    namespace: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "artifact": self.artifact,
            "target": self.target,
            "namespace": self.namespace,
        }


@dataclass(frozen=True)
class PipelineDocument:
    """Representação interna explícita do documento de pipeline."""

    build: Optional[BuildSpec] = None
    test: Optional[TestSpec] = None
    deploy: Optional[DeploySpec] = None

    @property
    def sections(self) -> List[str]:
        return [name for name in _SECTIONS if getattr(self, name) is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name).to_dict() for name in self.sections}


# ---------------------------------------------------------------------------
# Parse estrito
# ---------------------------------------------------------------------------

def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise PipelineParseError(f"{path or 'document'} must be a mapping, got {type(value).__name__}")
    return value


def _reject_unknown(data: Mapping[str, Any], allowed: Tuple[str, ...], path: str) -> None:
    for key in data:
        if key not in allowed:
            raise PipelineParseError(f"unknown field {_join(path, str(key))!r}")


def _string(data: Mapping[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PipelineParseError(
            f"{_join(path, key)} must be a string, got {type(value).__name__}"
        )
    return value


def _boolean(data: Mapping[str, Any], key: str, path: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if isinstance(value, str) and value in _BOOL_WORDS:
        return _BOOL_WORDS[value]
    if not isinstance(value, bool):
        raise PipelineParseError(
            f"{_join(path, key)} must be a boolean, got {type(value).__name__}"
        )
    return value


def _sequence(data: Mapping[str, Any], key: str, path: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PipelineParseError(
            f"{_join(path, key)} must be a list, got {type(value).__name__}"
        )
    return value


def _parse_build(raw: Any) -> BuildSpec:
    data = _mapping(raw, "build")
    _reject_unknown(data, ("steps",), "build")

    steps = []
    for i, raw_step in enumerate(_sequence(data, "steps", "build")):
        path = f"build.steps[{i}]"
        step = _mapping(raw_step, path)
        _reject_unknown(step, ("name", "run", "outputs"), path)

        outputs = []
        for j, raw_output in enumerate(_sequence(step, "outputs", path)):
            opath = f"{path}.outputs[{j}]"
            output = _mapping(raw_output, opath)
            _reject_unknown(output, ("type", "path", "ref"), opath)
            outputs.append(
                BuildOutput(
                    type=_string(output, "type", opath),
                    path=_string(output, "path", opath),
                    ref=_string(output, "ref", opath),
                )
            )

        steps.append(
            BuildStep(
                name=_string(step, "name", path),
                run=_string(step, "run", path),
                outputs=tuple(outputs),
            )
        )
    return BuildSpec(steps=tuple(steps))


def _parse_test(raw: Any) -> TestSpec:
    data = _mapping(raw, "test")
    _reject_unknown(data, ("steps",), "test")

    steps = []
    for i, raw_step in enumerate(_sequence(data, "steps", "test")):
        path = f"test.steps[{i}]"
        step = _mapping(raw_step, path)
        _reject_unknown(step, ("name", "run", "parallel", "artifacts"), path)

        artifacts = []
        for j, raw_artifact in enumerate(_sequence(step, "artifacts", path)):
            apath = f"{path}.artifacts[{j}]"
            artifact = _mapping(raw_artifact, apath)
            _reject_unknown(artifact, ("type", "path"), apath)
            artifacts.append(
                TestArtifact(
                    type=_string(artifact, "type", apath),
                    path=_string(artifact, "path", apath),
                )
            )

        steps.append(
            TestStep(
                name=_string(step, "name", path),
                run=_string(step, "run", path),
                parallel=_boolean(step, "parallel", path),
                artifacts=tuple(artifacts),
            )
        )
    return TestSpec(steps=tuple(steps))


def _parse_deploy(raw: Any) -> DeploySpec:
    data = _mapping(raw, "deploy")
    _reject_unknown(data, ("artifact", "target", "namespace"), "deploy")
    return DeploySpec(
        artifact=_string(data, "artifact", "deploy"),
        target=_string(data, "target", "deploy"),
        namespace=_string(data, "namespace", "deploy"),
    )


def parse_pipeline(data: Any) -> PipelineDocument:
    """Decodifica um mapping (YAML já carregado) em `PipelineDocument`.

    Seções com valor `null` são tratadas como ausentes. Não aplica as regras
    de validação: use `validate_pipeline` (ou `load_pipeline`, que faz ambos).

    Raises:
        PipelineParseError: raiz não é mapping, campo desconhecido ou tipo incorreto.
    """
    root = _mapping(data, "")
    _reject_unknown(root, _SECTIONS, "")

    build = root.get("build")
    test = root.get("test")
    deploy = root.get("deploy")

    return PipelineDocument(
        build=_parse_build(build) if build is not None else None,
        test=_parse_test(test) if test is not None else None,
        deploy=_parse_deploy(deploy) if deploy is not None else None,
    )


# ---------------------------------------------------------------------------
# Validação
# ---------------------------------------------------------------------------

def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _expect(cond: bool, msg: str, field_path: str) -> None:
    if not cond:
        raise PipelineValidationError(f"{field_path}: {msg}", field_path=field_path)


def _validate_discriminated(
    obj: Any,
    *,
    tag: str,
    table: Mapping[str, Tuple[str, ...]],
    path: str,
) -> None:
    tag_path = _join(path, tag)
    value = getattr(obj, tag)
    _expect(_is_non_empty_str(value), "is required", tag_path)
    _expect(value in table, f"must be one of {sorted(table)}, got {value!r}", tag_path)

    for name in table[value]:
        _expect(
            _is_non_empty_str(getattr(obj, name)),
            f"is required when {tag} is {value!r}",
            _join(path, name),
        )


def _validate_step(step: Any, path: str) -> None:
    _expect(_is_non_empty_str(step.name), "is required", f"{path}.name")
    _expect(_is_non_empty_str(step.run), "is required", f"{path}.run")


def validate_pipeline(doc: PipelineDocument) -> PipelineDocument:
    """Valida e devolve o mesmo documento.

    Regras (na ordem do documento, primeira falha interrompe):
        - ao menos uma de build/test/deploy
        - build.steps e test.steps com ao menos um step
        - name/run não vazios em todo step
        - outputs, artifacts e deploy conforme as tabelas de discriminador

    Raises:
        PipelineValidationError: com `field_path` do campo ofensor.
    """
    if not doc.sections:
        raise PipelineValidationError(
            "pipeline must define at least one of: build, test, deploy",
            field_path="",
        )

    if doc.build is not None:
        _expect(len(doc.build.steps) >= 1, "must contain at least one step", "build.steps")
        for i, step in enumerate(doc.build.steps):
            path = f"build.steps[{i}]"
            _validate_step(step, path)
            for j, output in enumerate(step.outputs):
                _validate_discriminated(
                    output,
                    tag="type",
                    table=BUILD_OUTPUT_REQUIRED_FIELDS,
                    path=f"{path}.outputs[{j}]",
                )

    if doc.test is not None:
        _expect(len(doc.test.steps) >= 1, "must contain at least one step", "test.steps")
        for i, step in enumerate(doc.test.steps):
            path = f"test.steps[{i}]"
            _validate_step(step, path)
            for j, artifact in enumerate(step.artifacts):
                _validate_discriminated(
                    artifact,
                    tag="type",
                    table=TEST_ARTIFACT_REQUIRED_FIELDS,
                    path=f"{path}.artifacts[{j}]",
                )

    if doc.deploy is not None:
        _validate_discriminated(
            doc.deploy,
            tag="artifact",
            table=DEPLOY_REQUIRED_FIELDS,
            path="deploy",
        )

    return doc
