# tests/core/pipeline/test_pipeline_schema.py
"""
Testes do schema do documento de pipeline.

Cobrem as duas fases separadamente:
- parse_pipeline: decodificação estrita (campos desconhecidos, tipos)
- validate_pipeline: regras estruturais e tabelas de discriminador

Invariantes:
    - Toda falha de validação identifica o caminho do campo ofensor
    - Campos irrelevantes para o discriminador são ignorados, não rejeitados
"""

import dataclasses

import pytest

from shipinator.core.pipeline.errors import PipelineParseError, PipelineValidationError
from shipinator.core.pipeline.schema import (
    BUILD_OUTPUT_REQUIRED_FIELDS,
    DEPLOY_ARTIFACT_KINDS,
    TEST_ARTIFACT_REQUIRED_FIELDS,
    BuildOutput,
    BuildSpec,
    BuildStep,
    DeploySpec,
    PipelineDocument,
    TestArtifact,
    TestSpec,
    TestStep,
    parse_pipeline,
    validate_pipeline,
)


def _build_with_output(**output) -> dict:
    return {"build": {"steps": [{"name": "b", "run": "make", "outputs": [output]}]}}


def _test_with_artifact(**artifact) -> dict:
    return {"test": {"steps": [{"name": "t", "run": "make test", "artifacts": [artifact]}]}}


def _validate(data: dict) -> PipelineDocument:
    return validate_pipeline(parse_pipeline(data))


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

def test_parse_materializes_immutable_tuples():
    doc = parse_pipeline(_build_with_output(type="binary", path="bin/app"))

    assert doc.build == BuildSpec(
        steps=(BuildStep(name="b", run="make", outputs=(BuildOutput(type="binary", path="bin/app"),)),)
    )
    assert doc.test is None
    assert doc.deploy is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        doc.build = None  # type: ignore[misc]


def test_parse_null_section_is_absent():
    doc = parse_pipeline({"build": None, "deploy": {"artifact": "binary", "target": "t", "namespace": "n"}})
    assert doc.build is None
    assert doc.sections == ["deploy"]


def test_parse_defaults_for_optional_fields():
    doc = parse_pipeline({"test": {"steps": [{"name": "t", "run": "r"}]}})
    step = doc.test.steps[0]
    assert step.parallel is False
    assert step.artifacts == ()


@pytest.mark.parametrize(
    "data, where",
    [
        ({"biuld": {"steps": []}}, "biuld"),
        ({"build": {"steps": [], "cache": True}}, "build.cache"),
        ({"build": {"steps": [{"name": "b", "run": "r", "env": {}}]}}, "build.steps[0].env"),
        (_build_with_output(type="binary", path="p", digest="x"), "build.steps[0].outputs[0].digest"),
        (_test_with_artifact(type="coverage", path="c", format="lcov"), "test.steps[0].artifacts[0].format"),
        ({"deploy": {"artifact": "binary", "target": "t", "namespace": "n", "region": "eu"}}, "deploy.region"),
    ],
)
def test_parse_rejects_unknown_fields(data, where):
    with pytest.raises(PipelineParseError) as exc:
        parse_pipeline(data)
    assert where in str(exc.value)


@pytest.mark.parametrize(
    "data",
    [
        ["build"],
        "build",
        {"build": ["steps"]},
        {"build": {"steps": {"name": "b"}}},
        {"build": {"steps": [{"name": 12, "run": "r"}]}},
        {"build": {"steps": [{"name": "b", "run": ["go", "build"]}]}},
        {"build": {"steps": ["go build"]}},
        {"test": {"steps": [{"name": "t", "run": "r", "parallel": "yes please"}]}},
        {"deploy": {"artifact": 1, "target": "t", "namespace": "n"}},
    ],
)
def test_parse_rejects_wrong_types(data):
    with pytest.raises(PipelineParseError):
        parse_pipeline(data)


# ---------------------------------------------------------------------------
# validate: estrutura
# ---------------------------------------------------------------------------

def test_empty_document_fails_validation():
    with pytest.raises(PipelineValidationError, match="at least one of: build, test, deploy"):
        validate_pipeline(PipelineDocument())


@pytest.mark.parametrize("section", ["build", "test"])
def test_section_without_steps_fails(section):
    with pytest.raises(PipelineValidationError) as exc:
        _validate({section: {"steps": []}})
    assert exc.value.field_path == f"{section}.steps"


def test_section_with_null_steps_fails():
    with pytest.raises(PipelineValidationError) as exc:
        _validate({"build": {}})
    assert exc.value.field_path == "build.steps"


@pytest.mark.parametrize(
    "step, field_path",
    [
        ({"run": "make"}, "build.steps[1].name"),
        ({"name": "b2"}, "build.steps[1].run"),
        ({"name": "   ", "run": "make"}, "build.steps[1].name"),
        ({"name": "b2", "run": ""}, "build.steps[1].run"),
    ],
)
def test_step_name_and_run_required(step, field_path):
    data = {"build": {"steps": [{"name": "b1", "run": "make"}, step]}}
    with pytest.raises(PipelineValidationError) as exc:
        _validate(data)
    assert exc.value.field_path == field_path
    assert field_path in str(exc.value)


def test_test_step_name_required():
    with pytest.raises(PipelineValidationError) as exc:
        _validate({"test": {"steps": [{"run": "pytest"}]}})
    assert exc.value.field_path == "test.steps[0].name"


def test_first_failure_in_document_order_is_reported():
    data = {
        "build": {"steps": [{"name": "", "run": "make"}]},
        "deploy": {"artifact": "nope", "target": "", "namespace": ""},
    }
    with pytest.raises(PipelineValidationError) as exc:
        _validate(data)
    assert exc.value.field_path == "build.steps[0].name"


# ---------------------------------------------------------------------------
# validate: discriminadores
# ---------------------------------------------------------------------------

def test_discriminator_tables():
    assert set(BUILD_OUTPUT_REQUIRED_FIELDS) == {"binary", "oci_image", "helm_chart"}
    assert set(TEST_ARTIFACT_REQUIRED_FIELDS) == {"coverage", "test_report"}
    assert DEPLOY_ARTIFACT_KINDS == frozenset(BUILD_OUTPUT_REQUIRED_FIELDS)


def test_oci_image_requires_ref():
    with pytest.raises(PipelineValidationError) as exc:
        _validate(_build_with_output(type="oci_image", path="ignored"))
    assert exc.value.field_path == "build.steps[0].outputs[0].ref"


def test_oci_image_with_ref_and_no_path_is_valid():
    doc = _validate(_build_with_output(type="oci_image", ref="registry/app:1"))
    assert doc.build.steps[0].outputs[0].path == ""


@pytest.mark.parametrize("output_type", ["binary", "helm_chart"])
def test_path_required_for_file_outputs(output_type):
    with pytest.raises(PipelineValidationError) as exc:
        _validate(_build_with_output(type=output_type, ref="registry/app:1"))
    assert exc.value.field_path == "build.steps[0].outputs[0].path"


def test_output_with_both_path_and_ref_is_accepted():
    doc = _validate(_build_with_output(type="binary", path="bin/app", ref="unused"))
    assert doc.build.steps[0].outputs[0].ref == "unused"


@pytest.mark.parametrize("output_type", ["", "tarball", "OCI_IMAGE"])
def test_output_type_outside_enumeration_fails(output_type):
    data = _build_with_output(type=output_type, path="p", ref="r")
    with pytest.raises(PipelineValidationError) as exc:
        _validate(data)
    assert exc.value.field_path == "build.steps[0].outputs[0].type"


@pytest.mark.parametrize("artifact_type", ["coverage", "test_report"])
def test_artifact_path_always_required(artifact_type):
    with pytest.raises(PipelineValidationError) as exc:
        _validate(_test_with_artifact(type=artifact_type))
    assert exc.value.field_path == "test.steps[0].artifacts[0].path"


def test_artifact_type_outside_enumeration_fails():
    with pytest.raises(PipelineValidationError) as exc:
        _validate(_test_with_artifact(type="junit", path="report.xml"))
    assert exc.value.field_path == "test.steps[0].artifacts[0].type"


@pytest.mark.parametrize("artifact", sorted(DEPLOY_ARTIFACT_KINDS))
def test_deploy_accepts_every_build_output_kind(artifact):
    doc = _validate({"deploy": {"artifact": artifact, "target": "prod", "namespace": "default"}})
    assert doc.deploy == DeploySpec(artifact=artifact, target="prod", namespace="default")


@pytest.mark.parametrize(
    "deploy, field_path",
    [
        ({"target": "prod", "namespace": "default"}, "deploy.artifact"),
        ({"artifact": "coverage", "target": "prod", "namespace": "default"}, "deploy.artifact"),
        ({"artifact": "binary", "namespace": "default"}, "deploy.target"),
        ({"artifact": "binary", "target": "prod"}, "deploy.namespace"),
    ],
)
def test_deploy_rules(deploy, field_path):
    with pytest.raises(PipelineValidationError) as exc:
        _validate({"deploy": deploy})
    assert exc.value.field_path == field_path


def test_validate_returns_same_document():
    doc = PipelineDocument(
        test=TestSpec(steps=(TestStep(name="t", run="r", artifacts=(TestArtifact(type="coverage", path="c"),)),))
    )
    assert validate_pipeline(doc) is doc


def test_to_dict_omits_empty_optional_output_fields():
    output = BuildOutput(type="oci_image", ref="registry/app:1")
    assert output.to_dict() == {"type": "oci_image", "ref": "registry/app:1"}
