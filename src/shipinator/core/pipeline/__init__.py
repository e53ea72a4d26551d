"""Shipinator: Pipeline (core).

Componentes canônicos do documento de pipeline (`.shipinator.yaml`):
 - parsing YAML estrito
 - validação estrutural e por discriminador
 - hashing canônico
"""

from .errors import (  # noqa: F401
    PipelineError,
    PipelineParseError,
    PipelineSourceError,
    PipelineValidationError,
)

from .hashing import compute_pipeline_hash  # noqa: F401
from .loader import dump_pipeline, load_pipeline, load_pipeline_file  # noqa: F401
from .schema import (  # noqa: F401
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
