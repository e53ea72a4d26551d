# tests/conftest.py
"""
Fixtures compartilhados para testes do Shipinator.

Fornecem documentos YAML como strings (pipeline e configuração de runtime)
para que os testes controlem explicitamente quando há acesso a filesystem
(`tmp_path`) e a ambiente (mapping `environ` explícito ou `monkeypatch`).

Invariantes:
    - Nenhuma fixture lê o ambiente real do processo
    - Nenhuma fixture escreve fora de `tmp_path`
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_shipinator_logger():
    """
    Restaura o logger `shipinator` após cada teste.

    `configure_logging` desliga a propagação para o root; sem este reset,
    testes posteriores que usam `caplog` deixariam de capturar registros.
    """
    yield
    logger = logging.getLogger("shipinator")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# =====================================================
# Pipeline document fixtures
# =====================================================

@pytest.fixture
def full_pipeline_yaml() -> str:
    """Documento com as três seções e todos os tipos de discriminador."""
    return """\
build:
  steps:
    - name: go-build
      run: go build ./...
      outputs:
        - type: binary
          path: bin/shipinator
    - name: image
      run: docker build -t registry.local/shipinator:dev .
      outputs:
        - type: oci_image
          ref: registry.local/shipinator:dev
        - type: helm_chart
          path: deploy/chart
test:
  steps:
    - name: unit
      run: go test ./...
      parallel: true
      artifacts:
        - type: coverage
          path: coverage.out
        - type: test_report
          path: report.xml
    - name: lint
      run: golangci-lint run
deploy:
  artifact: helm_chart
  target: prod-cluster
  namespace: shipinator
"""


@pytest.fixture
def build_only_yaml() -> str:
    return """\
build:
  steps:
    - name: go-build
      run: go build ./...
"""


# =====================================================
# Runtime config fixtures
# =====================================================

@pytest.fixture
def runtime_config_yaml() -> str:
    """Arquivo de configuração que sobrescreve parte das chaves."""
    return """\
listen_addr: ":9090"
db:
  host: db.internal
  port: 6432
  name: fromyaml
log_level: debug
"""


@pytest.fixture
def no_config_dirs(tmp_path):
    """Diretórios de descoberta vazios (nenhum config.yaml encontrado)."""
    empty = tmp_path / "empty"
    empty.mkdir()
    return (str(empty),)
