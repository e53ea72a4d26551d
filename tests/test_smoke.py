# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do Shipinator.

Garantem que o pacote importa e que os pontos de entrada públicos existem.
Não validam comportamento de domínio.
"""


def test_smoke():
    import shipinator
    from shipinator import cli
    from shipinator.core import config, pipeline

    assert shipinator.__version__
    assert callable(cli.main)
    assert callable(config.load_runtime_config)
    assert callable(pipeline.load_pipeline)
