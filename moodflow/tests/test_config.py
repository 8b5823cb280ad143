"""Tests for settings, logging setup and the command-line entry point."""

import json

import pytest
from pydantic import ValidationError


class TestSettings:
    def test_defaults(self):
        from moodflow.config import Settings

        settings = Settings()
        assert settings.knn_k == 5
        assert settings.tree_max_depth == 5
        assert settings.tree_min_samples_split == 10
        assert settings.train_ratio == 0.8
        assert settings.language == "fr"

    def test_environment_variables(self, monkeypatch):
        from moodflow.config import Settings

        monkeypatch.setenv("MOODFLOW_KNN_K", "7")
        monkeypatch.setenv("MOODFLOW_LOG_LEVEL", "debug")
        settings = Settings()

        assert settings.knn_k == 7
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("field,value", [
        ("train_ratio", 1.0),
        ("environment", "qa"),
        ("log_level", "LOUD"),
        ("knn_k", 0),
    ])
    def test_invalid_values(self, field, value):
        from moodflow.config import Settings

        with pytest.raises(ValidationError):
            Settings(**{field: value})

    def test_predictor_config_from_settings(self):
        from moodflow.config import Settings
        from moodflow.inference.predictor import PredictorConfig

        config = PredictorConfig.from_settings(Settings(knn_k=3, corpus_days=200))
        assert config.knn_k == 3
        assert config.corpus_days == 200


class TestLogging:
    def test_configure_logging(self):
        import logging

        import structlog

        from moodflow.logging_config import configure_logging

        configure_logging("WARNING", json_logs=True)

        assert logging.getLogger().level == logging.WARNING
        assert structlog.is_configured()


class TestCli:
    @pytest.fixture
    def stub_run(self, monkeypatch, city_forecast, today):
        """Replace the network-backed run with a session on canned data."""
        import numpy as np

        from moodflow import cli
        from moodflow.inference.predictor import PredictorConfig
        from moodflow.session import PredictionSession

        class CannedService:
            async def fetch_city_forecast(self, city):
                return city_forecast

        async def run(city, model, seed):
            session = PredictionSession(
                weather_service=CannedService(),
                config=PredictorConfig(corpus_days=90),
                rng=np.random.default_rng(seed),
                clock=lambda: today,
            )
            state = await session.refresh_prediction(city)
            if model != "best":
                session.select_prediction_model(model)
            return state

        monkeypatch.setattr(cli, "run", run)

    def test_table_output(self, stub_run, capsys):
        from moodflow.cli import main

        assert main(["--city", "Lyon", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Lyon, France" in out
        assert "Today" in out

    def test_json_output(self, stub_run, capsys):
        from moodflow.cli import main

        assert main(["--city", "Lyon", "--model", "tree", "--seed", "1", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["selected_model"] == "tree"
        assert len(data["chart"]) == 7

    def test_error_exit_code(self, stub_run, capsys):
        from moodflow.cli import main

        assert main(["--city", " "]) == 1
        assert "city name" in capsys.readouterr().err


class TestCliErrors:
    """The real ``run`` turns every failure into exit status 1."""

    @pytest.fixture
    def session_factory(self, monkeypatch, city_forecast, today):
        import numpy as np

        from moodflow import cli
        from moodflow.inference.predictor import PredictorConfig
        from moodflow.session import PredictionSession

        def install(fetch):
            class Service:
                async def fetch_city_forecast(self, city):
                    return await fetch(city)

            def factory(rng=None):
                return PredictionSession(
                    weather_service=Service(),
                    config=PredictorConfig(corpus_days=90),
                    rng=np.random.default_rng(0),
                    clock=lambda: today,
                )

            monkeypatch.setattr(cli, "PredictionSession", factory)

        return install

    def test_unexpected_failure(self, session_factory, capsys):
        from moodflow.cli import main

        async def fetch(city):
            raise RuntimeError("socket exploded")

        session_factory(fetch)

        assert main(["--city", "Lyon"]) == 1
        assert "socket exploded" in capsys.readouterr().err

    def test_requested_model_failed_to_train(self, session_factory, monkeypatch, city_forecast, capsys):
        from moodflow.cli import main
        from moodflow.inference import predictor
        from moodflow.models.base import ModelFittingError

        async def fetch(city):
            return city_forecast

        def broken_tree(X, y):
            raise ModelFittingError("no tree today")

        original = predictor.model_fitters

        def fitters(config):
            fits = original(config)
            fits['tree'] = broken_tree
            return fits

        session_factory(fetch)
        monkeypatch.setattr(predictor, 'model_fitters', fitters)

        assert main(["--city", "Lyon", "--model", "tree"]) == 1
        assert "not available" in capsys.readouterr().err
