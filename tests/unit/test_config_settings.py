from pathlib import Path

from commitlens.config.settings import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in ("VCS_BACKEND", "GH_BRANCH", "WEBHOOK_SECRET", "BOT_NAME"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.vcs_backend == "git"
    assert settings.workspace_root == Path(".")
    assert settings.github_branch == "main"
    assert settings.github_webhook_secret is None
    assert settings.discovery_max_attempts == 5
    assert settings.discovery_retry_delay == 0.5
    assert settings.bot_name == "CommitLens"
    assert settings.fix_context_lines == 5


def test_settings_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("VCS_BACKEND", "github")
    monkeypatch.setenv("GH_REPOSITORY", "owner/repo")
    monkeypatch.setenv("GH_BRANCH", "develop")
    monkeypatch.setenv("WEBHOOK_SECRET", "super-secret")
    monkeypatch.setenv("DISCOVERY_MAX_ATTEMPTS", "2")

    settings = Settings(_env_file=None)

    assert settings.vcs_backend == "github"
    assert settings.github_repository == "owner/repo"
    assert settings.github_branch == "develop"
    assert settings.github_webhook_secret == "super-secret"  # pragma: allowlist secret
    assert settings.discovery_max_attempts == 2


def test_missing_production_settings(monkeypatch) -> None:
    for name in ("OPENAI_API_KEY", "GH_TOKEN", "GH_REPOSITORY", "WEBHOOK_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("VCS_BACKEND", "github")

    settings = Settings(_env_file=None)

    assert settings.missing_production_settings() == [
        "OPENAI_API_KEY",
        "GH_TOKEN",
        "GH_REPOSITORY",
        "WEBHOOK_SECRET",
    ]


def test_git_backend_only_needs_model_key(monkeypatch) -> None:
    monkeypatch.setenv("VCS_BACKEND", "git")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    settings = Settings(_env_file=None)

    assert settings.missing_production_settings() == []


def test_server_binding_is_not_configured_here(monkeypatch) -> None:
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings(_env_file=None)

    assert "host" not in Settings.model_fields
    assert "port" not in Settings.model_fields
    assert not hasattr(settings, "host")
