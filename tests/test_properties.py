from symwizard.core.config import WizardConfig
from symwizard.integrations.properties import SentryCli

ANSWERS = {
    "config": {
        "organization": {"slug": "acme"},
        "project": {"slug": "cordova-app"},
        "auth": {"token": "sntrys_abc"},
    }
}


def test_convert_answers_to_properties():
    props = SentryCli(WizardConfig()).convert_answers_to_properties(ANSWERS)
    assert props == {
        "defaults/url": "https://sentry.io/",
        "defaults/org": "acme",
        "defaults/project": "cordova-app",
        "auth/token": "sntrys_abc",
        "cli/executable": "node_modules/@sentry/cli/bin/sentry-cli",
    }


def test_answers_url_wins_over_config():
    props = SentryCli(WizardConfig()).convert_answers_to_properties({"url": "https://self.hosted/"})
    assert props["defaults/url"] == "https://self.hosted/"
    assert props["defaults/org"] is None


def test_dump_properties():
    cli = SentryCli(WizardConfig())
    text = cli.dump_properties({
        "defaults/url": "https://sentry.io/",
        "defaults/org": None,
        "auth/token": "",
    })
    assert text == "defaults.url=https://sentry.io/\n#defaults.org=\n#auth.token=\n"


def test_windows_executable_path_is_escaped():
    config = WizardConfig(cli_executable="node_modules\\@sentry\\cli\\bin\\sentry-cli")
    props = SentryCli(config).convert_answers_to_properties({})
    assert props["cli/executable"] == "node_modules\\\\@sentry\\\\cli\\\\bin\\\\sentry-cli"
