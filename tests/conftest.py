import pytest


@pytest.fixture
def base_config():
    """Campos obligatorios; el resto toma los defaults del modelo."""
    return {
        "ensure": "present",
        "user": "thanos",
        "group": "thanos",
        "bin_path": "/usr/bin/thanos",
    }


class FakeSystemctl:
    """Runner falso: simula is-active/is-enabled y registra los comandos."""

    def __init__(self, active=False, enabled=False, fail_on=None):
        self.active = active
        self.enabled = enabled
        self.fail_on = fail_on
        self.calls = []

    def __call__(self, cmd):
        self.calls.append(cmd)
        verb = cmd[1]
        if verb == self.fail_on:
            return (False, "Failed to " + verb)
        if verb == "is-active":
            return (self.active, "")
        if verb == "is-enabled":
            return (self.enabled, "")
        if verb in ("start", "restart"):
            self.active = True
        elif verb == "stop":
            self.active = False
        elif verb == "enable":
            self.enabled = True
        elif verb == "disable":
            self.enabled = False
        return (True, "")

    @property
    def mutations(self):
        return [c[1:] for c in self.calls if not c[1].startswith("is-")]


@pytest.fixture
def fake_systemctl():
    return FakeSystemctl()
