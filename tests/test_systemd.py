import pytest
from rich.console import Console

from storegw.core.errors import ProviderError
from storegw.core.runtime.contracts import ProcessLifecycleManager
from storegw.core.store.builder import build_invocation
from storegw.providers.systemd import SystemdServiceManager, quote_exec_arg

from conftest import FakeSystemctl


@pytest.fixture
def invocation(base_config):
    return build_invocation({**base_config, "max_open_files": 65536})


def _manager(tmp_path, runner, **kwargs):
    return SystemdServiceManager(
        unit_dir=tmp_path, unit_prefix="thanos-", systemctl="systemctl", runner=runner, **kwargs
    )


def test_satisfies_contract(tmp_path, fake_systemctl):
    manager: ProcessLifecycleManager = _manager(tmp_path, fake_systemctl)
    assert manager.name == "systemd"


def test_render_unit(tmp_path, fake_systemctl, invocation):
    unit = _manager(tmp_path, fake_systemctl).render_unit(invocation)

    assert "Description=Thanos store" in unit
    assert "User=thanos\n" in unit
    assert "Group=thanos\n" in unit
    assert "LimitNOFILE=65536\n" in unit
    assert "ExecStart=/usr/bin/thanos store --log.level=info --log.format=logfmt" in unit
    assert "--store.grpc.series-sample-limit=0" in unit
    assert "WantedBy=multi-user.target" in unit


def test_render_unit_without_limit(tmp_path, fake_systemctl, base_config):
    unit = _manager(tmp_path, fake_systemctl).render_unit(build_invocation(base_config))

    assert "LimitNOFILE" not in unit


@pytest.mark.parametrize(
    "arg,expected",
    [
        ("--http-address=0.0.0.0:10902", "--http-address=0.0.0.0:10902"),
        ("--web.prefix-header=X Prefix", '"--web.prefix-header=X Prefix"'),
        ('--a="b"', '"--a=\\"b\\""'),
        ("--index-cache-size=50%", "--index-cache-size=50%%"),
        ("--x=$HOME", "--x=$$HOME"),
    ],
)
def test_quote_exec_arg(arg, expected):
    assert quote_exec_arg(arg) == expected


def test_converge_running_from_scratch(tmp_path, fake_systemctl, invocation):
    manager = _manager(tmp_path, fake_systemctl)

    result = manager.converge(invocation)

    assert result.changed
    assert (tmp_path / "thanos-store.service").read_text() == manager.render_unit(invocation)
    assert fake_systemctl.mutations == [
        ["daemon-reload"],
        ["enable", "thanos-store.service"],
        ["start", "thanos-store.service"],
    ]


def test_converge_is_idempotent(tmp_path, fake_systemctl, invocation):
    manager = _manager(tmp_path, fake_systemctl)
    manager.converge(invocation)
    fake_systemctl.calls.clear()

    result = manager.converge(invocation)

    assert not result.changed
    assert fake_systemctl.mutations == []
    assert not manager.plan(invocation).changed


def test_changed_args_restart_running_service(tmp_path, base_config):
    runner = FakeSystemctl()
    manager = _manager(tmp_path, runner)
    manager.converge(build_invocation(base_config))
    runner.calls.clear()

    manager.converge(build_invocation({**base_config, "log_level": "debug"}))

    assert runner.mutations == [["daemon-reload"], ["restart", "thanos-store.service"]]
    assert "--log.level=debug" in (tmp_path / "thanos-store.service").read_text()


def test_converge_stopped(tmp_path, base_config):
    runner = FakeSystemctl(active=True, enabled=True)
    manager = _manager(tmp_path, runner)
    invocation = build_invocation({**base_config, "ensure": "absent"})

    result = manager.converge(invocation)

    assert result.changed
    assert runner.mutations == [
        ["daemon-reload"],
        ["stop", "thanos-store.service"],
        ["disable", "thanos-store.service"],
    ]
    assert (tmp_path / "thanos-store.service").exists()


def test_plan_does_not_execute(tmp_path, fake_systemctl, invocation):
    manager = _manager(tmp_path, fake_systemctl)

    result = manager.plan(invocation)

    assert result.changed
    assert result.actions[0] == f"Escribir {tmp_path / 'thanos-store.service'}"
    assert "systemctl start thanos-store.service" in result.actions
    assert fake_systemctl.mutations == []
    assert not (tmp_path / "thanos-store.service").exists()


def test_dry_run_does_not_execute(tmp_path, fake_systemctl, invocation):
    manager = _manager(tmp_path, fake_systemctl, dry_run=True)

    result = manager.converge(invocation)

    assert result.changed
    assert result.summary.startswith("(dry-run)")
    assert fake_systemctl.mutations == []
    assert not (tmp_path / "thanos-store.service").exists()


def test_failing_command_raises(tmp_path, invocation):
    manager = _manager(tmp_path, FakeSystemctl(fail_on="start"))

    with pytest.raises(ProviderError) as exc:
        manager.converge(invocation)

    assert exc.value.command == ["systemctl", "start", "thanos-store.service"]
    assert "Failed to start" in exc.value.output


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("STOREGW_UNIT_DIR", str(tmp_path))
    monkeypatch.setenv("STOREGW_UNIT_PREFIX", "")
    monkeypatch.setenv("STOREGW_SYSTEMCTL", "/bin/systemctl")

    manager = SystemdServiceManager()

    assert manager.unit_dir == tmp_path
    assert manager.unit_prefix == ""
    assert manager.systemctl == "/bin/systemctl"


def test_multiline_value_stays_inside_exec_start(tmp_path, fake_systemctl, base_config):
    relabel = "- action: keep\n  regex: a\nExecStartPre=/bin/touch /tmp/owned"
    invocation = build_invocation({**base_config, "extra_params": {"selector.relabel-config": relabel}})

    unit = _manager(tmp_path, fake_systemctl).render_unit(invocation)
    lines = unit.splitlines()

    assert not any(line.startswith("ExecStartPre=") for line in lines)
    exec_start = [line for line in lines if line.startswith("ExecStart=")]
    assert len(exec_start) == 1
    assert '"--selector.relabel-config=- action: keep\\n  regex: a\\nExecStartPre=/bin/touch /tmp/owned"' in exec_start[0]


@pytest.mark.parametrize(
    "arg,expected",
    [
        ("--a=x\ny", '"--a=x\\ny"'),
        ("--a=x\r\ny", '"--a=x\\r\\ny"'),
        ("--a=x\ty", '"--a=x\\ty"'),
        ("--a=x\x1by", '"--a=x\\x1by"'),
        ("--a=x\x7fy", '"--a=x\\x7fy"'),
    ],
)
def test_quote_exec_arg_escapes_control_characters(arg, expected):
    quoted = quote_exec_arg(arg)

    assert quoted == expected
    assert not any(ord(c) < 0x20 or ord(c) == 0x7f for c in quoted)


def test_console_output_with_markup_in_path(tmp_path, fake_systemctl, invocation):
    unit_dir = tmp_path / "[bold]units"
    console = Console(record=True, width=200)
    manager = SystemdServiceManager(
        unit_dir=unit_dir, unit_prefix="thanos-", systemctl="systemctl",
        runner=fake_systemctl, console=console,
    )

    manager.converge(invocation)

    assert "[bold]units" in console.export_text()
